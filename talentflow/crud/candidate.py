"""
CRUD operations for Candidate model.

Stage changes and notes are appended to the candidate's timeline so the
profile page can show the full history of the application.
"""

import re
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from talentflow.models.candidate import Candidate, CandidateStage
from talentflow.schemas.candidate import CandidateCreateRequest, CandidateUpdateRequest, NoteCreateRequest

MENTION_PATTERN = re.compile(r"@([\w.\-]+)")


def _escape_like(term: str) -> str:
    """Make LIKE wildcards in a search term match literally"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timeline_entry(entry_type: str, description: str, metadata: Optional[dict] = None) -> dict:
    return {
        "id": uuid.uuid4().hex,
        "type": entry_type,
        "description": description,
        "timestamp": _now().isoformat(),
        "metadata": metadata or {},
    }


def extract_mentions(content: str) -> List[str]:
    """Return @handles in order of first appearance, without duplicates."""
    seen = []
    for handle in MENTION_PATTERN.findall(content):
        handle = handle.rstrip(".-")
        if handle and handle not in seen:
            seen.append(handle)
    return seen


def create(db: Session, candidate_data: CandidateCreateRequest) -> Candidate:
    """
    Add a candidate to the pipeline with an initial application timeline entry.
    """
    now = _now()
    candidate = Candidate(
        name=candidate_data.name,
        email=candidate_data.email,
        job_id=candidate_data.job_id,
        stage=candidate_data.stage,
        notes=[],
        timeline=[_timeline_entry("application", "Applied for position")],
        applied_at=now,
        updated_at=now,
    )

    db.add(candidate)
    db.commit()
    db.refresh(candidate)

    return candidate


def get_by_id(db: Session, candidate_id: int) -> Optional[Candidate]:
    return db.query(Candidate).filter(Candidate.id == candidate_id).first()


def get_multi(
    db: Session,
    page: int = 1,
    page_size: int = 50,
    stage: Optional[CandidateStage] = None,
    search: Optional[str] = None,
    job_id: Optional[int] = None
) -> Tuple[List[Candidate], int]:
    """
    Retrieve one page of candidates, most recently updated first.

    Args:
        db: Database session
        page: 1-based page number
        page_size: Candidates per page
        stage: Only candidates currently in this stage
        search: Case-insensitive match against name or email
        job_id: Only candidates for this job

    Returns:
        Tuple of (candidates on the requested page, total matching candidates)
    """
    query = db.query(Candidate)

    if stage:
        query = query.filter(Candidate.stage == stage)
    if job_id is not None:
        query = query.filter(Candidate.job_id == job_id)
    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(or_(
            Candidate.name.ilike(pattern, escape="\\"),
            Candidate.email.ilike(pattern, escape="\\"),
        ))

    total = query.count()
    candidates = (
        query.order_by(Candidate.updated_at.desc(), Candidate.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return candidates, total


def update(db: Session, candidate_id: int, candidate_data: CandidateUpdateRequest) -> Optional[Candidate]:
    """
    Apply a partial update. A stage different from the current one is
    recorded as a stage_change timeline entry.

    Returns:
        Updated Candidate instance if found, None otherwise
    """
    candidate = get_by_id(db, candidate_id)
    if not candidate:
        return None

    changes = candidate_data.model_dump(exclude_unset=True)
    new_stage = changes.pop("stage", None)

    for field, value in changes.items():
        if value is None and field != "job_id":
            continue
        setattr(candidate, field, value)

    if new_stage is not None and new_stage != candidate.stage:
        entry = _timeline_entry(
            "stage_change",
            f"Moved to {new_stage.value}",
            {"fromStage": candidate.stage.value, "toStage": new_stage.value},
        )
        # Reassign so SQLAlchemy sees the JSON column change
        candidate.timeline = [*(candidate.timeline or []), entry]
        candidate.stage = new_stage

    candidate.updated_at = _now()

    db.commit()
    db.refresh(candidate)

    return candidate


def add_note(db: Session, candidate_id: int, note_data: NoteCreateRequest) -> Optional[dict]:
    """
    Append a note to the candidate and record it on the timeline.

    Returns:
        The stored note, or None if the candidate does not exist
    """
    candidate = get_by_id(db, candidate_id)
    if not candidate:
        return None

    mentions = note_data.mentions if note_data.mentions is not None else extract_mentions(note_data.content)
    note = {
        "id": uuid.uuid4().hex,
        "content": note_data.content,
        "author": note_data.author,
        "createdAt": _now().isoformat(),
        "mentions": mentions,
    }

    candidate.notes = [*(candidate.notes or []), note]
    candidate.timeline = [
        *(candidate.timeline or []),
        _timeline_entry("note", f"Note added by {note_data.author}", {"noteId": note["id"]}),
    ]
    candidate.updated_at = _now()

    db.commit()

    return note


def count_by_stage(db: Session) -> dict:
    """Number of candidates in each pipeline stage (zero for empty stages)."""
    counts = {stage.value: 0 for stage in CandidateStage}
    rows = db.query(Candidate.stage, func.count(Candidate.id)).group_by(Candidate.stage).all()
    for candidate_stage, count in rows:
        counts[candidate_stage.value] = count
    return counts
