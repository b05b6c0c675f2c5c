"""
API endpoints for candidate management.

Handles the candidate pipeline: listing and filtering, stage moves from the
kanban board, profile timeline, and recruiter notes.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from talentflow.core.config import settings
from talentflow.core.database import get_db
from talentflow.core.fault_injection import simulate_write_failure
from talentflow.crud import candidate as candidate_crud
from talentflow.models.candidate import CandidateStage
from talentflow.schemas.common import Pagination
from talentflow.schemas.candidate import (
    CandidateCreateRequest,
    CandidateUpdateRequest,
    CandidateResponse,
    CandidateListResponse,
    NoteCreateRequest,
    NoteCreateResponse,
    NoteResponse,
    TimelineEntryResponse,
)

router = APIRouter(prefix="/candidates", tags=["Candidates"])
logger = logging.getLogger(__name__)


@router.get("", response_model=CandidateListResponse)
def list_candidates(
    search: Optional[str] = None,
    stage: Optional[CandidateStage] = None,
    job_id: Optional[int] = Query(None, alias="jobId"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_CANDIDATES_PAGE_SIZE, alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db)
):
    """
    List candidates, most recently updated first.

    Args:
        search: Case-insensitive match against name or email
        stage: Only candidates in this pipeline stage
        jobId: Only candidates for this job
        page: 1-based page number
        pageSize: Candidates per page (default: 50)
    """
    candidates, total = candidate_crud.get_multi(
        db,
        page=page,
        page_size=page_size,
        stage=stage,
        search=search,
        job_id=job_id
    )
    return CandidateListResponse(
        candidates=[CandidateResponse.model_validate(c) for c in candidates],
        pagination=Pagination.build(page, page_size, total)
    )


@router.get("/{candidate_id}", response_model=CandidateResponse)
def get_candidate(candidate_id: int, db: Session = Depends(get_db)):
    """Retrieve a candidate profile including notes and timeline."""
    candidate = candidate_crud.get_by_id(db, candidate_id)

    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    return candidate


@router.get("/{candidate_id}/timeline", response_model=List[TimelineEntryResponse])
def get_candidate_timeline(candidate_id: int, db: Session = Depends(get_db)):
    """Retrieve the candidate's history (application, stage changes, notes)."""
    candidate = candidate_crud.get_by_id(db, candidate_id)

    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    return candidate.timeline or []


@router.post("", status_code=201, response_model=CandidateResponse, dependencies=[Depends(simulate_write_failure)])
def create_candidate(request: CandidateCreateRequest, db: Session = Depends(get_db)):
    """
    Add a candidate to the pipeline.

    The job id is stored as given; it is not checked against existing jobs.
    """
    try:
        candidate = candidate_crud.create(db, request)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create candidate: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create candidate: {str(e)}")

    logger.info(f"Created candidate {candidate.id} for job {candidate.job_id}")
    return candidate


@router.patch("/{candidate_id}", response_model=CandidateResponse, dependencies=[Depends(simulate_write_failure)])
def update_candidate(candidate_id: int, request: CandidateUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a candidate.

    Sending a new `stage` moves the candidate on the kanban board and appends
    a stage_change entry to the timeline.
    """
    try:
        candidate = candidate_crud.update(db, candidate_id, request)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update candidate {candidate_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update candidate: {str(e)}")

    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    if request.stage is not None:
        logger.info(f"Candidate {candidate_id} now in stage {candidate.stage.value}")
    return candidate


@router.post(
    "/{candidate_id}/notes",
    status_code=201,
    response_model=NoteCreateResponse,
    dependencies=[Depends(simulate_write_failure)]
)
def add_candidate_note(candidate_id: int, request: NoteCreateRequest, db: Session = Depends(get_db)):
    """
    Add a recruiter note. @mentions in the content are recorded on the note.
    """
    try:
        note = candidate_crud.add_note(db, candidate_id, request)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to add note for candidate {candidate_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to add note: {str(e)}")

    if note is None:
        raise HTTPException(status_code=404, detail="Candidate not found")

    logger.info(f"Added note {note['id']} for candidate {candidate_id}")
    return NoteCreateResponse(
        success=True,
        message="Note added successfully",
        note=NoteResponse.model_validate(note)
    )
