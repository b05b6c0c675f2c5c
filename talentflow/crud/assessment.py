"""
CRUD operations for Assessment and AssessmentSubmission models.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.orm import Session
from talentflow.models.assessment import Assessment, AssessmentSubmission
from talentflow.schemas.assessment import AssessmentCreateRequest


class TitleConflictError(Exception):
    """Another assessment on the same job already uses the title."""

    def __init__(self, title: str):
        super().__init__(f"An assessment titled '{title}' already exists for this job")
        self.title = title


def _dump_questions(assessment_data: AssessmentCreateRequest) -> List[dict]:
    return [q.model_dump(mode="json", by_alias=True) for q in assessment_data.questions]


def get_by_job(db: Session, job_id: int) -> List[Assessment]:
    return db.query(Assessment).filter(Assessment.job_id == job_id).order_by(Assessment.id.asc()).all()


def get_by_id(db: Session, assessment_id: int, job_id: Optional[int] = None) -> Optional[Assessment]:
    """
    Retrieve an assessment, optionally requiring it to belong to a job.
    """
    query = db.query(Assessment).filter(Assessment.id == assessment_id)
    if job_id is not None:
        query = query.filter(Assessment.job_id == job_id)
    return query.first()


def get_by_title(db: Session, job_id: int, title: str) -> Optional[Assessment]:
    return db.query(Assessment).filter(Assessment.job_id == job_id, Assessment.title == title).first()


def save(db: Session, job_id: int, assessment_data: AssessmentCreateRequest) -> Tuple[Assessment, bool]:
    """
    Create an assessment for a job, or update the one with the same title.

    The builder saves by title, so saving twice never produces duplicates.

    Returns:
        Tuple of (assessment, created) where created is False on update
    """
    existing = get_by_title(db, job_id, assessment_data.title)
    if existing:
        return update(db, existing, assessment_data), False

    now = datetime.now(timezone.utc)
    assessment = Assessment(
        job_id=job_id,
        title=assessment_data.title,
        description=assessment_data.description,
        questions=_dump_questions(assessment_data),
        created_at=now,
        updated_at=now,
    )

    db.add(assessment)
    db.commit()
    db.refresh(assessment)

    return assessment, True


def update(db: Session, assessment: Assessment, assessment_data: AssessmentCreateRequest) -> Assessment:
    """
    Replace an assessment's title, description and questions.

    Raises:
        TitleConflictError: If another assessment on the job has the new title
    """
    clash = (
        db.query(Assessment)
        .filter(
            Assessment.job_id == assessment.job_id,
            Assessment.title == assessment_data.title,
            Assessment.id != assessment.id,
        )
        .first()
    )
    if clash:
        raise TitleConflictError(assessment_data.title)

    assessment.title = assessment_data.title
    assessment.description = assessment_data.description
    assessment.questions = _dump_questions(assessment_data)
    assessment.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(assessment)

    return assessment


def get_submissions(db: Session, assessment_id: int) -> List[AssessmentSubmission]:
    return (
        db.query(AssessmentSubmission)
        .filter(AssessmentSubmission.assessment_id == assessment_id)
        .order_by(AssessmentSubmission.submitted_at.desc(), AssessmentSubmission.id.desc())
        .all()
    )


def get_submission(db: Session, assessment_id: int, candidate_id: int) -> Optional[AssessmentSubmission]:
    return db.query(AssessmentSubmission).filter(
        AssessmentSubmission.assessment_id == assessment_id,
        AssessmentSubmission.candidate_id == candidate_id
    ).first()


def save_submission(
    db: Session,
    assessment_id: int,
    candidate_id: int,
    responses: Dict[str, Any]
) -> AssessmentSubmission:
    """
    Store a candidate's answers, replacing any earlier submission.

    Args:
        db: Database session
        assessment_id: Assessment being answered
        candidate_id: Candidate submitting
        responses: Already validated answers keyed by question id

    Returns:
        The stored submission
    """
    submission = get_submission(db, assessment_id, candidate_id)
    if submission is None:
        submission = AssessmentSubmission(assessment_id=assessment_id, candidate_id=candidate_id)
        db.add(submission)

    submission.responses = responses
    submission.submitted_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(submission)

    return submission


def count(db: Session) -> int:
    return db.query(Assessment).count()


def count_submissions(db: Session) -> int:
    return db.query(AssessmentSubmission).count()
