"""
API endpoints for the assessment builder and the candidate-facing form.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from talentflow.core.database import get_db
from talentflow.core.fault_injection import simulate_write_failure
from talentflow.crud import assessment as assessment_crud
from talentflow.crud import candidate as candidate_crud
from talentflow.crud import job as job_crud
from talentflow.crud.assessment import TitleConflictError
from talentflow.models.assessment import Assessment
from talentflow.schemas.assessment import (
    AssessmentCreateRequest,
    AssessmentUpdateRequest,
    AssessmentResponse,
    AssessmentSaveResponse,
    Question,
    SubmissionRequest,
    SubmissionResponse,
    SubmitResultResponse,
)
from talentflow.services import assessment_engine

router = APIRouter(prefix="/assessments", tags=["Assessments"])
logger = logging.getLogger(__name__)


def _get_assessment_or_404(db: Session, job_id: int, assessment_id: int) -> Assessment:
    assessment = assessment_crud.get_by_id(db, assessment_id, job_id=job_id)
    if not assessment:
        raise HTTPException(status_code=404, detail="Assessment not found")
    return assessment


@router.get("/{job_id}", response_model=List[AssessmentResponse])
def list_assessments(job_id: int, db: Session = Depends(get_db)):
    """List the assessments attached to a job."""
    return assessment_crud.get_by_job(db, job_id)


@router.get("/{job_id}/{assessment_id}", response_model=AssessmentResponse)
def get_assessment(job_id: int, assessment_id: int, db: Session = Depends(get_db)):
    """Retrieve one assessment with its questions."""
    return _get_assessment_or_404(db, job_id, assessment_id)


@router.post("/{job_id}", response_model=AssessmentSaveResponse, dependencies=[Depends(simulate_write_failure)])
def save_assessment(
    job_id: int,
    request: AssessmentCreateRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    Save an assessment from the builder.

    If the job already has an assessment with the same title it is updated
    in place (200); otherwise a new one is created (201).
    """
    if not job_crud.get_by_id(db, job_id):
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        assessment, created = assessment_crud.save(db, job_id, request)
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving assessment for job {job_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to save assessment: {str(e)}")

    if created:
        response.status_code = 201
        message = "Assessment created successfully"
    else:
        message = "Assessment updated successfully"

    logger.info(f"{message}: assessment {assessment.id} for job {job_id} ({len(assessment.questions)} questions)")
    return AssessmentSaveResponse(
        success=True,
        assessment=AssessmentResponse.model_validate(assessment),
        message=message
    )


@router.put(
    "/{job_id}/{assessment_id}",
    response_model=AssessmentResponse,
    dependencies=[Depends(simulate_write_failure)]
)
def update_assessment(
    job_id: int,
    assessment_id: int,
    request: AssessmentUpdateRequest,
    db: Session = Depends(get_db)
):
    """Replace an assessment's title, description and questions."""
    assessment = _get_assessment_or_404(db, job_id, assessment_id)

    try:
        assessment = assessment_crud.update(db, assessment, request)
    except TitleConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating assessment {assessment_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update assessment: {str(e)}")

    logger.info(f"Updated assessment {assessment_id}")
    return assessment


@router.post(
    "/{job_id}/{assessment_id}/submit",
    response_model=SubmitResultResponse,
    dependencies=[Depends(simulate_write_failure)]
)
def submit_assessment(
    job_id: int,
    assessment_id: int,
    request: SubmissionRequest,
    db: Session = Depends(get_db)
):
    """
    Submit a candidate's answers.

    Answers are validated against the visible questions only; answers to
    hidden or unknown questions are discarded. Resubmitting replaces the
    candidate's previous answers.

    Raises:
        HTTPException 404: Assessment or candidate not found
        HTTPException 422: One or more answers are invalid
    """
    assessment = _get_assessment_or_404(db, job_id, assessment_id)

    if not candidate_crud.get_by_id(db, request.candidate_id):
        raise HTTPException(status_code=404, detail="Candidate not found")

    questions = [Question.model_validate(q) for q in assessment.questions]
    errors = assessment_engine.validate_responses(questions, request.responses)
    if errors:
        raise HTTPException(
            status_code=422,
            detail={"message": "Some answers are invalid", "errors": errors}
        )

    try:
        submission = assessment_crud.save_submission(
            db,
            assessment_id=assessment.id,
            candidate_id=request.candidate_id,
            responses=assessment_engine.clean_responses(questions, request.responses)
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving response to assessment {assessment_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to save response: {str(e)}")

    logger.info(f"Candidate {request.candidate_id} submitted assessment {assessment_id}")
    return SubmitResultResponse(
        success=True,
        message="Response saved successfully",
        response=SubmissionResponse.model_validate(submission)
    )


@router.get("/{job_id}/{assessment_id}/responses", response_model=List[SubmissionResponse])
def list_submissions(job_id: int, assessment_id: int, db: Session = Depends(get_db)):
    """List every candidate's answers to an assessment, newest first."""
    assessment = _get_assessment_or_404(db, job_id, assessment_id)
    return assessment_crud.get_submissions(db, assessment.id)
