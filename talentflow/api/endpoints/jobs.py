import logging
from typing import Literal, Optional
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.orm import Session

from talentflow.core.config import settings
from talentflow.core.database import get_db
from talentflow.core.fault_injection import simulate_write_failure, simulate_reorder_failure
from talentflow.crud import job as job_crud
from talentflow.crud.job import InvalidSlugError, SlugConflictError, StaleOrderError
from talentflow.models.job import JobStatus
from talentflow.schemas.common import Pagination, SuccessResponse
from talentflow.schemas.job import (
    JobCreateRequest,
    JobUpdateRequest,
    JobReorderRequest,
    JobResponse,
    JobListResponse,
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.get("", response_model=JobListResponse)
def list_jobs(
    search: Optional[str] = None,
    status: Optional[JobStatus] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_JOBS_PAGE_SIZE, alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE),
    sort: Literal["order", "title", "createdAt"] = "order",
    db: Session = Depends(get_db)
):
    """
    List the jobs board with search, status filter, sorting and pagination.

    Args:
        search: Case-insensitive match against title or tags
        status: Optional filter (active, archived)
        page: 1-based page number
        pageSize: Jobs per page (default: 10)
        sort: order (board position), title, or createdAt (newest first)
    """
    jobs, total = job_crud.get_multi(
        db,
        page=page,
        page_size=page_size,
        status=status,
        search=search,
        sort=sort
    )
    return JobListResponse(
        jobs=[JobResponse.model_validate(job) for job in jobs],
        pagination=Pagination.build(page, page_size, total)
    )


@router.get("/slug/{slug}", response_model=JobResponse)
def get_job_by_slug(slug: str, db: Session = Depends(get_db)):
    """Retrieve a job by its URL slug."""
    job = job_crud.get_by_slug(db, slug)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """Retrieve a job by ID."""
    job = job_crud.get_by_id(db, job_id)

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    return job


@router.post("", status_code=201, response_model=JobResponse, dependencies=[Depends(simulate_write_failure)])
def create_job(request: JobCreateRequest, db: Session = Depends(get_db)):
    """
    Create a new job posting.

    The slug is derived from the title unless given and must be unique.
    New jobs are appended to the end of the board unless an order is given.
    """
    try:
        new_job = job_crud.create(db, request)
    except SlugConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidSlugError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating job: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create job: {str(e)}")

    logger.info(f"Created job {new_job.id}: {new_job.title} (order {new_job.order})")
    return new_job


@router.patch("/{job_id}", response_model=JobResponse, dependencies=[Depends(simulate_write_failure)])
def update_job(job_id: int, request: JobUpdateRequest, db: Session = Depends(get_db)):
    """
    Partially update a job (edit modal, archive/unarchive).
    """
    try:
        job = job_crud.update(db, job_id, request)
    except SlugConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidSlugError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating job {job_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to update job: {str(e)}")

    if not job:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Updated job {job_id}")
    return job


@router.patch("/{job_id}/reorder", response_model=SuccessResponse, dependencies=[Depends(simulate_reorder_failure)])
def reorder_job(job_id: int, request: JobReorderRequest, db: Session = Depends(get_db)):
    """
    Move a job from one board position to another.

    The client applies the move optimistically and rolls it back if this
    endpoint fails. A 409 means the client's board is stale and should be
    refetched.
    """
    try:
        moved = job_crud.reorder(db, job_id, request.from_order, request.to_order)
    except StaleOrderError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Error reordering job {job_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to reorder. Please try again")

    if moved is None:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Moved job {job_id} from {request.from_order} to {request.to_order} ({len(moved)} jobs updated)")
    return SuccessResponse(success=True)


@router.delete("/{job_id}", response_model=SuccessResponse, dependencies=[Depends(simulate_write_failure)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.
    """
    deleted = job_crud.delete(db, job_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Job not found")

    logger.info(f"Deleted job {job_id}")
    return SuccessResponse(success=True, message="Job deleted successfully")
