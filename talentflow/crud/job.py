"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, including the board reorder used by drag-and-drop.
"""

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from talentflow.models.job import Job, JobStatus
from talentflow.schemas.job import JobCreateRequest, JobUpdateRequest

logger = logging.getLogger(__name__)

SORT_FIELDS = ("order", "title", "createdAt")


class SlugConflictError(Exception):
    """Another job already uses the requested slug."""

    def __init__(self, slug: str):
        super().__init__(f"A job with slug '{slug}' already exists")
        self.slug = slug


class InvalidSlugError(Exception):
    """The title yields no usable slug and none was given."""

    def __init__(self, title: str):
        super().__init__(f"Cannot derive a slug from title '{title}'; provide a slug")
        self.title = title


class StaleOrderError(Exception):
    """The client's view of the board no longer matches the stored order."""

    def __init__(self, job_id: int, expected: int, actual: int):
        super().__init__(
            f"Job {job_id} is at position {actual}, not {expected}. Refresh the board and try again"
        )
        self.job_id = job_id
        self.expected = expected
        self.actual = actual


def generate_slug(title: str) -> str:
    """Lowercase the title and collapse non-alphanumeric runs into dashes."""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def _slug_for(title: str) -> str:
    slug = generate_slug(title)
    if not slug:
        raise InvalidSlugError(title)
    return slug


def _ensure_unique_slug(db: Session, slug: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Job).filter(Job.slug == slug)
    if exclude_id is not None:
        query = query.filter(Job.id != exclude_id)
    if query.first():
        raise SlugConflictError(slug)


def _matches_search(job: Job, term: str) -> bool:
    term = term.lower()
    if term in (job.title or "").lower():
        return True
    return any(term in tag.lower() for tag in (job.tags or []))


def create(db: Session, job_data: JobCreateRequest) -> Job:
    """
    Create a new job in the database.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job instance with id

    Raises:
        SlugConflictError: If the slug is already taken
        InvalidSlugError: If no slug is given and the title has no letters or digits
    """
    slug = job_data.slug or _slug_for(job_data.title)
    _ensure_unique_slug(db, slug)

    order = job_data.order
    if order is None:
        max_order = db.query(func.max(Job.order)).scalar()
        order = 0 if max_order is None else max_order + 1

    now = datetime.now(timezone.utc)
    db_job = Job(
        title=job_data.title,
        slug=slug,
        status=job_data.status,
        description=job_data.description,
        requirements=job_data.requirements,
        tags=job_data.tags,
        order=order,
        created_at=now,
        updated_at=now,
    )

    db.add(db_job)
    db.commit()
    db.refresh(db_job)

    return db_job


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Returns:
        Job instance if found, None otherwise
    """
    return db.query(Job).filter(Job.id == job_id).first()


def get_by_slug(db: Session, slug: str) -> Optional[Job]:
    return db.query(Job).filter(Job.slug == slug).first()


def get_multi(
    db: Session,
    page: int = 1,
    page_size: int = 10,
    status: Optional[JobStatus] = None,
    search: Optional[str] = None,
    sort: str = "order"
) -> Tuple[List[Job], int]:
    """
    Retrieve one page of the jobs board.

    Args:
        db: Database session
        page: 1-based page number
        page_size: Jobs per page
        status: Optional status filter
        search: Case-insensitive match against title or any tag
        sort: "order" (board position), "title", or "createdAt" (newest first)

    Returns:
        Tuple of (jobs on the requested page, total matching jobs)
    """
    query = db.query(Job)

    if status:
        query = query.filter(Job.status == status)

    if sort == "title":
        query = query.order_by(Job.title.asc(), Job.id.asc())
    elif sort == "createdAt":
        query = query.order_by(Job.created_at.desc(), Job.id.desc())
    else:
        query = query.order_by(Job.order.asc(), Job.id.asc())

    jobs = query.all()

    # Tags live in a JSON column, so the search runs in Python
    if search:
        jobs = [job for job in jobs if _matches_search(job, search)]

    start = (page - 1) * page_size
    return jobs[start:start + page_size], len(jobs)


def update(db: Session, job_id: int, job_data: JobUpdateRequest) -> Optional[Job]:
    """
    Apply a partial update to a job.

    A new title without an explicit slug regenerates the slug.

    Returns:
        Updated Job instance if found, None otherwise

    Raises:
        SlugConflictError: If the resulting slug is already taken
        InvalidSlugError: If a new title yields an empty slug
    """
    job = get_by_id(db, job_id)
    if not job:
        return None

    changes = job_data.model_dump(exclude_unset=True)
    if "title" in changes and not changes.get("slug"):
        changes["slug"] = _slug_for(changes["title"])
    if changes.get("slug") and changes["slug"] != job.slug:
        _ensure_unique_slug(db, changes["slug"], exclude_id=job.id)

    for field, value in changes.items():
        if value is None:
            # Every job column is required; explicit nulls are ignored
            continue
        setattr(job, field, value)
    job.updated_at = datetime.now(timezone.utc)

    db.commit()
    db.refresh(job)

    return job


def reorder(db: Session, job_id: int, from_order: int, to_order: int) -> Optional[List[Job]]:
    """
    Move a job to a new board position, shifting the jobs in between.

    Moving down (from < to) shifts jobs in (from, to] up by one; moving up
    shifts jobs in [to, from) down by one. Everything happens in a single
    transaction: if any write fails, no order changes are kept.

    Args:
        db: Database session
        job_id: Job being moved
        from_order: Position the client believes the job is at
        to_order: Target position

    Returns:
        Jobs whose order changed, or None if the job does not exist

    Raises:
        StaleOrderError: If the job is no longer at from_order
    """
    job = get_by_id(db, job_id)
    if not job:
        return None

    if job.order != from_order:
        raise StaleOrderError(job_id, from_order, job.order)

    if from_order == to_order:
        return []

    try:
        if from_order < to_order:
            shifted = db.query(Job).filter(
                Job.id != job_id,
                Job.order > from_order,
                Job.order <= to_order
            ).all()
            delta = -1
        else:
            shifted = db.query(Job).filter(
                Job.id != job_id,
                Job.order >= to_order,
                Job.order < from_order
            ).all()
            delta = 1

        for other in shifted:
            other.order = other.order + delta
        job.order = to_order

        db.commit()
    except Exception:
        db.rollback()
        logger.warning(f"Reorder of job {job_id} failed; order changes rolled back")
        raise

    return [job, *shifted]


def delete(db: Session, job_id: int) -> bool:
    """
    Delete a job by ID. Candidates and assessments are left untouched.

    Returns:
        True if deleted, False if not found
    """
    job = get_by_id(db, job_id)
    if not job:
        return False

    db.delete(job)
    db.commit()

    return True


def count_by_status(db: Session, status: JobStatus) -> int:
    return db.query(Job).filter(Job.status == status).count()
