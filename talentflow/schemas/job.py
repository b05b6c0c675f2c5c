from pydantic import Field, field_validator
from typing import List, Optional
from datetime import datetime

from talentflow.models.job import JobStatus
from talentflow.schemas.common import CamelModel, Pagination


def _clean_list(values: Optional[List[str]]) -> Optional[List[str]]:
    """Strip entries and drop blank ones"""
    if values is None:
        return None
    return [v.strip() for v in values if v and v.strip()]


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value.strip()


class JobCreateRequest(CamelModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=220, description="Derived from title when omitted")
    status: JobStatus = JobStatus.ACTIVE
    description: str = ""
    requirements: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    order: Optional[int] = Field(None, ge=0, description="Board position; appended to the end when omitted")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @field_validator("slug")
    @classmethod
    def blank_slug_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("requirements", "tags")
    @classmethod
    def drop_blank_entries(cls, v: List[str]) -> List[str]:
        return _clean_list(v)


class JobUpdateRequest(CamelModel):
    """Partial update; only fields present in the payload are applied.

    Board position is not editable here, moves go through the reorder endpoint.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=220)
    status: Optional[JobStatus] = None
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    tags: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title is required")
        return v.strip() if v else v

    @field_validator("slug")
    @classmethod
    def blank_slug_is_missing(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("requirements", "tags")
    @classmethod
    def drop_blank_entries(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_list(v)


class JobReorderRequest(CamelModel):
    """Drag-and-drop move of one job from one board position to another"""
    from_order: int = Field(..., ge=0)
    to_order: int = Field(..., ge=0)


class JobResponse(CamelModel):
    """Schema for job response"""
    id: int
    title: str
    slug: str
    status: JobStatus
    description: str
    requirements: List[str]
    tags: List[str]
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobListResponse(CamelModel):
    """One page of the jobs board"""
    jobs: List[JobResponse]
    pagination: Pagination
