"""
Pydantic schemas for Candidate API requests/responses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import Field, EmailStr, field_validator
from talentflow.models.candidate import CandidateStage
from talentflow.schemas.common import CamelModel, Pagination


class NoteCreateRequest(CamelModel):
    """A recruiter note; @mentions are extracted from content when not given."""
    content: str = Field(..., min_length=1)
    author: str = Field("Recruiter", min_length=1)
    mentions: Optional[List[str]] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Note content is required")
        return v


class NoteResponse(CamelModel):
    id: str
    content: str
    author: str
    created_at: datetime
    mentions: List[str] = Field(default_factory=list)


class TimelineEntryResponse(CamelModel):
    id: str
    type: str
    description: str
    timestamp: datetime
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CandidateCreateRequest(CamelModel):
    """Schema for adding a candidate to the pipeline."""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    job_id: Optional[int] = Field(None, description="Job applied to; not checked against the jobs table")
    stage: CandidateStage = CandidateStage.APPLIED


class CandidateUpdateRequest(CamelModel):
    """Partial update. A changed stage is recorded on the timeline."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    job_id: Optional[int] = None
    stage: Optional[CandidateStage] = None


class CandidateResponse(CamelModel):
    """Full candidate record including notes and timeline."""
    id: int
    name: str
    email: str
    stage: CandidateStage
    job_id: Optional[int] = None
    applied_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    notes: List[NoteResponse] = Field(default_factory=list)
    timeline: List[TimelineEntryResponse] = Field(default_factory=list)


class CandidateListResponse(CamelModel):
    """One page of candidates."""
    candidates: List[CandidateResponse]
    pagination: Pagination


class NoteCreateResponse(CamelModel):
    success: bool = True
    message: str
    note: NoteResponse
