"""
Candidate database model.

Represents an applicant moving through the hiring pipeline for a job.
Notes and timeline entries are stored inline as JSON lists.
"""

from sqlalchemy import Column, Integer, String, Enum, DateTime, func
import enum
from talentflow.core.database import Base, JSONType


class CandidateStage(str, enum.Enum):
    """
    Candidate pipeline stages:

    APPLIED -> SCREEN -> TECH -> OFFER -> HIRED
                  (any stage) -> REJECTED

    Transitions are driven entirely by the recruiter; any stage may follow any other.
    """
    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


class Candidate(Base):
    """
    An applicant for a job posting.

    job_id is a plain integer: candidates may outlive the job they applied to.
    """
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, nullable=True, index=True)

    name = Column(String, nullable=False, index=True)
    email = Column(String, nullable=False, index=True)

    stage = Column(
        Enum(CandidateStage),
        default=CandidateStage.APPLIED,
        nullable=False,
        index=True
    )

    # [{id, content, author, createdAt, mentions}]
    notes = Column(JSONType, nullable=False, default=list)
    # [{id, type, description, timestamp, metadata}]
    timeline = Column(JSONType, nullable=False, default=list)

    applied_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Candidate(id={self.id}, email='{self.email}', stage={self.stage.value})>"
