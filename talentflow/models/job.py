import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, func
from talentflow.core.database import Base, JSONType


class JobStatus(str, enum.Enum):
    """
    Job posting status.

    - ACTIVE: Visible on the jobs board and accepting candidates
    - ARCHIVED: Closed posting kept for history
    """
    ACTIVE = "active"
    ARCHIVED = "archived"


class Job(Base):
    """
    Job model representing a job posting on the board.

    `order` is the position on the drag-and-drop board; lower values come first.
    """
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    status = Column(Enum(JobStatus), default=JobStatus.ACTIVE, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    requirements = Column(JSONType, nullable=False, default=list)
    tags = Column(JSONType, nullable=False, default=list)

    order = Column(Integer, nullable=False, default=0, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Job(id={self.id}, slug='{self.slug}', order={self.order}, status={self.status.value})>"
