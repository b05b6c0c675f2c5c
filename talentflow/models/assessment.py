"""
Assessment and AssessmentSubmission models.

An assessment is an ordered list of questions attached to a job. The question
definitions (type, options, validation, conditional logic) are stored as JSON
and interpreted by talentflow.services.assessment_engine.
"""

from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from talentflow.core.database import Base, JSONType


class Assessment(Base):
    """A set of questions attached to a job posting."""
    __tablename__ = "assessments"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, nullable=False, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False, default="")

    questions = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    submissions = relationship("AssessmentSubmission", back_populates="assessment", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Assessment(id={self.id}, job_id={self.job_id}, title='{self.title}')>"


class AssessmentSubmission(Base):
    """
    A candidate's submitted answers to an assessment.

    One row per (assessment, candidate); resubmission overwrites it.
    """
    __tablename__ = "assessment_responses"
    __table_args__ = (
        UniqueConstraint("assessment_id", "candidate_id", name="uq_assessment_responses_assessment_candidate"),
    )

    id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, ForeignKey("assessments.id", ondelete="CASCADE"), nullable=False, index=True)
    candidate_id = Column(Integer, nullable=False, index=True)

    # {question_id: answer}
    responses = Column(JSONType, nullable=False, default=dict)
    score = Column(Float, nullable=True)

    submitted_at = Column(DateTime(timezone=True), server_default=func.now())

    assessment = relationship("Assessment", back_populates="submissions")

    def __repr__(self):
        return f"<AssessmentSubmission(assessment_id={self.assessment_id}, candidate_id={self.candidate_id})>"
