"""
Database models package.
"""

from talentflow.models.job import Job, JobStatus
from talentflow.models.candidate import Candidate, CandidateStage
from talentflow.models.assessment import Assessment, AssessmentSubmission

__all__ = ["Job", "JobStatus", "Candidate", "CandidateStage", "Assessment", "AssessmentSubmission"]
