"""
HTTP client for the TalentFlow API plus the board state used by the UI.
"""

from talentflow.client.api import ApiError, TalentFlowClient
from talentflow.client.boards import CandidatePipeline, JobBoard, ReorderFailed, StageChangeFailed

__all__ = [
    "ApiError",
    "TalentFlowClient",
    "CandidatePipeline",
    "JobBoard",
    "ReorderFailed",
    "StageChangeFailed",
]
