"""
Optimistic board state for the jobs board and the candidate kanban.

Both boards apply a move locally first so the UI responds immediately, then
send it to the API. If the request fails the previous state is restored and
the failure is re-raised; calling refresh() afterwards resyncs with the
server ("retry by refetch").
"""

import copy
import logging
from typing import Any, Dict, List, Optional
import httpx

from talentflow.client.api import ApiError, TalentFlowClient
from talentflow.core.config import settings
from talentflow.models.candidate import CandidateStage

logger = logging.getLogger(__name__)

STAGES = [stage.value for stage in CandidateStage]


class ReorderFailed(Exception):
    """A job move was rejected; the board has been rolled back."""

    def __init__(self, job_id: int, cause: Exception):
        super().__init__(f"Failed to move job {job_id}: {cause}")
        self.job_id = job_id
        self.cause = cause


class StageChangeFailed(Exception):
    """A stage move was rejected; the pipeline has been rolled back."""

    def __init__(self, candidate_id: int, stage: str, cause: Exception):
        super().__init__(f"Failed to move candidate {candidate_id} to {stage}: {cause}")
        self.candidate_id = candidate_id
        self.stage = stage
        self.cause = cause


def apply_move(jobs: List[Dict[str, Any]], job_id: int, from_order: int, to_order: int) -> List[Dict[str, Any]]:
    """
    Return a new job list with the same order shift the server applies.

    The moved job takes to_order; jobs between the two positions shift by one
    towards the gap. The result is sorted by order.
    """
    moved = []
    for job in jobs:
        job = dict(job)
        if job["id"] == job_id:
            job["order"] = to_order
        elif from_order < to_order and from_order < job["order"] <= to_order:
            job["order"] -= 1
        elif from_order > to_order and to_order <= job["order"] < from_order:
            job["order"] += 1
        moved.append(job)
    return sorted(moved, key=lambda j: (j["order"], j["id"]))


class JobBoard:
    """
    The jobs board in display (order) sequence.

    Args:
        client: API client
        page_size: Jobs loaded per refresh
        status: Optional status filter (e.g. "active")
        search: Optional title/tag search
    """

    def __init__(
        self,
        client: TalentFlowClient,
        page_size: int = settings.DEFAULT_JOBS_PAGE_SIZE,
        status: Optional[str] = None,
        search: Optional[str] = None
    ):
        self.client = client
        self.page = 1
        self.page_size = page_size
        self.status = status
        self.search = search
        self.jobs: List[Dict[str, Any]] = []
        self.pagination: Dict[str, Any] = {}

    def refresh(self, page: Optional[int] = None) -> List[Dict[str, Any]]:
        """Reload the current page from the server."""
        if page is not None:
            self.page = page
        data = self.client.list_jobs(
            page=self.page,
            pageSize=self.page_size,
            status=self.status,
            search=self.search,
            sort="order"
        )
        self.jobs = data["jobs"]
        self.pagination = data["pagination"]
        return self.jobs

    def index_of(self, job_id: int) -> int:
        for index, job in enumerate(self.jobs):
            if job["id"] == job_id:
                return index
        raise KeyError(f"Job {job_id} is not on the board")

    def move(self, job_id: int, to_index: int) -> List[Dict[str, Any]]:
        """
        Drag a job to another slot on the board.

        Args:
            job_id: Job being dragged
            to_index: Slot (0-based, within the loaded page) it is dropped on

        Returns:
            The board after the move

        Raises:
            KeyError: If the job is not on the board
            IndexError: If to_index is outside the board
            ReorderFailed: If the server rejected the move (board rolled back)
        """
        from_index = self.index_of(job_id)
        if not 0 <= to_index < len(self.jobs):
            raise IndexError(f"Slot {to_index} is outside the board")
        if from_index == to_index:
            return self.jobs

        from_order = self.jobs[from_index]["order"]
        to_order = self.jobs[to_index]["order"]

        previous = copy.deepcopy(self.jobs)
        self.jobs = apply_move(self.jobs, job_id, from_order, to_order)

        try:
            self.client.reorder_job(job_id, from_order, to_order)
        except (ApiError, httpx.HTTPError) as e:
            self.jobs = previous
            logger.warning(f"Reorder of job {job_id} failed, rolled back: {e}")
            raise ReorderFailed(job_id, e) from e

        logger.debug(f"Moved job {job_id} from order {from_order} to {to_order}")
        return self.jobs


class CandidatePipeline:
    """
    Candidates grouped into one kanban column per stage.

    Args:
        client: API client
        job_id: Only show candidates for this job
        page_size: Maximum candidates loaded
    """

    def __init__(
        self,
        client: TalentFlowClient,
        job_id: Optional[int] = None,
        page_size: int = settings.MAX_PAGE_SIZE
    ):
        self.client = client
        self.job_id = job_id
        self.page_size = page_size
        self.columns: Dict[str, List[Dict[str, Any]]] = {stage: [] for stage in STAGES}

    def refresh(self) -> Dict[str, List[Dict[str, Any]]]:
        """Reload every column from the server."""
        data = self.client.list_candidates(jobId=self.job_id, pageSize=self.page_size)
        columns = {stage: [] for stage in STAGES}
        for candidate in data["candidates"]:
            columns[candidate["stage"]].append(candidate)
        self.columns = columns
        return self.columns

    def find(self, candidate_id: int) -> Dict[str, Any]:
        for cards in self.columns.values():
            for card in cards:
                if card["id"] == candidate_id:
                    return card
        raise KeyError(f"Candidate {candidate_id} is not in the pipeline")

    def counts(self) -> Dict[str, int]:
        return {stage: len(cards) for stage, cards in self.columns.items()}

    def move(self, candidate_id: int, stage: str) -> Dict[str, Any]:
        """
        Drag a candidate card to another stage column.

        Returns:
            The candidate as stored by the server

        Raises:
            KeyError: If the candidate is not in the pipeline
            ValueError: If stage is not a pipeline stage
            StageChangeFailed: If the server rejected the move (columns rolled back)
        """
        if stage not in self.columns:
            raise ValueError(f"Unknown stage '{stage}'")

        card = self.find(candidate_id)
        if card["stage"] == stage:
            return card

        previous = copy.deepcopy(self.columns)
        self.columns[card["stage"]] = [c for c in self.columns[card["stage"]] if c["id"] != candidate_id]
        self.columns[stage] = [{**card, "stage": stage}, *self.columns[stage]]

        try:
            updated = self.client.update_candidate(candidate_id, {"stage": stage})
        except (ApiError, httpx.HTTPError) as e:
            self.columns = previous
            logger.warning(f"Stage change of candidate {candidate_id} failed, rolled back: {e}")
            raise StageChangeFailed(candidate_id, stage, e) from e

        self.columns[stage] = [updated if c["id"] == candidate_id else c for c in self.columns[stage]]
        return updated
