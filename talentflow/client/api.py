"""
Thin synchronous client for the TalentFlow REST API.

Payloads are plain dicts in the API's camelCase wire format.
"""

import logging
from typing import Any, Dict, List, Optional
import httpx

from talentflow.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"API error {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class TalentFlowClient:
    """
    Wraps an httpx.Client.

    Args:
        base_url: API root including the /api prefix
        http_client: Optional preconfigured client (e.g. FastAPI's TestClient)
    """

    def __init__(self, base_url: Optional[str] = None, http_client: Optional[httpx.Client] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(timeout=settings.API_TIMEOUT_SECONDS)

    def close(self) -> None:
        if self._owns_client:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, f"{self.base_url}{path}", **kwargs)
        if response.is_error:
            try:
                detail = response.json().get("detail")
            except ValueError:
                detail = response.text
            logger.debug(f"{method} {path} failed with {response.status_code}: {detail}")
            raise ApiError(response.status_code, detail)
        return response.json()

    # Jobs

    def list_jobs(self, **params) -> Dict[str, Any]:
        return self._request("GET", "/jobs", params=_drop_none(params))

    def get_job(self, job_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/jobs/{job_id}")

    def create_job(self, job: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/jobs", json=job)

    def update_job(self, job_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"/jobs/{job_id}", json=changes)

    def reorder_job(self, job_id: int, from_order: int, to_order: int) -> Dict[str, Any]:
        return self._request(
            "PATCH",
            f"/jobs/{job_id}/reorder",
            json={"fromOrder": from_order, "toOrder": to_order}
        )

    def delete_job(self, job_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/jobs/{job_id}")

    # Candidates

    def list_candidates(self, **params) -> Dict[str, Any]:
        return self._request("GET", "/candidates", params=_drop_none(params))

    def get_candidate(self, candidate_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/candidates/{candidate_id}")

    def create_candidate(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/candidates", json=candidate)

    def update_candidate(self, candidate_id: int, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"/candidates/{candidate_id}", json=changes)

    def get_timeline(self, candidate_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/candidates/{candidate_id}/timeline")

    def add_note(self, candidate_id: int, content: str, author: str = "Recruiter") -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/candidates/{candidate_id}/notes",
            json={"content": content, "author": author}
        )

    # Assessments

    def list_assessments(self, job_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/assessments/{job_id}")

    def get_assessment(self, job_id: int, assessment_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/assessments/{job_id}/{assessment_id}")

    def save_assessment(self, job_id: int, assessment: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", f"/assessments/{job_id}", json=assessment)

    def submit_assessment(
        self,
        job_id: int,
        assessment_id: int,
        candidate_id: int,
        responses: Dict[str, Any]
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/assessments/{job_id}/{assessment_id}/submit",
            json={"candidateId": candidate_id, "responses": responses}
        )


def _drop_none(params: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in params.items() if v is not None}
