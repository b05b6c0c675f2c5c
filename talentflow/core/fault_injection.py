"""
Random error injection for exercising the UI's optimistic updates.

Write endpoints depend on one of the checks below. With the default rates of
0.0 nothing is ever injected; raising SIMULATED_ERROR_RATE or
SIMULATED_REORDER_ERROR_RATE makes a fraction of requests fail with 500 before
the database is touched, so the client has to roll back its optimistic state.
"""

import logging
import random
from fastapi import HTTPException, status

from talentflow.core.config import settings

logger = logging.getLogger(__name__)


class FaultInjector:
    """
    Decides whether a request should fail.

    The random source is injectable so tests can make failures deterministic.
    """

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    def should_fail(self, rate: float) -> bool:
        return rate > 0 and self.rng.random() < rate


fault_injector = FaultInjector()


def simulate_write_failure() -> None:
    """
    FastAPI dependency for create/update/delete endpoints.

    Raises:
        HTTPException 500: When a failure is injected
    """
    if fault_injector.should_fail(settings.SIMULATED_ERROR_RATE):
        logger.warning("Injected failure on write request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


def simulate_reorder_failure() -> None:
    """
    FastAPI dependency for the job reorder endpoint.

    Raises:
        HTTPException 500: When a failure is injected
    """
    if fault_injector.should_fail(settings.SIMULATED_REORDER_ERROR_RATE):
        logger.warning("Injected failure on reorder request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reorder. Please try again"
        )
