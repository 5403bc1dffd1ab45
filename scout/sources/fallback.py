from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from scout.core.logging import get_logger
from scout.sources.base import FetchOutcome, Failure

logger = get_logger(__name__)

# Attempts one candidate endpoint: (endpoint, target, params) -> outcome
Attempt = Callable[[str, str, dict[str, Any]], Awaitable[FetchOutcome]]


class FallbackChain:
    """
    Tries the candidate endpoints of one logical source in priority order.

    Candidates run strictly one after another, never concurrently and never
    retried. The first Success wins; when every candidate fails the last
    Failure is returned.
    """

    def __init__(self, source_id: str, endpoints: Sequence[str], attempt: Attempt) -> None:
        self.source_id = source_id
        self.endpoints = list(endpoints)
        self.attempt = attempt

    async def resolve(self, target: str, params: dict[str, Any] | None = None) -> FetchOutcome:
        """Return the first Success, or the last Failure once all candidates are exhausted."""
        params = params or {}
        outcome: FetchOutcome = Failure(
            detail=f"{self.source_id}: no endpoints configured",
        )

        for position, endpoint in enumerate(self.endpoints, start=1):
            outcome = await self.attempt(endpoint, target, params)
            if outcome.ok:
                if position > 1:
                    logger.bind(source=self.source_id, target=target, endpoint=endpoint).info(
                        "fallback_recovered"
                    )
                return outcome

            logger.bind(
                source=self.source_id,
                target=target,
                endpoint=endpoint,
                attempt=position,
                remaining=len(self.endpoints) - position,
                detail=outcome.detail,
            ).debug("fallback_candidate_failed")

        if self.endpoints:
            logger.bind(source=self.source_id, target=target).warning("fallback_exhausted")
        return outcome
