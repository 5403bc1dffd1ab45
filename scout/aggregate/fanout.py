import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from scout.aggregate.assembler import annotate_failure
from scout.aggregate.classifier import rank
from scout.core.logging import get_logger
from scout.schemas.trending import ErrorAnnotation, NormalizedItem
from scout.sources.base import FetchOutcome, FetchRequest, Failure

logger = get_logger(__name__)

Fetch = Callable[[FetchRequest], Awaitable[FetchOutcome]]
Assemble = Callable[[str, Any], list[NormalizedItem]]


@dataclass
class AggregatedResponse:
    """Merged items plus one error annotation per failed target."""

    items: list[NormalizedItem] = field(default_factory=list)
    errors: list[ErrorAnnotation] = field(default_factory=list)
    succeeded: list[str] = field(default_factory=list)

    @property
    def all_failed(self) -> bool:
        return not self.succeeded and bool(self.errors)


class FanOutAggregator:
    """
    Dispatches one FetchRequest per target concurrently and merges the outcomes.

    Every dispatched fetch runs to a terminal outcome before the merge; a
    failing target contributes an error annotation and never cancels or
    discards the others. Items keep target dispatch order, then upstream
    order, unless ``rank_limit`` asks for a ranked merge.
    """

    def __init__(self, source_id: str) -> None:
        self.source_id = source_id

    async def aggregate(
        self,
        requests: list[FetchRequest],
        fetch: Fetch,
        assemble: Assemble,
        rank_limit: int | None = None,
    ) -> AggregatedResponse:
        """
        Fetch every request and merge the results.

        Args:
            requests: One request per target, in dispatch order
            fetch: Coroutine producing a FetchOutcome for one request
            assemble: Maps (target, successful payload) into items
            rank_limit: When set, rank the merged items and keep this many

        Returns:
            AggregatedResponse accounting for every target exactly once
        """
        outcomes = await asyncio.gather(*(self._run(fetch, request) for request in requests))

        response = AggregatedResponse()
        for request, outcome in zip(requests, outcomes, strict=True):
            target = request.target
            if not outcome.ok:
                response.errors.append(annotate_failure(target, outcome))
                continue

            try:
                items = assemble(target, outcome.payload)
            except Exception as e:
                logger.bind(source=self.source_id, target=target, error=str(e)).error(
                    "aggregate_assemble_error"
                )
                response.errors.append(
                    annotate_failure(target, Failure(detail=f"malformed {self.source_id} payload: {e}"))
                )
                continue

            response.items.extend(items)
            response.succeeded.append(target)

        if rank_limit is not None:
            response.items = rank(response.items, rank_limit)

        logger.bind(
            source=self.source_id,
            targets=len(requests),
            succeeded=len(response.succeeded),
            failed=len(response.errors),
            items=len(response.items),
        ).info("aggregate_completed")
        return response

    async def _run(self, fetch: Fetch, request: FetchRequest) -> FetchOutcome:
        try:
            return await fetch(request)
        except Exception as e:
            # Fetchers return Failure values; this only catches programming errors
            logger.bind(source=self.source_id, target=request.target, error=str(e)).error(
                "aggregate_fetch_error"
            )
            return Failure(detail=f"{self.source_id} fetch crashed: {type(e).__name__}: {e}")
