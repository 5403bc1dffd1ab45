"""Rising related queries for a keyword, behind a provider interface.

Exactly one provider is selected at startup. When none can be built the
capability is absent and the trends route answers 503.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from scout.core.logging import get_logger
from scout.sources.base import FetchOutcome, FetchRequest, Failure, Source, Success
from scout.sources.client import SourceClient
from scout.sources.fallback import FallbackChain

logger = get_logger(__name__)

RELATED_QUERIES_WIDGET = "RELATED_QUERIES"


class BaseTrendsProvider(ABC):
    """Abstract base class for trend data providers."""

    provider_name: str = "unknown"
    source: Source

    async def fetch(self, request: FetchRequest) -> FetchOutcome:
        """Rising queries for the keyword described by ``request``."""
        return await self.rising_queries(request.target)

    @abstractmethod
    async def rising_queries(self, keyword: str) -> FetchOutcome:
        """
        Fetch rising related queries for ``keyword``.

        Returns:
            Success with a list of ``{"query", "value", "formattedValue", "link"}``
            dicts, or Failure. Never raises.
        """


class GoogleTrendsProvider(BaseTrendsProvider):
    """
    Talks to the unofficial Google Trends widget API directly.

    Each endpoint candidate (Google itself or a proxy exposing the same paths)
    gets the full two-step exchange: ``explore`` issues a token for the
    related-queries widget, ``widgetdata/relatedsearches`` returns the lists.
    Widget tokens are host-bound, so both steps stay on one candidate.
    """

    provider_name = "google-trends"

    def __init__(
        self,
        client: SourceClient,
        source: Source,
        hl: str = "en-US",
        timeframe: str = "today 12-m",
    ) -> None:
        self.client = client
        self.source = source
        self.hl = hl
        self.timeframe = timeframe

    async def rising_queries(self, keyword: str) -> FetchOutcome:
        chain = FallbackChain(self.source.id, self.source.endpoints, self._attempt)
        return await chain.resolve(keyword)

    async def _attempt(self, endpoint: str, keyword: str, params: dict[str, Any]) -> FetchOutcome:
        base = endpoint.rstrip("/")
        explore = await self.client.fetch(
            f"{base}/trends/api/explore",
            params={
                "hl": self.hl,
                "tz": 0,
                "req": json.dumps(
                    {
                        "comparisonItem": [{"keyword": keyword, "geo": "", "time": self.timeframe}],
                        "category": 0,
                        "property": "",
                    }
                ),
            },
        )
        if not explore.ok:
            return explore

        widget = self._find_widget(explore.payload)
        if widget is None:
            return Failure(detail="Google Trends explore returned no related-queries widget", endpoint=endpoint)

        related = await self.client.fetch(
            f"{base}/trends/api/widgetdata/relatedsearches",
            params={
                "hl": self.hl,
                "tz": 0,
                "req": json.dumps(widget.get("request", {})),
                "token": widget.get("token", ""),
            },
        )
        if not related.ok:
            return related

        # rankedList[0] is "top", rankedList[1] is "rising"
        payload = related.payload if isinstance(related.payload, dict) else {}
        default = payload.get("default") if isinstance(payload.get("default"), dict) else {}
        ranked = default.get("rankedList")
        if not isinstance(ranked, list):
            ranked = []
        rising = ranked[1].get("rankedKeyword") if len(ranked) > 1 and isinstance(ranked[1], dict) else None
        return Success(payload=rising if isinstance(rising, list) else [], endpoint=related.endpoint)

    @staticmethod
    def _find_widget(payload: Any) -> dict | None:
        widgets = payload.get("widgets") if isinstance(payload, dict) else None
        for widget in widgets or []:
            if isinstance(widget, dict) and widget.get("id") == RELATED_QUERIES_WIDGET:
                return widget
        return None


class SerpApiTrendsProvider(BaseTrendsProvider):
    """Rising related queries through SerpApi's Google Trends engine."""

    provider_name = "serpapi"

    def __init__(self, client: SourceClient, source: Source, api_key: str) -> None:
        self.client = client
        self.source = source
        self.api_key = api_key

    async def rising_queries(self, keyword: str) -> FetchOutcome:
        chain = FallbackChain(self.source.id, self.source.endpoints, self._attempt)
        return await chain.resolve(keyword)

    async def _attempt(self, endpoint: str, keyword: str, params: dict[str, Any]) -> FetchOutcome:
        outcome = await self.client.fetch(
            endpoint,
            params={
                "engine": "google_trends",
                "data_type": "RELATED_QUERIES",
                "q": keyword,
                "api_key": self.api_key,
            },
        )
        if not outcome.ok:
            return outcome

        payload = outcome.payload if isinstance(outcome.payload, dict) else {}
        if payload.get("error"):
            return Failure(detail=f"serpapi: {payload['error']}", endpoint=endpoint)

        related = payload.get("related_queries") if isinstance(payload.get("related_queries"), dict) else {}
        rising = related.get("rising") if isinstance(related.get("rising"), list) else []
        return Success(
            payload=[
                {
                    "query": entry.get("query", ""),
                    "value": entry.get("extracted_value", 0),
                    "formattedValue": entry.get("value", ""),
                    "link": entry.get("link", ""),
                }
                for entry in rising
                if isinstance(entry, dict)
            ],
            endpoint=endpoint,
        )
