from typing import Any

from scout.core.logging import get_logger
from scout.sources.base import FetchOutcome, FetchRequest, Failure, Source, Success
from scout.sources.client import SourceClient
from scout.sources.fallback import FallbackChain

logger = get_logger(__name__)

# YouTube Data API caps maxResults at 50
MAX_SEARCH_RESULTS = 50


class YouTubeFetcher:
    """
    Fetcher for short videos via the YouTube Data API v3.

    Two calls per query: ``search.list`` (ordered by view count, restricted to
    videos under four minutes) for IDs, then ``videos.list`` for statistics
    and durations. A search failure short-circuits the second call.
    """

    source_name = "youtube"

    def __init__(self, client: SourceClient, source: Source, api_key: str) -> None:
        """
        Initialize YouTube fetcher.

        Args:
            client: SourceClient bound to the shared session
            source: Source whose endpoints are API base URLs
            api_key: YouTube Data API key
        """
        self.client = client
        self.source = source
        self.api_key = api_key

    async def search_videos(
        self,
        query: str,
        max_results: int = 10,
        region_code: str | None = None,
        published_after: str | None = None,
    ) -> FetchOutcome:
        """Search ``query`` and return Success(videos.list payload) or the first Failure."""
        search = await self._resolve(
            "search",
            query,
            {
                "part": "snippet",
                "type": "video",
                "q": query,
                "maxResults": min(max(max_results, 1), MAX_SEARCH_RESULTS),
                "videoDuration": "short",
                "order": "viewCount",
                "safeSearch": "none",
                "regionCode": region_code,
                "publishedAfter": published_after,
            },
        )
        if not search.ok:
            return search

        items = search.payload.get("items") if isinstance(search.payload, dict) else None
        if items is not None and not isinstance(items, list):
            return Failure(detail="youtube search returned malformed items", endpoint=search.endpoint)

        ids = [
            video_id
            for video_id in (
                (item.get("id") or {}).get("videoId") if isinstance(item, dict) else None
                for item in items or []
            )
            if video_id
        ]
        if not ids:
            logger.bind(query=query).info("youtube_search_empty")
            return Success(payload={"items": []}, endpoint=search.endpoint)

        return await self._resolve(
            "videos",
            query,
            {
                "part": "snippet,contentDetails,statistics",
                "id": ",".join(ids),
            },
        )

    async def _resolve(self, resource: str, query: str, params: dict[str, Any]) -> FetchOutcome:
        async def attempt(endpoint: str, target: str, call_params: dict[str, Any]) -> FetchOutcome:
            return await self.client.fetch(
                f"{endpoint.rstrip('/')}/{resource}",
                params={**call_params, "key": self.api_key},
            )

        chain = FallbackChain(f"{self.source.id}_{resource}", self.source.endpoints, attempt)
        return await chain.resolve(query, params)

    async def fetch(self, request: FetchRequest) -> FetchOutcome:
        """Search the query described by ``request``."""
        return await self.search_videos(
            request.target,
            request.limit,
            region_code=request.params.get("region_code"),
            published_after=request.params.get("published_after"),
        )
