import asyncio
import math
import time
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import aiohttp

from scout.core.logging import get_logger
from scout.sources.base import FetchOutcome, FetchRequest, Failure, Source, Success
from scout.sources.client import SourceClient
from scout.sources.fallback import FallbackChain

logger = get_logger(__name__)

SORT_MODES = ("hot", "top", "new", "rising")

# Refresh the bearer token this long before Reddit says it expires
TOKEN_EXPIRY_MARGIN_SECONDS = 60

# Reddit app-only tokens last an hour
DEFAULT_TOKEN_LIFETIME_SECONDS = 3600.0


def _expires_in_seconds(value: Any) -> float:
    """Token lifetime from the exchange reply; missing or unusable values mean one hour."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return DEFAULT_TOKEN_LIFETIME_SECONDS
    if not math.isfinite(seconds) or seconds <= 0:
        return DEFAULT_TOKEN_LIFETIME_SECONDS
    return seconds


class RedditTokenProvider:
    """
    Exchanges Reddit app credentials for an application-only bearer token.

    Uses the ``client_credentials`` grant and caches the token until shortly
    before it expires. Concurrent callers share a single exchange.
    """

    def __init__(
        self,
        client: SourceClient,
        source: Source,
        client_id: str,
        client_secret: str,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.source = source
        self.client_id = client_id
        self.client_secret = client_secret
        self._clock = clock
        self._token: str | None = None
        self._expires_at = 0.0
        self._lock = asyncio.Lock()

    async def get_token(self) -> FetchOutcome:
        """Return Success(token) from cache or a fresh exchange, else the exchange Failure."""
        if self._token and self._clock() < self._expires_at:
            return Success(payload=self._token)

        async with self._lock:
            if self._token and self._clock() < self._expires_at:
                return Success(payload=self._token)

            chain = FallbackChain(f"{self.source.id}_oauth", self.source.endpoints, self._exchange)
            outcome = await chain.resolve("access_token")
            if not outcome.ok:
                logger.bind(detail=outcome.detail).error("reddit_token_failed")
                return outcome

            token = outcome.payload.get("access_token") if isinstance(outcome.payload, dict) else None
            if not token:
                logger.warning("reddit_token_missing")
                return Failure(detail="Reddit OAuth returned no access_token", endpoint=outcome.endpoint)

            expires_in = _expires_in_seconds(outcome.payload.get("expires_in"))
            self._token = token
            self._expires_at = self._clock() + max(expires_in - TOKEN_EXPIRY_MARGIN_SECONDS, 0)
            logger.bind(expires_in=expires_in).info("reddit_token_acquired")
            return Success(payload=token, endpoint=outcome.endpoint)

    def invalidate(self) -> None:
        self._token = None
        self._expires_at = 0.0

    async def _exchange(self, endpoint: str, target: str, params: dict[str, Any]) -> FetchOutcome:
        return await self.client.fetch(
            endpoint,
            method="POST",
            data={"grant_type": "client_credentials", "scope": "read"},
            auth=aiohttp.BasicAuth(self.client_id, self.client_secret),
        )


class RedditFetcher:
    """
    Fetches subreddit listings through the OAuth API.

    Endpoint candidates are URL templates with ``{target}`` and ``{sort}``
    placeholders, tried in order by a FallbackChain. The bearer token is
    acquired first; a token failure short-circuits before any listing call.
    """

    source_name = "reddit"

    def __init__(
        self,
        client: SourceClient,
        source: Source,
        tokens: RedditTokenProvider,
    ) -> None:
        self.client = client
        self.source = source
        self.tokens = tokens

    async def fetch_listing(self, subreddit: str, sort: str = "hot", limit: int = 10) -> FetchOutcome:
        """Fetch one subreddit listing as raw Reddit JSON."""
        token = await self.tokens.get_token()
        if not token.ok:
            return Failure(detail=f"Reddit OAuth failed: {token.detail}", endpoint=token.endpoint)

        async def attempt(endpoint: str, target: str, params: dict[str, Any]) -> FetchOutcome:
            url = endpoint.format(target=quote(target, safe=""), sort=sort)
            outcome = await self.client.fetch(
                url,
                params=params,
                headers={"Authorization": f"Bearer {token.payload}"},
            )
            if not outcome.ok and outcome.status == 401:
                # Token revoked early; next request exchanges a new one
                self.tokens.invalidate()
            return outcome

        chain = FallbackChain(self.source.id, self.source.endpoints, attempt)
        return await chain.resolve(subreddit, {"limit": limit, "raw_json": 1})

    async def fetch(self, request: FetchRequest) -> FetchOutcome:
        """Fetch the listing described by ``request``."""
        return await self.fetch_listing(request.target, request.sort, request.limit)
