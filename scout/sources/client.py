import json
from typing import Any

import aiohttp

from scout.core.logging import get_logger
from scout.sources.base import FetchOutcome, Failure, Success

logger = get_logger(__name__)

# Upstream text quoted in error details is capped at this many characters
EXCERPT_CHARS = 200

# Google prefixes JSON responses with this guard against XSSI
XSSI_PREFIX = ")]}'"


def excerpt(text: str, limit: int = EXCERPT_CHARS) -> str:
    """Collapse whitespace and cap upstream text for use in error details."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[:limit] + "..."


def parse_json_body(text: str) -> Any:
    """Parse a JSON body, tolerating Google's XSSI prefix line."""
    body = text.lstrip()
    if body.startswith(XSSI_PREFIX):
        body = body[len(XSSI_PREFIX) :].lstrip(",").lstrip()
    return json.loads(body)


class SourceClient:
    """
    Performs exactly one upstream HTTP call and turns it into a FetchOutcome.

    The body is always read as text first, so a non-JSON answer (an HTML
    captcha page, a proxy error) becomes a Failure quoting a short excerpt
    instead of an exception. Nothing raises past ``fetch``.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        source_id: str,
        timeout_seconds: float = 10.0,
        user_agent: str | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            session: Shared aiohttp session
            source_id: Upstream family name, used in logs and error details
            timeout_seconds: Total timeout for one call
            user_agent: Optional User-Agent sent with every call
        """
        self.session = session
        self.source_id = source_id
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.user_agent = user_agent

    async def fetch(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        method: str = "GET",
        data: dict[str, str] | None = None,
        auth: aiohttp.BasicAuth | None = None,
    ) -> FetchOutcome:
        """Call ``endpoint`` once and return Success(parsed JSON) or Failure."""
        request_headers = {"Accept": "application/json"}
        if self.user_agent:
            request_headers["User-Agent"] = self.user_agent
        if headers:
            request_headers.update(headers)

        call = self.session.post if method.upper() == "POST" else self.session.get
        kwargs: dict[str, Any] = {
            "params": _clean_params(params),
            "headers": request_headers,
            "timeout": self.timeout,
        }
        if data is not None:
            kwargs["data"] = data
        if auth is not None:
            kwargs["auth"] = auth

        try:
            async with call(endpoint, **kwargs) as response:
                status = response.status
                text = await response.text()
        except TimeoutError:
            logger.bind(source=self.source_id, endpoint=endpoint).warning("upstream_timeout")
            return Failure(
                detail=f"{self.source_id} timed out after {self.timeout.total}s",
                endpoint=endpoint,
            )
        except aiohttp.ClientError as e:
            logger.bind(source=self.source_id, endpoint=endpoint, error=str(e)).warning(
                "upstream_client_error"
            )
            return Failure(
                detail=f"{self.source_id} request failed: {excerpt(str(e)) or type(e).__name__}",
                endpoint=endpoint,
            )
        except UnicodeDecodeError:
            logger.bind(source=self.source_id, endpoint=endpoint).warning("upstream_undecodable")
            return Failure(
                detail=f"{self.source_id} returned an undecodable body",
                endpoint=endpoint,
            )

        if not 200 <= status < 300:
            logger.bind(source=self.source_id, endpoint=endpoint, status=status).warning(
                "upstream_http_error"
            )
            return Failure(
                detail=f"{self.source_id} {status}: {excerpt(text)}",
                endpoint=endpoint,
                status=status,
            )

        try:
            payload = parse_json_body(text)
        except ValueError:
            logger.bind(source=self.source_id, endpoint=endpoint).warning("upstream_non_json")
            return Failure(
                detail=f"{self.source_id} non-JSON response: {excerpt(text)}",
                endpoint=endpoint,
                status=status,
            )

        logger.bind(source=self.source_id, endpoint=endpoint).debug("upstream_fetch_success")
        return Success(payload=payload, endpoint=endpoint)


def _clean_params(params: dict[str, Any] | None) -> dict[str, str] | None:
    """Drop None values and stringify the rest; aiohttp rejects non-str params."""
    if not params:
        return None
    return {key: str(value) for key, value in params.items() if value is not None}
