from typing import Annotated

from fastapi import Depends, Header, Request

from scout.config import AppConfig, Settings, get_config, get_settings
from scout.core.errors import RateLimitError
from scout.core.rate_limit import RateLimiter, client_key_from_request
from scout.core.security import verify_api_key
from scout.sources.registry import Upstreams

# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
Config = Annotated[AppConfig, Depends(get_config)]


def get_rate_limiter(request: Request) -> RateLimiter:
    """The limiter constructed at startup."""
    limiter: RateLimiter = request.app.state.rate_limiter
    return limiter


def get_upstreams(request: Request) -> Upstreams:
    """Upstream clients built at startup around the shared HTTP session."""
    upstreams: Upstreams = request.app.state.upstreams
    return upstreams


Limiter = Annotated[RateLimiter, Depends(get_rate_limiter)]
UpstreamClients = Annotated[Upstreams, Depends(get_upstreams)]


async def enforce_rate_limit(request: Request, limiter: Limiter) -> None:
    """Raise 429 when the caller has used up its window."""
    if not limiter.admit(client_key_from_request(request)):
        raise RateLimitError()


async def require_api_key(
    settings: AppSettings,
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
) -> None:
    """Raise 401 unless the x-api-key header matches PRIVATE_API_KEY."""
    verify_api_key(settings.private_api_key, x_api_key)
