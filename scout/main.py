from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from scout import __version__
from scout.api.router import api_router
from scout.config import AppConfig, get_config, get_settings
from scout.core.errors import ScoutError, request_validation_error_handler, scout_error_handler
from scout.core.logging import get_logger, setup_logging
from scout.core.rate_limit import RateLimiter
from scout.sources.registry import build_upstreams

logger = get_logger(__name__)

settings = get_settings()


def create_rate_limiter(config: AppConfig) -> RateLimiter:
    """Rate limiter sized from config.yml."""
    return RateLimiter(
        window_seconds=config.rate_limit.window_seconds,
        max_requests=config.rate_limit.max_requests,
        max_keys=config.rate_limit.max_keys,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    # Startup
    setup_logging()
    config = get_config()
    session = aiohttp.ClientSession()
    app.state.http_session = session
    app.state.rate_limiter = create_rate_limiter(config)
    app.state.upstreams = build_upstreams(session, config)
    logger.info("scout_started")
    yield
    # Shutdown
    await session.close()
    logger.info("scout_stopped")


app = FastAPI(
    title="viral-scout",
    description="Trending content from Reddit, YouTube and Google Trends behind one API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["x-api-key"],
)

app.add_exception_handler(ScoutError, scout_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

app.include_router(api_router)
