"""loguru setup for the API and the CLI.

Every module logs snake_case events through ``get_logger(__name__)`` with
context attached via ``bind``. Bound values whose key names a credential are
masked before any sink sees them.
"""

import logging
import sys
from typing import Any

from loguru import logger

from scout.config import get_settings

# Bound keys whose values never reach a sink
SECRET_FIELDS = frozenset({"api_key", "key", "token", "access_token", "client_secret", "authorization"})
MASK = "***"

# Probe endpoints polled by load balancers
PROBE_PATHS = ("/api/health", "/api/version")

DEBUG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level> | {extra}"
)
PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} | {message} | {extra}"

# stdlib loggers routed into loguru
INTERCEPTED = ("uvicorn", "uvicorn.error", "uvicorn.access", "aiohttp.client", "aiohttp.server")


class InterceptHandler(logging.Handler):
    """Forward stdlib records (uvicorn, aiohttp) to loguru at the matching level."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.bind(name=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def mask_secrets(record: dict[str, Any]) -> None:
    """Patcher replacing credential-like bound values with a mask."""
    extra = record["extra"]
    for field in extra.keys() & SECRET_FIELDS:
        if extra[field]:
            extra[field] = MASK


def quiet_probes(record: dict[str, Any]) -> bool:
    """Drop access lines for health/version probes unless running at DEBUG."""
    message = record.get("message", "")
    if any(path in message for path in PROBE_PATHS):
        return bool(record["level"].no <= logging.DEBUG)
    return True


def setup_logging(debug: bool | None = None) -> None:
    """
    Configure loguru for the application.

    Args:
        debug: Force colored DEBUG output; defaults to the DEBUG setting.
    """
    settings = get_settings()
    debug = settings.debug if debug is None else debug

    logger.remove()
    logger.configure(extra={"name": "scout"}, patcher=mask_secrets)

    if debug:
        logger.add(sys.stderr, level="DEBUG", format=DEBUG_FORMAT, backtrace=True, diagnose=True)
    else:
        logger.add(
            sys.stderr,
            level="INFO",
            format=PLAIN_FORMAT,
            filter=quiet_probes,
            backtrace=True,
            diagnose=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in INTERCEPTED:
        logging.getLogger(name).handlers = [InterceptHandler()]


def get_logger(name: str) -> Any:
    """Logger carrying the module name in ``extra``."""
    return logger.bind(name=name)
