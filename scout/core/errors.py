"""Error taxonomy for failures raised before any upstream dispatch.

Per-target upstream faults are never raised; they travel as ``Failure``
outcomes and end up as error annotations inside a 200 response.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from scout.core.logging import get_logger

logger = get_logger(__name__)


class ScoutError(Exception):
    """Base error rendered as ``{"ok": false, "error": ..., "detail": ...}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal error"

    def __init__(self, message: str | None = None, detail: str | None = None) -> None:
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(ScoutError):
    """Malformed or missing request input."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class AuthError(ScoutError):
    """Missing or wrong shared-secret header."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class RateLimitError(ScoutError):
    """Admission denied by the rate limiter."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Too many requests"


class ConfigError(ScoutError):
    """A required credential, secret or capability is not configured."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Service not configured"


class UpstreamError(ScoutError):
    """Upstream unusable for the whole request (credential exchange, exhausted fallbacks)."""

    status_code = status.HTTP_502_BAD_GATEWAY
    message = "Upstream error"


def error_body(message: str, detail: str | None = None) -> dict:
    body: dict = {"ok": False, "error": message}
    if detail:
        body["detail"] = detail
    return body


async def scout_error_handler(request: Request, exc: ScoutError) -> JSONResponse:
    """Render a ScoutError into the error envelope."""
    logger.bind(
        path=request.url.path,
        status=exc.status_code,
        error=exc.message,
        detail=exc.detail,
    ).warning("request_rejected")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.detail),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI's query validation failures as 400 in the same envelope."""
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ())[1:])}: {err.get('msg', '')}"
        for err in errors
    )
    logger.bind(path=request.url.path, detail=detail).warning("request_validation_failed")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationError.message, detail or None),
    )
