import platform

from fastapi import APIRouter, Response

from scout.core.datetime_utils import utc_now_iso
from scout.dependencies import AppSettings
from scout.schemas.trending import HealthResponse, VersionResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(response: Response) -> HealthResponse:
    """Health check endpoint for load balancers."""
    response.headers["Cache-Control"] = "no-store"
    return HealthResponse(python=platform.python_version())


@router.get("/version", response_model=VersionResponse)
async def version(response: Response, settings: AppSettings) -> VersionResponse:
    """Deployment info for debugging: runtime, commit and server time."""
    response.headers["Cache-Control"] = "no-store"
    return VersionResponse(
        python=platform.python_version(),
        commit=settings.commit_sha or "unknown",
        server_time=utc_now_iso(),
    )
