from fastapi import APIRouter, Depends

from scout.api.meta import router as meta_router
from scout.api.reddit import router as reddit_router
from scout.api.trends import router as trends_router
from scout.api.youtube import router as youtube_router
from scout.dependencies import enforce_rate_limit, require_api_key

api_router = APIRouter()

# Unauthenticated probes at /api/health and /api/version
api_router.include_router(meta_router, prefix="/api", tags=["meta"])

# Aggregation routes: rate limit first, then the shared-secret check
guarded = [Depends(enforce_rate_limit), Depends(require_api_key)]
api_router.include_router(reddit_router, prefix="/api", tags=["reddit"], dependencies=guarded)
api_router.include_router(youtube_router, prefix="/api", tags=["youtube"], dependencies=guarded)
api_router.include_router(trends_router, prefix="/api", tags=["trends"], dependencies=guarded)
