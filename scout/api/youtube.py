from fastapi import APIRouter, Query, Response

from scout.aggregate.classifier import ShortFormPolicy
from scout.api.common import items_data, set_cdn_cache
from scout.dependencies import Config, UpstreamClients
from scout.schemas.params import TopShortsParams
from scout.schemas.trending import ItemsResponse
from scout.services.trending import top_shorts

router = APIRouter()


@router.get("/youtube/top_shorts", response_model=ItemsResponse, response_model_exclude_none=True)
async def youtube_top_shorts(
    response: Response,
    config: Config,
    upstreams: UpstreamClients,
    q: str | None = Query(default=None, description="Comma-separated search queries, up to 10"),
    max_results: str | None = Query(default=None, description="1..50"),
    min_views: str | None = Query(default=None, description="Minimum view count"),
    region_code: str | None = Query(default=None, description="ISO 3166-1 alpha-2"),
    published_after: str | None = Query(default=None, description="RFC 3339 timestamp"),
) -> ItemsResponse:
    """Most viewed YouTube Shorts for one or more queries."""
    params = TopShortsParams.parse(
        config.defaults,
        q=q,
        max_results=max_results,
        min_views=min_views,
        region_code=region_code,
        published_after=published_after,
    )
    result = await top_shorts(
        upstreams.youtube,
        params,
        ShortFormPolicy.from_config(config.classifier),
    )
    set_cdn_cache(response)
    return ItemsResponse(data=items_data(result))
