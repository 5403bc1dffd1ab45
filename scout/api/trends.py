from fastapi import APIRouter, Query, Response

from scout.api.common import set_cdn_cache
from scout.dependencies import Config, UpstreamClients
from scout.schemas.params import parse_keyword
from scout.schemas.trending import TrendsData, TrendsResponse
from scout.services.trending import rising_queries

router = APIRouter()


@router.get("/trends/rising", response_model=TrendsResponse, response_model_exclude_none=True)
async def trends_rising(
    response: Response,
    config: Config,
    upstreams: UpstreamClients,
    keyword: str | None = Query(default=None, description="Up to 64 characters"),
) -> TrendsResponse:
    """Rising related search queries for a keyword."""
    keyword = parse_keyword(keyword, config.defaults.max_keyword_length)
    result = await rising_queries(upstreams.trends, keyword)
    set_cdn_cache(response)
    return TrendsResponse(
        data=TrendsData(
            keyword=keyword,
            source=upstreams.trends.provider_name if upstreams.trends else "",
            items=result.items,
        )
    )
