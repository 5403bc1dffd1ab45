from fastapi import APIRouter, Query, Response

from scout.api.common import items_data, set_cdn_cache
from scout.dependencies import Config, UpstreamClients
from scout.schemas.params import RedditSearchParams
from scout.schemas.trending import ItemsResponse
from scout.services.trending import search_reddit

router = APIRouter()


@router.get("/reddit/search", response_model=ItemsResponse, response_model_exclude_none=True)
async def reddit_search(
    response: Response,
    config: Config,
    upstreams: UpstreamClients,
    subreddits: str | None = Query(default=None, description="Comma-separated, up to 10"),
    sort: str | None = Query(default=None, description="hot, top, new or rising"),
    limit: str | None = Query(default=None, description="Posts per subreddit, 1..50"),
    min_score: str | None = Query(default=None, description="Drop posts scoring below this"),
    rank: str | None = Query(default=None, description="Rank the merged set by score"),
) -> ItemsResponse:
    """
    Trending posts across several subreddits.

    Subreddits that fail upstream are reported in ``data.errors``; the
    response is still 200.
    """
    params = RedditSearchParams.parse(
        config.defaults,
        subreddits=subreddits,
        sort=sort,
        limit=limit,
        min_score=min_score,
        ranked=rank,
    )
    result = await search_reddit(upstreams.reddit, params)
    set_cdn_cache(response)
    return ItemsResponse(data=items_data(result))
