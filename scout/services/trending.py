"""Fan-out aggregation for each endpoint family, shared by the API and the CLI."""

from scout.aggregate.assembler import (
    assemble_reddit_listing,
    assemble_trends_rising,
    assemble_youtube_videos,
)
from scout.aggregate.classifier import ShortFormPolicy, apply_view_floor
from scout.aggregate.fanout import AggregatedResponse, FanOutAggregator
from scout.core.errors import ConfigError, UpstreamError
from scout.core.logging import get_logger
from scout.schemas.params import RedditSearchParams, TopShortsParams
from scout.schemas.trending import NormalizedItem
from scout.sources.base import FetchRequest
from scout.sources.reddit import RedditFetcher
from scout.sources.trends import BaseTrendsProvider
from scout.sources.youtube import YouTubeFetcher

logger = get_logger(__name__)


async def search_reddit(reddit: RedditFetcher | None, params: RedditSearchParams) -> AggregatedResponse:
    """
    Fetch every requested subreddit concurrently.

    The bearer token is acquired before dispatch; if that fails no listing
    call is attempted and the whole request fails with 502.
    """
    if reddit is None:
        raise ConfigError(
            "Reddit not configured",
            "Missing REDDIT_CLIENT_ID or REDDIT_CLIENT_SECRET",
        )

    token = await reddit.tokens.get_token()
    if not token.ok:
        raise UpstreamError("Reddit upstream error", token.detail)

    def assemble(target: str, payload: object) -> list[NormalizedItem]:
        return apply_view_floor(assemble_reddit_listing(target, payload), params.min_score)

    requests = [
        FetchRequest(source=reddit.source, target=subreddit, sort=params.sort, limit=params.limit)
        for subreddit in params.subreddits
    ]
    return await FanOutAggregator(reddit.source.id).aggregate(
        requests,
        reddit.fetch,
        assemble,
        rank_limit=params.limit if params.ranked else None,
    )


async def top_shorts(
    youtube: YouTubeFetcher | None,
    params: TopShortsParams,
    policy: ShortFormPolicy,
) -> AggregatedResponse:
    """Search each query, keep short-form videos above the view floor, rank by views."""
    if youtube is None:
        raise ConfigError(
            "YOUTUBE_API_KEY not set",
            "Set YOUTUBE_API_KEY to enable /api/youtube/top_shorts.",
        )

    def assemble(target: str, payload: object) -> list[NormalizedItem]:
        shorts = [item for item in assemble_youtube_videos(target, payload, policy) if item.is_short_form]
        return apply_view_floor(shorts, params.min_views)

    requests = [
        FetchRequest(
            source=youtube.source,
            target=query,
            sort="viewCount",
            limit=params.max_results,
            params={"region_code": params.region_code, "published_after": params.published_after},
        )
        for query in params.queries
    ]
    return await FanOutAggregator(youtube.source.id).aggregate(
        requests,
        youtube.fetch,
        assemble,
        rank_limit=params.max_results,
    )


async def rising_queries(trends: BaseTrendsProvider | None, keyword: str) -> AggregatedResponse:
    """
    Rising related queries for one keyword.

    With a single target there is no partial result to return, so a failure
    after fallback exhaustion becomes a 502.
    """
    if trends is None:
        raise ConfigError(
            "Trends provider not configured",
            "Set TRENDS_PROVIDER=google, or TRENDS_PROVIDER=serpapi with SERPAPI_API_KEY.",
        )

    response = await FanOutAggregator(trends.source.id).aggregate(
        [FetchRequest(source=trends.source, target=keyword)],
        trends.fetch,
        assemble_trends_rising,
    )
    if response.all_failed:
        logger.bind(keyword=keyword, provider=trends.provider_name).warning("trends_unavailable")
        raise UpstreamError(
            "Trends upstream appears to be blocking this request",
            response.errors[0].detail,
        )
    return response
