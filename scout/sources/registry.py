from dataclasses import dataclass

import aiohttp

from scout.config import AppConfig
from scout.core.logging import get_logger
from scout.sources.base import CredentialKind, Source
from scout.sources.client import SourceClient
from scout.sources.reddit import RedditFetcher, RedditTokenProvider
from scout.sources.trends import BaseTrendsProvider, GoogleTrendsProvider, SerpApiTrendsProvider
from scout.sources.youtube import YouTubeFetcher

logger = get_logger(__name__)


@dataclass
class Upstreams:
    """Upstream clients built once at startup; None marks a missing credential."""

    reddit: RedditFetcher | None = None
    youtube: YouTubeFetcher | None = None
    trends: BaseTrendsProvider | None = None


def create_reddit_fetcher(session: aiohttp.ClientSession, config: AppConfig) -> RedditFetcher | None:
    """Create Reddit fetcher from config."""
    settings = config.settings
    if not settings.reddit_client_id or not settings.reddit_client_secret:
        return None

    token_source = Source.from_config("reddit_oauth", config.sources.reddit_token, CredentialKind.NONE)
    listing_source = Source.from_config("reddit", config.sources.reddit, CredentialKind.BEARER_TOKEN)
    tokens = RedditTokenProvider(
        SourceClient(session, token_source.id, token_source.timeout_seconds, settings.reddit_user_agent),
        token_source,
        settings.reddit_client_id,
        settings.reddit_client_secret,
    )
    client = SourceClient(session, listing_source.id, listing_source.timeout_seconds, settings.reddit_user_agent)
    return RedditFetcher(client, listing_source, tokens)


def create_youtube_fetcher(session: aiohttp.ClientSession, config: AppConfig) -> YouTubeFetcher | None:
    """Create YouTube fetcher from config."""
    if not config.settings.youtube_api_key:
        return None

    source = Source.from_config("youtube", config.sources.youtube, CredentialKind.API_KEY)
    client = SourceClient(session, source.id, source.timeout_seconds)
    return YouTubeFetcher(client, source, config.settings.youtube_api_key)


def create_trends_provider(session: aiohttp.ClientSession, config: AppConfig) -> BaseTrendsProvider | None:
    """
    Select the trends provider named by TRENDS_PROVIDER.

    Returns None when the capability is disabled or its credential is missing.
    """
    name = config.settings.trends_provider.strip().lower()

    if name == "google":
        source = Source.from_config("google_trends", config.sources.trends, CredentialKind.NONE)
        return GoogleTrendsProvider(
            SourceClient(
                session,
                source.id,
                source.timeout_seconds,
                "Mozilla/5.0 (compatible; viral-scout/1.0)",
            ),
            source,
        )

    if name == "serpapi":
        if not config.settings.serpapi_api_key:
            logger.bind(provider=name).warning("trends_provider_missing_key")
            return None
        source = Source.from_config("serpapi", config.sources.serpapi, CredentialKind.API_KEY)
        return SerpApiTrendsProvider(
            SourceClient(session, source.id, source.timeout_seconds),
            source,
            config.settings.serpapi_api_key,
        )

    if name not in ("", "none"):
        logger.bind(provider=name).warning("trends_provider_unknown")
    return None


def build_upstreams(session: aiohttp.ClientSession, config: AppConfig) -> Upstreams:
    """Build every configured upstream around one shared session."""
    upstreams = Upstreams(
        reddit=create_reddit_fetcher(session, config),
        youtube=create_youtube_fetcher(session, config),
        trends=create_trends_provider(session, config),
    )
    logger.bind(
        reddit=upstreams.reddit is not None,
        youtube=upstreams.youtube is not None,
        trends=upstreams.trends.provider_name if upstreams.trends else None,
    ).info("upstreams_configured")
    return upstreams
