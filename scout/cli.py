"""
viral-scout CLI - run aggregations from the terminal or start the API.

Usage:
    scout --help                       Show all commands
    scout serve                        Run the API with uvicorn
    scout reddit python,rust --sort top
    scout shorts "football,cricket" --max-results 5
    scout rising "world cup"
"""

import asyncio
import json
from collections.abc import Awaitable, Callable

import aiohttp
import typer

from scout.aggregate.classifier import ShortFormPolicy
from scout.aggregate.fanout import AggregatedResponse
from scout.config import get_config
from scout.core.errors import ScoutError
from scout.core.logging import setup_logging
from scout.schemas.params import RedditSearchParams, TopShortsParams, parse_keyword
from scout.sources.registry import Upstreams, build_upstreams
from scout.services.trending import rising_queries, search_reddit, top_shorts

app = typer.Typer(
    name="scout",
    help="viral-scout CLI - trending content aggregation",
    no_args_is_help=True,
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    """viral-scout CLI - trending content aggregation."""
    setup_logging(debug=True if verbose else None)


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    typer.echo(f"❌ {message}", err=True)


def _print_result(result: AggregatedResponse) -> None:
    typer.echo(
        json.dumps(
            {
                "items": [item.model_dump() for item in result.items],
                "errors": [error.model_dump() for error in result.errors],
            },
            indent=2,
        )
    )
    if result.errors:
        typer.echo(f"  ⚠️ {len(result.errors)} target(s) failed", err=True)


def _run(job: Callable[[Upstreams], Awaitable[AggregatedResponse]]) -> None:
    """Build upstreams around a fresh session, run ``job`` and print its result."""

    async def _main() -> AggregatedResponse:
        async with aiohttp.ClientSession() as session:
            return await job(build_upstreams(session, get_config()))

    try:
        result = asyncio.run(_main())
    except ScoutError as e:
        _print_error(f"{e.message}: {e.detail}" if e.detail else e.message)
        raise typer.Exit(code=1) from None
    _print_result(result)


@app.command()
def reddit(
    subreddits: str = typer.Argument("all", help="Comma-separated subreddits"),
    sort: str = typer.Option("hot", help="hot, top, new or rising"),
    limit: int = typer.Option(10, help="Posts per subreddit (1-50)"),
    min_score: int = typer.Option(0, help="Drop posts scoring below this"),
    rank: bool = typer.Option(False, help="Rank the merged set by score"),
) -> None:
    """Trending posts across subreddits."""
    config = get_config()
    try:
        params = RedditSearchParams.parse(
            config.defaults,
            subreddits=subreddits,
            sort=sort,
            limit=str(limit),
            min_score=str(min_score),
            ranked=rank,
        )
    except ScoutError as e:
        _print_error(e.message)
        raise typer.Exit(code=2) from None

    _run(lambda upstreams: search_reddit(upstreams.reddit, params))


@app.command()
def shorts(
    queries: str = typer.Argument(..., help="Comma-separated search queries"),
    max_results: int = typer.Option(10, help="Videos to keep (1-50)"),
    min_views: int = typer.Option(0, help="Minimum view count"),
    region_code: str = typer.Option("US", help="ISO 3166-1 alpha-2 region"),
    published_after: str | None = typer.Option(None, help="RFC 3339 timestamp"),
) -> None:
    """Most viewed YouTube Shorts for the given queries."""
    config = get_config()
    try:
        params = TopShortsParams.parse(
            config.defaults,
            q=queries,
            max_results=str(max_results),
            min_views=str(min_views),
            region_code=region_code,
            published_after=published_after,
        )
    except ScoutError as e:
        _print_error(e.message)
        raise typer.Exit(code=2) from None

    policy = ShortFormPolicy.from_config(config.classifier)
    _run(lambda upstreams: top_shorts(upstreams.youtube, params, policy))


@app.command()
def rising(keyword: str = typer.Argument(..., help="Keyword, up to 64 characters")) -> None:
    """Rising related queries for a keyword."""
    config = get_config()
    try:
        keyword = parse_keyword(keyword, config.defaults.max_keyword_length)
    except ScoutError as e:
        _print_error(e.message)
        raise typer.Exit(code=2) from None

    _run(lambda upstreams: rising_queries(upstreams.trends, keyword))


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API server."""
    import uvicorn

    uvicorn.run("scout.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
