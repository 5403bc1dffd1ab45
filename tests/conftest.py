"""
Pytest configuration and fixtures for viral-scout tests.

Provides:
- A scripted stand-in for aiohttp.ClientSession
- Test settings/config with every upstream credential set
- Async test client with app state wired to the fake session
- Payload factories for Reddit, YouTube and Google Trends
"""

import asyncio
import json
from contextlib import asynccontextmanager
from dataclasses import dataclass
from urllib.parse import urlencode

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from scout.config import AppConfig, Settings, get_config, get_settings
from scout.core.rate_limit import RateLimiter
from scout.main import app
from scout.sources.registry import build_upstreams

TEST_API_KEY = "test-api-key"


class ScoutTestSettings(Settings):
    private_api_key: str = TEST_API_KEY
    reddit_client_id: str = "test-client-id"
    reddit_client_secret: str = "test-client-secret"
    youtube_api_key: str = "test-youtube-key"
    trends_provider: str = "google"
    serpapi_api_key: str = ""
    commit_sha: str = "abc1234"
    debug: bool = True


def make_config(data: dict | None = None, **overrides) -> AppConfig:
    """AppConfig built from ScoutTestSettings (with overrides) and an in-memory YAML dict."""
    return AppConfig(settings=ScoutTestSettings(**overrides), data=data or {})


# ============================================================================
# Fake aiohttp session
# ============================================================================


class FakeResponse:
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body


@dataclass
class FakeRoute:
    pattern: str
    status: int = 200
    body: str = ""
    exc: BaseException | None = None
    delay: float = 0.0


class FakeSession:
    """
    Scripted replacement for aiohttp.ClientSession.

    Routes match when ``pattern`` is a substring of the URL plus its encoded
    query string; the first route added wins. Unmatched calls answer 404.
    """

    def __init__(self) -> None:
        self.routes: list[FakeRoute] = []
        self.calls: list[dict] = []

    def add(
        self,
        pattern: str,
        *,
        status: int = 200,
        json_body: object = None,
        text: str | None = None,
        exc: BaseException | None = None,
        delay: float = 0.0,
    ) -> "FakeSession":
        body = text if text is not None else json.dumps(json_body if json_body is not None else {})
        self.routes.append(FakeRoute(pattern, status, body, exc, delay))
        return self

    def get(self, url: str, **kwargs):
        return self._respond("GET", url, kwargs)

    def post(self, url: str, **kwargs):
        return self._respond("POST", url, kwargs)

    def calls_to(self, pattern: str) -> list[dict]:
        return [call for call in self.calls if pattern in call["match"]]

    @asynccontextmanager
    async def _respond(self, method: str, url: str, kwargs: dict):
        params = kwargs.get("params") or {}
        match = f"{url}?{urlencode(params)}" if params else url
        self.calls.append({"method": method, "url": url, "match": match, **kwargs})

        route = next((r for r in self.routes if r.pattern in match), None)
        if route is None:
            yield FakeResponse(404, "not found")
            return
        if route.delay:
            await asyncio.sleep(route.delay)
        if route.exc is not None:
            raise route.exc
        yield FakeResponse(route.status, route.body)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


# ============================================================================
# App fixtures
# ============================================================================


@pytest.fixture
def test_config() -> AppConfig:
    return make_config()


@pytest_asyncio.fixture
async def client(fake_session: FakeSession, test_config: AppConfig):
    """Async test client with upstreams bound to the fake session."""
    app.dependency_overrides[get_settings] = lambda: test_config.settings
    app.dependency_overrides[get_config] = lambda: test_config

    app.state.rate_limiter = RateLimiter(window_seconds=60, max_requests=60)
    app.state.upstreams = build_upstreams(fake_session, test_config)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"x-api-key": TEST_API_KEY},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# ============================================================================
# Payload factories
# ============================================================================


@pytest.fixture
def reddit_listing():
    """Factory for Reddit listing payloads."""

    def _make(*posts: dict) -> dict:
        return {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": p} for p in posts]}}

    return _make


@pytest.fixture
def reddit_post():
    """Factory for a single Reddit post."""

    def _make(post_id: str = "abc", score: int = 10, **extra) -> dict:
        post = {
            "id": post_id,
            "title": f"Post {post_id}",
            "permalink": f"/r/test/comments/{post_id}/post/",
            "score": score,
            "num_comments": 3,
            "created_utc": 1767225600.0,
            "author": "someone",
            "thumbnail": "self",
            "is_video": False,
        }
        post.update(extra)
        return post

    return _make


@pytest.fixture
def youtube_video():
    """Factory for a single videos.list entry."""

    def _make(
        video_id: str = "vid1",
        duration: str = "PT45S",
        views: str = "1000",
        title: str | None = None,
        **snippet_extra,
    ) -> dict:
        snippet = {
            "title": title or f"Video {video_id}",
            "channelTitle": "Channel",
            "publishedAt": "2026-01-10T10:00:00Z",
            "description": "",
            "thumbnails": {"high": {"url": f"https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"}},
        }
        snippet.update(snippet_extra)
        return {
            "id": video_id,
            "snippet": snippet,
            "contentDetails": {"duration": duration},
            "statistics": {"viewCount": views, "likeCount": "50"},
        }

    return _make


@pytest.fixture
def trends_payloads():
    """Explore and relatedsearches bodies as Google serves them (XSSI-prefixed)."""

    def _make(rising: list[dict]) -> tuple[str, str]:
        explore = {
            "widgets": [
                {"id": "TIMESERIES", "token": "ts-token", "request": {}},
                {"id": "RELATED_QUERIES", "token": "rq-token", "request": {"restriction": {}}},
            ]
        }
        related = {
            "default": {
                "rankedList": [
                    {"rankedKeyword": [{"query": "top query", "value": 100, "link": "/trends/explore?q=top"}]},
                    {"rankedKeyword": rising},
                ]
            }
        }
        return ")]}'\n" + json.dumps(explore), ")]}',\n" + json.dumps(related)

    return _make


@pytest.fixture
def config_factory():
    """Build an AppConfig with settings overrides and in-memory YAML data."""
    return make_config


@pytest.fixture
def upstreams(fake_session: FakeSession, test_config: AppConfig):
    """Every upstream built around the fake session."""
    return build_upstreams(fake_session, test_config)
