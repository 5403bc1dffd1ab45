"""Tests for per-client rate limiting on the aggregation routes."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
def reddit_ok(fake_session, reddit_listing, reddit_post):
    fake_session.add("access_token", json_body={"access_token": "tok", "expires_in": 3600})
    fake_session.add("/r/python/", json_body=reddit_listing(reddit_post("p1")))


class TestRateLimiting:
    """Tests for the 60 requests per minute window."""

    async def test_allows_normal_usage(self, client: AsyncClient, reddit_ok):
        """Should allow requests within the limit."""
        for _ in range(3):
            response = await client.get("/api/reddit/search", params={"subreddits": "python"})
            assert response.status_code == 200

    async def test_blocks_61st_request(self, client: AsyncClient, reddit_ok):
        """The 61st request inside one window should be rejected with 429."""
        statuses = []
        for _ in range(61):
            response = await client.get("/api/reddit/search", params={"subreddits": "python"})
            statuses.append(response.status_code)

        assert statuses[:60] == [200] * 60
        assert statuses[60] == 429
        assert response.json() == {"ok": False, "error": "Too many requests"}

    async def test_clients_counted_separately(self, client: AsyncClient, reddit_ok):
        """A different forwarded client address should have its own window."""
        for _ in range(60):
            await client.get(
                "/api/reddit/search",
                params={"subreddits": "python"},
                headers={"x-forwarded-for": "203.0.113.1"},
            )

        blocked = await client.get(
            "/api/reddit/search",
            params={"subreddits": "python"},
            headers={"x-forwarded-for": "203.0.113.1, 10.0.0.1"},
        )
        other = await client.get(
            "/api/reddit/search",
            params={"subreddits": "python"},
            headers={"x-forwarded-for": "198.51.100.7"},
        )

        assert blocked.status_code == 429
        assert other.status_code == 200

    async def test_probes_not_limited(self, client: AsyncClient, reddit_ok):
        for _ in range(61):
            await client.get("/api/reddit/search", params={"subreddits": "python"})

        response = await client.get("/api/health")

        assert response.status_code == 200
