"""Tests for building upstreams from configuration."""

from scout.sources.registry import build_upstreams
from scout.sources.trends import GoogleTrendsProvider, SerpApiTrendsProvider


class TestBuildUpstreams:
    """Tests for capability selection at startup."""

    def test_all_configured(self, fake_session, config_factory):
        upstreams = build_upstreams(fake_session, config_factory())

        assert upstreams.reddit is not None
        assert upstreams.youtube is not None
        assert isinstance(upstreams.trends, GoogleTrendsProvider)

    def test_missing_credentials_disable_capability(self, fake_session, config_factory):
        """Missing keys should leave the capability absent rather than raise."""
        upstreams = build_upstreams(
            fake_session,
            config_factory(reddit_client_secret="", youtube_api_key="", trends_provider="none"),
        )

        assert upstreams.reddit is None
        assert upstreams.youtube is None
        assert upstreams.trends is None

    def test_serpapi_requires_key(self, fake_session, config_factory):
        assert build_upstreams(fake_session, config_factory(trends_provider="serpapi")).trends is None

        upstreams = build_upstreams(
            fake_session, config_factory(trends_provider="SerpApi", serpapi_api_key="k")
        )
        assert isinstance(upstreams.trends, SerpApiTrendsProvider)

    def test_unknown_provider(self, fake_session, config_factory):
        assert build_upstreams(fake_session, config_factory(trends_provider="bing")).trends is None

    def test_endpoints_from_yaml(self, fake_session, config_factory):
        config = config_factory(
            {"sources": {"youtube": {"endpoints": ["https://yt-proxy.example.com/v3"], "timeout_seconds": 3}}}
        )

        upstreams = build_upstreams(fake_session, config)

        assert upstreams.youtube.source.endpoints == ("https://yt-proxy.example.com/v3",)
        assert upstreams.youtube.source.timeout_seconds == 3
        assert upstreams.reddit.source.endpoints[0] == "https://oauth.reddit.com/r/{target}/{sort}"
