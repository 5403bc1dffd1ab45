from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared secret checked against the x-api-key header
    private_api_key: str = Field(default="")

    # Reddit (OAuth client_credentials)
    reddit_client_id: str = Field(default="")
    reddit_client_secret: str = Field(default="")
    # Reddit requires a descriptive UA naming a human account
    reddit_user_agent: str = Field(default="viral-scout/1.0 (trending content aggregator)")

    # YouTube Data API v3
    youtube_api_key: str = Field(default="")

    # Trends capability: google | serpapi | none
    trends_provider: str = Field(default="google")
    serpapi_api_key: str = Field(default="")

    # Application
    commit_sha: str = Field(default="unknown")
    debug: bool = Field(default=False)
    config_path: str = Field(default="config.yml")


class SourceConfig:
    """Endpoint candidates and timeout for one upstream family."""

    def __init__(self, data: dict[str, Any], defaults: dict[str, Any]) -> None:
        self.endpoints: list[str] = list(data.get("endpoints", defaults["endpoints"]))
        self.timeout_seconds: float = data.get("timeout_seconds", defaults["timeout_seconds"])


class SourcesConfig:
    """Upstream definitions from config.yml."""

    REDDIT_DEFAULTS: dict[str, Any] = {
        "endpoints": [
            "https://oauth.reddit.com/r/{target}/{sort}",
            "https://www.reddit.com/r/{target}/{sort}.json",
        ],
        "timeout_seconds": 10,
    }
    REDDIT_TOKEN_DEFAULTS: dict[str, Any] = {
        "endpoints": ["https://www.reddit.com/api/v1/access_token"],
        "timeout_seconds": 10,
    }
    YOUTUBE_DEFAULTS: dict[str, Any] = {
        "endpoints": ["https://www.googleapis.com/youtube/v3"],
        "timeout_seconds": 10,
    }
    TRENDS_DEFAULTS: dict[str, Any] = {
        "endpoints": ["https://trends.google.com"],
        "timeout_seconds": 10,
    }
    SERPAPI_DEFAULTS: dict[str, Any] = {
        "endpoints": ["https://serpapi.com/search.json"],
        "timeout_seconds": 15,
    }

    def __init__(self, data: dict[str, Any]) -> None:
        self.reddit = SourceConfig(data.get("reddit", {}), self.REDDIT_DEFAULTS)
        self.reddit_token = SourceConfig(data.get("reddit_token", {}), self.REDDIT_TOKEN_DEFAULTS)
        self.youtube = SourceConfig(data.get("youtube", {}), self.YOUTUBE_DEFAULTS)
        self.trends = SourceConfig(data.get("trends", {}), self.TRENDS_DEFAULTS)
        self.serpapi = SourceConfig(data.get("serpapi", {}), self.SERPAPI_DEFAULTS)


class RateLimitConfig:
    """Sliding-window rate limit settings from config.yml."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.window_seconds: float = data.get("window_seconds", 60)
        self.max_requests: int = data.get("max_requests", 60)
        self.max_keys: int = data.get("max_keys", 10_000)


class ClassifierConfig:
    """Short-form classification policy from config.yml."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.short_threshold_seconds: int = data.get("short_threshold_seconds", 60)
        self.hint_widening: bool = data.get("hint_widening", True)
        self.hint_max_seconds: int = data.get("hint_max_seconds", 180)
        self.short_markers: list[str] = data.get("short_markers", ["#shorts", "shorts"])


class RequestDefaultsConfig:
    """Request parameter defaults and bounds from config.yml."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.max_targets: int = data.get("max_targets", 10)
        self.default_limit: int = data.get("default_limit", 10)
        self.max_limit: int = data.get("max_limit", 50)
        self.default_subreddits: str = data.get("default_subreddits", "all")
        self.default_sort: str = data.get("default_sort", "hot")
        self.default_region_code: str = data.get("default_region_code", "US")
        self.max_keyword_length: int = data.get("max_keyword_length", 64)


class AppConfig:
    """Combined application configuration from .env and config.yml."""

    def __init__(self, settings: Settings | None = None, data: dict[str, Any] | None = None) -> None:
        self.settings = settings or Settings()
        if data is None:
            data = self._load_yaml(Path(self.settings.config_path))

        self.sources = SourcesConfig(data.get("sources", {}))
        self.rate_limit = RateLimitConfig(data.get("rate_limit", {}))
        self.classifier = ClassifierConfig(data.get("classifier", {}))
        self.defaults = RequestDefaultsConfig(data.get("defaults", {}))

    @staticmethod
    def _load_yaml(config_path: Path) -> dict[str, Any]:
        if config_path.exists():
            with open(config_path) as f:
                return yaml.safe_load(f) or {}
        return {}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


@lru_cache
def get_config() -> AppConfig:
    """Get cached full config instance."""
    return AppConfig(get_settings())
