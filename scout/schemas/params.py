"""Lenient parsing of query parameters shared by the routes and the CLI."""

from dataclasses import dataclass

from scout.config import RequestDefaultsConfig
from scout.core.errors import ValidationError
from scout.sources.reddit import SORT_MODES


def parse_targets(raw: str | None, max_targets: int = 10, name: str = "targets") -> list[str]:
    """Split a comma list, trim entries, drop empties and keep at most ``max_targets``."""
    targets = [part.strip() for part in (raw or "").split(",")]
    targets = [t for t in targets if t][:max_targets]
    if not targets:
        raise ValidationError(f"Missing `{name}`")
    return targets


def clamp_int(raw: str | int | None, default: int, lower: int, upper: int) -> int:
    """Parse an int, falling back to ``default`` when absent, zero or non-numeric, then clamp."""
    try:
        value = int(float(raw)) if raw not in (None, "") else default
    except (TypeError, ValueError, OverflowError):
        value = default
    if value == 0:
        value = default
    return min(max(value, lower), upper)


def parse_floor(raw: str | int | None, name: str = "min_views") -> int:
    """Non-negative integer floor; absent means 0."""
    if raw in (None, ""):
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"`{name}` must be a non-negative integer") from None
    if value < 0:
        raise ValidationError(f"`{name}` must be a non-negative integer")
    return value


def parse_sort(raw: str | None, default: str = "hot") -> str:
    sort = (raw or default).strip().lower()
    if sort not in SORT_MODES:
        raise ValidationError(f"`sort` must be one of {', '.join(SORT_MODES)}")
    return sort


def parse_keyword(raw: str | None, max_length: int = 64) -> str:
    keyword = (raw or "").strip()
    if not keyword:
        raise ValidationError("Missing `keyword`")
    if len(keyword) > max_length:
        raise ValidationError(f"`keyword` too long (max {max_length} chars)")
    return keyword


def parse_bool(raw: str | bool | None) -> bool:
    if isinstance(raw, bool):
        return raw
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class RedditSearchParams:
    subreddits: list[str]
    sort: str = "hot"
    limit: int = 10
    min_score: int = 0
    ranked: bool = False

    @classmethod
    def parse(
        cls,
        defaults: RequestDefaultsConfig,
        subreddits: str | None = None,
        sort: str | None = None,
        limit: str | None = None,
        min_score: str | None = None,
        ranked: str | bool | None = None,
    ) -> "RedditSearchParams":
        return cls(
            subreddits=parse_targets(
                subreddits if subreddits is not None else defaults.default_subreddits,
                defaults.max_targets,
                "subreddits",
            ),
            sort=parse_sort(sort, defaults.default_sort),
            limit=clamp_int(limit, defaults.default_limit, 1, defaults.max_limit),
            min_score=parse_floor(min_score, "min_score"),
            ranked=parse_bool(ranked),
        )


@dataclass(frozen=True)
class TopShortsParams:
    queries: list[str]
    max_results: int = 10
    min_views: int = 0
    region_code: str = "US"
    published_after: str | None = None

    @classmethod
    def parse(
        cls,
        defaults: RequestDefaultsConfig,
        q: str | None = None,
        max_results: str | None = None,
        min_views: str | None = None,
        region_code: str | None = None,
        published_after: str | None = None,
    ) -> "TopShortsParams":
        return cls(
            queries=parse_targets(q, defaults.max_targets, "q"),
            max_results=clamp_int(max_results, defaults.default_limit, 1, defaults.max_limit),
            min_views=parse_floor(min_views, "min_views"),
            region_code=(region_code or defaults.default_region_code).strip().upper(),
            published_after=(published_after or "").strip() or None,
        )
