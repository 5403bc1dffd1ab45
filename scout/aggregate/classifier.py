"""Pure classification, filtering and ranking over normalized items."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from scout.config import ClassifierConfig
from scout.schemas.trending import NormalizedItem

# PT[nH][nM][nS]: each group optional, order fixed, whole string must match
DURATION_PATTERN = re.compile(r"PT(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?")


@dataclass(frozen=True)
class ShortFormPolicy:
    """Tunable short-form rules."""

    threshold_seconds: int = 60
    hint_widening: bool = True
    hint_max_seconds: int = 180
    markers: tuple[str, ...] = field(default=("#shorts", "shorts"))

    @classmethod
    def from_config(cls, config: ClassifierConfig) -> "ShortFormPolicy":
        return cls(
            threshold_seconds=config.short_threshold_seconds,
            hint_widening=config.hint_widening,
            hint_max_seconds=config.hint_max_seconds,
            markers=tuple(m.lower() for m in config.short_markers),
        )


def parse_duration(value: str | None) -> int:
    """
    Convert an ISO-8601 duration subset to total seconds.

    Examples:
        "PT1M" -> 60, "PT45S" -> 45, "PT1H2M3S" -> 3723, "" -> 0, "P1D" -> 0
    """
    if not value:
        return 0
    match = DURATION_PATTERN.fullmatch(value.strip())
    if not match:
        return 0
    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    seconds = int(match.group("seconds") or 0)
    return hours * 3600 + minutes * 60 + seconds


def has_short_hint(texts: Iterable[str | None], markers: Iterable[str]) -> bool:
    """Case-insensitive check for any short-form marker in titles, descriptions or tags."""
    haystack = " ".join(t for t in texts if t).lower()
    if not haystack:
        return False
    return any(marker.lower() in haystack for marker in markers)


def is_short_form(
    duration_seconds: int,
    hint_texts: Iterable[str | None] = (),
    policy: ShortFormPolicy | None = None,
) -> bool:
    """
    Decide whether a video counts as short-form.

    Anything in (0, threshold] is short. Above the threshold, a marker such as
    "#shorts" still classifies it as short while the duration stays within
    ``hint_max_seconds``; upstream durations are sometimes rounded up.
    """
    policy = policy or ShortFormPolicy()
    if duration_seconds <= 0:
        return False
    if duration_seconds <= policy.threshold_seconds:
        return True
    if not policy.hint_widening or duration_seconds > policy.hint_max_seconds:
        return False
    return has_short_hint(hint_texts, policy.markers)


def apply_view_floor(items: list[NormalizedItem], min_views: int) -> list[NormalizedItem]:
    """Drop items whose primary metric is below ``min_views``."""
    if min_views <= 0:
        return list(items)
    return [item for item in items if item.primary_metric >= min_views]


def rank(items: list[NormalizedItem], limit: int | None = None) -> list[NormalizedItem]:
    """Sort by primary metric descending (stable for ties) and truncate to ``limit``."""
    ranked = sorted(items, key=lambda item: item.primary_metric, reverse=True)
    if limit is not None:
        ranked = ranked[: max(limit, 0)]
    return ranked
