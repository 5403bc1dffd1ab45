from scout.aggregate.classifier import (
    ShortFormPolicy,
    apply_view_floor,
    is_short_form,
    parse_duration,
    rank,
)
from scout.aggregate.fanout import AggregatedResponse, FanOutAggregator

__all__ = [
    "AggregatedResponse",
    "FanOutAggregator",
    "ShortFormPolicy",
    "apply_view_floor",
    "is_short_form",
    "parse_duration",
    "rank",
]
