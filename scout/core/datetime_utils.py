"""Centralized datetime utilities for consistent timezone handling.

All functions work in UTC. Upstreams report timestamps either as epoch
seconds (Reddit) or as ISO-8601 strings (YouTube); items carry epoch seconds.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC time as an aware datetime."""
    return datetime.now(UTC)


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with a ``Z`` suffix."""
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_to_epoch(value: str) -> int | None:
    """Convert an ISO-8601 timestamp to epoch seconds.

    Args:
        value: Timestamp such as "2026-01-10T10:00:00Z"; naive values are UTC

    Returns:
        Whole epoch seconds, or None if the string is not ISO-8601
    """
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp())
