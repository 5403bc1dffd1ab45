"""Map upstream payloads into NormalizedItem records.

Upstream schemas are not contractually stable, so every field is read
defensively and falls back to the NormalizedItem default.
"""

import math
from typing import Any

from scout.aggregate.classifier import ShortFormPolicy, is_short_form, parse_duration
from scout.core.datetime_utils import iso_to_epoch
from scout.schemas.trending import ErrorAnnotation, NormalizedItem
from scout.sources.base import Failure

REDDIT_BASE_URL = "https://www.reddit.com"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="
TRENDS_BASE_URL = "https://trends.google.com"

# Reddit uses these placeholders instead of a thumbnail URL
REDDIT_THUMBNAIL_PLACEHOLDERS = {"self", "default", "nsfw", "spoiler", "image", ""}


def dig(obj: Any, *keys: str | int) -> Any:
    """Walk nested dicts/lists, returning None as soon as a step is missing."""
    for key in keys:
        if isinstance(obj, dict):
            obj = obj.get(key)
        elif isinstance(obj, list) and isinstance(key, int) and -len(obj) <= key < len(obj):
            obj = obj[key]
        else:
            return None
    return obj


def to_number(value: Any) -> int | float:
    """Coerce upstream numbers (often strings) to int/float; anything else, NaN or infinity is 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        try:
            return int(text)
        except ValueError:
            try:
                return to_number(float(text))
            except ValueError:
                return 0
    return 0


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def to_epoch(value: Any) -> int | float:
    """Epoch seconds from a number or an ISO-8601 timestamp; 0 when unparseable."""
    if isinstance(value, int | float) and not isinstance(value, bool):
        return to_number(value)
    if isinstance(value, str) and value:
        epoch = iso_to_epoch(value)
        return epoch if epoch is not None else to_number(value)
    return 0


def absolute_url(base: str, link: Any) -> str:
    """Prefix ``base`` onto relative upstream paths; absolute URLs pass through."""
    link = to_text(link)
    if not link:
        return ""
    if link.startswith(("http://", "https://")):
        return link
    if link.startswith("/"):
        return f"{base.rstrip('/')}{link}"
    return f"{base.rstrip('/')}/{link}"


def assemble_reddit_listing(target: str, payload: Any) -> list[NormalizedItem]:
    """Map a Reddit listing (``data.children[].data``) into items."""
    children = dig(payload, "data", "children")
    if not isinstance(children, list):
        return []

    items = []
    for child in children:
        post = dig(child, "data")
        if not isinstance(post, dict):
            continue

        thumbnail = to_text(post.get("thumbnail"))
        if thumbnail in REDDIT_THUMBNAIL_PLACEHOLDERS:
            thumbnail = ""

        items.append(
            NormalizedItem(
                source_target=target,
                id=to_text(post.get("id")),
                title=to_text(post.get("title")),
                url=absolute_url(REDDIT_BASE_URL, post.get("permalink")) or REDDIT_BASE_URL,
                primary_metric=to_number(post.get("score")),
                secondary_metric=to_number(post.get("num_comments")),
                created_at=to_epoch(post.get("created_utc")),
                author=to_text(post.get("author")),
                thumbnail=thumbnail,
                is_video=bool(post.get("is_video")),
            )
        )
    return items


def assemble_youtube_videos(
    target: str,
    payload: Any,
    policy: ShortFormPolicy | None = None,
) -> list[NormalizedItem]:
    """Map a YouTube ``videos.list`` response into items, classifying short-form."""
    videos = dig(payload, "items")
    if not isinstance(videos, list):
        return []

    items = []
    for video in videos:
        if not isinstance(video, dict):
            continue

        video_id = to_text(video.get("id"))
        snippet = video.get("snippet") if isinstance(video.get("snippet"), dict) else {}
        title = to_text(snippet.get("title"))
        duration = to_text(dig(video, "contentDetails", "duration"))
        tags = snippet.get("tags") if isinstance(snippet.get("tags"), list) else []

        items.append(
            NormalizedItem(
                source_target=target,
                id=video_id,
                title=title,
                url=f"{YOUTUBE_WATCH_URL}{video_id}" if video_id else "",
                primary_metric=to_number(dig(video, "statistics", "viewCount")),
                secondary_metric=to_number(dig(video, "statistics", "likeCount")),
                created_at=to_epoch(snippet.get("publishedAt")),
                is_short_form=is_short_form(
                    parse_duration(duration),
                    [title, to_text(snippet.get("description")), *map(to_text, tags)],
                    policy,
                ),
                duration=duration,
                author=to_text(snippet.get("channelTitle")),
                thumbnail=to_text(dig(snippet, "thumbnails", "high", "url"))
                or to_text(dig(snippet, "thumbnails", "default", "url")),
                is_video=True,
            )
        )
    return items


def assemble_trends_rising(target: str, payload: Any) -> list[NormalizedItem]:
    """Map rising related queries (``[{query, value, link}]``) into items."""
    if not isinstance(payload, list):
        return []

    items = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        query = to_text(entry.get("query"))
        items.append(
            NormalizedItem(
                source_target=target,
                id=query,
                title=query,
                url=absolute_url(TRENDS_BASE_URL, entry.get("link")),
                primary_metric=to_number(entry.get("value")),
            )
        )
    return items


def annotate_failure(target: str, failure: Failure) -> ErrorAnnotation:
    """Error annotation for a failed target; the detail is never empty."""
    detail = failure.detail or f"upstream call failed for {target!r}"
    return ErrorAnnotation(target=target, detail=detail)
