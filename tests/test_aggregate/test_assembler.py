"""Tests for mapping upstream payloads to normalized items."""

import pytest

from scout.aggregate.assembler import (
    absolute_url,
    annotate_failure,
    assemble_reddit_listing,
    assemble_trends_rising,
    assemble_youtube_videos,
    to_epoch,
    to_number,
)
from scout.sources.base import Failure


class TestAssembleRedditListing:
    def test_maps_posts(self, reddit_listing, reddit_post):
        payload = reddit_listing(
            reddit_post("p1", score=42, thumbnail="https://b.thumbs.redditmedia.com/x.jpg", is_video=True)
        )

        [item] = assemble_reddit_listing("python", payload)

        assert item.source_target == "python"
        assert item.id == "p1"
        assert item.url == "https://www.reddit.com/r/test/comments/p1/post/"
        assert item.primary_metric == 42
        assert item.secondary_metric == 3
        assert item.created_at == 1767225600.0
        assert item.thumbnail.startswith("https://")
        assert item.is_video is True

    def test_placeholder_thumbnail_dropped(self, reddit_listing, reddit_post):
        [item] = assemble_reddit_listing("python", reddit_listing(reddit_post(thumbnail="self")))
        assert item.thumbnail == ""

    def test_missing_fields_use_defaults(self, reddit_listing):
        """A post missing everything should still assemble."""
        [item] = assemble_reddit_listing("python", reddit_listing({}))

        assert item.id == ""
        assert item.primary_metric == 0
        assert item.url == "https://www.reddit.com"

    def test_malformed_payload(self):
        assert assemble_reddit_listing("python", {"data": {"children": "nope"}}) == []
        assert assemble_reddit_listing("python", "<html>") == []


class TestAssembleYoutubeVideos:
    def test_maps_video(self, youtube_video):
        payload = {"items": [youtube_video("abc", duration="PT45S", views="12345")]}

        [item] = assemble_youtube_videos("cats", payload)

        assert item.url == "https://www.youtube.com/watch?v=abc"
        assert item.primary_metric == 12345
        assert item.secondary_metric == 50
        assert item.created_at == 1768039200
        assert item.duration == "PT45S"
        assert item.is_short_form is True
        assert item.author == "Channel"
        assert item.thumbnail == "https://i.ytimg.com/vi/abc/hqdefault.jpg"

    def test_hint_from_tags(self, youtube_video):
        payload = {"items": [youtube_video("abc", duration="PT1M30S", tags=["Shorts"])]}

        [item] = assemble_youtube_videos("cats", payload)

        assert item.is_short_form is True

    def test_long_video(self, youtube_video):
        [item] = assemble_youtube_videos("cats", {"items": [youtube_video(duration="PT10M")]})
        assert item.is_short_form is False


class TestAssembleTrendsRising:
    def test_maps_entries(self):
        payload = [{"query": "world cup final", "value": 450, "link": "/trends/explore?q=final"}]

        [item] = assemble_trends_rising("world cup", payload)

        assert item.title == "world cup final"
        assert item.primary_metric == 450
        assert item.url == "https://trends.google.com/trends/explore?q=final"

    def test_non_list_payload(self):
        assert assemble_trends_rising("x", {"default": {}}) == []


class TestHelpers:
    def test_to_number(self):
        assert to_number("1,234") == 1234
        assert to_number("1.5") == 1.5
        assert to_number("n/a") == 0
        assert to_number(None) == 0
        assert to_number(7) == 7

    @pytest.mark.parametrize("value", ["NaN", "nan", "inf", "-Infinity", "1e400", float("nan"), float("inf")])
    def test_to_number_non_finite_is_zero(self, value):
        assert to_number(value) == 0

    def test_to_epoch_non_finite_is_zero(self):
        assert to_epoch(float("nan")) == 0
        assert to_epoch("inf") == 0

    def test_absolute_url(self):
        assert absolute_url("https://a.com/", "/x") == "https://a.com/x"
        assert absolute_url("https://a.com", "https://b.com/y") == "https://b.com/y"
        assert absolute_url("https://a.com", None) == ""

    def test_annotation_detail_never_empty(self):
        annotation = annotate_failure("python", Failure(detail=""))
        assert annotation.target == "python"
        assert annotation.detail
