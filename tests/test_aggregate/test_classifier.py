"""Tests for duration parsing, short-form classification and ranking."""

import pytest

from scout.aggregate.classifier import (
    ShortFormPolicy,
    apply_view_floor,
    has_short_hint,
    is_short_form,
    parse_duration,
    rank,
)
from scout.config import ClassifierConfig
from scout.schemas.trending import NormalizedItem


@pytest.mark.parametrize(
    "value,expected",
    [
        ("PT1M", 60),
        ("PT45S", 45),
        ("PT1M15S", 75),
        ("PT1H2M3S", 3723),
        ("PT2H", 7200),
        ("PT0S", 0),
        ("", 0),
        (None, 0),
        ("garbage", 0),
        ("P1D", 0),
        ("PT1S2M", 0),
        ("1M", 0),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


class TestIsShortForm:
    """Tests for the short-form decision."""

    @pytest.mark.parametrize("seconds,expected", [(1, True), (59, True), (60, True), (61, False), (90, False)])
    def test_threshold_without_hint(self, seconds, expected):
        assert is_short_form(seconds) is expected

    def test_zero_duration_is_not_short(self):
        """An unknown duration should never count, even with a marker."""
        assert is_short_form(0, ["#shorts"]) is False

    def test_hint_widens_above_threshold(self):
        """A #shorts marker should classify a 90 s video as short."""
        assert is_short_form(90, ["My clip #Shorts"]) is True

    def test_hint_has_an_upper_bound(self):
        assert is_short_form(181, ["#shorts"]) is False
        assert is_short_form(180, ["#shorts"]) is True

    def test_hint_widening_disabled(self):
        policy = ShortFormPolicy(hint_widening=False)
        assert is_short_form(90, ["#shorts"], policy) is False

    def test_custom_threshold(self):
        policy = ShortFormPolicy(threshold_seconds=30)
        assert is_short_form(45, [], policy) is False

    def test_policy_from_config(self):
        policy = ShortFormPolicy.from_config(
            ClassifierConfig({"short_threshold_seconds": 90, "short_markers": ["#Reel"]})
        )
        assert policy.threshold_seconds == 90
        assert policy.markers == ("#reel",)


def test_has_short_hint_ignores_empty_texts():
    assert has_short_hint([None, ""], ["#shorts"]) is False
    assert has_short_hint([None, "tag: SHORTS"], ["shorts"]) is True


def _item(item_id: str, metric: int) -> NormalizedItem:
    return NormalizedItem(id=item_id, primary_metric=metric)


class TestFloorAndRank:
    def test_view_floor_inclusive(self):
        items = [_item("a", 99), _item("b", 100), _item("c", 101)]
        assert [i.id for i in apply_view_floor(items, 100)] == ["b", "c"]

    def test_zero_floor_keeps_everything(self):
        items = [_item("a", 0)]
        assert apply_view_floor(items, 0) == items

    def test_rank_descending_and_truncated(self):
        items = [_item("a", 5), _item("b", 50), _item("c", 20)]
        assert [i.id for i in rank(items, 2)] == ["b", "c"]

    def test_rank_is_stable_for_ties(self):
        items = [_item("a", 10), _item("b", 10), _item("c", 10)]
        assert [i.id for i in rank(items)] == ["a", "b", "c"]
