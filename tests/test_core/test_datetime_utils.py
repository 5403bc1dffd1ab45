"""Tests for datetime utilities."""

from scout.core.datetime_utils import iso_to_epoch, utc_now, utc_now_iso


class TestIsoToEpoch:
    """Tests for iso_to_epoch."""

    def test_zulu_timestamp(self):
        """Should parse YouTube-style timestamps."""
        assert iso_to_epoch("2026-01-01T00:00:00Z") == 1767225600

    def test_offset_timestamp(self):
        """Should honor explicit offsets."""
        assert iso_to_epoch("2026-01-01T01:00:00+01:00") == 1767225600

    def test_naive_is_utc(self):
        """Naive timestamps should be read as UTC."""
        assert iso_to_epoch("2026-01-01T00:00:00") == 1767225600

    def test_invalid(self):
        """Should return None for non-ISO strings."""
        assert iso_to_epoch("yesterday") is None
        assert iso_to_epoch("") is None


class TestUtcNow:
    def test_is_aware(self):
        assert utc_now().tzinfo is not None

    def test_iso_has_z_suffix(self):
        value = utc_now_iso()
        assert value.endswith("Z")
        assert iso_to_epoch(value) is not None
