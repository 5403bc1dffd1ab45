"""Tests for the shared-secret check."""

import pytest

from scout.core.errors import AuthError, ConfigError
from scout.core.security import verify_api_key


class TestVerifyApiKey:
    def test_matching_key_passes(self):
        verify_api_key("secret", "secret")

    def test_wrong_key(self):
        with pytest.raises(AuthError):
            verify_api_key("secret", "nope")

    def test_missing_header(self):
        with pytest.raises(AuthError):
            verify_api_key("secret", None)

    def test_unconfigured_server(self):
        """No configured key should be a 503, never an open door."""
        with pytest.raises(ConfigError) as exc_info:
            verify_api_key("", "anything")
        assert exc_info.value.status_code == 503
