"""Unit tests for settings validation."""

import pytest

from market.util.error import ConfigurationError
from tests.di.config import make_test_settings


class TestValidateRequired:
    """Tests for Settings.validate_required()."""

    def test_complete_settings_pass(self):
        make_test_settings().validate_required()

    def test_missing_values_are_all_named(self):
        settings = make_test_settings()
        settings.auth.jwt.secret_key = None
        settings.auth.google.client_secret = None

        with pytest.raises(ConfigurationError) as exc_info:
            settings.validate_required()

        assert "auth.jwt.secret_key" in str(exc_info.value)
        assert "auth.google.client_secret" in str(exc_info.value)

    def test_inverted_failure_delay_rejected(self):
        settings = make_test_settings(failure_delay_min_ms=500, failure_delay_max_ms=100)

        with pytest.raises(ConfigurationError):
            settings.validate_required()

    def test_failure_delay_below_floor_rejected(self):
        """Failed logins are always delayed by at least 100 ms."""
        settings = make_test_settings(failure_delay_min_ms=0, failure_delay_max_ms=300)

        with pytest.raises(ConfigurationError, match="failure_delay_min_ms"):
            settings.validate_required()

    def test_non_positive_refresh_token_lifetime_rejected(self):
        settings = make_test_settings(refresh_token_default_expires_in_seconds=0)

        with pytest.raises(ConfigurationError):
            settings.validate_required()
