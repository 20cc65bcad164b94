"""Unit tests for domain value types."""

import pytest

from market.domain.value import ProviderTokens, normalize_email, normalize_username


class TestNormalization:
    """Normalization follows the database's lower() indexes."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("  Ann@Example.COM ", "ann@example.com"),
            ("STRAßE@example.com", "straße@example.com"),
        ],
    )
    def test_normalize_email(self, value, expected):
        assert normalize_email(value) == expected

    def test_lowercase_is_not_full_case_folding(self):
        """Sharp s is kept, so straße and strasse stay distinct as in lower()."""
        assert normalize_username("Straße") != normalize_username("STRASSE")


class TestProviderTokens:
    """Tests for ProviderTokens."""

    def test_missing_expires_in_is_none(self):
        tokens = ProviderTokens.model_validate(
            {"access_token": "a", "id_token": "i", "refresh_token": "r"}
        )

        assert tokens.expires_in is None
