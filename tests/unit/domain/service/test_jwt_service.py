"""Unit tests for JWTService."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from market.config import JWTSettings
from market.domain.service import JWTService
from market.util.error import ConfigurationError
from market.util.jwt import JWTError
from tests.di.config import TEST_JWT_AUDIENCE, TEST_JWT_ISSUER, TEST_JWT_SECRET


def make_jwt_settings(**overrides) -> JWTSettings:
    values = {
        "secret_key": TEST_JWT_SECRET,
        "issuer": TEST_JWT_ISSUER,
        "audience": TEST_JWT_AUDIENCE,
        "expiry_minutes": 60,
    }
    values.update(overrides)
    return JWTSettings(**values)


def read_claims(token: str) -> dict:
    return jwt.decode(token, options={"verify_signature": False})


class TestCreateToken:
    """Tests for JWTService.create_token()."""

    def test_round_trip_preserves_subject_email_and_roles(self):
        """Verifying an issued token yields exactly what was put in."""
        service = JWTService(make_jwt_settings())

        token = service.create_token(
            account_id="account-1",
            email="ann@example.com",
            username="ann",
            roles=["Customer", "Admin"],
        )
        payload = service.verify_token(token)

        assert payload.sub == "account-1"
        assert payload.email == "ann@example.com"
        assert payload.name == "ann"
        assert payload.role == ["Customer", "Admin"]
        assert payload.iss == TEST_JWT_ISSUER
        assert payload.aud == TEST_JWT_AUDIENCE

    def test_verification_with_different_secret_fails(self):
        """A token cannot be verified with another secret."""
        token = JWTService(make_jwt_settings()).create_token(
            "account-1", "ann@example.com", "ann", ["Customer"]
        )
        other = JWTService(
            make_jwt_settings(secret_key="a-completely-different-secret-0123456789")
        )

        with pytest.raises(JWTError):
            other.verify_token(token)

    def test_verification_with_different_audience_fails(self):
        """A token issued for one audience is rejected by another."""
        token = JWTService(make_jwt_settings()).create_token(
            "account-1", "ann@example.com", "ann", ["Customer"]
        )
        other = JWTService(make_jwt_settings(audience="another-app"))

        with pytest.raises(JWTError):
            other.verify_token(token)

    def test_each_token_has_a_fresh_jti(self):
        """Two tokens for the same login are distinguishable."""
        service = JWTService(make_jwt_settings())

        first = read_claims(service.create_token("a", "a@b.com", "a", ["Customer"]))
        second = read_claims(service.create_token("a", "a@b.com", "a", ["Customer"]))

        assert first["jti"] != second["jti"]

    def test_expiry_is_issue_time_plus_ttl(self):
        """exp is always iat plus the configured number of minutes."""
        service = JWTService(make_jwt_settings(expiry_minutes=15))

        claims = read_claims(service.create_token("a", "a@b.com", "a", []))

        assert claims["exp"] - claims["iat"] == 15 * 60

    def test_uses_hs256(self):
        """Tokens are signed with HMAC-SHA256."""
        service = JWTService(make_jwt_settings())

        token = service.create_token("a", "a@b.com", "a", [])

        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_roles_are_emitted_as_given(self):
        """Order is preserved and duplicates are not removed."""
        service = JWTService(make_jwt_settings())

        claims = read_claims(
            service.create_token("a", "a@b.com", "a", ["Customer", "Admin", "Customer"])
        )

        assert claims["role"] == ["Customer", "Admin", "Customer"]

    def test_optional_profile_claims_included_when_given(self):
        """display_name and picture are added when non-empty."""
        service = JWTService(make_jwt_settings())

        claims = read_claims(
            service.create_token(
                "a",
                "a@b.com",
                "a",
                ["Customer"],
                display_name="Ann",
                picture="https://example.com/ann.png",
            )
        )

        assert claims["display_name"] == "Ann"
        assert claims["picture"] == "https://example.com/ann.png"

    def test_optional_profile_claims_omitted_when_empty(self):
        """Empty or missing display_name and picture are left out."""
        service = JWTService(make_jwt_settings())

        claims = read_claims(
            service.create_token("a", "a@b.com", "a", ["Customer"], display_name="")
        )

        assert "display_name" not in claims
        assert "picture" not in claims

    def test_expired_token_is_rejected(self):
        """verify_token raises for a token past its expiry."""
        service = JWTService(make_jwt_settings())
        issued_at = datetime.now(timezone.utc) - timedelta(hours=2)
        token = jwt.encode(
            {
                "sub": "a",
                "email": "a@b.com",
                "jti": "jti-1",
                "name": "a",
                "iss": TEST_JWT_ISSUER,
                "aud": TEST_JWT_AUDIENCE,
                "iat": issued_at,
                "exp": issued_at + timedelta(hours=1),
            },
            TEST_JWT_SECRET,
            algorithm="HS256",
        )

        with pytest.raises(JWTError, match="expired"):
            service.verify_token(token)


class TestConfiguration:
    """JWTService refuses to start with incomplete settings."""

    @pytest.mark.parametrize("field", ["secret_key", "issuer", "audience", "expiry_minutes"])
    def test_missing_value_raises_configuration_error(self, field):
        """Each required value is checked at construction."""
        with pytest.raises(ConfigurationError, match=field):
            JWTService(make_jwt_settings(**{field: None}))

    @pytest.mark.parametrize("expiry_minutes", [0, -5])
    def test_non_positive_expiry_raises_configuration_error(self, expiry_minutes):
        """Expiry must be greater than zero."""
        with pytest.raises(ConfigurationError):
            JWTService(make_jwt_settings(expiry_minutes=expiry_minutes))
