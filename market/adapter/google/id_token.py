"""Google ID token validation."""

from typing import Any

import jwt
import logfire

from market.adapter.google.keys import SigningKeyCache
from market.domain.error import InvalidArgumentError, InvalidTokenError
from market.domain.service.auth_service import IdentityValidator
from market.domain.value import AuthProvider, ExternalIdentity

# Google signs ID tokens with RS256 only; anything else, "none" included,
# is rejected before the signature is looked at
EXPECTED_ALGORITHM = "RS256"

REQUIRED_CLAIMS = ("sub", "email", "name")


def parse_email_verified(value: Any) -> bool:
    """Read ``email_verified``, which Google sends as a bool or a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


class GoogleIdentityValidator(IdentityValidator):
    """Base class for Google ID token validators.

    Provides type distinction for dependency injection.
    """

    pass


class RealGoogleIdentityValidator(GoogleIdentityValidator):
    """Validates Google ID tokens against Google's published signing keys."""

    def __init__(
        self,
        client_id: str,
        key_cache: SigningKeyCache,
        valid_issuers: list[str],
        clock_skew_seconds: int = 300,
    ) -> None:
        """Initialize Google ID token validator.

        Args:
            client_id: Google OAuth client ID, the expected audience
            key_cache: Signing key cache
            valid_issuers: Accepted ``iss`` values
            clock_skew_seconds: Leeway for ``exp``/``iat`` checks
        """
        self.client_id = client_id
        self.key_cache = key_cache
        self.valid_issuers = frozenset(valid_issuers)
        self.clock_skew_seconds = clock_skew_seconds

    async def validate_id_token(self, id_token: str) -> ExternalIdentity:
        """Validate a Google ID token.

        Args:
            id_token: Compact-serialized ID token

        Returns:
            Identity asserted by the token

        Raises:
            InvalidArgumentError: If the token is empty
            InvalidTokenError: If any check fails; ``check`` names which one
        """
        if not id_token or not id_token.strip():
            raise InvalidArgumentError("ID token is required")

        with logfire.span("google.validate_id_token"):
            try:
                claims = await self._decode(id_token)
            except InvalidTokenError as e:
                logfire.warn("Google ID token rejected", check=e.check, detail=e.detail)
                raise

            logfire.info("Google ID token validated", subject=claims["sub"])
            return ExternalIdentity(
                provider=AuthProvider.GOOGLE,
                subject=claims["sub"],
                email=claims["email"],
                email_verified=parse_email_verified(claims.get("email_verified")),
                name=claims["name"],
                picture=claims.get("picture") or None,
            )

    async def _decode(self, id_token: str) -> dict[str, Any]:
        try:
            header = jwt.get_unverified_header(id_token)
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("malformed", str(e)) from e

        algorithm = header.get("alg")
        if algorithm != EXPECTED_ALGORITHM:
            raise InvalidTokenError(
                "algorithm", f"Unexpected signing algorithm '{algorithm}'"
            )

        kid = header.get("kid")
        if not kid:
            raise InvalidTokenError("signing_key", "Token header has no key id")

        signing_key = await self.key_cache.get_key(kid)
        if signing_key is None:
            raise InvalidTokenError("signing_key", f"Unknown signing key '{kid}'")

        try:
            claims = jwt.decode(
                id_token,
                signing_key.key,
                algorithms=[EXPECTED_ALGORITHM],
                audience=self.client_id,
                leeway=self.clock_skew_seconds,
                options={
                    "require": ["exp", "iat", "iss", "aud"],
                    # Two issuer spellings are valid; checked below
                    "verify_iss": False,
                },
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("expiry", str(e)) from e
        except jwt.InvalidAudienceError as e:
            raise InvalidTokenError("audience", str(e)) from e
        except jwt.InvalidSignatureError as e:
            raise InvalidTokenError("signature", str(e)) from e
        except jwt.MissingRequiredClaimError as e:
            raise InvalidTokenError("missing_claim", str(e)) from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("invalid", str(e)) from e

        issuer = claims.get("iss")
        if issuer not in self.valid_issuers:
            raise InvalidTokenError("issuer", f"Unexpected issuer '{issuer}'")

        missing = [name for name in REQUIRED_CLAIMS if not claims.get(name)]
        if missing:
            raise InvalidTokenError(
                "missing_claim", f"Missing required claims: {', '.join(missing)}"
            )

        return claims


class MockGoogleIdentityValidator(GoogleIdentityValidator):
    """Mock Google ID token validator for testing.

    Accepts only the token issued by ``MockGoogleAuthExchange`` and returns
    a fixed identity for it.
    """

    ACCEPTED_TOKEN = "mock-google-id-token"

    def __init__(self):
        """Initialize mock validator without real OAuth configuration."""
        self.identity = ExternalIdentity(
            provider=AuthProvider.GOOGLE,
            subject="mock-google-123",
            email="mock.user@example.com",
            email_verified=True,
            name="Mock User",
            picture="https://example.com/mock-avatar.png",
        )

    async def validate_id_token(self, id_token: str) -> ExternalIdentity:
        """Return the mock identity.

        Args:
            id_token: ID token from the mock exchange

        Returns:
            Mock Google identity
        """
        if not id_token or not id_token.strip():
            raise InvalidArgumentError("ID token is required")
        if id_token != self.ACCEPTED_TOKEN:
            raise InvalidTokenError("signature", "Unknown mock token")
        return self.identity
