"""Google OAuth adapter."""

from .exchange import GoogleAuthExchange, MockGoogleAuthExchange, RealGoogleAuthExchange
from .id_token import (
    GoogleIdentityValidator,
    MockGoogleIdentityValidator,
    RealGoogleIdentityValidator,
    parse_email_verified,
)
from .keys import SigningKeyCache, SigningKeySet, parse_jwks

__all__ = [
    "GoogleAuthExchange",
    "GoogleIdentityValidator",
    "MockGoogleAuthExchange",
    "MockGoogleIdentityValidator",
    "RealGoogleAuthExchange",
    "RealGoogleIdentityValidator",
    "SigningKeyCache",
    "SigningKeySet",
    "parse_email_verified",
    "parse_jwks",
]
