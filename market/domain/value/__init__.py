"""Domain value objects for marketplace authentication."""

from market.domain.value.identifiers import AccountId, RefreshTokenId
from market.domain.value.types import (
    AuthProvider,
    CredentialError,
    ExternalIdentity,
    ProfileClaim,
    ProviderTokens,
    Role,
    SignInResult,
    normalize_email,
    normalize_username,
)

__all__ = [
    # Identifiers
    "AccountId",
    "RefreshTokenId",
    # Types
    "AuthProvider",
    "CredentialError",
    "ExternalIdentity",
    "ProfileClaim",
    "ProviderTokens",
    "Role",
    "SignInResult",
    "normalize_email",
    "normalize_username",
]
