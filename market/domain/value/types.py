"""Domain value objects for marketplace authentication."""

from enum import Enum

from market.domain.value.common import ValueObject


class AuthProvider(str, Enum):
    """Supported external authentication providers."""

    GOOGLE = "google"


class Role(str, Enum):
    """Role names known to the marketplace."""

    ADMIN = "Admin"
    CUSTOMER = "Customer"


class ProfileClaim(str, Enum):
    """Profile claims synchronised from an external identity onto an account."""

    EXTERNAL_ID = "external_id"
    DISPLAY_NAME = "display_name"
    PICTURE = "picture"


class ExternalIdentity(ValueObject):
    """Identity asserted by a validated provider ID token.

    Provider-agnostic: any provider's validator produces this shape.
    """

    provider: AuthProvider
    subject: str  # Stable provider-scoped user ID ("sub")
    email: str | None = None
    email_verified: bool = False
    name: str | None = None
    picture: str | None = None


class ProviderTokens(ValueObject):
    """Tokens returned by a provider's authorization-code exchange.

    Field names match the OAuth 2.0 token response.
    """

    access_token: str | None = None
    id_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None  # Seconds; some responses omit it
    token_type: str | None = None


class CredentialError(ValueObject):
    """One structured credential validation failure."""

    code: str
    description: str


class SignInResult(ValueObject):
    """Outcome of a password check.

    The failure reason is for logging only; callers of the login use case
    never see it.
    """

    succeeded: bool
    is_locked_out: bool = False
    is_not_allowed: bool = False

    @property
    def failure_reason(self) -> str | None:
        if self.succeeded:
            return None
        if self.is_locked_out:
            return "locked_out"
        if self.is_not_allowed:
            return "not_allowed"
        return "invalid_credentials"


def normalize_email(email: str) -> str:
    """Normalize an email for case-insensitive uniqueness checks and lookups.

    Matches the database's ``lower(email)`` unique index.
    """
    return email.strip().lower()


def normalize_username(username: str) -> str:
    """Normalize a username for case-insensitive uniqueness checks.

    Matches the database's ``lower(username)`` unique index.
    """
    return username.strip().lower()
