"""Domain layer errors.

Component errors carry diagnostic detail for logs. The auth use cases
collapse all of them into ``AuthenticationFailedError`` or
``RegistrationError`` before anything reaches a caller.
"""

from market.domain.value import CredentialError


class DomainError(Exception):
    """Base domain error."""

    pass


class InvalidArgumentError(DomainError):
    """Caller passed malformed input, such as an empty code or token."""

    pass


class InvalidTokenError(DomainError):
    """A provider ID token failed validation.

    Attributes:
        check: Which check failed (algorithm, signature, expiry, audience,
            issuer, signing_key, missing_claim, malformed)
        detail: Diagnostic detail for logs
    """

    def __init__(self, check: str, detail: str):
        self.check = check
        self.detail = detail
        super().__init__(f"ID token rejected ({check}): {detail}")


class MissingIdentityDataError(DomainError):
    """A validated external identity lacks data needed to link an account."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"External identity is missing '{field}'")


class AccountProvisioningError(DomainError):
    """Account creation or default role assignment failed."""

    pass


class CredentialValidationError(DomainError):
    """Credential store rejected account data."""

    def __init__(self, errors: list[CredentialError]):
        self.errors = errors
        codes = ", ".join(e.code for e in errors)
        super().__init__(f"Credential validation failed: {codes}")


class RegistrationError(DomainError):
    """Registration failed.

    ``errors`` holds caller-safe descriptions only.
    """

    GENERIC = CredentialError(
        code="RegistrationError",
        description="An error occurred during registration. Please try again.",
    )

    def __init__(self, errors: list[CredentialError] | None = None):
        self.errors = errors or [self.GENERIC]
        super().__init__("Registration failed")


class AuthenticationFailedError(DomainError):
    """Login or OAuth callback failed.

    Deliberately carries no detail: every failure looks the same.
    """

    def __init__(self) -> None:
        super().__init__("Authentication failed")
