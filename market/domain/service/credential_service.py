"""Credential store domain service.

Owns account creation, password checks, role assignment and profile
claims. Password policy lives here; callers only propagate the structured
errors it raises.
"""

import asyncio
import re
import secrets
from functools import lru_cache
from uuid import uuid4

import logfire

from market.config import AuthSettings
from market.domain.error import CredentialValidationError
from market.domain.model.account import Account
from market.domain.repository import AccountRepository
from market.domain.value import AccountId, CredentialError, SignInResult
from market.util.password import MAX_PASSWORD_BYTES, hash_password, verify_password

from .base import Service

ALLOWED_USERNAME_CHARACTERS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._@+"
)

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")


@lru_cache(maxsize=None)
def _dummy_password_hash(rounds: int) -> str:
    # Stands in for a real hash on every failure path, at the same cost
    return hash_password(secrets.token_urlsafe(16), rounds)


class CredentialService(Service):
    """Domain service over the account repository."""

    def __init__(
        self, account_repository: AccountRepository, auth_settings: AuthSettings
    ) -> None:
        """Initialize credential service.

        Args:
            account_repository: Account repository
            auth_settings: Authentication settings (password policy, bcrypt cost)
        """
        self.account_repository = account_repository
        self.auth_settings = auth_settings

    async def create_account(
        self, username: str, email: str, password: str, email_confirmed: bool = False
    ) -> Account:
        """Create a password account.

        Args:
            username: Desired username
            email: Email address
            password: Plain text password
            email_confirmed: Whether to mark the email as already confirmed

        Returns:
            The created account (no roles yet)

        Raises:
            CredentialValidationError: If any field, uniqueness or policy check fails
        """
        username = (username or "").strip()
        email = (email or "").strip()
        password = password or ""

        with logfire.span("credential_service.create_account", username=username):
            errors = self._validate_username(username)
            errors += self._validate_email(email)
            errors += self.validate_password(password)

            if not errors:
                if await self.account_repository.find_by_username(username):
                    errors.append(
                        CredentialError(
                            code="DuplicateUserName",
                            description=f"Username '{username}' is already taken.",
                        )
                    )
                if await self.account_repository.find_by_email(email):
                    errors.append(
                        CredentialError(
                            code="DuplicateEmail",
                            description=f"Email '{email}' is already taken.",
                        )
                    )

            if errors:
                logfire.info(
                    "Account validation failed",
                    username=username,
                    codes=[e.code for e in errors],
                )
                raise CredentialValidationError(errors)

            password_hash = await asyncio.to_thread(
                hash_password, password, self.auth_settings.bcrypt_rounds
            )
            account = Account(
                id=AccountId(uuid4()),
                username=username,
                email=email,
                password_hash=password_hash,
                email_confirmed=email_confirmed,
            )
            saved = await self.account_repository.save(account)
            logfire.info("Account created", account_id=str(saved.id))
            return saved

    async def create_external_account(self, email: str) -> Account:
        """Create a password-less account for an externally verified email.

        The email doubles as the username and is marked confirmed.

        Args:
            email: Provider-verified email

        Returns:
            The created account (no roles yet)
        """
        with logfire.span("credential_service.create_external_account"):
            account = Account(
                id=AccountId(uuid4()),
                username=email,
                email=email,
                email_confirmed=True,
            )
            saved = await self.account_repository.save(account)
            logfire.info("External account created", account_id=str(saved.id))
            return saved

    async def find_by_email(self, email: str) -> Account | None:
        """Find an account by email, ignoring case."""
        return await self.account_repository.find_by_email(email)

    async def check_password(self, account: Account, password: str) -> SignInResult:
        """Check a password without recording failures.

        Sign-in eligibility is checked before the password so that a
        not-allowed or locked-out account never reaches its real hash. Every
        path still performs one bcrypt check at the configured cost.

        Args:
            account: Account to check
            password: Plain text password

        Returns:
            Sign-in result
        """
        if self.auth_settings.require_confirmed_email and not account.email_confirmed:
            await self.reject_password(password)
            return SignInResult(succeeded=False, is_not_allowed=True)
        if account.is_locked_out():
            await self.reject_password(password)
            return SignInResult(succeeded=False, is_locked_out=True)
        if not account.password_hash:
            await self.reject_password(password)
            return SignInResult(succeeded=False)

        matches = await asyncio.to_thread(
            verify_password, password, account.password_hash
        )
        return SignInResult(succeeded=matches)

    async def reject_password(self, password: str) -> None:
        """Spend the cost of a password check that cannot succeed.

        Used where there is no account or no usable hash, so the failure
        takes as long as a wrong password.

        Args:
            password: Plain text password as submitted
        """
        rounds = self.auth_settings.bcrypt_rounds
        dummy_hash = await asyncio.to_thread(_dummy_password_hash, rounds)
        await asyncio.to_thread(verify_password, password, dummy_hash)

    async def get_roles(self, account_id: AccountId) -> list[str]:
        """Get the account's role names."""
        return await self.account_repository.get_roles(account_id)

    async def add_to_role(self, account_id: AccountId, role: str) -> None:
        """Assign a role to an account."""
        with logfire.span(
            "credential_service.add_to_role", account_id=str(account_id), role=role
        ):
            await self.account_repository.add_role(account_id, role)

    async def delete(self, account_id: AccountId) -> None:
        """Delete an account."""
        with logfire.span("credential_service.delete", account_id=str(account_id)):
            await self.account_repository.delete(account_id)
            logfire.warn("Account deleted", account_id=str(account_id))

    async def get_claims(self, account_id: AccountId) -> dict[str, str]:
        """Get profile claims of an account."""
        return await self.account_repository.get_claims(account_id)

    async def replace_claims(
        self, account_id: AccountId, claims: dict[str, str]
    ) -> None:
        """Replace the named profile claims, leaving others untouched."""
        with logfire.span(
            "credential_service.replace_claims",
            account_id=str(account_id),
            claim_types=sorted(claims),
        ):
            await self.account_repository.upsert_claims(account_id, claims)

    def validate_password(self, password: str) -> list[CredentialError]:
        """Check a password against the configured policy.

        Args:
            password: Plain text password

        Returns:
            Policy violations (empty when the password is acceptable)
        """
        policy = self.auth_settings.password
        errors: list[CredentialError] = []

        if len(password) < policy.min_length:
            errors.append(
                CredentialError(
                    code="PasswordTooShort",
                    description=f"Passwords must be at least {policy.min_length} characters.",
                )
            )
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            errors.append(
                CredentialError(
                    code="PasswordTooLong",
                    description=f"Passwords must be at most {MAX_PASSWORD_BYTES} bytes.",
                )
            )
        if policy.require_uppercase and not any(c.isupper() for c in password):
            errors.append(
                CredentialError(
                    code="PasswordRequiresUpper",
                    description="Passwords must have at least one uppercase ('A'-'Z').",
                )
            )
        if policy.require_lowercase and not any(c.islower() for c in password):
            errors.append(
                CredentialError(
                    code="PasswordRequiresLower",
                    description="Passwords must have at least one lowercase ('a'-'z').",
                )
            )
        if policy.require_digit and not any(c.isdigit() for c in password):
            errors.append(
                CredentialError(
                    code="PasswordRequiresDigit",
                    description="Passwords must have at least one digit ('0'-'9').",
                )
            )
        return errors

    def _validate_username(self, username: str) -> list[CredentialError]:
        if not username or any(c not in ALLOWED_USERNAME_CHARACTERS for c in username):
            return [
                CredentialError(
                    code="InvalidUserName",
                    description=f"Username '{username}' is invalid, can only contain letters or digits.",
                )
            ]
        return []

    def _validate_email(self, email: str) -> list[CredentialError]:
        if not email or not _EMAIL_PATTERN.match(email):
            return [
                CredentialError(
                    code="InvalidEmail",
                    description=f"Email '{email}' is invalid.",
                )
            ]
        return []
