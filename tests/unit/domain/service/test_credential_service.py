"""Unit tests for CredentialService."""

from datetime import datetime, timedelta, timezone

import pytest

from market.config import AuthSettings
from market.domain.error import CredentialValidationError
from market.domain.service import CredentialService
from market.persistence.repository.inmemory import InMemoryAccountRepository


@pytest.fixture
def repository():
    return InMemoryAccountRepository()


@pytest.fixture
def service(repository):
    return CredentialService(repository, AuthSettings(bcrypt_rounds=4))


def error_codes(exc_info) -> list[str]:
    return [e.code for e in exc_info.value.errors]


class TestCreateAccount:
    """Tests for CredentialService.create_account()."""

    @pytest.mark.asyncio
    async def test_creates_account_with_hashed_password(self, service, repository):
        """The stored account has a bcrypt hash, never the password."""
        # Act
        account = await service.create_account("ann", "ann@example.com", "Secret123")

        # Assert
        stored = await repository.find_by_id(account.id)
        assert stored is not None
        assert stored.username == "ann"
        assert stored.email == "ann@example.com"
        assert stored.password_hash.startswith("$2")
        assert stored.email_confirmed is False
        assert await repository.get_roles(account.id) == []

    @pytest.mark.asyncio
    async def test_weak_password_reports_every_violation(self, service):
        """All policy violations are reported together."""
        with pytest.raises(CredentialValidationError) as exc_info:
            await service.create_account("ann", "ann@example.com", "abc")

        assert error_codes(exc_info) == [
            "PasswordTooShort",
            "PasswordRequiresUpper",
            "PasswordRequiresDigit",
        ]

    @pytest.mark.asyncio
    async def test_password_over_72_bytes_rejected(self, service):
        """bcrypt's input limit is enforced up front."""
        with pytest.raises(CredentialValidationError) as exc_info:
            await service.create_account("ann", "ann@example.com", "Aa1" + "x" * 70)

        assert error_codes(exc_info) == ["PasswordTooLong"]

    @pytest.mark.asyncio
    async def test_invalid_username_and_email(self, service):
        """Field format errors come before uniqueness checks."""
        with pytest.raises(CredentialValidationError) as exc_info:
            await service.create_account("ann smith", "not-an-email", "Secret123")

        assert error_codes(exc_info) == ["InvalidUserName", "InvalidEmail"]

    @pytest.mark.asyncio
    async def test_duplicate_email_ignores_case(self, service):
        """Emails are unique case-insensitively."""
        await service.create_account("ann", "ann@example.com", "Secret123")

        with pytest.raises(CredentialValidationError) as exc_info:
            await service.create_account("ann2", "ANN@Example.com", "Secret123")

        assert error_codes(exc_info) == ["DuplicateEmail"]

    @pytest.mark.asyncio
    async def test_duplicate_username_and_email_both_reported(self, service):
        """Both uniqueness violations are returned."""
        await service.create_account("ann", "ann@example.com", "Secret123")

        with pytest.raises(CredentialValidationError) as exc_info:
            await service.create_account("ANN", "ann@example.com", "Secret123")

        assert error_codes(exc_info) == ["DuplicateUserName", "DuplicateEmail"]


class TestCreateExternalAccount:
    """Tests for CredentialService.create_external_account()."""

    @pytest.mark.asyncio
    async def test_email_is_username_and_confirmed(self, service):
        """External accounts have no password and a confirmed email."""
        account = await service.create_external_account("a@b.com")

        assert account.username == "a@b.com"
        assert account.email == "a@b.com"
        assert account.email_confirmed is True
        assert account.password_hash is None


class TestCheckPassword:
    """Tests for CredentialService.check_password()."""

    @pytest.mark.asyncio
    async def test_correct_password_succeeds(self, service):
        account = await service.create_account("ann", "ann@example.com", "Secret123")

        result = await service.check_password(account, "Secret123")

        assert result.succeeded
        assert result.failure_reason is None

    @pytest.mark.asyncio
    async def test_wrong_password_fails(self, service):
        account = await service.create_account("ann", "ann@example.com", "Secret123")

        result = await service.check_password(account, "Secret124")

        assert not result.succeeded
        assert result.failure_reason == "invalid_credentials"

    @pytest.mark.asyncio
    async def test_account_without_password_fails(self, service):
        """OAuth-only accounts cannot log in with any password."""
        account = await service.create_external_account("a@b.com")

        result = await service.check_password(account, "")

        assert not result.succeeded

    @pytest.mark.asyncio
    async def test_locked_out_account_fails(self, service, repository):
        account = await service.create_account("ann", "ann@example.com", "Secret123")
        locked = account.model_copy(
            update={"lockout_end": datetime.now(timezone.utc) + timedelta(minutes=5)}
        )
        await repository.save(locked)

        result = await service.check_password(locked, "Secret123")

        assert result.is_locked_out
        assert result.failure_reason == "locked_out"

    @pytest.mark.asyncio
    async def test_unconfirmed_email_not_allowed_when_required(self, repository):
        """Confirmation policy is checked before the password."""
        service = CredentialService(
            repository, AuthSettings(bcrypt_rounds=4, require_confirmed_email=True)
        )
        account = await service.create_account("ann", "ann@example.com", "Secret123")

        result = await service.check_password(account, "Secret123")

        assert result.is_not_allowed
        assert result.failure_reason == "not_allowed"


class TestClaims:
    """Tests for claim replacement."""

    @pytest.mark.asyncio
    async def test_replace_claims_leaves_other_claims(self, service):
        account = await service.create_external_account("a@b.com")
        await service.replace_claims(account.id, {"external_id": "1", "picture": "p"})

        await service.replace_claims(account.id, {"picture": "q"})

        assert await service.get_claims(account.id) == {
            "external_id": "1",
            "picture": "q",
        }
