"""Unit tests for RefreshTokenService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from market.domain.service import RefreshTokenService
from market.domain.value import AccountId
from market.persistence.repository.inmemory import InMemoryRefreshTokenRepository


@pytest.fixture
def repository():
    return InMemoryRefreshTokenRepository()


@pytest.fixture
def service(repository):
    return RefreshTokenService(repository)


class TestRefreshTokenService:
    """Tests for RefreshTokenService."""

    @pytest.mark.asyncio
    async def test_save_creates_record_with_expiry(self, service):
        """expires_at is now plus the provider's lifetime."""
        account_id = AccountId(uuid4())
        before = datetime.now(timezone.utc)

        record = await service.save(account_id, "rt-123", 3600)

        assert record.account_id == account_id
        assert record.token == "rt-123"
        assert before + timedelta(seconds=3600) <= record.expires_at
        assert record.expires_at <= datetime.now(timezone.utc) + timedelta(seconds=3600)

    @pytest.mark.asyncio
    async def test_save_overwrites_existing_record(self, service, repository):
        """One account keeps one record; the second save replaces the token."""
        account_id = AccountId(uuid4())
        first = await service.save(account_id, "rt-1", 3600)

        second = await service.save(account_id, "rt-2", 7200)

        assert second.id == first.id
        assert second.created_at == first.created_at
        assert second.token == "rt-2"
        assert second.expires_at > first.expires_at
        assert [r.token for r in repository.all()] == ["rt-2"]

    @pytest.mark.asyncio
    async def test_records_are_per_account(self, service, repository):
        await service.save(AccountId(uuid4()), "rt-1", 3600)
        await service.save(AccountId(uuid4()), "rt-2", 3600)

        assert len(repository.all()) == 2

    @pytest.mark.asyncio
    async def test_get_for_account_without_record(self, service):
        assert await service.get_for_account(AccountId(uuid4())) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expires_in", [None, 0])
    async def test_missing_lifetime_uses_default(self, repository, expires_in):
        """A token without a reported lifetime is not stored already expired."""
        service = RefreshTokenService(repository, default_expires_in_seconds=1800)
        before = datetime.now(timezone.utc)

        record = await service.save(AccountId(uuid4()), "rt-123", expires_in)

        assert record.expires_at >= before + timedelta(seconds=1800)
        assert record.expires_at <= datetime.now(timezone.utc) + timedelta(seconds=1800)
