"""In-memory refresh token repository for testing."""

from typing import Optional

from market.domain.model.refresh_token import RefreshTokenRecord
from market.domain.repository.refresh_token import RefreshTokenRepository
from market.domain.value import AccountId


class InMemoryRefreshTokenRepository(RefreshTokenRepository):
    """In-memory implementation of RefreshTokenRepository for testing."""

    def __init__(self) -> None:
        self._records: dict[AccountId, RefreshTokenRecord] = {}

    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[RefreshTokenRecord]:
        """Find the refresh token record of an account."""
        return self._records.get(account_id)

    async def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """Save a record, replacing any existing one for the account."""
        self._records[record.account_id] = record
        return record

    def all(self) -> list[RefreshTokenRecord]:
        """Return every stored record."""
        return list(self._records.values())
