"""Refresh token repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from market.domain.model.refresh_token import RefreshTokenRecord
from market.domain.value import AccountId


class RefreshTokenRepository(ABC):
    """Repository for provider refresh tokens, keyed by account."""

    @abstractmethod
    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[RefreshTokenRecord]:
        """Find the refresh token record of an account.

        Args:
            account_id: Owning account

        Returns:
            The record if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """Save a record, replacing any existing record for the same account.

        Args:
            record: Record to save

        Returns:
            The saved record
        """
        pass
