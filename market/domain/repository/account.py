"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from market.domain.model.account import Account
from market.domain.value import AccountId


class AccountRepository(ABC):
    """Repository for the Account aggregate, its roles and profile claims.

    This is the credential store's persistence contract. Implementations
    must enforce email uniqueness (case-insensitive) at the storage layer.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email, ignoring case.

        Args:
            email: Email address in any case

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: str) -> Optional[Account]:
        """Find an account by username, ignoring case.

        Args:
            username: Username in any case

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Save an account (create or update).

        Args:
            account: The account to save

        Returns:
            The saved account
        """
        pass

    @abstractmethod
    async def delete(self, account_id: AccountId) -> None:
        """Delete an account together with its roles and claims.

        Args:
            account_id: The account to delete
        """
        pass

    @abstractmethod
    async def get_roles(self, account_id: AccountId) -> list[str]:
        """Get role names in assignment order.

        Args:
            account_id: The account's unique identifier

        Returns:
            Role names (may be empty)
        """
        pass

    @abstractmethod
    async def add_role(self, account_id: AccountId, role: str) -> None:
        """Assign a role. Assigning a role twice is a no-op.

        Args:
            account_id: The account's unique identifier
            role: Role name
        """
        pass

    @abstractmethod
    async def get_claims(self, account_id: AccountId) -> dict[str, str]:
        """Get profile claims.

        Args:
            account_id: The account's unique identifier

        Returns:
            Mapping of claim type to value
        """
        pass

    @abstractmethod
    async def upsert_claims(self, account_id: AccountId, claims: dict[str, str]) -> None:
        """Insert or replace the given profile claims.

        Claims not named in ``claims`` are left untouched.

        Args:
            account_id: The account's unique identifier
            claims: Mapping of claim type to new value
        """
        pass
