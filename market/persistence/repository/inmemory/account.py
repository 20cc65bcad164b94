"""In-memory account repository for testing."""

from typing import Optional

from sqlalchemy.exc import IntegrityError

from market.domain.model.account import Account
from market.domain.repository.account import AccountRepository
from market.domain.value import AccountId, normalize_email, normalize_username


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing."""

    def __init__(self) -> None:
        self._accounts: dict[AccountId, Account] = {}
        self._roles: dict[AccountId, list[str]] = {}
        self._claims: dict[AccountId, dict[str, str]] = {}

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self._accounts.get(account_id)

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email, ignoring case."""
        normalized = normalize_email(email)
        for account in self._accounts.values():
            if account.normalized_email == normalized:
                return account
        return None

    async def find_by_username(self, username: str) -> Optional[Account]:
        """Find an account by username, ignoring case."""
        normalized = normalize_username(username)
        for account in self._accounts.values():
            if account.normalized_username == normalized:
                return account
        return None

    async def save(self, account: Account) -> Account:
        """Save or update an account.

        Raises:
            IntegrityError: If another account has the same email or username
        """
        for other in self._accounts.values():
            if other.id == account.id:
                continue
            if other.normalized_email == account.normalized_email:
                raise IntegrityError("Duplicate email", None, Exception())
            if other.normalized_username == account.normalized_username:
                raise IntegrityError("Duplicate username", None, Exception())

        self._accounts[account.id] = account
        return account

    async def delete(self, account_id: AccountId) -> None:
        """Delete an account with its roles and claims."""
        self._accounts.pop(account_id, None)
        self._roles.pop(account_id, None)
        self._claims.pop(account_id, None)

    async def get_roles(self, account_id: AccountId) -> list[str]:
        """Get role names in assignment order."""
        return list(self._roles.get(account_id, []))

    async def add_role(self, account_id: AccountId, role: str) -> None:
        """Assign a role."""
        roles = self._roles.setdefault(account_id, [])
        if role not in roles:
            roles.append(role)

    async def get_claims(self, account_id: AccountId) -> dict[str, str]:
        """Get profile claims."""
        return dict(self._claims.get(account_id, {}))

    async def upsert_claims(self, account_id: AccountId, claims: dict[str, str]) -> None:
        """Insert or replace the given claims."""
        self._claims.setdefault(account_id, {}).update(claims)
