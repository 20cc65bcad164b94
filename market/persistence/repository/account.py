"""PostgreSQL implementation of Account repository."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from market.domain.model import Account
from market.domain.repository import AccountRepository
from market.domain.value import AccountId, normalize_email, normalize_username
from market.persistence.mappers import account_to_dict, row_to_account
from market.persistence.tables import (
    account_claims_table,
    account_roles_table,
    accounts_table,
)


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email, ignoring case.

        Uses the ``lower(email)`` unique index.
        """
        stmt = select(accounts_table).where(
            func.lower(accounts_table.c.email) == normalize_email(email)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_username(self, username: str) -> Optional[Account]:
        """Find an account by username, ignoring case."""
        stmt = select(accounts_table).where(
            func.lower(accounts_table.c.username) == normalize_username(username)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def save(self, account: Account) -> Account:
        """Save an account (create or update).

        Args:
            account: Account to save

        Returns:
            Saved account
        """
        existing = await self.find_by_id(account.id)

        account_dict = account_to_dict(account)

        if existing:
            stmt = (
                accounts_table.update()
                .where(accounts_table.c.id == account.id)
                .values(**account_dict)
            )
        else:
            stmt = accounts_table.insert().values(**account_dict)
        await self.session.execute(stmt)

        await self.session.flush()
        return account

    async def delete(self, account_id: AccountId) -> None:
        """Delete an account; roles and claims cascade."""
        stmt = delete(accounts_table).where(accounts_table.c.id == account_id)
        await self.session.execute(stmt)
        await self.session.flush()

    async def get_roles(self, account_id: AccountId) -> list[str]:
        """Get role names in assignment order."""
        stmt = (
            select(account_roles_table.c.role)
            .where(account_roles_table.c.account_id == account_id)
            .order_by(account_roles_table.c.created_at, account_roles_table.c.role)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_role(self, account_id: AccountId, role: str) -> None:
        """Assign a role; an existing assignment is left alone."""
        stmt = (
            insert(account_roles_table)
            .values(
                account_id=account_id,
                role=role,
                # NOW() is fixed per transaction, which would lose assignment order
                created_at=datetime.now(timezone.utc),
            )
            .on_conflict_do_nothing(index_elements=["account_id", "role"])
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def get_claims(self, account_id: AccountId) -> dict[str, str]:
        """Get profile claims."""
        stmt = select(
            account_claims_table.c.claim_type, account_claims_table.c.claim_value
        ).where(account_claims_table.c.account_id == account_id)
        result = await self.session.execute(stmt)
        return {row.claim_type: row.claim_value for row in result.all()}

    async def upsert_claims(self, account_id: AccountId, claims: dict[str, str]) -> None:
        """Insert or replace the given claims in one statement."""
        if not claims:
            return

        stmt = insert(account_claims_table).values(
            [
                {"account_id": account_id, "claim_type": claim_type, "claim_value": value}
                for claim_type, value in claims.items()
            ]
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_account_claim_type",
            set_={"claim_value": stmt.excluded.claim_value},
        )
        await self.session.execute(stmt)
        await self.session.flush()
