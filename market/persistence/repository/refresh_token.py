"""PostgreSQL implementation of RefreshToken repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from market.domain.model import RefreshTokenRecord
from market.domain.repository import RefreshTokenRepository
from market.domain.value import AccountId
from market.persistence.mappers import refresh_token_to_dict, row_to_refresh_token
from market.persistence.tables import refresh_tokens_table


class PostgresRefreshTokenRepository(RefreshTokenRepository):
    """PostgreSQL implementation of RefreshTokenRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_account_id(
        self, account_id: AccountId
    ) -> Optional[RefreshTokenRecord]:
        """Find the refresh token record of an account."""
        stmt = select(refresh_tokens_table).where(
            refresh_tokens_table.c.account_id == account_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_refresh_token(dict(row)) if row else None

    async def save(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """Upsert by account id.

        Concurrent saves for the same account resolve to the last write.
        Runs in a savepoint so a failure leaves the surrounding transaction
        usable.
        """
        stmt = insert(refresh_tokens_table).values(**refresh_token_to_dict(record))
        stmt = stmt.on_conflict_do_update(
            constraint="uq_refresh_tokens_account_id",
            set_={
                "token": stmt.excluded.token,
                "expires_at": stmt.excluded.expires_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        async with self.session.begin_nested():
            await self.session.execute(stmt)
        return record
