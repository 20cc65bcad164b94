"""PostgreSQL repository implementations."""

from market.persistence.repository.account import PostgresAccountRepository
from market.persistence.repository.refresh_token import PostgresRefreshTokenRepository

__all__ = [
    "PostgresAccountRepository",
    "PostgresRefreshTokenRepository",
]
