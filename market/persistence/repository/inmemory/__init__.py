"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .refresh_token import InMemoryRefreshTokenRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryRefreshTokenRepository",
]
