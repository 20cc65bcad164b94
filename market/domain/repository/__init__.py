"""Repository interfaces for the marketplace auth domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from market.domain.repository.account import AccountRepository
from market.domain.repository.refresh_token import RefreshTokenRepository

__all__ = [
    "AccountRepository",
    "RefreshTokenRepository",
]
