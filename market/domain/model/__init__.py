"""Domain model entities for marketplace authentication."""

from market.domain.model.account import Account
from market.domain.model.refresh_token import RefreshTokenRecord

__all__ = [
    "Account",
    "RefreshTokenRecord",
]
