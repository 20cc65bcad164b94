"""Refresh token record.

Stores the external provider's refresh token for an account so that
renewal jobs can obtain new provider access tokens offline.
"""

from datetime import datetime, timezone

from pydantic import Field

from market.domain.model.common import DomainModel
from market.domain.value import AccountId, RefreshTokenId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefreshTokenRecord(DomainModel):
    """Provider refresh token, at most one per account."""

    id: RefreshTokenId
    account_id: AccountId
    token: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
