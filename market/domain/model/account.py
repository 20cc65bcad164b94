"""Account aggregate root.

An account is the local identity anchor. It is created either by password
registration or by a first OAuth login, and every issued token names it as
the subject.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, computed_field

from market.domain.model.common import DomainModel
from market.domain.value import AccountId, normalize_email, normalize_username


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(DomainModel):
    """Local account.

    Roles and profile claims are stored alongside the account by the
    account repository rather than on the aggregate itself.
    """

    id: AccountId
    username: str
    email: str
    password_hash: Optional[str] = None  # None for OAuth-only accounts
    email_confirmed: bool = False
    lockout_end: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @computed_field
    @property
    def normalized_email(self) -> str:
        return normalize_email(self.email)

    @computed_field
    @property
    def normalized_username(self) -> str:
        return normalize_username(self.username)

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    def is_locked_out(self, now: datetime | None = None) -> bool:
        """Whether a lockout is currently in effect."""
        if self.lockout_end is None:
            return False
        return self.lockout_end > (now or _utcnow())
