"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from market.domain.model import Account, RefreshTokenRecord
from market.domain.value import AccountId, RefreshTokenId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model.

    Args:
        row: Database row as dict

    Returns:
        Account domain model
    """
    return Account(
        id=AccountId(_uuid(row["id"])),
        username=row["username"],
        email=row["email"],
        password_hash=row.get("password_hash"),
        email_confirmed=row["email_confirmed"],
        lockout_end=row.get("lockout_end"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict.

    Normalized email/username are computed by the model and enforced by
    functional indexes, so they are not stored.

    Args:
        account: Account domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return account.model_dump(exclude={"normalized_email", "normalized_username"})


def row_to_refresh_token(row: Dict[str, Any]) -> RefreshTokenRecord:
    """Convert database row to RefreshTokenRecord domain model.

    Args:
        row: Database row as dict

    Returns:
        RefreshTokenRecord domain model
    """
    return RefreshTokenRecord(
        id=RefreshTokenId(_uuid(row["id"])),
        account_id=AccountId(_uuid(row["account_id"])),
        token=row["token"],
        expires_at=row["expires_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def refresh_token_to_dict(record: RefreshTokenRecord) -> Dict[str, Any]:
    """Convert RefreshTokenRecord domain model to database dict."""
    return record.model_dump()
