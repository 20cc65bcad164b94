"""Unit tests for row/model mappers."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from market.domain.model import Account, RefreshTokenRecord
from market.domain.value import AccountId, RefreshTokenId
from market.persistence.mappers import (
    account_to_dict,
    refresh_token_to_dict,
    row_to_account,
    row_to_refresh_token,
)


class TestAccountMapping:
    """Tests for account mapping."""

    def test_dict_excludes_computed_fields(self):
        """Normalized values live in functional indexes, not columns."""
        account = Account(id=AccountId(uuid4()), username="Ann", email="Ann@B.com")

        row = account_to_dict(account)

        assert "normalized_email" not in row
        assert "normalized_username" not in row
        assert row["email"] == "Ann@B.com"

    def test_row_with_string_id(self):
        account_id = uuid4()
        now = datetime.now(timezone.utc)

        account = row_to_account(
            {
                "id": str(account_id),
                "username": "ann",
                "email": "ann@example.com",
                "password_hash": None,
                "email_confirmed": True,
                "lockout_end": None,
                "created_at": now,
                "updated_at": now,
            }
        )

        assert account.id == account_id
        assert account.has_password is False
        assert account.normalized_email == "ann@example.com"


class TestRefreshTokenMapping:
    """Tests for refresh token mapping."""

    def test_dict_row_dict(self):
        now = datetime.now(timezone.utc)
        record = RefreshTokenRecord(
            id=RefreshTokenId(uuid4()),
            account_id=AccountId(uuid4()),
            token="rt-123",
            expires_at=now + timedelta(hours=1),
            created_at=now,
            updated_at=now,
        )

        assert row_to_refresh_token(refresh_token_to_dict(record)) == record
