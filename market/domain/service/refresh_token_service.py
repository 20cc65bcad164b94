"""Refresh token domain service."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from market.domain.model.refresh_token import RefreshTokenRecord
from market.domain.repository import RefreshTokenRepository
from market.domain.value import AccountId, RefreshTokenId

from .base import Service


class RefreshTokenService(Service):
    """Keeps the provider refresh token of each account, last write wins."""

    def __init__(
        self,
        refresh_token_repository: RefreshTokenRepository,
        default_expires_in_seconds: int = 3600,
    ) -> None:
        """Initialize refresh token service.

        Args:
            refresh_token_repository: Refresh token repository
            default_expires_in_seconds: Lifetime used when the provider
                reports none
        """
        self.refresh_token_repository = refresh_token_repository
        self.default_expires_in_seconds = default_expires_in_seconds

    async def save(
        self,
        account_id: AccountId,
        refresh_token: str,
        expires_in_seconds: int | None,
    ) -> RefreshTokenRecord:
        """Store a refresh token, overwriting any previous one for the account.

        Args:
            account_id: Owning account
            refresh_token: Opaque provider refresh token
            expires_in_seconds: Lifetime reported by the provider; None or a
                non-positive value falls back to the default lifetime

        Returns:
            The stored record
        """
        with logfire.span("refresh_token_service.save", account_id=str(account_id)):
            now = datetime.now(timezone.utc)
            if not expires_in_seconds or expires_in_seconds <= 0:
                logfire.info(
                    "Provider reported no token lifetime, using default",
                    account_id=str(account_id),
                    default_seconds=self.default_expires_in_seconds,
                )
                expires_in_seconds = self.default_expires_in_seconds
            expires_at = now + timedelta(seconds=expires_in_seconds)

            existing = await self.refresh_token_repository.find_by_account_id(
                account_id
            )
            if existing:
                record = existing.model_copy(
                    update={
                        "token": refresh_token,
                        "expires_at": expires_at,
                        "updated_at": now,
                    }
                )
            else:
                record = RefreshTokenRecord(
                    id=RefreshTokenId(uuid4()),
                    account_id=account_id,
                    token=refresh_token,
                    expires_at=expires_at,
                    created_at=now,
                    updated_at=now,
                )

            saved = await self.refresh_token_repository.save(record)
            logfire.info(
                "Refresh token stored",
                account_id=str(account_id),
                replaced=existing is not None,
            )
            return saved

    async def get_for_account(self, account_id: AccountId) -> RefreshTokenRecord | None:
        """Get the stored refresh token of an account, if any."""
        return await self.refresh_token_repository.find_by_account_id(account_id)
