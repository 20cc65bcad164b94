"""OAuth callback use case."""

from uuid import uuid4

import logfire
from pydantic import BaseModel

from market.application.usecase.base import BaseUseCase
from market.config import AuthSettings
from market.domain.error import (
    AccountProvisioningError,
    AuthenticationFailedError,
    MissingIdentityDataError,
)
from market.domain.model.account import Account
from market.domain.service import (
    AccountReconciler,
    AuthService,
    CredentialService,
    JWTService,
    RefreshTokenService,
)
from market.domain.value import AuthProvider, ProviderTokens

from .common import AuthResponse, deduplicate_roles


class OAuthCallbackRequest(BaseModel):
    """Authorization code posted back by the client after provider sign-in."""

    provider: AuthProvider = AuthProvider.GOOGLE
    code: str


class OAuthCallbackUseCase(BaseUseCase):
    """Use case for signing in with an external provider's authorization code."""

    def __init__(
        self,
        auth_service: AuthService,
        account_reconciler: AccountReconciler,
        refresh_token_service: RefreshTokenService,
        credential_service: CredentialService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize OAuth callback use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            account_reconciler: Links external identities to accounts
            refresh_token_service: Provider refresh token store
            credential_service: Credential store service
            jwt_service: JWT token domain service
            auth_settings: Authentication settings
        """
        self.auth_service = auth_service
        self.account_reconciler = account_reconciler
        self.refresh_token_service = refresh_token_service
        self.credential_service = credential_service
        self.jwt_service = jwt_service
        self.auth_settings = auth_settings

    async def execute(self, request: OAuthCallbackRequest) -> AuthResponse:
        """Execute the OAuth callback flow.

        Steps:
        1. Exchange the code for provider tokens
        2. Validate the ID token into an external identity
        3. Find or create the linked account
        4. Store the provider refresh token, if one was returned
        5. Sync profile claims onto the account
        6. Issue a token carrying the identity's display name and picture

        Args:
            request: Provider and authorization code

        Returns:
            Token and profile echo; username and email come from the
            stored account

        Raises:
            AuthenticationFailedError: For every kind of failure
        """
        correlation_id = str(uuid4())

        with logfire.span(
            "oauth_callback",
            provider=request.provider.value,
            correlation_id=correlation_id,
        ):
            try:
                response = await self._complete(request, correlation_id)
            except Exception as e:
                logfire.error(
                    "OAuth callback failed",
                    correlation_id=correlation_id,
                    provider=request.provider.value,
                    error=str(e),
                    error_type=type(e).__name__,
                    check=getattr(e, "check", None),
                    upstream_status=getattr(e, "status_code", None),
                    upstream_body=getattr(e, "body", None),
                )
                raise AuthenticationFailedError() from None

            logfire.info(
                "OAuth callback succeeded",
                correlation_id=correlation_id,
                provider=request.provider.value,
            )
            return response

    async def _complete(
        self, request: OAuthCallbackRequest, correlation_id: str
    ) -> AuthResponse:
        tokens = await self.auth_service.exchange_code(request.provider, request.code)
        if not tokens.id_token:
            raise MissingIdentityDataError("id_token")

        identity = await self.auth_service.validate_identity(
            request.provider, tokens.id_token
        )

        try:
            account = await self.account_reconciler.find_or_create(identity)
        except AccountProvisioningError:
            logfire.error(
                "Account provisioning failed",
                correlation_id=correlation_id,
                email=identity.email,
            )
            raise

        if tokens.refresh_token:
            await self._store_refresh_token(account, tokens, correlation_id)

        await self.account_reconciler.sync_profile_claims(account, identity)

        roles = deduplicate_roles(await self.credential_service.get_roles(account.id))
        token = self.jwt_service.create_token(
            account_id=str(account.id),
            email=account.email,
            username=account.username,
            roles=roles,
            display_name=identity.name,
            picture=identity.picture,
        )
        return AuthResponse(
            token=token,
            username=account.username,
            email=account.email,
            roles=roles,
        )

    async def _store_refresh_token(
        self, account: Account, tokens: ProviderTokens, correlation_id: str
    ) -> None:
        # The refresh token only matters for later offline renewal, so by
        # default losing it does not fail the current sign-in
        try:
            await self.refresh_token_service.save(
                account.id, tokens.refresh_token, tokens.expires_in
            )
        except Exception as e:
            if self.auth_settings.refresh_token_persistence_required:
                raise
            logfire.warn(
                "Refresh token not stored",
                correlation_id=correlation_id,
                account_id=str(account.id),
                error=str(e),
                error_type=type(e).__name__,
            )
