"""Domain layer DI providers."""

from dishka import Scope, provide

from market.config import AuthSettings, JWTSettings
from market.domain.repository import AccountRepository, RefreshTokenRepository
from market.domain.service import (
    AccountReconciler,
    AuthExchange,
    AuthService,
    CredentialService,
    IdentityValidator,
    JWTService,
    RefreshTokenService,
)
from market.domain.value import AuthProvider
from market.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Services over repositories are REQUEST-scoped to align with the
    repository/session lifecycle. Stateless services live for the app.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_jwt_service(self, jwt_settings: JWTSettings) -> JWTService:
        """Provide JWT token domain service.

        Raises:
            ConfigurationError: If JWT settings are incomplete
        """
        return JWTService(jwt_settings=jwt_settings)

    @provide(scope=Scope.APP)
    def get_auth_service(
        self,
        exchanges: dict[AuthProvider, AuthExchange],
        validators: dict[AuthProvider, IdentityValidator],
    ) -> AuthService:
        """Provide multi-provider authentication domain service.

        Args:
            exchanges: Code exchange per provider
            validators: ID token validator per provider

        Returns:
            AuthService configured with all available providers
        """
        return AuthService(exchanges=exchanges, validators=validators)

    @provide
    def get_credential_service(
        self, account_repository: AccountRepository, auth_settings: AuthSettings
    ) -> CredentialService:
        """Provide credential store service."""
        return CredentialService(
            account_repository=account_repository, auth_settings=auth_settings
        )

    @provide
    def get_account_reconciler(
        self, credential_service: CredentialService, auth_settings: AuthSettings
    ) -> AccountReconciler:
        """Provide account reconciler."""
        return AccountReconciler(
            credential_service=credential_service,
            default_role=auth_settings.default_role,
        )

    @provide
    def get_refresh_token_service(
        self,
        refresh_token_repository: RefreshTokenRepository,
        auth_settings: AuthSettings,
    ) -> RefreshTokenService:
        """Provide refresh token domain service."""
        return RefreshTokenService(
            refresh_token_repository=refresh_token_repository,
            default_expires_in_seconds=auth_settings.refresh_token_default_expires_in_seconds,
        )
