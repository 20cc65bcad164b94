"""Application layer DI providers."""

from dishka import Scope, provide

from market.application.usecase.admin import SeedAdminUseCase
from market.application.usecase.auth import (
    LoginUseCase,
    OAuthCallbackUseCase,
    RegisterUseCase,
)
from market.config import AdminSettings, AuthSettings
from market.domain.service import (
    AccountReconciler,
    AuthService,
    CredentialService,
    JWTService,
    RefreshTokenService,
)
from market.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_register_use_case(
        self,
        credential_service: CredentialService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> RegisterUseCase:
        """Provide register use case."""
        return RegisterUseCase(
            credential_service=credential_service,
            jwt_service=jwt_service,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        credential_service: CredentialService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            credential_service=credential_service,
            jwt_service=jwt_service,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_oauth_callback_use_case(
        self,
        auth_service: AuthService,
        account_reconciler: AccountReconciler,
        refresh_token_service: RefreshTokenService,
        credential_service: CredentialService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> OAuthCallbackUseCase:
        """Provide OAuth callback use case."""
        return OAuthCallbackUseCase(
            auth_service=auth_service,
            account_reconciler=account_reconciler,
            refresh_token_service=refresh_token_service,
            credential_service=credential_service,
            jwt_service=jwt_service,
            auth_settings=auth_settings,
        )

    # Admin use cases
    @provide(scope=Scope.REQUEST)
    def get_seed_admin_use_case(
        self, credential_service: CredentialService, admin_settings: AdminSettings
    ) -> SeedAdminUseCase:
        """Provide seed admin use case."""
        return SeedAdminUseCase(
            credential_service=credential_service, admin_settings=admin_settings
        )
