"""OAuth infrastructure provider for multi-provider authentication."""

from dishka import Scope, provide

from market.adapter.google import GoogleAuthExchange, GoogleIdentityValidator
from market.domain.service.auth_service import AuthExchange, IdentityValidator
from market.domain.value import AuthProvider
from market.util.di.base import ProviderBase


class OAuthAggregatorProvider(ProviderBase):
    """Provider that aggregates provider capabilities into dictionaries."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_auth_exchanges(
        self, google_exchange: GoogleAuthExchange
    ) -> dict[AuthProvider, AuthExchange]:
        """Provide code exchanges by provider."""
        return {AuthProvider.GOOGLE: google_exchange}

    @provide(scope=Scope.APP)
    def get_identity_validators(
        self, google_validator: GoogleIdentityValidator
    ) -> dict[AuthProvider, IdentityValidator]:
        """Provide ID token validators by provider."""
        return {AuthProvider.GOOGLE: google_validator}
