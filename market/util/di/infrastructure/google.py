"""Google infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from market.adapter.google import (
    GoogleAuthExchange,
    GoogleIdentityValidator,
    RealGoogleAuthExchange,
    RealGoogleIdentityValidator,
    SigningKeyCache,
)
from market.config import GoogleOAuthSettings
from market.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_signing_key_cache(
        self, settings: GoogleOAuthSettings
    ) -> AsyncIterator[SigningKeyCache]:
        """Provide the signing key cache with background refresh running.

        The refresh task is stopped when the container closes.
        """
        key_cache = SigningKeyCache(
            discovery_url=settings.discovery_url,
            automatic_refresh_interval=settings.automatic_refresh_interval_hours * 3600,
            refresh_interval=settings.refresh_interval_minutes * 60,
            timeout=settings.request_timeout_seconds,
        )
        key_cache.start()
        yield key_cache
        await key_cache.aclose()

    @provide(scope=Scope.APP)
    def get_google_auth_exchange(
        self, settings: GoogleOAuthSettings
    ) -> GoogleAuthExchange:
        """Provide Google authorization-code exchange."""
        return RealGoogleAuthExchange(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            token_url=settings.token_url,
            redirect_uri=settings.redirect_uri,
            timeout=settings.request_timeout_seconds,
        )

    @provide(scope=Scope.APP)
    def get_google_identity_validator(
        self, settings: GoogleOAuthSettings, key_cache: SigningKeyCache
    ) -> GoogleIdentityValidator:
        """Provide Google ID token validator."""
        return RealGoogleIdentityValidator(
            client_id=settings.client_id,
            key_cache=key_cache,
            valid_issuers=settings.valid_issuers,
            clock_skew_seconds=settings.clock_skew_seconds,
        )
