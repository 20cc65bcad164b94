"""Core DI providers."""

from dishka import Scope, provide

from market.config import (
    AdminSettings,
    AuthSettings,
    GoogleOAuthSettings,
    JWTSettings,
    Settings,
)
from market.util.di.base import ProviderBase


class ConfigProvider(ProviderBase):
    """Config component base.

    Mockable so tests can supply settings without touching the environment.
    """

    __mock_component__ = "config"


class ProdConfigProvider(ConfigProvider):
    """Production config provider.

    Settings are loaded from environment variables and .env file automatically.
    """

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment.

        Raises:
            ConfigurationError: If a required value is missing
        """
        settings = Settings()
        settings.validate_required()
        return settings


class SettingsSectionProvider(ProviderBase):
    """Exposes settings sections as their own dependencies - concrete."""

    scope = Scope.APP

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide
    def provide_jwt_settings(self, auth_settings: AuthSettings) -> JWTSettings:
        """Provide JWT settings."""
        return auth_settings.jwt

    @provide
    def provide_google_settings(
        self, auth_settings: AuthSettings
    ) -> GoogleOAuthSettings:
        """Provide Google OAuth settings."""
        return auth_settings.google

    @provide
    def provide_admin_settings(self, settings: Settings) -> AdminSettings:
        """Provide admin seed settings."""
        return settings.admin
