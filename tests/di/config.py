"""Mock config provider for testing."""

from dishka import Scope, provide

from market.config import (
    AdminSettings,
    AuthSettings,
    GoogleOAuthSettings,
    JWTSettings,
    Settings,
)
from market.util.di.core import ConfigProvider

TEST_JWT_SECRET = "test-secret-key-for-hs256-signing-0123456789"
TEST_JWT_ISSUER = "market-api-test"
TEST_JWT_AUDIENCE = "market-web-test"
TEST_GOOGLE_CLIENT_ID = "test-client.apps.googleusercontent.com"

TEST_ADMIN_EMAIL = "admin@example.com"
TEST_ADMIN_PASSWORD = "Admin123"


def make_test_settings(**auth_overrides) -> Settings:
    """Build settings for tests without reading secrets from the environment.

    Args:
        **auth_overrides: Field overrides for ``AuthSettings``

    Returns:
        Complete test settings
    """
    auth = AuthSettings(
        jwt=JWTSettings(
            secret_key=TEST_JWT_SECRET,
            issuer=TEST_JWT_ISSUER,
            audience=TEST_JWT_AUDIENCE,
            expiry_minutes=60,
        ),
        google=GoogleOAuthSettings(
            client_id=TEST_GOOGLE_CLIENT_ID,
            client_secret="test-client-secret",
        ),
        bcrypt_rounds=4,  # Minimum cost keeps tests fast
    )
    if auth_overrides:
        auth = auth.model_copy(update=auth_overrides)

    return Settings(
        environment="test",
        auth=auth,
        admin=AdminSettings(
            email=TEST_ADMIN_EMAIL,
            username="admin",
            password=TEST_ADMIN_PASSWORD,
        ),
    )


class MockConfigProvider(ConfigProvider):
    """Mock config provider with fixed test settings."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide test settings."""
        return make_test_settings()
