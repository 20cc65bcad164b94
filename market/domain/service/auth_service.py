"""Authentication domain service."""

from market.domain.value import AuthProvider, ExternalIdentity, ProviderTokens

from .base import Service


class AuthExchange:
    """Provider capability: trade an authorization code for provider tokens."""

    async def exchange_code(self, code: str) -> ProviderTokens:
        """Exchange an authorization code at the provider's token endpoint.

        Authorization codes are single-use, so implementations never retry.

        Args:
            code: Authorization code from the client

        Returns:
            Tokens issued by the provider
        """
        raise NotImplementedError


class IdentityValidator:
    """Provider capability: validate an ID token and extract the identity."""

    async def validate_id_token(self, id_token: str) -> ExternalIdentity:
        """Validate a provider ID token.

        Args:
            id_token: Compact-serialized ID token

        Returns:
            Identity asserted by the token
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service for multi-provider authentication operations.

    Each provider contributes an ``AuthExchange`` and an ``IdentityValidator``.
    Adding a provider means registering a new pair; nothing downstream of
    ``ExternalIdentity`` changes.
    """

    def __init__(
        self,
        exchanges: dict[AuthProvider, AuthExchange],
        validators: dict[AuthProvider, IdentityValidator],
    ) -> None:
        """Initialize auth service.

        Args:
            exchanges: Map of provider to code exchange implementation
            validators: Map of provider to ID token validator
        """
        self.exchanges = exchanges
        self.validators = validators

    async def exchange_code(self, provider: AuthProvider, code: str) -> ProviderTokens:
        """Exchange an authorization code with the given provider.

        Raises:
            ValueError: If provider not supported
        """
        exchange = self.exchanges.get(provider)
        if not exchange:
            raise ValueError(f"Unsupported provider: {provider}")

        return await exchange.exchange_code(code)

    async def validate_identity(
        self, provider: AuthProvider, id_token: str
    ) -> ExternalIdentity:
        """Validate an ID token issued by the given provider.

        Raises:
            ValueError: If provider not supported
        """
        validator = self.validators.get(provider)
        if not validator:
            raise ValueError(f"Unsupported provider: {provider}")

        return await validator.validate_id_token(id_token)
