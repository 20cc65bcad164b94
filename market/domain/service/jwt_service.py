"""JWT token domain service."""

import logfire

from market.config import JWTSettings
from market.util.error import ConfigurationError
from market.util.jwt import TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for issuing and verifying the tokens this service signs.

    Token creation is a pure, non-validating primitive: roles are emitted
    exactly as given, in order.
    """

    def __init__(self, jwt_settings: JWTSettings) -> None:
        """Initialize JWT service.

        Args:
            jwt_settings: JWT settings

        Raises:
            ConfigurationError: If secret, issuer, audience or expiry is missing,
                or expiry is not positive
        """
        missing = [
            name
            for name in ("secret_key", "issuer", "audience", "expiry_minutes")
            if getattr(jwt_settings, name) is None or getattr(jwt_settings, name) == ""
        ]
        if missing:
            raise ConfigurationError(
                f"JWT settings missing: {', '.join(missing)}"
            )
        if jwt_settings.expiry_minutes <= 0:
            raise ConfigurationError("JWT expiry_minutes must be greater than 0")

        self.jwt_settings = jwt_settings

    def create_token(
        self,
        account_id: str,
        email: str,
        username: str,
        roles: list[str],
        display_name: str | None = None,
        picture: str | None = None,
    ) -> str:
        """Create a signed JWT for an account.

        Args:
            account_id: Account ID (token subject)
            email: Account email
            username: Account username
            roles: Role names
            display_name: Optional display name claim (omitted when empty)
            picture: Optional picture URL claim (omitted when empty)

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", account_id=account_id):
            token = create_token(
                account_id,
                email,
                username,
                roles,
                self.jwt_settings,
                display_name=display_name,
                picture=picture,
            )
            logfire.info("JWT token created", account_id=account_id, roles=roles)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.jwt_settings)
                logfire.info("JWT token verified", account_id=payload.sub)
                return payload
            except Exception as e:
                logfire.error("JWT token verification failed", error=str(e))
                raise
