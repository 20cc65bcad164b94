"""Google OAuth 2.0 authorization-code exchange."""

import httpx
import logfire

from market.adapter.error import UpstreamExchangeError
from market.domain.error import InvalidArgumentError
from market.domain.service.auth_service import AuthExchange
from market.domain.value import ProviderTokens


class GoogleAuthExchange(AuthExchange):
    """Base class for Google code exchanges.

    Provides type distinction for dependency injection.
    """

    pass


class RealGoogleAuthExchange(GoogleAuthExchange):
    """Exchanges codes at Google's token endpoint.

    Codes come from the in-app popup flow, so the redirect URI sent is the
    fixed ``postmessage`` value rather than a callback URL.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str = "https://oauth2.googleapis.com/token",
        redirect_uri: str = "postmessage",
        timeout: float = 10.0,
    ) -> None:
        """Initialize Google code exchange.

        Args:
            client_id: Google OAuth client ID
            client_secret: Google OAuth client secret
            token_url: Token endpoint
            redirect_uri: Redirect value registered for the code
            timeout: Request timeout in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    async def exchange_code(self, code: str) -> ProviderTokens:
        """Exchange an authorization code for Google tokens.

        Args:
            code: Authorization code from the client

        Returns:
            Tokens issued by Google

        Raises:
            InvalidArgumentError: If the code is empty
            UpstreamExchangeError: If Google rejects the code, the response
                cannot be parsed, or the request fails
        """
        if not code or not code.strip():
            raise InvalidArgumentError("Authorization code is required")

        data = {
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }

        with logfire.span("google.exchange_code"):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        self.token_url,
                        data=data,
                        headers={"Accept": "application/json"},
                    )
            except httpx.HTTPError as e:
                logfire.error("Google token exchange HTTP error", error=str(e))
                raise UpstreamExchangeError(
                    f"HTTP error during token exchange: {e}"
                ) from e

            if not 200 <= response.status_code < 300:
                logfire.error(
                    "Google token exchange failed",
                    status_code=response.status_code,
                    error=response.text,
                )
                raise UpstreamExchangeError(
                    f"Token exchange failed: {response.status_code}",
                    status_code=response.status_code,
                    body=response.text,
                )

            try:
                tokens = ProviderTokens.model_validate(response.json())
            except ValueError as e:
                # Covers both invalid JSON and an unexpected JSON shape
                logfire.error("Google token response malformed", error=str(e))
                raise UpstreamExchangeError(
                    "malformed response", status_code=response.status_code
                ) from e

            logfire.info(
                "Google token exchange succeeded",
                has_id_token=tokens.id_token is not None,
                has_refresh_token=tokens.refresh_token is not None,
                expires_in=tokens.expires_in,
            )
            return tokens


class MockGoogleAuthExchange(GoogleAuthExchange):
    """Mock Google code exchange for testing.

    Returns deterministic tokens without making real API calls. The code
    ``invalid-code`` is rejected the way Google rejects a used code.
    """

    ID_TOKEN = "mock-google-id-token"
    REFRESH_TOKEN = "mock-google-refresh-token"
    REJECTED_CODE = "invalid-code"

    def __init__(self):
        """Initialize mock exchange without real OAuth configuration."""
        self.exchanged_codes: list[str] = []

    async def exchange_code(self, code: str) -> ProviderTokens:
        """Return mock tokens.

        Args:
            code: Authorization code

        Returns:
            Mock Google tokens
        """
        if not code or not code.strip():
            raise InvalidArgumentError("Authorization code is required")
        self.exchanged_codes.append(code)
        if code == self.REJECTED_CODE:
            raise UpstreamExchangeError(
                "Token exchange failed: 400",
                status_code=400,
                body='{"error": "invalid_grant"}',
            )
        return ProviderTokens(
            access_token="mock-google-access-token",
            id_token=self.ID_TOKEN,
            refresh_token=self.REFRESH_TOKEN,
            expires_in=3600,
            token_type="Bearer",
        )
