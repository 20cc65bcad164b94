"""Login use case."""

import asyncio
import random
from uuid import uuid4

import logfire
from pydantic import BaseModel

from market.application.usecase.base import BaseUseCase
from market.config import AuthSettings
from market.domain.error import AuthenticationFailedError
from market.domain.service import CredentialService, JWTService

from .common import AuthResponse, deduplicate_roles


class LoginRequest(BaseModel):
    """Password login request."""

    email: str
    password: str


class _LoginRejected(Exception):
    """Internal signal carrying a failure reason for the log."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class LoginUseCase(BaseUseCase):
    """Use case for password login.

    All failures look identical to the caller. Each rejected attempt costs one
    bcrypt check, whether or not the email exists, and is then delayed by a
    random interval, so neither the response nor its latency reveals which
    check failed.
    """

    def __init__(
        self,
        credential_service: CredentialService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize login use case.

        Args:
            credential_service: Credential store service
            jwt_service: JWT token domain service
            auth_settings: Authentication settings
        """
        self.credential_service = credential_service
        self.jwt_service = jwt_service
        self.auth_settings = auth_settings

    async def execute(self, request: LoginRequest) -> AuthResponse:
        """Check credentials and issue a token.

        Args:
            request: Login credentials

        Returns:
            Token and profile echo

        Raises:
            AuthenticationFailedError: For every kind of failure
        """
        correlation_id = str(uuid4())

        with logfire.span("login", correlation_id=correlation_id):
            try:
                response = await self._login(request)
            except _LoginRejected as e:
                logfire.info(
                    "Login rejected", correlation_id=correlation_id, reason=e.reason
                )
            except Exception as e:
                logfire.error(
                    "Login failed",
                    correlation_id=correlation_id,
                    reason="error",
                    error=str(e),
                    error_type=type(e).__name__,
                )
            else:
                logfire.info("Login succeeded", correlation_id=correlation_id)
                return response

            await self._failure_delay()
            raise AuthenticationFailedError()

    async def _login(self, request: LoginRequest) -> AuthResponse:
        if not request.email.strip() or not request.password.strip():
            await self.credential_service.reject_password(request.password)
            raise _LoginRejected("empty_credentials")

        account = await self.credential_service.find_by_email(request.email)
        if account is None:
            await self.credential_service.reject_password(request.password)
            raise _LoginRejected("unknown_email")

        result = await self.credential_service.check_password(account, request.password)
        if not result.succeeded:
            raise _LoginRejected(result.failure_reason)

        roles = deduplicate_roles(await self.credential_service.get_roles(account.id))
        token = self.jwt_service.create_token(
            account_id=str(account.id),
            email=account.email,
            username=account.username,
            roles=roles,
        )
        return AuthResponse(
            token=token,
            username=account.username,
            email=account.email,
            roles=roles,
        )

    async def _failure_delay(self) -> None:
        delay_ms = random.uniform(
            self.auth_settings.failure_delay_min_ms,
            self.auth_settings.failure_delay_max_ms,
        )
        await asyncio.sleep(delay_ms / 1000)
