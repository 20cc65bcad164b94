"""Register use case."""

from uuid import uuid4

import logfire
from pydantic import BaseModel

from market.application.usecase.base import BaseUseCase
from market.config import AuthSettings
from market.domain.error import CredentialValidationError, RegistrationError
from market.domain.model.account import Account
from market.domain.service import CredentialService, JWTService

from .common import AuthResponse, deduplicate_roles


class RegisterRequest(BaseModel):
    """Password registration request."""

    username: str
    email: str
    password: str


class RegisterUseCase(BaseUseCase):
    """Use case for password registration."""

    def __init__(
        self,
        credential_service: CredentialService,
        jwt_service: JWTService,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize register use case.

        Args:
            credential_service: Credential store service
            jwt_service: JWT token domain service
            auth_settings: Authentication settings
        """
        self.credential_service = credential_service
        self.jwt_service = jwt_service
        self.auth_settings = auth_settings

    async def execute(self, request: RegisterRequest) -> AuthResponse:
        """Register an account and sign it in.

        Steps:
        1. Create the account (the credential store validates every field)
        2. Assign the default role
        3. Issue a token with the account's roles

        Args:
            request: Registration data

        Returns:
            Token and profile echo

        Raises:
            RegistrationError: With the validation errors, or a single
                generic error if anything unexpected failed
        """
        correlation_id = str(uuid4())

        with logfire.span("register", correlation_id=correlation_id):
            try:
                response = await self._register(request)
            except CredentialValidationError as e:
                logfire.info(
                    "Registration rejected",
                    correlation_id=correlation_id,
                    codes=[error.code for error in e.errors],
                )
                raise RegistrationError(e.errors) from None
            except Exception as e:
                logfire.error(
                    "Registration failed",
                    correlation_id=correlation_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise RegistrationError() from None

            logfire.info("Registration succeeded", correlation_id=correlation_id)
            return response

    async def _register(self, request: RegisterRequest) -> AuthResponse:
        account = await self.credential_service.create_account(
            request.username, request.email, request.password
        )

        try:
            await self.credential_service.add_to_role(
                account.id, self.auth_settings.default_role
            )
            roles = deduplicate_roles(await self.credential_service.get_roles(account.id))
            token = self.jwt_service.create_token(
                account_id=str(account.id),
                email=account.email,
                username=account.username,
                roles=roles,
            )
        except Exception:
            await self._discard(account)
            raise

        return AuthResponse(
            token=token,
            username=account.username,
            email=account.email,
            roles=roles,
        )

    async def _discard(self, account: Account) -> None:
        # Leave no role-less account behind; the caller reports the failure
        try:
            await self.credential_service.delete(account.id)
        except Exception as e:
            logfire.error(
                "Failed to remove partially registered account",
                account_id=str(account.id),
                error=str(e),
            )
