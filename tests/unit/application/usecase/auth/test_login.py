"""Unit tests for LoginUseCase."""

import time
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from market.application.usecase.auth import (
    LoginRequest,
    LoginUseCase,
    RegisterRequest,
    RegisterUseCase,
)
from market.config import AuthSettings
from market.domain.error import AuthenticationFailedError
from market.domain.repository import AccountRepository
from market.domain.service import CredentialService, JWTService
from market.persistence.repository.inmemory import InMemoryAccountRepository
from market.util.password import verify_password
from tests.di.config import make_test_settings
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def register(env, email: str = "ann@example.com") -> None:
    use_case = await env.get(RegisterUseCase)
    await use_case.execute(
        RegisterRequest(username="ann", email=email, password="Secret123")
    )


async def timed_failure(use_case: LoginUseCase, request: LoginRequest):
    start = time.monotonic()
    with pytest.raises(AuthenticationFailedError) as exc_info:
        await use_case.execute(request)
    return exc_info.value, time.monotonic() - start


class TestLoginUseCase:
    """Tests for LoginUseCase."""

    @pytest.mark.asyncio
    async def test_login_success(self, unit_env):
        """Correct credentials yield a token with the account's roles."""
        # Arrange
        await register(unit_env)
        use_case = await unit_env.get(LoginUseCase)
        jwt_service = await unit_env.get(JWTService)

        # Act
        response = await use_case.execute(
            LoginRequest(email="ANN@example.com", password="Secret123")
        )

        # Assert
        assert response.username == "ann"
        assert response.email == "ann@example.com"
        assert response.roles == ["Customer"]
        assert jwt_service.verify_token(response.token).email == "ann@example.com"

    @pytest.mark.asyncio
    async def test_failures_are_indistinguishable_and_delayed(self, unit_env):
        """Unknown email and wrong password fail the same way, after a delay."""
        await register(unit_env)
        use_case = await unit_env.get(LoginUseCase)

        wrong_password, first_elapsed = await timed_failure(
            use_case, LoginRequest(email="ann@example.com", password="Wrong123")
        )
        unknown_email, second_elapsed = await timed_failure(
            use_case, LoginRequest(email="bob@example.com", password="Secret123")
        )

        assert str(wrong_password) == str(unknown_email)
        assert type(wrong_password) is type(unknown_email)
        assert first_elapsed >= 0.1
        assert second_elapsed >= 0.1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("email,password", [("", "Secret123"), ("ann@example.com", "  ")])
    async def test_empty_credentials_rejected(self, unit_env, email, password):
        await register(unit_env)
        use_case = await unit_env.get(LoginUseCase)

        with pytest.raises(AuthenticationFailedError):
            await use_case.execute(LoginRequest(email=email, password=password))

    @pytest.mark.asyncio
    async def test_oauth_only_account_cannot_use_password(self, unit_env):
        credential_service = await unit_env.get(CredentialService)
        await credential_service.create_external_account("a@b.com")
        use_case = await unit_env.get(LoginUseCase)

        with pytest.raises(AuthenticationFailedError):
            await use_case.execute(LoginRequest(email="a@b.com", password="anything"))

    @pytest.mark.asyncio
    async def test_unconfirmed_email_rejected_when_required(self, unit_env):
        await register(unit_env)
        credential_service = await unit_env.get(CredentialService)
        use_case = LoginUseCase(
            credential_service=CredentialService(
                credential_service.account_repository,
                AuthSettings(require_confirmed_email=True, bcrypt_rounds=4),
            ),
            jwt_service=await unit_env.get(JWTService),
            auth_settings=AuthSettings(),
        )

        with patch.object(LoginUseCase, "_failure_delay", AsyncMock()):
            with pytest.raises(AuthenticationFailedError):
                await use_case.execute(
                    LoginRequest(email="ann@example.com", password="Secret123")
                )

    @pytest.mark.asyncio
    async def test_store_error_looks_like_bad_credentials(self, unit_env):
        """Infrastructure failures are not distinguishable from bad input."""
        use_case = await unit_env.get(LoginUseCase)
        repository = await unit_env.get(AccountRepository)

        with patch.object(
            repository, "find_by_email", AsyncMock(side_effect=RuntimeError("db down"))
        ):
            error, _ = await timed_failure(
                use_case, LoginRequest(email="ann@example.com", password="Secret123")
            )

        assert str(error) == "Authentication failed"
        assert error.__cause__ is None
        assert error.__context__ is None

    @pytest.mark.asyncio
    async def test_roles_are_deduplicated(self, unit_env):
        await register(unit_env)
        use_case = await unit_env.get(LoginUseCase)
        repository = await unit_env.get(AccountRepository)

        with patch.object(
            repository,
            "get_roles",
            AsyncMock(return_value=["Customer", "Admin", "Customer"]),
        ):
            response = await use_case.execute(
                LoginRequest(email="ann@example.com", password="Secret123")
            )

        assert response.roles == ["Customer", "Admin"]


class TestLoginFailureCost:
    """Every rejected login pays for one bcrypt check at the configured cost."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password",
        [
            ("ann@example.com", "Wrong123"),
            ("bob@example.com", "Secret123"),
            ("", "Secret123"),
            ("ann@example.com", "   "),
            ("a@b.com", "Secret123"),
        ],
    )
    async def test_each_failure_checks_one_hash_at_configured_cost(
        self, unit_env, email, password
    ):
        # Arrange
        await register(unit_env)
        credential_service = await unit_env.get(CredentialService)
        await credential_service.create_external_account("a@b.com")
        use_case = await unit_env.get(LoginUseCase)

        # Act
        with patch(
            "market.domain.service.credential_service.verify_password",
            wraps=verify_password,
        ) as verify, patch.object(LoginUseCase, "_failure_delay", AsyncMock()):
            with pytest.raises(AuthenticationFailedError):
                await use_case.execute(LoginRequest(email=email, password=password))

        # Assert
        assert verify.call_count == 1
        checked_hash = verify.call_args.args[1]
        assert checked_hash.startswith("$2b$04$")

    @pytest.mark.asyncio
    async def test_locked_out_account_checks_one_hash(self, unit_env):
        await register(unit_env)
        repository = await unit_env.get(AccountRepository)
        account = await repository.find_by_email("ann@example.com")
        await repository.save(
            account.model_copy(
                update={"lockout_end": datetime.now(timezone.utc) + timedelta(minutes=5)}
            )
        )
        use_case = await unit_env.get(LoginUseCase)

        with patch(
            "market.domain.service.credential_service.verify_password",
            wraps=verify_password,
        ) as verify, patch.object(LoginUseCase, "_failure_delay", AsyncMock()):
            with pytest.raises(AuthenticationFailedError):
                await use_case.execute(
                    LoginRequest(email="ann@example.com", password="Secret123")
                )

        assert verify.call_count == 1

    @pytest.mark.asyncio
    async def test_unknown_email_costs_as_much_as_wrong_password(self):
        """At production bcrypt cost, unknown emails are not measurably faster.

        The random delay is held fixed so only the hashing work is compared.
        """
        # Arrange
        settings = AuthSettings()
        credential_service = CredentialService(InMemoryAccountRepository(), settings)
        await credential_service.create_account("ann", "ann@example.com", "Secret123")
        use_case = LoginUseCase(
            credential_service=credential_service,
            jwt_service=JWTService(make_test_settings().auth.jwt),
            auth_settings=settings,
        )
        # First use builds the stand-in hash
        await credential_service.reject_password("warm-up")

        wrong_password = LoginRequest(email="ann@example.com", password="Wrong123")
        unknown_email = LoginRequest(email="bob@example.com", password="Wrong123")

        # Act
        wrong_password_times, unknown_email_times = [], []
        with patch(
            "market.application.usecase.auth.login.random.uniform", return_value=100
        ):
            for _ in range(3):
                _, elapsed = await timed_failure(use_case, wrong_password)
                wrong_password_times.append(elapsed)
                _, elapsed = await timed_failure(use_case, unknown_email)
                unknown_email_times.append(elapsed)

        # Assert
        assert min(unknown_email_times) >= 0.1
        assert min(unknown_email_times) > 0.5 * min(wrong_password_times)
