"""Seed admin use case."""

import logfire
from pydantic import BaseModel

from market.application.usecase.base import BaseUseCase
from market.config import AdminSettings
from market.domain.service import CredentialService
from market.domain.value import Role


class SeedAdminResponse(BaseModel):
    """Outcome of seeding."""

    seeded: bool  # False when no admin is configured
    created: bool = False
    account_id: str | None = None


class SeedAdminUseCase(BaseUseCase):
    """Ensure the configured administrator account exists and has the Admin role.

    Runs once at startup. Safe to run repeatedly.
    """

    def __init__(
        self, credential_service: CredentialService, admin_settings: AdminSettings
    ) -> None:
        """Initialize seed admin use case.

        Args:
            credential_service: Credential store service
            admin_settings: Administrator account settings
        """
        self.credential_service = credential_service
        self.admin_settings = admin_settings

    async def execute(self, request: None = None) -> SeedAdminResponse:
        """Create the admin account if missing and grant it the Admin role.

        Returns:
            Seeding outcome

        Raises:
            CredentialValidationError: If the configured admin data is invalid
        """
        if not self.admin_settings.is_configured:
            logfire.debug("No admin account configured, skipping seed")
            return SeedAdminResponse(seeded=False)

        email = self.admin_settings.email
        with logfire.span("seed_admin"):
            account = await self.credential_service.find_by_email(email)
            created = account is None
            if created:
                account = await self.credential_service.create_account(
                    username=self.admin_settings.username or email,
                    email=email,
                    password=self.admin_settings.password,
                    email_confirmed=True,
                )

            roles = await self.credential_service.get_roles(account.id)
            if Role.ADMIN.value not in roles:
                await self.credential_service.add_to_role(account.id, Role.ADMIN.value)
                logfire.info("Admin role granted", account_id=str(account.id))

            logfire.info(
                "Admin account seeded", account_id=str(account.id), created=created
            )
            return SeedAdminResponse(
                seeded=True, created=created, account_id=str(account.id)
            )
