"""Account reconciliation for external identities.

Maps a validated external identity onto a local account, creating the
account on first use, and keeps the account's profile claims in step with
the provider's data.
"""

import logfire

from market.domain.error import AccountProvisioningError, MissingIdentityDataError
from market.domain.model.account import Account
from market.domain.value import ExternalIdentity, ProfileClaim

from .base import Service
from .credential_service import CredentialService


class AccountReconciler(Service):
    """Links external identities to local accounts."""

    def __init__(self, credential_service: CredentialService, default_role: str) -> None:
        """Initialize account reconciler.

        Args:
            credential_service: Credential store service
            default_role: Role given to newly provisioned accounts
        """
        self.credential_service = credential_service
        self.default_role = default_role

    async def find_or_create(self, identity: ExternalIdentity) -> Account:
        """Find the account for an identity's email, creating it if absent.

        An existing account is returned unchanged. A new account gets the
        email as username, a confirmed email, no password and the default
        role. If the role cannot be assigned the new account is deleted
        again, so no account is ever left without a role.

        Args:
            identity: Validated external identity

        Returns:
            The linked account

        Raises:
            MissingIdentityDataError: If the identity has no email
            AccountProvisioningError: If creation or role assignment fails
        """
        if not identity.email:
            raise MissingIdentityDataError("email")

        with logfire.span(
            "account_reconciler.find_or_create", provider=identity.provider.value
        ):
            account = await self.credential_service.find_by_email(identity.email)
            if account:
                logfire.info("Linked existing account", account_id=str(account.id))
                return account

            try:
                account = await self.credential_service.create_external_account(
                    identity.email
                )
            except Exception as e:
                logfire.error("Account creation failed", error=str(e))
                raise AccountProvisioningError("Failed to create account") from e

            try:
                await self.credential_service.add_to_role(account.id, self.default_role)
            except Exception as e:
                logfire.error(
                    "Default role assignment failed, removing account",
                    account_id=str(account.id),
                    role=self.default_role,
                    error=str(e),
                )
                await self._discard(account)
                raise AccountProvisioningError(
                    f"Failed to assign role '{self.default_role}'"
                ) from e

            logfire.info(
                "Provisioned account for external identity",
                account_id=str(account.id),
                provider=identity.provider.value,
            )
            return account

    async def sync_profile_claims(
        self, account: Account, identity: ExternalIdentity
    ) -> bool:
        """Copy the identity's profile data onto the account's claims.

        Only claims whose value differs are written, in a single call.

        Args:
            account: Linked account
            identity: Validated external identity

        Returns:
            True if anything was written, False if all claims already matched
        """
        desired = {
            ProfileClaim.EXTERNAL_ID.value: identity.subject,
            ProfileClaim.PICTURE.value: identity.picture or "",
            ProfileClaim.DISPLAY_NAME.value: identity.name or "",
        }

        with logfire.span(
            "account_reconciler.sync_profile_claims", account_id=str(account.id)
        ):
            current = await self.credential_service.get_claims(account.id)
            changed = {
                claim_type: value
                for claim_type, value in desired.items()
                if current.get(claim_type) != value
            }
            if not changed:
                logfire.debug("Profile claims up to date", account_id=str(account.id))
                return False

            await self.credential_service.replace_claims(account.id, changed)
            logfire.info(
                "Profile claims updated",
                account_id=str(account.id),
                claim_types=sorted(changed),
            )
            return True

    async def _discard(self, account: Account) -> None:
        try:
            await self.credential_service.delete(account.id)
        except Exception as e:
            # Original provisioning error is raised by the caller
            logfire.error(
                "Compensating account delete failed",
                account_id=str(account.id),
                error=str(e),
            )
