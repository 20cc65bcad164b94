"""Domain services."""

from .account_reconciler import AccountReconciler
from .auth_service import AuthExchange, AuthService, IdentityValidator
from .base import Service
from .credential_service import CredentialService
from .jwt_service import JWTService
from .refresh_token_service import RefreshTokenService

__all__ = [
    "AccountReconciler",
    "AuthExchange",
    "AuthService",
    "CredentialService",
    "IdentityValidator",
    "JWTService",
    "RefreshTokenService",
    "Service",
]
