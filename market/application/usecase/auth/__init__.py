"""Authentication use cases."""

from .common import AuthResponse
from .login import LoginRequest, LoginUseCase
from .oauth_callback import OAuthCallbackRequest, OAuthCallbackUseCase
from .register import RegisterRequest, RegisterUseCase

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "LoginUseCase",
    "OAuthCallbackRequest",
    "OAuthCallbackUseCase",
    "RegisterRequest",
    "RegisterUseCase",
]
