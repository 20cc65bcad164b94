"""Authentication routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from market.application.usecase.auth import (
    AuthResponse,
    LoginRequest,
    LoginUseCase,
    OAuthCallbackRequest,
    OAuthCallbackUseCase,
    RegisterRequest,
    RegisterUseCase,
)
from market.domain.error import AuthenticationFailedError, RegistrationError
from market.domain.value import AuthProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"], route_class=DishkaRoute)


class GoogleCallbackRequest(BaseModel):
    """Authorization code obtained by the frontend's Google popup."""

    code: str = ""


class MessageResponse(BaseModel):
    """Error response with a single caller-safe message."""

    message: str


class ErrorListResponse(BaseModel):
    """Registration error response."""

    errors: list[str]


@router.post(
    "/register",
    response_model=AuthResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorListResponse}},
)
async def register(
    request: RegisterRequest,
    register_use_case: FromDishka[RegisterUseCase],
):
    """Register with username, email and password.

    Example:
        POST /api/auth/register
        {"username": "ann", "email": "ann@example.com", "password": "Secret1"}

        Response:
        {"token": "...", "username": "ann", "email": "ann@example.com", "roles": ["Customer"]}
    """
    try:
        return await register_use_case.execute(request)
    except RegistrationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": [error.description for error in e.errors]},
        )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse}},
)
async def login(
    request: LoginRequest,
    login_use_case: FromDishka[LoginUseCase],
):
    """Sign in with email and password.

    Every failure gets the same response.
    """
    try:
        return await login_use_case.execute(request)
    except AuthenticationFailedError:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"message": "Invalid credentials"},
        )


@router.post(
    "/google/callback",
    response_model=AuthResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse},
    },
)
async def google_callback(
    request: GoogleCallbackRequest,
    oauth_callback_use_case: FromDishka[OAuthCallbackUseCase],
):
    """Complete Google sign-in with the authorization code from the popup flow."""
    if not request.code.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Authorization code is required"},
        )

    try:
        return await oauth_callback_use_case.execute(
            OAuthCallbackRequest(provider=AuthProvider.GOOGLE, code=request.code)
        )
    except AuthenticationFailedError:
        logger.info("Google callback rejected")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"message": "Google authentication failed"},
        )
