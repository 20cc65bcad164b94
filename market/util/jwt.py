"""JWT token utilities."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
from pydantic import BaseModel

from market.config import JWTSettings

ROLE_CLAIM = "role"


class TokenPayload(BaseModel):
    """JWT token payload."""

    sub: str
    email: str
    jti: str
    name: str
    role: list[str] = []
    display_name: str | None = None
    picture: str | None = None
    iss: str
    aud: str
    iat: datetime
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    account_id: str,
    email: str,
    username: str,
    roles: list[str],
    settings: JWTSettings,
    display_name: str | None = None,
    picture: str | None = None,
) -> str:
    """Create a signed JWT for an account.

    Args:
        account_id: Account ID, used as the subject
        email: Account email
        username: Account username
        roles: Role names, emitted in the given order
        settings: JWT settings
        display_name: Optional display name claim
        picture: Optional picture URL claim

    Returns:
        Encoded JWT token
    """
    issued_at = datetime.now(timezone.utc)
    expiry = issued_at + timedelta(minutes=settings.expiry_minutes)

    payload = {
        "sub": account_id,
        "email": email,
        "jti": str(uuid4()),
        "name": username,
        ROLE_CLAIM: list(roles),
        "iss": settings.issuer,
        "aud": settings.audience,
        "iat": issued_at,
        "exp": expiry,
    }

    if display_name:
        payload["display_name"] = display_name
    if picture:
        payload["picture"] = picture

    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def verify_token(token: str, settings: JWTSettings) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: JWT settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            audience=settings.audience,
            issuer=settings.issuer,
            options={"require": ["exp", "iat", "sub", "jti"]},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
