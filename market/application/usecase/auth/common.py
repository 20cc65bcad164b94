"""Shared types for the authentication use cases."""

from pydantic import BaseModel


class AuthResponse(BaseModel):
    """Successful authentication: a signed token plus a minimal profile echo."""

    token: str
    username: str
    email: str
    roles: list[str]


def deduplicate_roles(roles: list[str]) -> list[str]:
    """Drop repeated role names, keeping first-seen order."""
    return list(dict.fromkeys(roles))
