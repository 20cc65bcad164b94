"""Strongly typed identifiers for marketplace auth entities."""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", UUID)
RefreshTokenId = NewType("RefreshTokenId", UUID)
