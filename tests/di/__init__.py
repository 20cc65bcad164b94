"""Mock providers for testing."""

from .config import MockConfigProvider
from .google import MockGoogleProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockConfigProvider",
    "MockGoogleProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
