"""Test configuration and fixtures."""

import pytest

from tests.google_tokens import RsaSigner, make_rsa_signer


@pytest.fixture(scope="session")
def rsa_signer() -> RsaSigner:
    """RSA signer shared across the session (key generation is slow)."""
    return make_rsa_signer()
