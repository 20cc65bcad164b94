"""Google ID token signing keys.

Keys are found through the OpenID Connect discovery document and cached
in a ``RefreshingValue``. Each refresh produces a new immutable key set.
"""

from collections.abc import Mapping
from types import MappingProxyType

import httpx
import jwt
import logfire
from pydantic import BaseModel

from market.adapter.error import SigningKeyError
from market.util.cache import RefreshingValue


class OpenIDConfiguration(BaseModel):
    """Subset of the OpenID Connect discovery document that we use."""

    issuer: str
    jwks_uri: str


class SigningKeySet:
    """Immutable set of signing keys indexed by key id."""

    def __init__(self, keys: Mapping[str, jwt.PyJWK]) -> None:
        self._keys = MappingProxyType(dict(keys))

    def get(self, kid: str) -> jwt.PyJWK | None:
        return self._keys.get(kid)

    @property
    def key_ids(self) -> list[str]:
        return sorted(self._keys)

    def __len__(self) -> int:
        return len(self._keys)


def parse_jwks(jwks: dict) -> SigningKeySet:
    """Build a key set from a JWKS document.

    Keys without a ``kid`` or that cannot be loaded are skipped.

    Args:
        jwks: Parsed JWKS JSON

    Returns:
        Key set

    Raises:
        SigningKeyError: If no usable key remains
    """
    if not isinstance(jwks, dict):
        raise SigningKeyError("JWKS document is not a JSON object")

    keys: dict[str, jwt.PyJWK] = {}
    for jwk in jwks.get("keys", []):
        kid = jwk.get("kid")
        if not kid:
            continue
        try:
            keys[kid] = jwt.PyJWK(jwk)
        except (jwt.PyJWKError, jwt.InvalidKeyError) as e:
            logfire.warn("Skipping unusable signing key", kid=kid, error=str(e))

    if not keys:
        raise SigningKeyError("JWKS document contains no usable keys")
    return SigningKeySet(keys)


class SigningKeyCache:
    """Provider signing keys with automatic and on-demand refresh.

    Keys are refreshed in the background every ``automatic_refresh_interval``
    seconds (and lazily once that age is exceeded). A token naming an
    unknown key id may force a refresh, at most once per
    ``refresh_interval`` seconds, so rotated keys are picked up without
    adding latency to every request.
    """

    def __init__(
        self,
        discovery_url: str,
        automatic_refresh_interval: float,
        refresh_interval: float,
        timeout: float = 10.0,
    ) -> None:
        """Initialize signing key cache.

        Args:
            discovery_url: OpenID Connect discovery document URL
            automatic_refresh_interval: Seconds between automatic refreshes
            refresh_interval: Minimum seconds between on-demand refreshes
            timeout: HTTP timeout in seconds
        """
        self.discovery_url = discovery_url
        self.timeout = timeout
        self._keys: RefreshingValue[SigningKeySet] = RefreshingValue(
            name="google-signing-keys",
            loader=self.fetch,
            automatic_refresh_interval=automatic_refresh_interval,
            refresh_interval=refresh_interval,
        )

    async def get_key(self, kid: str) -> jwt.PyJWK | None:
        """Get the key with the given id.

        An unknown id triggers one on-demand refresh (if allowed by the
        refresh interval) before giving up.

        Args:
            kid: Key id from the token header

        Returns:
            The key, or None if it is not published
        """
        key_set = await self._keys.get()
        key = key_set.get(kid)
        if key is None and self._keys.request_refresh():
            logfire.info("Unknown signing key id, refreshing keys", kid=kid)
            key_set = await self._keys.get()
            key = key_set.get(kid)
        return key

    async def fetch(self) -> SigningKeySet:
        """Fetch the discovery document and then its JWKS.

        Returns:
            Freshly loaded key set

        Raises:
            SigningKeyError: If either document cannot be fetched or parsed
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.discovery_url)
                response.raise_for_status()
                configuration = OpenIDConfiguration(**response.json())

                response = await client.get(configuration.jwks_uri)
                response.raise_for_status()
                jwks = response.json()
        except httpx.HTTPError as e:
            raise SigningKeyError(f"Failed to fetch signing keys: {e}") from e
        except ValueError as e:
            raise SigningKeyError(f"Malformed discovery or JWKS document: {e}") from e

        key_set = parse_jwks(jwks)
        logfire.info("Signing keys loaded", key_ids=key_set.key_ids)
        return key_set

    def start(self) -> None:
        """Start background refresh."""
        self._keys.start()

    async def aclose(self) -> None:
        """Stop background refresh."""
        await self._keys.aclose()
