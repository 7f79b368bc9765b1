"""Firebase ID token verification.

Verifies RS256 tokens issued by Firebase Auth against Google's published
securetoken key set. Keys are cached per key id with a bounded TTL and a
bounded entry count; the key set is re-fetched lazily on a miss, on expiry,
or when a token names an unknown key id.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Any

import httpx
from jose import JWTError, jwt

from sopdesk.application.dtos.identity import VerifiedIdentity
from sopdesk.domain.exceptions import InvalidCredentialException, KeyFetchException

logger = logging.getLogger(__name__)

_ISSUER_PREFIX = "https://securetoken.google.com/"
_ALGORITHM = "RS256"


class JwksKeyCache:
    """kid -> JWK cache with TTL and LRU eviction beyond max_entries."""

    def __init__(self, ttl_seconds: float, max_entries: int) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._keys: OrderedDict[str, tuple[dict[str, Any], float]] = OrderedDict()

    def get(self, kid: str) -> dict[str, Any] | None:
        entry = self._keys.get(kid)
        if entry is None:
            return None
        key, fetched_at = entry
        if time.monotonic() - fetched_at > self._ttl:
            del self._keys[kid]
            return None
        self._keys.move_to_end(kid)
        return key

    def put_many(self, keys: list[dict[str, Any]]) -> None:
        now = time.monotonic()
        for key in keys:
            kid = key.get("kid")
            if not kid:
                continue
            self._keys[kid] = (key, now)
            self._keys.move_to_end(kid)
        while len(self._keys) > self._max_entries:
            self._keys.popitem(last=False)

    def __len__(self) -> int:
        return len(self._keys)


class FirebaseTokenVerifier:
    """Verify Firebase ID tokens (signature, issuer, audience, expiry).

    Only mutable state is the key cache; concurrent refreshes are collapsed
    behind a lock so a key rotation triggers one upstream fetch.
    """

    def __init__(
        self,
        project_id: str,
        jwks_url: str,
        http_client: httpx.AsyncClient,
        *,
        cache_ttl_seconds: float = 600,
        cache_max_entries: int = 5,
        fetch_timeout_seconds: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._issuer = f"{_ISSUER_PREFIX}{project_id}"
        self._jwks_url = jwks_url
        self._http = http_client
        self._timeout = fetch_timeout_seconds
        self._cache = JwksKeyCache(cache_ttl_seconds, cache_max_entries)
        self._refresh_lock = asyncio.Lock()

    async def _fetch_keys(self) -> list[dict[str, Any]]:
        try:
            resp = await self._http.get(self._jwks_url, timeout=self._timeout)
            resp.raise_for_status()
            keys = resp.json().get("keys", [])
        except (httpx.HTTPError, ValueError) as e:
            raise KeyFetchException(str(e)) from e
        if not isinstance(keys, list):
            raise KeyFetchException("key set has no 'keys' list")
        return keys

    async def _get_signing_key(self, kid: str) -> dict[str, Any]:
        key = self._cache.get(kid)
        if key is not None:
            return key
        async with self._refresh_lock:
            key = self._cache.get(kid)
            if key is not None:
                return key
            self._cache.put_many(await self._fetch_keys())
            key = self._cache.get(kid)
        if key is None:
            raise InvalidCredentialException("Invalid token")
        return key

    async def verify(self, token: str) -> VerifiedIdentity:
        """Return the verified identity for token.

        Raises:
            InvalidCredentialException: Bad signature, issuer, audience, expiry or payload.
            KeyFetchException: Key set unreachable (an InvalidCredentialException subclass).
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise InvalidCredentialException("Invalid token") from e
        kid = header.get("kid")
        if not kid or header.get("alg") != _ALGORITHM:
            raise InvalidCredentialException("Invalid token")

        try:
            key = await self._get_signing_key(kid)
        except KeyFetchException as e:
            logger.error("Identity provider key fetch failed: %s", e.reason)
            raise

        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=[_ALGORITHM],
                audience=self._project_id,
                issuer=self._issuer,
                options={"require_exp": True, "require_iat": False, "verify_at_hash": False},
            )
        except JWTError as e:
            logger.info("Token verification failed: %s", e)
            raise InvalidCredentialException("Invalid token") from e

        subject_id = claims.get("user_id") or claims.get("sub")
        email = claims.get("email")
        if not subject_id or not email:
            raise InvalidCredentialException("Invalid token payload")
        return VerifiedIdentity(subject_id=str(subject_id), email=str(email))
