"""Tests for FirebaseTokenVerifier with real RS256 keys and a mocked key endpoint."""

import time

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwk, jwt

from sopdesk.domain.exceptions import InvalidCredentialException, KeyFetchException
from sopdesk.infrastructure.security import FirebaseTokenVerifier, JwksKeyCache

PROJECT = "demo-project"
JWKS_URL = "https://keys.test/jwks"


def _keypair(kid: str) -> tuple[bytes, dict]:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    public_jwk = jwk.construct(public_pem, algorithm="RS256").to_dict()
    public_jwk["kid"] = kid
    return private_pem, public_jwk


@pytest.fixture(scope="module")
def signing_key() -> tuple[bytes, dict]:
    return _keypair("kid-1")


def _claims(**overrides) -> dict:
    now = int(time.time())
    claims = {
        "iss": f"https://securetoken.google.com/{PROJECT}",
        "aud": PROJECT,
        "sub": "uid-1",
        "user_id": "uid-1",
        "email": "u1@example.com",
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def _token(private_pem: bytes, kid: str = "kid-1", **overrides) -> str:
    return jwt.encode(_claims(**overrides), private_pem, algorithm="RS256", headers={"kid": kid})


def _verifier(keys: list[dict], calls: list[int] | None = None, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(1)
        return httpx.Response(status, json={"keys": keys})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FirebaseTokenVerifier(PROJECT, JWKS_URL, client), client


async def test_valid_token_returns_identity(signing_key) -> None:
    private_pem, public_jwk = signing_key
    verifier, client = _verifier([public_jwk])
    async with client:
        identity = await verifier.verify(_token(private_pem))
    assert identity.subject_id == "uid-1"
    assert identity.email == "u1@example.com"


async def test_subject_falls_back_to_sub(signing_key) -> None:
    private_pem, public_jwk = signing_key
    verifier, client = _verifier([public_jwk])
    async with client:
        identity = await verifier.verify(_token(private_pem, user_id=None, sub="uid-9"))
    assert identity.subject_id == "uid-9"


@pytest.mark.parametrize(
    "overrides",
    [
        {"aud": "other-project"},
        {"iss": "https://securetoken.google.com/other-project"},
        {"exp": int(time.time()) - 60},
        {"email": None},
    ],
)
async def test_rejects_bad_claims(signing_key, overrides) -> None:
    private_pem, public_jwk = signing_key
    verifier, client = _verifier([public_jwk])
    async with client:
        with pytest.raises(InvalidCredentialException):
            await verifier.verify(_token(private_pem, **overrides))


async def test_rejects_token_signed_by_other_key(signing_key) -> None:
    _, public_jwk = signing_key
    other_private, _ = _keypair("kid-1")
    verifier, client = _verifier([public_jwk])
    async with client:
        with pytest.raises(InvalidCredentialException):
            await verifier.verify(_token(other_private))


async def test_unknown_kid_is_invalid(signing_key) -> None:
    private_pem, public_jwk = signing_key
    verifier, client = _verifier([public_jwk])
    async with client:
        with pytest.raises(InvalidCredentialException):
            await verifier.verify(_token(private_pem, kid="kid-unknown"))


async def test_garbage_token_is_invalid() -> None:
    verifier, client = _verifier([])
    async with client:
        with pytest.raises(InvalidCredentialException):
            await verifier.verify("not-a-jwt")


async def test_keys_are_cached_between_calls(signing_key) -> None:
    private_pem, public_jwk = signing_key
    calls: list[int] = []
    verifier, client = _verifier([public_jwk], calls)
    async with client:
        await verifier.verify(_token(private_pem))
        await verifier.verify(_token(private_pem))
    assert len(calls) == 1


async def test_key_fetch_failure_surfaces_as_key_fetch_exception(signing_key) -> None:
    private_pem, _ = signing_key
    verifier, client = _verifier([], status=500)
    async with client:
        with pytest.raises(KeyFetchException):
            await verifier.verify(_token(private_pem))


class TestJwksKeyCache:
    def test_evicts_least_recently_used(self) -> None:
        cache = JwksKeyCache(ttl_seconds=600, max_entries=2)
        cache.put_many([{"kid": "a"}, {"kid": "b"}])
        cache.get("a")
        cache.put_many([{"kid": "c"}])
        assert len(cache) == 2
        assert cache.get("b") is None
        assert cache.get("a") is not None

    def test_expired_entries_are_dropped(self) -> None:
        cache = JwksKeyCache(ttl_seconds=-1, max_entries=5)
        cache.put_many([{"kid": "a"}])
        assert cache.get("a") is None

    def test_keys_without_kid_are_ignored(self) -> None:
        cache = JwksKeyCache(ttl_seconds=600, max_entries=5)
        cache.put_many([{"kty": "RSA"}])
        assert len(cache) == 0
