from __future__ import annotations

import time

import pytest
from jose import jwt

from deepguard.auth.jwt_verifier import JWTIdentityResolver, bearer_token
from deepguard.errors import ConfigurationError

SECRET = "test-secret"


def _token(**claims) -> str:
    payload = {"sub": "user-42", "email": "a@example.com", "role": "authenticated", "aud": "authenticated"}
    payload.update(claims)
    return jwt.encode(payload, SECRET, algorithm="HS256")


def test_bearer_token_parsing() -> None:
    assert bearer_token(None) is None
    assert bearer_token("Basic abc") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token("Bearer abc.def") == "abc.def"


@pytest.mark.anyio
async def test_valid_token_resolves_identity() -> None:
    resolver = JWTIdentityResolver(SECRET)
    identity = await resolver.resolve(f"Bearer {_token()}")

    assert identity is not None
    assert identity.user_id == "user-42"
    assert identity.email == "a@example.com"
    assert identity.role == "authenticated"


@pytest.mark.anyio
async def test_missing_header_has_no_identity() -> None:
    assert await JWTIdentityResolver(SECRET).resolve(None) is None


@pytest.mark.anyio
async def test_wrong_signature_has_no_identity() -> None:
    token = jwt.encode({"sub": "user-42"}, "other-secret", algorithm="HS256")
    assert await JWTIdentityResolver(SECRET).resolve(f"Bearer {token}") is None


@pytest.mark.anyio
async def test_expired_token_has_no_identity() -> None:
    token = _token(exp=int(time.time()) - 60)
    assert await JWTIdentityResolver(SECRET).resolve(f"Bearer {token}") is None


@pytest.mark.anyio
async def test_token_without_subject_has_no_identity() -> None:
    token = jwt.encode({"email": "a@example.com"}, SECRET, algorithm="HS256")
    assert await JWTIdentityResolver(SECRET).resolve(f"Bearer {token}") is None


@pytest.mark.anyio
async def test_missing_secret_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        await JWTIdentityResolver("").resolve(f"Bearer {_token()}")
