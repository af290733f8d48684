"""Tests for bearer token signing and verification."""

import pytest
from jose import jwt

from cinebook.config import settings
from cinebook.security import (
    InvalidTokenError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_round_trip_keeps_claims() -> None:
    token = create_access_token({"userId": 7, "email": "a@b.c"})
    claims = decode_access_token(token)
    assert claims["userId"] == 7
    assert claims["email"] == "a@b.c"
    assert "exp" in claims


def test_expired_token_is_rejected() -> None:
    token = create_access_token({"userId": 7}, expires_minutes=-1)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_token_signed_with_another_secret_is_rejected() -> None:
    token = jwt.encode({"userId": 7}, "not-the-secret", algorithm=settings.jwt_algorithm)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token)


def test_garbage_is_rejected() -> None:
    with pytest.raises(InvalidTokenError):
        decode_access_token("not.a.jwt")


def test_password_hash_verifies_only_the_original_password() -> None:
    hashed = hash_password("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_missing_password_hash_never_verifies() -> None:
    assert not verify_password("secret123", None)
    assert not verify_password("", "")
