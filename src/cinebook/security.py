"""Bearer credential signing and verification, and password hashing."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from cinebook.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidTokenError(Exception):
    """Raised when a bearer token cannot be verified."""


def create_access_token(claims: dict[str, Any], expires_minutes: int | None = None) -> str:
    """
    Sign a bearer token.

    Args:
        claims: Payload, e.g. ``{"userId": 1, "email": "a@b.c"}`` or ``{"role": "admin"}``
        expires_minutes: Lifetime override (uses settings if not provided)

    Returns:
        Encoded JWT
    """
    minutes = expires_minutes if expires_minutes is not None else settings.jwt_expires_minutes
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify a bearer token and return its claims."""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise InvalidTokenError(str(e)) from e


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored hash; users without a hash never match."""
    if not password_hash:
        return False
    return pwd_context.verify(password, password_hash)
