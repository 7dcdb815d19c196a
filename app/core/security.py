"""Password hashing, JWT access tokens and opaque refresh token values."""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Username rules shared by registration and generated OAuth usernames.
USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 20
USERNAME_PATTERN = r"^[a-zA-Z0-9_]+$"
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# Bytes of randomness in a refresh token (hex-encoded, so twice as many chars).
REFRESH_TOKEN_BYTES = 64


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(claims: dict[str, Any]) -> str:
    """
    Sign an access token carrying the given claims plus iat and exp.

    The claims are a snapshot taken now; they are not refreshed until a new token is issued.
    """
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {**claims, "exp": expire, "iat": now}
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, email, roles, isAdmin, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )


def generate_refresh_token_value() -> str:
    """Return a new opaque refresh token value."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)


def refresh_token_expiry(now: datetime | None = None) -> datetime:
    """Expiry timestamp for a refresh token issued at `now`."""
    issued = now or datetime.now(UTC)
    return issued + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
