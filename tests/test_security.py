"""Unit tests for password hashing, access tokens and refresh token values."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    generate_refresh_token_value,
    hash_password,
    refresh_token_expiry,
    verify_password,
)


class TestPasswordHashing(unittest.TestCase):
    """bcrypt hashes verify only against the original password."""

    def test_hash_verifies(self) -> None:
        hashed = hash_password("s3cret-password")
        self.assertNotEqual(hashed, "s3cret-password")
        self.assertTrue(verify_password("s3cret-password", hashed))
        self.assertFalse(verify_password("wrong-password", hashed))

    def test_hash_uses_configured_cost(self) -> None:
        hashed = hash_password("s3cret-password")
        self.assertTrue(hashed.startswith(f"$2b${settings.BCRYPT_ROUNDS:02d}$"))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("same-password"), hash_password("same-password"))

    def test_malformed_hash_does_not_verify(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))


class TestAccessToken(unittest.TestCase):
    """Access tokens carry the given claims plus iat/exp."""

    def test_round_trip_keeps_claims(self) -> None:
        claims = {
            "sub": "7f1c7c1e-3f4c-4a4e-9d0e-3c2b1a0f9e8d",
            "email": "a@example.com",
            "roles": [{"id": "1", "name": "user", "permissions": []}],
            "isAdmin": False,
        }
        payload = decode_access_token(create_access_token(claims))
        for key, value in claims.items():
            self.assertEqual(payload[key], value)
        self.assertEqual(payload["exp"] - payload["iat"], settings.JWT_EXPIRE_MINUTES * 60)

    def test_expired_token_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "x", "email": "a@example.com", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_token_signed_with_other_secret_rejected(self) -> None:
        token = jwt.encode({"sub": "x"}, "some-other-secret", algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(jwt.PyJWTError):
            decode_access_token(token)


class TestRefreshTokenValues(unittest.TestCase):
    def test_values_are_long_and_unique(self) -> None:
        values = {generate_refresh_token_value() for _ in range(50)}
        self.assertEqual(len(values), 50)
        for value in values:
            self.assertEqual(len(value), 128)
            int(value, 16)

    def test_expiry_uses_configured_days(self) -> None:
        issued = datetime(2026, 1, 1, tzinfo=UTC)
        self.assertEqual(
            refresh_token_expiry(issued),
            issued + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )


if __name__ == "__main__":
    unittest.main()
