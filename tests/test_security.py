"""Unit tests for app.core.security: password hashing and the 7-day bearer token."""

import unittest
from datetime import UTC, datetime, timedelta

import jwt

from app.core.config import get_settings
from app.core.security import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing(unittest.TestCase):
    """hash_password is one-way and salted; verify_password checks candidates against it."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("hunter22")
        self.assertNotIn("hunter22", hashed)
        self.assertTrue(verify_password("hunter22", hashed))
        self.assertFalse(verify_password("hunter23", hashed))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("hunter22"), hash_password("hunter22"))

    def test_garbage_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("hunter22", "not-a-bcrypt-hash"))


class TestAccessToken(unittest.TestCase):
    """Tokens carry user id and username and stay valid for exactly JWT_EXPIRE_DAYS."""

    def test_round_trip_claims(self) -> None:
        token = create_access_token(user_id=42, username="alice")
        claims = decode_access_token(token)
        self.assertEqual(claims.user_id, 42)
        self.assertEqual(claims.username, "alice")
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(days=7))

    def test_token_six_days_old_is_accepted(self) -> None:
        issued = datetime.now(UTC) - timedelta(days=6)
        token = create_access_token(user_id=1, username="alice", now=issued)
        self.assertEqual(decode_access_token(token).user_id, 1)

    def test_token_eight_days_old_is_expired(self) -> None:
        issued = datetime.now(UTC) - timedelta(days=8)
        token = create_access_token(user_id=1, username="alice", now=issued)
        with self.assertRaises(TokenExpiredError):
            decode_access_token(token)

    def test_garbage_token_is_invalid(self) -> None:
        with self.assertRaises(InvalidTokenError):
            decode_access_token("not.a.token")

    def test_token_signed_with_other_key_is_invalid(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "username": "alice", "iat": now, "exp": now + timedelta(days=1)},
            "some-other-signing-key-0123456789abcdef",
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token)

    def test_token_without_username_is_invalid(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "1", "iat": now, "exp": now + timedelta(days=1)},
            get_settings().JWT_SECRET.get_secret_value(),
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token)

    def test_non_numeric_subject_is_invalid(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "abc", "username": "alice", "iat": now, "exp": now + timedelta(days=1)},
            get_settings().JWT_SECRET.get_secret_value(),
            algorithm="HS256",
        )
        with self.assertRaises(InvalidTokenError):
            decode_access_token(token)


if __name__ == "__main__":
    unittest.main()
