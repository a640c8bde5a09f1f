"""Tests for app.services.credentials: registration rules, uniqueness and login checks."""

import unittest

from app.core.errors import DuplicateFieldError, UnauthorizedError, ValidationError
from app.services import credentials
from tests.support import DatabaseTestCase


class TestValidateRegistration(unittest.TestCase):
    """validate_registration reports every violated rule at once."""

    def test_valid_input(self) -> None:
        self.assertEqual(credentials.validate_registration("alice_1", "a@example.com", "secret1"), [])

    def test_all_missing(self) -> None:
        errors = credentials.validate_registration(None, None, None)
        self.assertEqual(
            errors,
            ["Username is required", "Email is required", "Password is required"],
        )

    def test_username_rules(self) -> None:
        self.assertIn(
            "Username must be between 3 and 20 characters",
            credentials.validate_registration("ab", "a@example.com", "secret1"),
        )
        self.assertIn(
            "Username must be between 3 and 20 characters",
            credentials.validate_registration("a" * 21, "a@example.com", "secret1"),
        )
        self.assertIn(
            "Username can only contain letters, numbers, and underscores",
            credentials.validate_registration("bad-name", "a@example.com", "secret1"),
        )

    def test_bad_email_and_short_password(self) -> None:
        errors = credentials.validate_registration("alice", "not-an-email", "12345")
        self.assertIn("Please enter a valid email address", errors)
        self.assertIn("Password must be between 6 and 128 characters", errors)


class TestRegister(DatabaseTestCase):
    def test_register_normalizes_email_and_hashes_password(self) -> None:
        user = credentials.register(self.db, "  alice ", "  Alice@Example.COM ", "secret123")
        self.assertIsNotNone(user.id)
        self.assertEqual(user.username, "alice")
        self.assertEqual(user.email, "alice@example.com")
        self.assertNotEqual(user.password_hash, "secret123")
        self.assertTrue(credentials.verify_password(user, "secret123"))

    def test_duplicate_email_is_case_insensitive(self) -> None:
        credentials.register(self.db, "alice", "alice@example.com", "secret123")
        with self.assertRaises(DuplicateFieldError) as ctx:
            credentials.register(self.db, "alice2", "ALICE@example.com", "secret123")
        self.assertEqual(ctx.exception.field, "email")
        self.assertEqual(ctx.exception.message, "User with this email already exists")

    def test_duplicate_username(self) -> None:
        credentials.register(self.db, "alice", "alice@example.com", "secret123")
        with self.assertRaises(DuplicateFieldError) as ctx:
            credentials.register(self.db, "alice", "other@example.com", "secret123")
        self.assertEqual(ctx.exception.field, "username")

    def test_invalid_input_raises_validation_error(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            credentials.register(self.db, "a", "bad", "1")
        self.assertEqual(len(ctx.exception.errors), 3)


class TestLookupAndAuthenticate(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user("alice", "alice@example.com", "secret123")

    def test_find_by_email_ignores_case(self) -> None:
        found = credentials.find_by_email(self.db, "ALICE@EXAMPLE.com")
        self.assertIsNotNone(found)
        self.assertEqual(found.id, self.user.id)

    def test_find_by_email_missing(self) -> None:
        self.assertIsNone(credentials.find_by_email(self.db, "nobody@example.com"))
        self.assertIsNone(credentials.find_by_email(self.db, ""))

    def test_verify_password(self) -> None:
        self.assertTrue(credentials.verify_password(self.user, "secret123"))
        self.assertFalse(credentials.verify_password(self.user, "wrong-password"))
        self.assertFalse(credentials.verify_password(self.user, ""))

    def test_authenticate(self) -> None:
        self.assertEqual(
            credentials.authenticate(self.db, "Alice@example.com", "secret123").id,
            self.user.id,
        )
        with self.assertRaises(UnauthorizedError):
            credentials.authenticate(self.db, "alice@example.com", "wrong-password")
        with self.assertRaises(UnauthorizedError):
            credentials.authenticate(self.db, "nobody@example.com", "secret123")


if __name__ == "__main__":
    unittest.main()
