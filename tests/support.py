"""Shared fixtures: a fresh schema per test plus builders for users and posts."""

import unittest
from unittest.mock import patch

from app.core.database import SessionLocal, engine
from app.models import Base, Post, User
from app.services import credentials
from app.services import posts as post_store

LONG_CONTENT = "This is the body of a blog post and it is comfortably longer than fifty characters."


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them afterwards."""

    def setUp(self) -> None:
        # Minimum bcrypt cost keeps registration fast in tests.
        rounds = patch("app.core.security.BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        Base.metadata.create_all(engine)
        self.addCleanup(Base.metadata.drop_all, engine)
        self.db = SessionLocal()
        self.addCleanup(self.db.close)

    def make_user(
        self,
        username: str = "alice",
        email: str | None = None,
        password: str = "secret123",
    ) -> User:
        return credentials.register(
            self.db, username, email or f"{username}@example.com", password
        )

    def make_post(
        self,
        user: User,
        title: str = "A perfectly fine title",
        content: str = LONG_CONTENT,
        image_url: str | None = None,
    ) -> Post:
        return post_store.create_post(
            self.db,
            author_id=user.id,
            author_username=user.username,
            title=title,
            content=content,
            image_url=image_url,
        )
