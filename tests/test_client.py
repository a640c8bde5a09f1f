"""Tests for app.client: session transitions and the httpx API client (no network)."""

import json
import shutil
import tempfile
import unittest
from datetime import UTC, datetime, timedelta
from pathlib import Path

import httpx

from app.client import ApiError, BlogClient, Session
from app.core.security import create_access_token
from app.schemas.auth import UserPublic

ALICE = UserPublic(id=1, username="alice", email="alice@example.com")


def _post_json(post_id: int = 1, title: str = "A perfectly fine title") -> dict:
    return {
        "id": post_id,
        "title": title,
        "imageURL": None,
        "content": "x" * 60,
        "username": "alice",
        "userId": 1,
        "createdAt": "2026-10-01T12:00:00Z",
        "updatedAt": "2026-10-01T12:00:00Z",
    }


class SessionTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, tmp, ignore_errors=True)
        self.path = Path(tmp) / "session.json"


class TestSession(SessionTestCase):
    def test_login_persists_and_hydrate_restores(self) -> None:
        token = create_access_token(ALICE.id, ALICE.username)
        Session(self.path).login(token, ALICE)
        self.assertTrue(self.path.exists())

        restored = Session(self.path)
        restored.hydrate()
        self.assertEqual(restored.token, token)
        self.assertEqual(restored.user, ALICE)
        self.assertTrue(restored.is_authenticated)

    def test_logout_clears_memory_and_storage(self) -> None:
        session = Session(self.path)
        session.login(create_access_token(ALICE.id, ALICE.username), ALICE)
        session.logout()
        self.assertIsNone(session.token)
        self.assertIsNone(session.user)
        self.assertFalse(self.path.exists())
        self.assertFalse(session.is_authenticated)

    def test_corrupted_storage_is_discarded(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        session = Session(self.path)
        session.hydrate()
        self.assertIsNone(session.token)
        self.assertFalse(self.path.exists())

    def test_missing_storage_is_a_fresh_session(self) -> None:
        session = Session(self.path)
        session.hydrate()
        self.assertFalse(session.is_authenticated)

    def test_expired_token_clears_session(self) -> None:
        token = create_access_token(
            ALICE.id, ALICE.username, now=datetime.now(UTC) - timedelta(days=8)
        )
        session = Session(self.path)
        session.login(token, ALICE)
        self.assertTrue(session.is_expired())
        self.assertFalse(session.is_authenticated)
        self.assertIsNone(session.token)
        self.assertFalse(self.path.exists())

    def test_expires_at_comes_from_token(self) -> None:
        issued = datetime.now(UTC).replace(microsecond=0)
        session = Session()
        session.login(create_access_token(ALICE.id, ALICE.username, now=issued), ALICE)
        self.assertEqual(session.expires_at, issued + timedelta(days=7))
        self.assertFalse(session.is_expired(now=issued + timedelta(days=6)))
        self.assertTrue(session.is_expired(now=issued + timedelta(days=8)))


class TestBlogClient(SessionTestCase):
    def _client(self, handler) -> BlogClient:
        client = BlogClient(
            base_url="http://testserver/api",
            session=Session(self.path),
            transport=httpx.MockTransport(handler),
        )
        self.addCleanup(client.close)
        return client

    def test_login_starts_session(self) -> None:
        token = create_access_token(ALICE.id, ALICE.username)

        def handler(request: httpx.Request) -> httpx.Response:
            self.assertEqual(request.url.path, "/api/auth/login")
            self.assertEqual(
                json.loads(request.content),
                {"email": "alice@example.com", "password": "secret123"},
            )
            return httpx.Response(
                200,
                json={"message": "Login successful", "token": token, "user": ALICE.model_dump()},
            )

        client = self._client(handler)
        result = client.login("alice@example.com", "secret123")
        self.assertEqual(result.user, ALICE)
        self.assertEqual(client.session.token, token)
        self.assertTrue(self.path.exists())

    def test_bearer_token_is_attached(self) -> None:
        seen: dict[str, str | None] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["limit"] = request.url.params.get("limit")
            return httpx.Response(
                200,
                json={"posts": [_post_json()], "totalPages": 1, "currentPage": 1, "total": 1},
            )

        client = self._client(handler)
        client.session.login("tok123", ALICE)
        page = client.list_my_posts(page=1, limit=5)
        self.assertEqual(seen["auth"], "Bearer tok123")
        self.assertEqual(seen["limit"], "5")
        self.assertEqual(page.total, 1)
        self.assertEqual(page.posts[0].user_id, 1)

    def test_unauthorized_clears_session(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "Access denied. Token expired."})

        client = self._client(handler)
        client.session.login("tok123", ALICE)
        with self.assertRaises(ApiError) as ctx:
            client.create_post("A perfectly fine title", "x" * 60)
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.message, "Access denied. Token expired.")
        self.assertIsNone(client.session.token)
        self.assertFalse(self.path.exists())

    def test_error_message_from_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"message": "Access denied. You can only update your own posts."})

        client = self._client(handler)
        client.session.login("tok123", ALICE)
        with self.assertRaises(ApiError) as ctx:
            client.update_post(3, title="Another title")
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(client.session.token, "tok123")

    def test_update_sends_only_given_fields(self) -> None:
        sent: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            sent.update(json.loads(request.content))
            return httpx.Response(
                200,
                json={"message": "Post updated successfully", "post": _post_json(3, "Another title")},
            )

        client = self._client(handler)
        result = client.update_post(3, title="Another title", image_url="")
        self.assertEqual(sent, {"title": "Another title", "imageURL": ""})
        self.assertEqual(result.post.title, "Another title")

    def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = self._client(handler)
        with self.assertRaises(ApiError) as ctx:
            client.get_post(1)
        self.assertIsNone(ctx.exception.status_code)


if __name__ == "__main__":
    unittest.main()
