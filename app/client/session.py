"""Client-side login session: token plus user, hydrated from and persisted to a JSON file."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

import jwt
from pydantic import ValidationError

from app.schemas.auth import UserPublic

logger = logging.getLogger(__name__)


class Session:
    """
    Holds the bearer token and user for one client.

    Transitions are explicit: hydrate() restores a persisted session, login() replaces it,
    logout() clears memory and storage. A session whose token has expired is cleared
    the next time is_authenticated is checked; the server still enforces expiry itself.
    """

    def __init__(self, storage_path: str | Path | None = None) -> None:
        self.storage_path = Path(storage_path) if storage_path else None
        self.token: str | None = None
        self.user: UserPublic | None = None

    def hydrate(self) -> None:
        """Load a persisted session. Corrupted storage is discarded."""
        if self.storage_path is None or not self.storage_path.exists():
            return
        try:
            data = json.loads(self.storage_path.read_text(encoding="utf-8"))
            token = data["token"]
            user = UserPublic.model_validate(data["user"])
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValidationError) as e:
            logger.warning("Discarding unreadable session file %s: %s", self.storage_path, e)
            self._clear_storage()
            return
        if not isinstance(token, str) or not token:
            self._clear_storage()
            return
        self.token = token
        self.user = user

    def login(self, token: str, user: UserPublic) -> None:
        self.token = token
        self.user = user
        if self.storage_path is not None:
            self.storage_path.parent.mkdir(parents=True, exist_ok=True)
            self.storage_path.write_text(
                json.dumps({"token": token, "user": user.model_dump()}),
                encoding="utf-8",
            )
        logger.info("Logged in as %s", user.username)

    def logout(self) -> None:
        self.token = None
        self.user = None
        self._clear_storage()

    @property
    def expires_at(self) -> datetime | None:
        """Expiry read from the token payload (signature not checked; the server does that)."""
        if not self.token:
            return None
        try:
            payload = jwt.decode(self.token, options={"verify_signature": False})
            return datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (jwt.PyJWTError, KeyError, TypeError, ValueError):
            return None

    def is_expired(self, now: datetime | None = None) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return True
        return (now or datetime.now(UTC)) >= expires_at

    @property
    def is_authenticated(self) -> bool:
        if not self.token or self.user is None:
            return False
        if self.is_expired():
            logger.info("Session expired; clearing it")
            self.logout()
            return False
        return True

    def _clear_storage(self) -> None:
        if self.storage_path is not None:
            self.storage_path.unlink(missing_ok=True)
