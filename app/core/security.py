"""Password hashing and JWT creation/verification for authentication."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12


class TokenExpiredError(Exception):
    """Raised when a token's signature is valid but its expiry has passed."""


class InvalidTokenError(Exception):
    """Raised when a token cannot be parsed, has a bad signature, or lacks required claims."""


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""

    user_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    user_id: int,
    username: str,
    now: datetime | None = None,
) -> str:
    """Create a JWT access token with sub (user id), username, iat and exp (JWT_EXPIRE_DAYS later)."""
    issued_at = now or datetime.now(UTC)
    expire = issued_at + timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "username": username,
        "exp": expire,
        "iat": issued_at,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> TokenClaims:
    """
    Decode and validate JWT; return its claims.
    Raises TokenExpiredError once exp has passed, InvalidTokenError for anything else wrong.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except jwt.PyJWTError as e:
        raise InvalidTokenError("Token is malformed or invalid") from e

    username = payload.get("username")
    if not isinstance(username, str) or not username:
        raise InvalidTokenError("Token payload missing username")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise InvalidTokenError("Token payload has an invalid subject") from e

    return TokenClaims(
        user_id=user_id,
        username=username,
        issued_at=datetime.fromtimestamp(payload["iat"], UTC),
        expires_at=datetime.fromtimestamp(payload["exp"], UTC),
    )
