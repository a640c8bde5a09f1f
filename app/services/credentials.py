"""Credential store: user registration, lookup by email, and password verification."""

import logging
import re

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateFieldError, UnauthorizedError, ValidationError
from app.core.security import hash_password, verify_password as _check_password
from app.models.user import User

logger = logging.getLogger(__name__)

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 20
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

_email_adapter = TypeAdapter(EmailStr)


def normalize_email(email: str) -> str:
    """Lowercase and trim; emails are stored and compared in this form."""
    return email.strip().lower()


def validate_registration(username: str | None, email: str | None, password: str | None) -> list[str]:
    """Return every violated registration rule (empty list when the input is valid)."""
    errors: list[str] = []

    username = (username or "").strip()
    if not username:
        errors.append("Username is required")
    elif not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        errors.append(
            f"Username must be between {USERNAME_MIN_LEN} and {USERNAME_MAX_LEN} characters"
        )
    elif not USERNAME_PATTERN.match(username):
        errors.append("Username can only contain letters, numbers, and underscores")

    email = (email or "").strip()
    if not email:
        errors.append("Email is required")
    else:
        try:
            _email_adapter.validate_python(email)
        except PydanticValidationError:
            errors.append("Please enter a valid email address")

    if not password:
        errors.append("Password is required")
    elif not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        errors.append(
            f"Password must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters"
        )
    return errors


def find_by_email(db: Session, email: str) -> User | None:
    """Return the user with this email (case-insensitive) or None."""
    if not email or not email.strip():
        return None
    return db.query(User).filter(User.email == normalize_email(email)).first()


def verify_password(user: User, candidate: str) -> bool:
    """True if candidate matches the user's stored hash."""
    if not candidate:
        return False
    return _check_password(candidate, user.password_hash)


def register(db: Session, username: str | None, email: str | None, password: str | None) -> User:
    """
    Validate and persist a new user with a bcrypt-hashed password.

    Raises ValidationError listing every violated rule, or DuplicateFieldError naming
    'email' or 'username' when either is already registered.
    """
    errors = validate_registration(username, email, password)
    if errors:
        raise ValidationError(errors)

    username = (username or "").strip()
    email = normalize_email(email or "")

    existing = (
        db.query(User)
        .filter(or_(User.email == email, User.username == username))
        .first()
    )
    if existing is not None:
        field = "email" if existing.email == email else "username"
        raise DuplicateFieldError(field)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password or ""),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration for the same username or email.
        db.rollback()
        field = "email" if "email" in str(e.orig).lower() else "username"
        raise DuplicateFieldError(field) from e
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id, "username": user.username})
    return user


def authenticate(db: Session, email: str | None, password: str | None) -> User:
    """Return the user for these credentials or raise UnauthorizedError without saying which part was wrong."""
    user = find_by_email(db, email or "")
    if user is None or not verify_password(user, password or ""):
        raise UnauthorizedError("Invalid credentials")
    return user
