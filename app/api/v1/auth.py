"""Register/login routes and the bearer-token auth dependency (get_current_user)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.v1.errors import http_error
from app.core.database import get_db
from app.core.errors import BlogError
from app.core.security import (
    InvalidTokenError,
    TokenExpiredError,
    create_access_token,
    decode_access_token,
)
from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from app.services import credentials as credential_store

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(message: str, details: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "details": details},
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Create an account and return a token for it.

    Username: 3-20 letters, digits or underscores. Email is stored lowercased.
    Returns 400 when a field is invalid or the username/email is already taken.
    """
    try:
        user = credential_store.register(db, body.username, body.email, body.password)
    except BlogError as e:
        raise http_error(e) from e
    token = create_access_token(user_id=user.id, username=user.username)
    return AuthResponse(
        message="User created successfully",
        token=token,
        user=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    if not body.email or not body.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )
    try:
        user = credential_store.authenticate(db, body.email, body.password)
    except BlogError as e:
        logger.info("Failed login attempt")
        raise http_error(e) from e
    token = create_access_token(user_id=user.id, username=user.username)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserPublic.model_validate(user),
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the identity it carries.

    Stateless: the token alone is trusted until it expires; the database is not consulted.
    Raises 401 when the header is missing or malformed, the token is expired, or it is invalid.
    """
    if credentials is None:
        raise _unauthorized(
            "Access denied. No valid token provided.",
            "Authorization header must be in format: Bearer <token>",
        )
    try:
        claims = decode_access_token(credentials.credentials)
    except TokenExpiredError:
        raise _unauthorized("Access denied. Token expired.", "Please login again")
    except InvalidTokenError:
        raise _unauthorized("Access denied. Invalid token.", "Token is malformed or invalid")
    return CurrentUser(id=claims.user_id, username=claims.username)
