"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from app.schemas.health import HealthResponse
from app.schemas.posts import (
    MessageResponse,
    PostCreateRequest,
    PostMutationResponse,
    PostOut,
    PostResponse,
    PostsResponse,
    PostUpdateRequest,
)

__all__ = [
    "AuthResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PostCreateRequest",
    "PostMutationResponse",
    "PostOut",
    "PostResponse",
    "PostsResponse",
    "PostUpdateRequest",
    "RegisterRequest",
    "UserPublic",
]
