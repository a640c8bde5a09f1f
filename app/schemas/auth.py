"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Registration payload. Field rules are enforced by the credential store so every violation is reported."""

    username: str | None = Field(default=None, description="3-20 letters, digits or underscores")
    email: str | None = Field(default=None, description="Email address (stored lowercased)")
    password: str | None = Field(default=None, description="Password (6-128 characters)")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, description="Email address")
    password: str | None = Field(default=None, description="Password")


class UserPublic(BaseModel):
    """User identity returned to clients (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str


class AuthResponse(BaseModel):
    """Response for register and login: a bearer token plus the user it identifies."""

    message: str
    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    user: UserPublic


class CurrentUser(BaseModel):
    """Authenticated identity (id, username) attached to protected requests."""

    id: int
    username: str
