"""Python client for the blog API with an explicit, persisted login session."""

from app.client.api import ApiError, BlogClient
from app.client.session import Session

__all__ = ["ApiError", "BlogClient", "Session"]
