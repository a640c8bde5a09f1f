"""Translate domain errors into HTTP errors at the route boundary."""

from fastapi import HTTPException

from app.core.errors import BlogError, UnauthorizedError, ValidationError


def http_error(error: BlogError) -> HTTPException:
    """Build the HTTPException for a domain error; the app-level handler renders it as {message, ...}."""
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=error.status_code,
            detail={"message": error.message, "errors": error.errors},
        )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(error, UnauthorizedError) else None
    return HTTPException(status_code=error.status_code, detail=error.message, headers=headers)
