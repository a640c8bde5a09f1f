"""Domain errors raised by the stores and mapped to HTTP responses at the route boundary."""


class BlogError(Exception):
    """Base class for expected, user-facing failures. Carries a message and an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(BlogError):
    """One or more field rules were violated. errors lists every violated rule."""

    status_code = 400

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class DuplicateFieldError(BlogError):
    """A unique field (username or email) is already taken."""

    status_code = 400

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"User with this {field} already exists")


class UnauthorizedError(BlogError):
    status_code = 401


class ForbiddenError(BlogError):
    status_code = 403


class NotFoundError(BlogError):
    status_code = 404


class InvalidIdentifierError(NotFoundError):
    """The identifier is not well formed; treated as a client error rather than a miss."""

    status_code = 400
