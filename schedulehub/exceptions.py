"""Application error taxonomy.

Every error carries the HTTP status it maps to; the handler in
``schedulehub.main`` renders them as ``{"error": message}``.
"""


class AppError(Exception):
    """Base exception for all expected application failures."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Missing required fields"


class InvalidCredentials(AppError):
    """Unknown email or wrong password at login."""

    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(AppError):
    """Missing, invalid or expired access token."""

    status_code = 401
    default_message = "Invalid or expired token"


class Forbidden(AppError):
    """Valid token but the role is insufficient."""

    status_code = 403
    default_message = "Admin access required"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class DuplicateEmail(AppError):
    status_code = 400
    default_message = "Email already exists"


class StoreError(AppError):
    """Underlying store failure. The client only ever sees the generic message."""

    status_code = 500
    default_message = "Database error"


class NotConfigured(AppError):
    """An optional integration was requested but has no configuration."""

    status_code = 503
    default_message = "Not configured"
