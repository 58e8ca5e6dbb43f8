"""Error taxonomy shared by stores, services and the HTTP layer.

Each error carries the HTTP status it maps to. Stores and services raise
these; a single exception handler in main.py renders them as
{"detail": message}. Nothing here knows about drivers.
"""


class SecretlaneError(Exception):
    """Base class for all application errors."""

    status_code = 500
    default_message = "internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(SecretlaneError):
    """Malformed or missing request fields."""

    status_code = 422
    default_message = "invalid request"


class AuthenticationError(SecretlaneError):
    """Bad credentials. Deliberately says nothing about which part was wrong."""

    status_code = 401
    default_message = "invalid username or password"


class InvalidTokenError(SecretlaneError):
    """Session token missing, malformed, tampered with, or expired."""

    status_code = 401
    default_message = "invalid or expired token"


class ConflictError(SecretlaneError):
    status_code = 409
    default_message = "record already exists"


class NotFoundError(SecretlaneError):
    """No row matched. Every dialect's "no rows" signal becomes this."""

    status_code = 404
    default_message = "not found"


class StorageError(SecretlaneError):
    """Any other persistence failure. Driver detail is logged, never returned."""

    status_code = 500
    default_message = "internal storage error"


class SigningError(SecretlaneError):
    """Token signing is impossible (no secret). Fatal at startup."""

    status_code = 500
    default_message = "token signing is not configured"
