"""Error taxonomy for the DevClimate service.

Every failure a request can hit is raised as a subclass of
`DevClimateError`. Each class carries the HTTP status it maps to; the API
layer converts them to a `{"error": message}` body in one place
(`devclimate.api.errors`), so services never build responses themselves.
"""

from __future__ import annotations


class DevClimateError(Exception):
    """Base exception for all service errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# 400


class InvalidInput(DevClimateError):
    """Malformed or missing request data."""

    status_code = 400
    default_message = "Invalid input"


class WeakPassword(InvalidInput):
    """Password does not meet the length requirements."""

    default_message = "Password must be at least 6 characters long"


class DuplicateUser(DevClimateError):
    """A user with the same email or username already exists."""

    status_code = 400
    default_message = "User with this email or username already exists"


# 401 / 403


class AuthError(DevClimateError):
    """Base class for authentication failures."""

    status_code = 401
    default_message = "Authentication failed"


class InvalidCredentials(AuthError):
    """Unknown email or wrong password.

    Both cases share one message so callers cannot enumerate accounts.
    """

    default_message = "Invalid email or password"


class MissingCredential(AuthError):
    """No credential was supplied with the request."""

    default_message = "Access token required"


class InvalidCredential(AuthError):
    """A credential was supplied but could not be verified."""

    status_code = 403
    default_message = "Invalid or expired token"


class InvalidToken(InvalidCredential):
    """Token signature, structure or type is invalid."""

    default_message = "Invalid token"


class ExpiredToken(InvalidCredential):
    """Token is past its expiry."""

    default_message = "Token has expired"


# 404


class NotFound(DevClimateError):
    status_code = 404
    default_message = "Not found"


class NotFoundOrUnauthorized(NotFound):
    """Record does not exist or belongs to another user."""

    default_message = "Weather search not found or unauthorized"


class CityNotFound(NotFound):
    default_message = "City not found"


# 500


class UpstreamError(DevClimateError):
    """An external HTTP service failed or returned something unusable."""

    status_code = 500
    default_message = "Failed to fetch weather data"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.upstream_status = status_code


class StoreError(DevClimateError):
    status_code = 500
    default_message = "Database operation failed"


class StartupError(DevClimateError):
    """Fatal to the process: the service cannot start."""

    default_message = "Service failed to start"
