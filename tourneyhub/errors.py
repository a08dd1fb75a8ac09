"""Custom exception classes for the application."""

from .core.constants import REASON_LOGIN_REQUIRED


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input or a join request fails validation."""

    def __init__(self, message="Validation failed.", status_code=400):
        """Initialize the error."""
        super().__init__(message, status_code)


class UnauthorizedError(AppError):
    """Raised when an operation needs an identity and none is present."""

    def __init__(self, message=REASON_LOGIN_REQUIRED):
        """Initialize the error."""
        super().__init__(message, 401)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class StoreError(AppError):
    """Raised when the record store reports a failure.

    ``category`` is one of ``permission_denied``, ``unavailable``,
    ``malformed``, ``contention`` or ``unknown``.
    """

    STATUS_CODES = {
        "permission_denied": 403,
        "unavailable": 503,
        "malformed": 502,
        "contention": 503,
    }

    def __init__(self, category, message, code=None):
        """Initialize the error."""
        super().__init__(message, self.STATUS_CODES.get(category, 500))
        self.category = category
        self.code = code


def describe_store_error(error):
    """Return the user-facing message for a store failure."""
    message = getattr(error, "message", None) or str(error) or "Unknown error"
    category = getattr(error, "category", None)
    code = getattr(error, "code", None)
    if category == "permission_denied":
        return "Permission denied. Deploy the latest database rules and try again."
    if "app check" in message.lower():
        return (
            "App Check token missing or invalid. Register this app in "
            "Firebase App Check and try again."
        )
    if category == "unavailable":
        return "The tournament database is unreachable. Please try again shortly."
    if category == "contention":
        return message
    return f"{message} (code: {code})" if code else message
