"""Domain errors rendered by the API as {error, message} bodies."""


class PortalError(Exception):
    """Base class for errors that map to a client-facing HTTP response."""

    status_code = 500
    error = "InternalError"

    def __init__(self, message: str, error: str | None = None) -> None:
        self.message = message
        if error is not None:
            self.error = error
        super().__init__(message)


class Unauthenticated(PortalError):
    status_code = 401
    error = "Unauthenticated"


class Forbidden(PortalError):
    status_code = 403
    error = "Forbidden"


class NotFound(PortalError):
    status_code = 404
    error = "NotFound"


class Conflict(PortalError):
    """Raised when an email is already registered to another user."""

    status_code = 409
    error = "EmailConflict"


class ValidationFailed(PortalError):
    status_code = 400
    error = "ValidationFailed"


class SelfProtectionViolation(PortalError):
    """Raised when an administrator tries to delete or deactivate their own account."""

    status_code = 400


class LoginRedirect(Exception):
    """Raised by the restricted-access check to send the client to the login page."""

    def __init__(self, location: str = "/login") -> None:
        self.location = location
        super().__init__(location)
