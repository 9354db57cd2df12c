"""Domain errors raised by the data-access layer and mapped to HTTP responses in app.main."""


class SocialError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500
    error_code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SocialError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class ConflictError(SocialError):
    # duplicate username/email is reported as a plain 400
    status_code = 400
    error_code = "CONFLICT"


class AuthenticationError(SocialError):
    status_code = 401
    error_code = "AUTHENTICATION_FAILED"


class PermissionDeniedError(SocialError):
    status_code = 403
    error_code = "FORBIDDEN"


class NotFoundError(SocialError):
    status_code = 404
    error_code = "NOT_FOUND"
