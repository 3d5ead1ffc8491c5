from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "details": self.details,
        }


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=404,
        )


class ValidationError(AppError):
    """Invalid input data."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=400, details=details)


class AuthenticationError(AppError):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message, status_code=401)


class PermissionDeniedError(AppError):
    """Authenticated, but not allowed to perform the action."""

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message=message, status_code=403)


class UpstreamError(AppError):
    """An external service (Overseerr, push service) returned an error."""

    def __init__(self, service: str, message: str):
        super().__init__(message=f"{service} error: {message}", status_code=502)
        self.service = service
