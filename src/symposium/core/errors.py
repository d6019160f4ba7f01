"""
Service Errors

Base exception for business-rule failures. Services raise subclasses of
`ServiceError`; routers translate them into HTTP responses with
`to_http_exception`.
"""

from fastapi import HTTPException, status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(ServiceError):
    """Raised when a record does not exist."""

    def __init__(self, what: str, error_code: str = "NOT_FOUND"):
        super().__init__(
            message=f"{what} not found",
            error_code=error_code,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class ValidationFailedError(ServiceError):
    """Raised when input fails a business validation rule."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class ForbiddenError(ServiceError):
    """Raised when the caller does not own the record they act on."""

    def __init__(self, message: str = "You do not have access to this record."):
        super().__init__(message=message, error_code="FORBIDDEN", status_code=403)


class ConflictError(ServiceError):
    """Raised when the record's current state does not allow the operation."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class EmailDeliveryError(ServiceError):
    """Raised when a required email could not be sent."""

    def __init__(self, message: str = "Failed to send email. Please try again later."):
        super().__init__(
            message=message,
            error_code="EMAIL_DELIVERY_FAILED",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def to_http_exception(e: ServiceError) -> HTTPException:
    """Convert a service error into an HTTPException."""
    return HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


def internal_error() -> HTTPException:
    """Generic 500 that does not expose exception details."""
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )
