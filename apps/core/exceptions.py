"""
Custom Exception Handling for the Journey Backend

Provides consistent error response format across all API endpoints.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that provides consistent error format.

    Error Response Format:
    {
        "error": "ErrorType",
        "message": "Human-readable error message",
        "details": {...}  // Optional, additional context
    }
    """
    if isinstance(exc, APIException):
        return Response(error_payload(exc), status=exc.status_code)

    response = exception_handler(exc, context)

    if response is not None:
        error_data = {
            'error': exc.__class__.__name__,
            'message': str(exc.detail) if hasattr(exc, 'detail') else str(exc),
        }

        if hasattr(exc, 'detail'):
            if isinstance(exc.detail, dict):
                error_data['details'] = exc.detail
                messages = []
                for field, errors in exc.detail.items():
                    if isinstance(errors, list):
                        messages.append(f"{field}: {', '.join(str(e) for e in errors)}")
                    else:
                        messages.append(f"{field}: {errors}")
                error_data['message'] = '; '.join(messages)
            elif isinstance(exc.detail, list):
                error_data['message'] = ', '.join(str(e) for e in exc.detail)

        response.data = error_data
        return response

    logger.exception(f'Unhandled exception: {exc}')
    return Response(
        {'error': 'InternalServerError', 'message': 'An unexpected error occurred'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


class APIException(Exception):
    """
    Base exception class for API errors.

    Usage:
        raise APIException('Something went wrong', status_code=400)
    """
    def __init__(self, message: str, status_code: int = 400, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ValidationError(APIException):
    """Raised when request validation fails."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


class AuthenticationError(APIException):
    """Raised when authentication fails."""
    def __init__(self, message: str = 'Authentication required'):
        super().__init__(message, status_code=401)


class PermissionDeniedError(APIException):
    """Raised when user lacks permission."""
    def __init__(self, message: str = 'Access denied'):
        super().__init__(message, status_code=403)


class NotFoundError(APIException):
    """Raised when a resource is not found."""
    def __init__(self, message: str = 'Resource not found'):
        super().__init__(message, status_code=404)


class ConflictError(APIException):
    """Raised when a status change is not allowed from the current state."""
    def __init__(self, message: str = 'Resource conflict', details: dict | None = None):
        super().__init__(message, status_code=409, details=details)


class UpstreamError(APIException):
    """Raised when Supabase Auth or Storage cannot be reached."""
    def __init__(self, message: str = 'Upstream service unavailable'):
        super().__init__(message, status_code=503)


class BulkOperationError(APIException):
    """
    Raised when a sequential bulk write stops part way.

    Rows written before the failure stay written; only the count is reported.
    """
    def __init__(self, message: str, processed: int, total: int):
        super().__init__(
            message,
            status_code=500,
            details={'processed': processed, 'total': total},
        )


def error_payload(exc: APIException) -> dict:
    """Standard error envelope for our own exceptions."""
    data = {'error': exc.__class__.__name__, 'message': exc.message}
    if exc.details:
        data['details'] = exc.details
    return data
