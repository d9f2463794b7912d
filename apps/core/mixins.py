"""
Core View Mixins

Provides standardized authentication, parsing, and error handling for the
API views.
"""
import functools
import logging
from datetime import date, datetime
from uuid import UUID

from rest_framework import status
from rest_framework.response import Response

from .authentication import AuthenticatedUser, get_user_context
from .exceptions import APIException as APIError
from .exceptions import AuthenticationError, PermissionDeniedError, ValidationError, error_payload

logger = logging.getLogger(__name__)


class AuthenticatedAPIView:
    """
    Mixin providing standardized authentication and request parsing.

    Usage:
        class MyView(AuthenticatedAPIView, APIView):
            def get(self, request):
                user = self.get_user(request)  # Raises if not authenticated
    """

    def get_user(self, request) -> AuthenticatedUser:
        user = get_user_context(request)
        if not user:
            raise AuthenticationError()
        return user

    def require_role(self, user: AuthenticatedUser, *roles: str) -> None:
        if user.role not in roles:
            raise PermissionDeniedError()

    def parse_uuid(self, value: str | UUID | None, field_name: str = 'id') -> UUID:
        """
        Parse string to UUID or raise validation error.

        Raises:
            ValidationError if missing or invalid format
        """
        if isinstance(value, UUID):
            return value
        if not value:
            raise ValidationError(f'{field_name} is required')
        try:
            return UUID(str(value))
        except ValueError as err:
            raise ValidationError(f'Invalid {field_name} format') from err

    def parse_uuid_optional(self, value: str | None) -> UUID | None:
        """Parse string to UUID, return None if empty or invalid."""
        if not value:
            return None
        try:
            return UUID(str(value))
        except ValueError:
            return None

    def parse_date(self, value: str | None, fmt: str = '%Y-%m-%d') -> date | None:
        """Parse date string, return None if empty or invalid."""
        if not value:
            return None
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            return None

    def validated(self, serializer_class, data) -> dict:
        """Run a DRF serializer and raise ValidationError with its field errors."""
        serializer = serializer_class(data=data)
        if not serializer.is_valid():
            raise ValidationError('Invalid request', details=serializer.errors)
        return serializer.validated_data

    def export_language(self, request) -> str:
        return getattr(request, 'export_language', None) or 'en'


def handle_api_errors(failure_message: str):
    """
    Decorator for view methods that talk to the backend.

    APIError subclasses become their own status with the standard error
    envelope. Anything else is logged and answered with a generic 500 so the
    client can show its failure toast.

    Usage:
        @handle_api_errors('Failed to review task')
        def post(self, request, submission_id):
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, request, *args, **kwargs):
            try:
                return func(self, request, *args, **kwargs)
            except APIError as e:
                return Response(error_payload(e), status=e.status_code)
            except Exception as e:
                logger.error(f'{self.__class__.__name__} {request.method} failed: {e}')
                return Response(
                    {'error': failure_message, 'detail': str(e)},
                    status=status.HTTP_500_INTERNAL_SERVER_ERROR
                )
        return wrapper
    return decorator
