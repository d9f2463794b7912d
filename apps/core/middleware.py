"""
Authentication Middleware for the Journey Backend

Handles JWT authentication and attaches user context to requests.
"""
import logging
import re
from collections.abc import Callable

from django.conf import settings
from django.http import JsonResponse

from .authentication import SupabaseJWTAuthentication

logger = logging.getLogger(__name__)


class SupabaseAuthMiddleware:
    """
    Middleware that authenticates requests using Supabase JWTs.

    This middleware:
    1. Skips authentication for public routes
    2. Validates JWT for protected routes
    3. Attaches AuthenticatedUser to request.user
    4. Returns 401 for unauthenticated requests to protected routes
    """

    PUBLIC_ROUTES: list[str] = [
        r'^/api/health$',
        r'^/api/auth/login$',
        r'^/api/auth/register$',
        r'^/api/auth/refresh$',
        r'^/api/settings/app$',
    ]

    def __init__(self, get_response: Callable):
        self.get_response = get_response
        self.authenticator = SupabaseJWTAuthentication()
        self._public_patterns = [re.compile(pattern) for pattern in self.PUBLIC_ROUTES]

    def __call__(self, request):
        if self._is_public_route(request.path):
            request.user = None
            return self.get_response(request)

        try:
            auth_result = self.authenticator.authenticate(request)

            if auth_result is None:
                return JsonResponse(
                    {
                        'error': 'Unauthorized',
                        'message': 'Authentication required'
                    },
                    status=401
                )

            user, token = auth_result
            request.user = user
            request.auth_token = token

            logger.debug(f'Authenticated {user.role} {user.id} accessing {request.path}')

        except Exception as e:
            logger.warning(f'Authentication failed: {e}')
            return JsonResponse(
                {
                    'error': 'Unauthorized',
                    'message': str(e)
                },
                status=401
            )

        return self.get_response(request)

    def _is_public_route(self, path: str) -> bool:
        return any(pattern.match(path) for pattern in self._public_patterns)


class LanguageContextMiddleware:
    """
    Picks the language for exported column headers.

    Order: ?lang= query param, then the first supported Accept-Language tag,
    then English.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response
        self.supported = getattr(settings, 'EXPORT_LANGUAGES', ['en'])

    def __call__(self, request):
        request.export_language = self._resolve(request)
        return self.get_response(request)

    def _resolve(self, request) -> str:
        requested = request.GET.get('lang')
        if requested in self.supported:
            return requested

        header = request.META.get('HTTP_ACCEPT_LANGUAGE', '')
        for part in header.split(','):
            tag = part.split(';')[0].strip().lower()
            primary = tag.split('-')[0]
            if primary in self.supported:
                return primary
        return 'en'
