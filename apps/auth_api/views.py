"""
Authentication API Views

Thin proxies over Supabase Auth (GoTrue). The profile row itself is
created by a database trigger when GoTrue creates the auth user.
"""
import logging

import httpx
from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.authentication import get_user_context, load_user
from apps.core.permissions import IsAuthenticated
from apps.core.throttles import AuthRateThrottle
from apps.settings_api.selectors import get_effective_navigation

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _auth_url(path: str) -> str:
    return f'{settings.SUPABASE_URL}/auth/v1/{path}'


def _anon_headers() -> dict:
    return {
        'apikey': settings.SUPABASE_ANON_KEY,
        'Content-Type': 'application/json',
    }


def _unavailable(e: Exception) -> Response:
    logger.error(f'Supabase auth request failed: {e}')
    return Response(
        {'error': 'ServiceError', 'message': 'Authentication service unavailable'},
        status=status.HTTP_503_SERVICE_UNAVAILABLE
    )


def _user_payload(user) -> dict:
    return {
        'id': str(user.id),
        'email': user.email,
        'full_name': user.full_name,
        'role': user.role,
        'batch_number': user.batch_number,
        'assigned_coach_id': str(user.assigned_coach_id) if user.assigned_coach_id else None,
    }


def _token_payload(auth_data: dict) -> dict:
    return {
        'access_token': auth_data.get('access_token'),
        'refresh_token': auth_data.get('refresh_token'),
        'expires_in': auth_data.get('expires_in'),
        'token_type': 'bearer',
    }


class LoginView(APIView):
    """
    POST /api/auth/login

    Request Body:
        {"email": "user@example.com", "password": "secret"}

    Response (200):
        {
            "access_token": "...",
            "refresh_token": "...",
            "expires_in": 3600,
            "token_type": "bearer",
            "user": {"id": "uuid", "email": "...", "role": "participant", ...},
            "default_page": "/dashboard"
        }

    Errors:
        400: Missing email or password
        401: Invalid credentials
        503: Supabase Auth unreachable
    """
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]

    def post(self, request):
        email = request.data.get('email', '').strip().lower()
        password = request.data.get('password', '')

        if not email or not password:
            return Response(
                {'error': 'ValidationError', 'message': 'Email and password required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            with httpx.Client() as client:
                response = client.post(
                    _auth_url('token?grant_type=password'),
                    json={'email': email, 'password': password},
                    headers=_anon_headers(),
                    timeout=10.0
                )
        except httpx.RequestError as e:
            return _unavailable(e)

        if response.status_code != 200:
            error_data = response.json() if response.content else {}
            return Response(
                {
                    'error': 'AuthenticationError',
                    'message': error_data.get('error_description', 'Invalid credentials'),
                },
                status=status.HTTP_401_UNAUTHORIZED
            )

        auth_data = response.json()
        auth_user_id = auth_data.get('user', {}).get('id')
        user = load_user(auth_user_id) if auth_user_id else None
        if user is None:
            return Response(
                {'error': 'NotFound', 'message': 'Profile not found'},
                status=status.HTTP_404_NOT_FOUND
            )

        return Response({
            **_token_payload(auth_data),
            'user': _user_payload(user),
            'default_page': get_effective_navigation(user.role)['default_page'],
        })


class RegisterView(APIView):
    """
    POST /api/auth/register

    Request Body:
        {"email": "user@example.com", "password": "secret", "full_name": "Asha Patil"}

    Response (201):
        {"message": "Registration successful", "user_id": "uuid", "confirmation_required": true}
    """
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]

    def post(self, request):
        email = request.data.get('email', '').strip().lower()
        password = request.data.get('password', '')
        full_name = request.data.get('full_name', '').strip()

        errors = []
        if not email:
            errors.append('Email is required')
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            errors.append(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
        if not full_name:
            errors.append('Full name is required')

        if errors:
            return Response(
                {'error': 'ValidationError', 'message': '; '.join(errors)},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            with httpx.Client() as client:
                response = client.post(
                    _auth_url('signup'),
                    json={
                        'email': email,
                        'password': password,
                        'data': {'full_name': full_name},
                    },
                    headers=_anon_headers(),
                    timeout=10.0
                )
        except httpx.RequestError as e:
            return _unavailable(e)

        if response.status_code not in (200, 201):
            error_data = response.json() if response.content else {}
            return Response(
                {'error': 'RegistrationError', 'message': error_data.get('msg', 'Registration failed')},
                status=status.HTTP_400_BAD_REQUEST
            )

        auth_data = response.json()
        auth_user = auth_data.get('user') or auth_data
        logger.info(f'Registered {email} as {auth_user.get("id")}')

        return Response(
            {
                'message': 'Registration successful',
                'user_id': auth_user.get('id'),
                'confirmation_required': not auth_data.get('access_token'),
                **(_token_payload(auth_data) if auth_data.get('access_token') else {}),
            },
            status=status.HTTP_201_CREATED
        )


class RefreshTokenView(APIView):
    """
    POST /api/auth/refresh

    Request Body:
        {"refresh_token": "..."}
    """
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]

    def post(self, request):
        refresh_token = request.data.get('refresh_token', '')

        if not refresh_token:
            return Response(
                {'error': 'ValidationError', 'message': 'Refresh token required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            with httpx.Client() as client:
                response = client.post(
                    _auth_url('token?grant_type=refresh_token'),
                    json={'refresh_token': refresh_token},
                    headers=_anon_headers(),
                    timeout=10.0
                )
        except httpx.RequestError as e:
            return _unavailable(e)

        if response.status_code != 200:
            return Response(
                {'error': 'RefreshError', 'message': 'Token refresh failed'},
                status=status.HTTP_401_UNAUTHORIZED
            )

        return Response(_token_payload(response.json()))


class LogoutView(APIView):
    """
    POST /api/auth/logout

    Revokes the session in Supabase; always answers 200.
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')
        token = getattr(request, 'auth', None) or auth_header[7:]
        if token:
            try:
                with httpx.Client() as client:
                    client.post(
                        _auth_url('logout'),
                        headers={
                            'apikey': settings.SUPABASE_ANON_KEY,
                            'Authorization': f'Bearer {token}',
                        },
                        timeout=5.0
                    )
            except httpx.RequestError as e:
                logger.warning(f'Supabase logout request failed: {e}')

        return Response({'message': 'Logged out successfully'})


class SessionView(APIView):
    """
    GET /api/auth/me

    Response (200):
        {
            "authenticated": true,
            "user": {...},
            "navigation": {"links": [...], "default_page": "/journey", "source": "settings"}
        }
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        user = get_user_context(request)
        if not user:
            return Response({'authenticated': False})

        return Response({
            'authenticated': True,
            'user': _user_payload(user),
            'navigation': get_effective_navigation(user.role),
        })
