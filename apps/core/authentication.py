"""
Supabase JWT Authentication for Django REST Framework

Validates JWTs issued by Supabase Auth and attaches user context to requests.
"""
import logging
from dataclasses import dataclass
from uuid import UUID

import jwt
from django.conf import settings
from django.db import DatabaseError

from rest_framework import authentication, exceptions

from .constants import (
    ROLE_ADMIN,
    ROLE_COACH,
    ROLE_ECOMMERCE,
    ROLE_FINANCE,
    ROLE_PARTICIPANT,
    STAFF_ROLES,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user from Supabase.

    This is NOT a Django User model - it's a lightweight container
    built from the JWT plus the profiles and user_roles tables.
    """
    id: UUID                             # profiles.id == auth.users.id
    email: str
    role: str                            # one of APP_ROLES
    full_name: str | None = None
    batch_number: str | None = None
    assigned_coach_id: UUID | None = None

    @property
    def pk(self) -> UUID:
        return self.id

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_coach(self) -> bool:
        return self.role == ROLE_COACH

    @property
    def is_finance(self) -> bool:
        return self.role == ROLE_FINANCE

    @property
    def is_ecommerce(self) -> bool:
        return self.role == ROLE_ECOMMERCE

    @property
    def is_participant(self) -> bool:
        return self.role == ROLE_PARTICIPANT

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def load_user(user_id) -> AuthenticatedUser | None:
    """
    Build an AuthenticatedUser from profiles + user_roles.

    A profile without a role row is treated as a participant.
    """
    from .models import Profile, UserRole

    profile = Profile.objects.filter(id=user_id).first()
    if not profile:
        return None

    role_row = UserRole.objects.filter(user_id=profile.id).values_list('role', flat=True).first()
    return AuthenticatedUser(
        id=profile.id,
        email=profile.email or '',
        role=role_row or ROLE_PARTICIPANT,
        full_name=profile.full_name,
        batch_number=profile.batch_number,
        assigned_coach_id=profile.assigned_coach_id,
    )


class SupabaseJWTAuthentication(authentication.BaseAuthentication):
    """
    Authenticates requests using Supabase JWTs.

    Flow:
    1. Extract Bearer token from Authorization header
    2. Decode and validate JWT using the Supabase JWT secret
    3. Look up the profile by id (sub claim) and its role
    4. Return AuthenticatedUser
    """

    def authenticate(self, request):
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')

        if not auth_header.startswith('Bearer '):
            return None

        token = auth_header[7:]
        if not token:
            return None

        payload = self._decode_jwt(token)
        if not payload:
            raise exceptions.AuthenticationFailed('Invalid or expired token')

        user = self._get_user_from_payload(payload)
        if not user:
            raise exceptions.AuthenticationFailed('User not found')

        return (user, token)

    def authenticate_header(self, request):
        return 'Bearer realm="api"'

    def _decode_jwt(self, token: str) -> dict | None:
        """
        Decode and validate a Supabase JWT.

        Returns:
            dict: The decoded payload if valid
            None: If token is invalid or expired
        """
        jwt_secret = getattr(settings, 'SUPABASE_JWT_SECRET', None)

        if not jwt_secret:
            logger.error('SUPABASE_JWT_SECRET not configured')
            return None

        supabase_url = getattr(settings, 'SUPABASE_URL', '')
        expected_issuer = f'{supabase_url}/auth/v1' if supabase_url else None

        decode_kwargs = {
            'jwt': token,
            'key': jwt_secret,
            'algorithms': ['HS256'],
            'audience': 'authenticated',
            'options': {
                'verify_exp': True,
                'verify_aud': True,
                'verify_iss': bool(expected_issuer),
            },
        }
        if expected_issuer:
            decode_kwargs['issuer'] = expected_issuer

        try:
            return jwt.decode(**decode_kwargs)
        except jwt.ExpiredSignatureError:
            logger.debug('JWT has expired')
            return None
        except jwt.InvalidTokenError as e:
            logger.debug(f'JWT validation failed: {e}')
            return None

    def _get_user_from_payload(self, payload: dict) -> AuthenticatedUser | None:
        user_id = payload.get('sub')
        if not user_id:
            logger.warning('JWT missing sub claim')
            return None

        try:
            user = load_user(user_id)
        except (DatabaseError, ValueError) as e:
            logger.error(f'Database error looking up profile: {e}')
            return None

        if not user:
            logger.warning(f'No profile found for user: {user_id}')
        return user


def get_user_context(request) -> AuthenticatedUser | None:
    """
    Utility function to get authenticated user from request.

    Returns:
        AuthenticatedUser if authenticated, None otherwise
    """
    user = getattr(request, 'user', None)
    if isinstance(user, AuthenticatedUser):
        return user
    return None
