"""
Supabase JWT Authentication Unit Tests
"""
import time
import uuid

import jwt
import pytest
from django.conf import settings
from django.test import RequestFactory
from rest_framework import exceptions

from apps.core.authentication import AuthenticatedUser, SupabaseJWTAuthentication, get_user_context


def make_token(sub, **overrides):
    payload = {
        'sub': str(sub),
        'aud': 'authenticated',
        'iss': f'{settings.SUPABASE_URL}/auth/v1',
        'exp': int(time.time()) + 3600,
    }
    payload.update(overrides)
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm='HS256')


def bearer(token):
    return RequestFactory().get('/', HTTP_AUTHORIZATION=f'Bearer {token}')


@pytest.fixture
def user():
    return AuthenticatedUser(id=uuid.uuid4(), email='p@example.com', role='participant')


class TestSupabaseJWTAuthentication:

    def test_no_header_is_anonymous(self):
        assert SupabaseJWTAuthentication().authenticate(RequestFactory().get('/')) is None

    def test_valid_token(self, mocker, user):
        load = mocker.patch('apps.core.authentication.load_user', return_value=user)
        token = make_token(user.id)

        result = SupabaseJWTAuthentication().authenticate(bearer(token))

        assert result == (user, token)
        load.assert_called_once_with(str(user.id))

    def test_expired_token(self, user):
        token = make_token(user.id, exp=int(time.time()) - 10)
        with pytest.raises(exceptions.AuthenticationFailed, match='Invalid or expired token'):
            SupabaseJWTAuthentication().authenticate(bearer(token))

    def test_wrong_audience(self, user):
        token = make_token(user.id, aud='anon')
        with pytest.raises(exceptions.AuthenticationFailed):
            SupabaseJWTAuthentication().authenticate(bearer(token))

    def test_wrong_secret(self, user):
        token = jwt.encode(
            {'sub': str(user.id), 'aud': 'authenticated', 'exp': int(time.time()) + 60},
            'some-other-secret-of-sufficient-length',
            algorithm='HS256',
        )
        with pytest.raises(exceptions.AuthenticationFailed):
            SupabaseJWTAuthentication().authenticate(bearer(token))

    def test_unknown_profile(self, mocker, user):
        mocker.patch('apps.core.authentication.load_user', return_value=None)
        with pytest.raises(exceptions.AuthenticationFailed, match='User not found'):
            SupabaseJWTAuthentication().authenticate(bearer(make_token(user.id)))


class TestAuthenticatedUser:

    def test_role_flags(self):
        coach = AuthenticatedUser(id=uuid.uuid4(), email='c@example.com', role='coach')
        assert coach.is_coach and coach.is_staff
        assert not coach.is_admin

    def test_participant_is_not_staff(self, user):
        assert user.is_participant
        assert not user.is_staff

    def test_get_user_context(self, user):
        request = RequestFactory().get('/')
        request.user = user
        assert get_user_context(request) is user
        request.user = None
        assert get_user_context(request) is None
