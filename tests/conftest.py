"""
Pytest Configuration for the Journey Backend Tests

Key Features:
- Enables managed=True for unmanaged models during tests
- Provides one profile per role and API clients authenticated as them
- Factories live in tests/factories
"""
import pytest
from django.apps import apps
from rest_framework.test import APIClient

from apps.core.authentication import load_user


# =============================================================================
# Database Setup - Enable managed=True for unmanaged models
# =============================================================================

@pytest.fixture(scope='session')
def django_db_setup(django_db_setup, django_db_blocker):
    """
    Enable managed=True for all models and build their tables.
    The models normally point at existing Supabase tables (managed=False).
    """
    with django_db_blocker.unblock():
        for model in apps.get_models():
            if not model._meta.managed:
                model._meta.managed = True

        from django.core.management import call_command

        call_command('migrate', '--run-syncdb', verbosity=0)


# =============================================================================
# Role profiles
# =============================================================================

def _profile_with_role(role: str | None, **kwargs):
    from tests.factories import ProfileFactory, UserRoleFactory

    profile = ProfileFactory(**kwargs)
    if role:
        UserRoleFactory(user=profile, role=role)
    return profile


@pytest.fixture
def admin_profile(db):
    return _profile_with_role('admin', full_name='Admin User', batch_number=None)


@pytest.fixture
def coach_profile(db):
    return _profile_with_role('coach', full_name='Coach User', batch_number=None)


@pytest.fixture
def finance_profile(db):
    return _profile_with_role('finance', full_name='Finance User', batch_number=None)


@pytest.fixture
def ecommerce_profile(db):
    return _profile_with_role('ecommerce', full_name='Store User', batch_number=None)


@pytest.fixture
def participant_profile(db, coach_profile):
    """A participant in batch B1 assigned to coach_profile."""
    return _profile_with_role(None, full_name='Asha Patil', batch_number='B1', assigned_coach=coach_profile)


@pytest.fixture
def other_participant(db):
    """A participant in batch B2 with no coach."""
    return _profile_with_role(None, full_name='Ravi Kumar', batch_number='B2')


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Basic API client without authentication."""
    return APIClient()


@pytest.fixture
def client_for(db):
    """
    Build an APIClient authenticated as a stored profile.

    The AuthenticatedUser is loaded the same way the JWT authenticator
    does it, so the role comes from user_roles.
    """
    def _client(profile):
        client = APIClient()
        client.force_authenticate(user=load_user(profile.id))
        return client
    return _client


@pytest.fixture
def admin_client(client_for, admin_profile):
    return client_for(admin_profile)


@pytest.fixture
def coach_client(client_for, coach_profile):
    return client_for(coach_profile)


@pytest.fixture
def participant_client(client_for, participant_profile):
    return client_for(participant_profile)


@pytest.fixture
def mock_upload(mocker):
    """
    Replace Supabase Storage uploads with a fixed public URL.

    Services import upload_user_file by name, so each one is patched.
    """
    from apps.core.storage import UploadResult

    def _fake_upload(kind, user_id, uploaded_file, **kwargs):
        return UploadResult(
            success=True,
            bucket='documents',
            storage_path=f'{user_id}/{kind}.pdf',
            public_url=f'http://localhost:54321/storage/v1/object/public/documents/{user_id}/{kind}.pdf',
            size=uploaded_file.size,
        )

    targets = [
        'apps.tasks.services.upload_user_file',
        'apps.documents.services.upload_user_file',
        'apps.trades.services.upload_user_file',
        'apps.journey.services.upload_user_file',
        'apps.settings_api.services.upload_user_file',
    ]
    return [mocker.patch(target, side_effect=_fake_upload) for target in targets]
