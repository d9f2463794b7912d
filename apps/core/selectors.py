"""
Shared profile lookups with role scoping.
"""
from uuid import UUID

from .authentication import AuthenticatedUser
from .exceptions import NotFoundError, PermissionDeniedError
from .models import Profile, UserRole
from .permissions import can_view_participant


def get_profile(profile_id: UUID) -> Profile:
    profile = Profile.objects.filter(id=profile_id).first()
    if profile is None:
        raise NotFoundError('Profile not found')
    return profile


def get_visible_profile(user: AuthenticatedUser, profile_id: UUID) -> Profile:
    """
    Load a participant the caller may act on.

    Raises:
        NotFoundError: no such profile
        PermissionDeniedError: a coach asking for someone else's participant,
            or a participant asking for another user
    """
    profile = get_profile(profile_id)
    if not can_view_participant(user, profile.id, profile.assigned_coach_id):
        raise PermissionDeniedError()
    return profile


def get_scoped_participants(user: AuthenticatedUser, batch_number: str | None = None):
    """Participant profiles visible to the caller, ordered by name."""
    return (
        Profile.objects
        .participants()
        .visible_to(user)
        .in_batch(batch_number)
        .order_by('full_name')
    )


def profile_rows(queryset) -> list[dict]:
    """Flat dict rows for the report services."""
    return list(queryset.values('id', 'full_name', 'email', 'phone', 'batch_number', 'unique_id', 'assigned_coach_id', 'created_at'))


def role_of(user_id: UUID) -> str | None:
    return UserRole.objects.filter(user_id=user_id).values_list('role', flat=True).first()
