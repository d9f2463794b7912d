"""
Admin Services

User management: roles, coach assignment, batch moves and unique id
regeneration. Every change leaves an audit row.
"""
import logging
from uuid import UUID

from django.db import DatabaseError

from apps.core.audit import record_audit
from apps.core.authentication import AuthenticatedUser
from apps.core.bulk import run_sequentially
from apps.core.constants import ROLE_ADMIN, ROLE_COACH
from apps.core.exceptions import UpstreamError, ValidationError
from apps.core.models import Profile, UserRole
from apps.core.selectors import get_profile, role_of

logger = logging.getLogger(__name__)


def update_user_role(*, actor: AuthenticatedUser, user_id: UUID, role: str) -> str:
    """
    Give a user exactly one role, replacing whatever they had.

    Raises:
        NotFoundError: unknown user
        ValidationError: an admin tried to demote themselves
    """
    profile = get_profile(user_id)
    if profile.id == actor.id and role != ROLE_ADMIN:
        raise ValidationError('You cannot remove your own admin role')

    old_role = role_of(profile.id)
    UserRole.objects.filter(user_id=profile.id).exclude(role=role).delete()
    UserRole.objects.get_or_create(user_id=profile.id, role=role)

    record_audit(
        table_name='user_roles',
        record_id=profile.id,
        action='role_changed',
        changed_by=actor.id,
        user_id=profile.id,
        old_status=old_role,
        new_status=role,
    )
    logger.info(f'Role for {profile.id}: {old_role} -> {role} by {actor.id}')
    return role


def assign_coach(*, actor: AuthenticatedUser, user_id: UUID, coach_id: UUID | None) -> Profile:
    """
    Point a participant at a coach, or clear the assignment with None.

    Raises:
        ValidationError: the chosen profile is neither coach nor admin
    """
    profile = get_profile(user_id)
    if coach_id is not None:
        get_profile(coach_id)
        if not UserRole.objects.filter(user_id=coach_id, role__in=[ROLE_COACH, ROLE_ADMIN]).exists():
            raise ValidationError('Selected user is not a coach', details={'coach_id': str(coach_id)})

    old_coach = profile.assigned_coach_id
    profile.assigned_coach_id = coach_id
    profile.save(update_fields=['assigned_coach', 'updated_at'])

    record_audit(
        table_name='profiles',
        record_id=profile.id,
        action='coach_assigned',
        changed_by=actor.id,
        user_id=profile.id,
        old_status=str(old_coach) if old_coach else None,
        new_status=str(coach_id) if coach_id else None,
    )
    return profile


def _set_batch(actor: AuthenticatedUser, user_id: UUID, batch_number: str | None) -> Profile:
    profile = get_profile(user_id)
    old_batch = profile.batch_number
    profile.batch_number = batch_number
    profile.save(update_fields=['batch_number', 'updated_at'])

    record_audit(
        table_name='profiles',
        record_id=profile.id,
        action='batch_changed',
        changed_by=actor.id,
        user_id=profile.id,
        old_status=old_batch,
        new_status=batch_number,
    )
    return profile


def update_batches(*, actor: AuthenticatedUser, user_ids: list[UUID], batch_number: str | None) -> int:
    """Move several users into one batch (empty string clears it). One write per user."""
    batch_number = (batch_number or '').strip() or None
    return run_sequentially(
        user_ids,
        lambda user_id: _set_batch(actor, user_id, batch_number),
        label='update batches',
    )


def regenerate_unique_id(*, actor: AuthenticatedUser, user_id: UUID) -> str | None:
    """
    Issue a new unique_id through the database function.

    Raises:
        UpstreamError: the database function failed
    """
    profile = get_profile(user_id)
    old_id = profile.unique_id
    try:
        new_id = profile.regenerate_unique_id()
    except DatabaseError as e:
        logger.error(f'regenerate_unique_id failed for {profile.id}: {e}')
        raise UpstreamError('Could not regenerate unique id') from e

    record_audit(
        table_name='profiles',
        record_id=profile.id,
        action='unique_id_regenerated',
        changed_by=actor.id,
        user_id=profile.id,
        old_status=old_id,
        new_status=new_id,
    )
    return new_id
