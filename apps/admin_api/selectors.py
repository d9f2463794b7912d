"""
Admin Selectors
"""
import logging
from datetime import date
from uuid import UUID

from apps.core.constants import AUDIT_LOG_LIMIT, ROLE_ADMIN, ROLE_COACH, ROLE_PARTICIPANT
from apps.core.models import AuditLog, Profile, UserRole
from apps.core.utils import display_name

logger = logging.getLogger(__name__)


def get_users_with_roles(search: str | None = None, role: str | None = None) -> list[dict]:
    """
    Every profile with its role and coach name, newest first.

    A profile without a user_roles row is a participant.
    """
    profiles = list(Profile.objects.search(search).order_by('-created_at'))
    roles = dict(UserRole.objects.values_list('user_id', 'role'))
    names = dict(Profile.objects.values_list('id', 'full_name'))

    users = []
    for profile in profiles:
        user_role = roles.get(profile.id) or ROLE_PARTICIPANT
        if role and role != 'all' and user_role != role:
            continue
        users.append({
            'id': str(profile.id),
            'full_name': profile.full_name,
            'email': profile.email,
            'phone': profile.phone,
            'avatar_url': profile.avatar_url,
            'batch_number': profile.batch_number,
            'unique_id': profile.unique_id,
            'assigned_coach_id': str(profile.assigned_coach_id) if profile.assigned_coach_id else None,
            'coach_name': names.get(profile.assigned_coach_id) if profile.assigned_coach_id else None,
            'role': user_role,
            'created_at': profile.created_at,
        })
    return users


def get_coaches() -> list[dict]:
    """Profiles that may be assigned as a coach (coaches and admins)."""
    return list(
        Profile.objects
        .filter(roles__role__in=[ROLE_COACH, ROLE_ADMIN])
        .distinct()
        .order_by('full_name')
        .values('id', 'full_name', 'email')
    )


def get_audit_logs(
    *,
    table_name: str | None = None,
    action: str | None = None,
    user_id: UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = AUDIT_LOG_LIMIT,
) -> list[dict]:
    """
    Latest audit rows, enriched with participant and actor names.

    Rows without an actor read 'System'.
    """
    qs = AuditLog.objects.all()
    if table_name and table_name != 'all':
        qs = qs.filter(table_name=table_name)
    if action and action != 'all':
        qs = qs.filter(action=action)
    if user_id:
        qs = qs.filter(user_id=user_id)
    if start_date:
        qs = qs.filter(created_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(created_at__date__lte=end_date)

    logs = list(qs.order_by('-created_at')[:min(limit, AUDIT_LOG_LIMIT)])
    people = {log.user_id for log in logs} | {log.changed_by for log in logs}
    names = dict(Profile.objects.filter(id__in=[p for p in people if p]).values_list('id', 'full_name'))

    return [
        {
            'id': str(log.id),
            'table_name': log.table_name,
            'record_id': str(log.record_id) if log.record_id else None,
            'action': log.action,
            'old_status': log.old_status,
            'new_status': log.new_status,
            'notes': log.notes,
            'created_at': log.created_at,
            'user_id': str(log.user_id) if log.user_id else None,
            'user_name': display_name(names.get(log.user_id)),
            'changed_by': str(log.changed_by) if log.changed_by else None,
            'changed_by_name': display_name(names.get(log.changed_by), 'System'),
        }
        for log in logs
    ]
