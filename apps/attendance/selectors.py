"""
Attendance Selectors
"""
from datetime import date
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.models import Attendance, Profile, Session, UserSessionCompletion
from apps.core.utils import display_name


def get_own_attendance(user_id: UUID):
    return Attendance.objects.filter(user_id=user_id).order_by('-date')


def get_active_sessions():
    return Session.objects.filter(is_active=True).order_by('scheduled_at')


def get_attendance_records(
    *,
    viewer: AuthenticatedUser,
    on: date | None = None,
    limit: int = 100,
):
    """Recent attendance rows for the participants the viewer can see."""
    qs = Attendance.objects.visible_to(viewer).select_related('user')
    if on:
        qs = qs.filter(date=on)
    return qs.order_by('-date', '-check_in_time')[:limit]


def get_today_record(user_id: UUID, on: date) -> Attendance | None:
    return (
        Attendance.objects
        .filter(user_id=user_id, date=on, attendance_type=Attendance.TYPE_DAILY)
        .first()
    )


def present_user_ids(on: date) -> set[str]:
    """Users with a daily row on the given date."""
    return {
        str(user_id)
        for user_id in Attendance.objects
        .filter(date=on, attendance_type=Attendance.TYPE_DAILY)
        .values_list('user_id', flat=True)
    }


def attendance_rows(start: date, end: date) -> list[dict]:
    """Flat rows for the attendance report, limited to [start, end]."""
    return list(
        Attendance.objects
        .filter(date__gte=start, date__lte=end)
        .values('user_id', 'date', 'attendance_type')
    )


def get_session_completions(user_id: UUID) -> list[dict]:
    """Completed sessions for one participant with the marker's name."""
    completions = list(UserSessionCompletion.objects.filter(user_id=user_id))
    marker_ids = {c.marked_by for c in completions if c.marked_by}
    names = dict(Profile.objects.filter(id__in=marker_ids).values_list('id', 'full_name'))
    return [
        {
            'id': str(c.id),
            'user_id': str(c.user_id),
            'session_type': c.session_type,
            'completed_at': c.completed_at,
            'marked_by': str(c.marked_by) if c.marked_by else None,
            'marked_by_name': display_name(names.get(c.marked_by), 'Admin'),
            'notes': c.notes,
        }
        for c in completions
    ]
