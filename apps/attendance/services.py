"""
Attendance Services

Self check-in/out for participants and manual marking by staff.
"""
import logging
from datetime import date
from uuid import UUID

from django.utils import timezone

from apps.core.audit import record_audit
from apps.core.authentication import AuthenticatedUser
from apps.core.bulk import run_sequentially
from apps.core.exceptions import ConflictError, NotFoundError
from apps.core.models import Attendance, Session, UserSessionCompletion
from apps.core.selectors import get_scoped_participants, get_visible_profile
from apps.core.utils import today

from .selectors import get_today_record, present_user_ids

logger = logging.getLogger(__name__)


def check_in(*, user: AuthenticatedUser) -> Attendance:
    """
    Record today's daily attendance for the caller.

    Raises:
        ConflictError: already checked in today
    """
    on = today()
    if get_today_record(user.id, on) is not None:
        raise ConflictError('Already checked in today')

    record = Attendance.objects.create(
        user_id=user.id,
        date=on,
        attendance_type=Attendance.TYPE_DAILY,
        check_in_time=timezone.now(),
    )
    logger.info(f'{user.id} checked in for {on}')
    return record


def check_out(*, user: AuthenticatedUser) -> Attendance:
    """
    Close today's daily attendance row.

    Raises:
        NotFoundError: no check-in today
        ConflictError: already checked out
    """
    record = get_today_record(user.id, today())
    if record is None:
        raise NotFoundError('No check-in found for today')
    if record.check_out_time:
        raise ConflictError('Already checked out today')

    record.check_out_time = timezone.now()
    record.save(update_fields=['check_out_time'])
    return record


def _session_name(session_id: UUID | None) -> str | None:
    if not session_id:
        return None
    session = Session.objects.filter(id=session_id).first()
    if session is None:
        raise NotFoundError('Session not found')
    return session.name


def mark_attendance(
    *,
    actor: AuthenticatedUser,
    user_id: UUID,
    on: date,
    attendance_type: str = Attendance.TYPE_DAILY,
    session_id: UUID | None = None,
    session_name: str | None = None,
) -> Attendance:
    """Staff records attendance for one participant."""
    get_visible_profile(actor, user_id)
    if session_name is None and attendance_type == Attendance.TYPE_SESSION:
        session_name = _session_name(session_id)

    return Attendance.objects.create(
        user_id=user_id,
        date=on,
        attendance_type=attendance_type,
        session_name=session_name,
        check_in_time=timezone.now(),
    )


def delete_attendance(*, actor: AuthenticatedUser, attendance_id: UUID) -> None:
    record = Attendance.objects.filter(id=attendance_id).first()
    if record is None:
        raise NotFoundError('Attendance record not found')
    get_visible_profile(actor, record.user_id)
    record.delete()
    logger.info(f'Attendance {attendance_id} deleted by {actor.id}')


def bulk_mark_attendance(
    *,
    actor: AuthenticatedUser,
    user_ids: list[UUID],
    on: date,
    attendance_type: str = Attendance.TYPE_DAILY,
    session_id: UUID | None = None,
) -> int:
    """Mark the same attendance for several participants, one insert each."""
    session_name = _session_name(session_id) if attendance_type == Attendance.TYPE_SESSION else None
    return run_sequentially(
        user_ids,
        lambda user_id: mark_attendance(
            actor=actor,
            user_id=user_id,
            on=on,
            attendance_type=attendance_type,
            session_name=session_name,
        ),
        label='mark attendance',
    )


def mark_all_present(*, actor: AuthenticatedUser, on: date, batch_number: str | None = None) -> int:
    """
    Daily attendance for every visible participant not yet marked on `on`.

    Returns:
        Number of rows written; 0 when everyone is already marked
    """
    already = present_user_ids(on)
    missing = [
        profile.id
        for profile in get_scoped_participants(actor, batch_number)
        if str(profile.id) not in already
    ]
    if not missing:
        return 0
    return bulk_mark_attendance(actor=actor, user_ids=missing, on=on)


def toggle_session_completion(
    *,
    actor: AuthenticatedUser,
    user_id: UUID,
    session_type: str,
    notes: str | None = None,
) -> bool:
    """
    Flip a participant's completion of one session type.

    Returns:
        True when the session is now complete, False when it was cleared
    """
    get_visible_profile(actor, user_id)
    existing = UserSessionCompletion.objects.filter(user_id=user_id, session_type=session_type).first()

    if existing is not None:
        existing.delete()
        action, completed = 'session_incomplete', False
    else:
        existing = UserSessionCompletion.objects.create(
            user_id=user_id,
            session_type=session_type,
            completed_at=timezone.now(),
            marked_by=actor.id,
            notes=notes or None,
        )
        action, completed = 'session_complete', True

    record_audit(
        table_name='user_session_completions',
        record_id=existing.id,
        action=action,
        changed_by=actor.id,
        user_id=user_id,
        notes=session_type,
    )
    return completed
