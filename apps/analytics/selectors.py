"""
Analytics Selectors

Fetch the flat row sets the report services aggregate. Every fetch is
scoped to the participants the viewer can see; aggregation itself lives
in services/.
"""
import logging
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.models import (
    Attendance,
    Document,
    ECommerceSetup,
    JourneyStage,
    ParticipantProgress,
    Profile,
    Task,
    TaskSubmission,
    Trade,
)
from apps.core.selectors import get_scoped_participants, profile_rows

logger = logging.getLogger(__name__)

PROGRESS_FIELDS = ('id', 'user_id', 'stage_id', 'status', 'started_at', 'completed_at')
SUBMISSION_FIELDS = ('id', 'user_id', 'task_id', 'status', 'submitted_at', 'verified_at')
DOCUMENT_FIELDS = ('id', 'user_id', 'document_type', 'document_name', 'status', 'submitted_at')
TRADE_FIELDS = (
    'id', 'user_id', 'trade_type', 'product_service', 'amount', 'country', 'status', 'trade_date',
)
ATTENDANCE_FIELDS = ('id', 'user_id', 'date', 'attendance_type', 'session_name', 'check_in_time')
SETUP_FIELDS = ('id', 'user_id', 'store_name', 'platform', 'status', 'created_at', 'completed_at')

# Model and column list behind each custom report data source
SOURCE_TABLES = {
    'task_submissions': (TaskSubmission, SUBMISSION_FIELDS),
    'documents': (Document, DOCUMENT_FIELDS),
    'trades': (Trade, TRADE_FIELDS),
    'attendance': (Attendance, ATTENDANCE_FIELDS),
    'participant_progress': (ParticipantProgress, PROGRESS_FIELDS),
    'ecommerce_setups': (ECommerceSetup, SETUP_FIELDS),
}


def stage_rows() -> list[dict]:
    return list(
        JourneyStage.objects
        .filter(is_active=True)
        .order_by('stage_order')
        .values('id', 'name', 'stage_order')
    )


def task_rows() -> list[dict]:
    return list(Task.objects.filter(is_active=True).values('id', 'title', 'stage_id'))


def scoped_rows(model, fields, viewer: AuthenticatedUser, user_ids=None) -> list[dict]:
    qs = model.objects.visible_to(viewer)
    if user_ids is not None:
        qs = qs.for_users(user_ids)
    return list(qs.values(*fields))


def get_program_rows(viewer: AuthenticatedUser, batch_number: str | None = None) -> dict:
    """
    Every row set the program analytics need.

    Returns:
        Dict with participants, stages, progress, tasks, submissions,
        documents, trades and attendance row lists
    """
    participants = profile_rows(get_scoped_participants(viewer, batch_number))
    return {
        'participants': participants,
        'stages': stage_rows(),
        'progress': scoped_rows(ParticipantProgress, PROGRESS_FIELDS, viewer),
        'tasks': task_rows(),
        'submissions': scoped_rows(TaskSubmission, SUBMISSION_FIELDS, viewer),
        'documents': scoped_rows(Document, DOCUMENT_FIELDS, viewer),
        'trades': scoped_rows(Trade, TRADE_FIELDS, viewer),
        'attendance': scoped_rows(Attendance, ATTENDANCE_FIELDS, viewer),
    }


def get_comparison_rows(viewer: AuthenticatedUser, user_ids: list[UUID]) -> dict:
    """Rows for the selected participants, in the order they were picked."""
    by_id = {
        str(row['id']): row
        for row in profile_rows(Profile.objects.visible_to(viewer).filter(id__in=user_ids))
    }
    return {
        'participants': [by_id[str(uid)] for uid in user_ids if str(uid) in by_id],
        'progress': scoped_rows(ParticipantProgress, PROGRESS_FIELDS, viewer, user_ids),
        'submissions': scoped_rows(TaskSubmission, SUBMISSION_FIELDS, viewer, user_ids),
        'documents': scoped_rows(Document, DOCUMENT_FIELDS, viewer, user_ids),
        'trades': scoped_rows(Trade, TRADE_FIELDS, viewer, user_ids),
        'total_stages': JourneyStage.objects.count(),
        'total_tasks': Task.objects.count(),
    }


def get_source_rows(viewer: AuthenticatedUser, source: str) -> list[dict]:
    """Raw rows of one custom report data source."""
    if source == 'profiles':
        return profile_rows(get_scoped_participants(viewer))
    model, fields = SOURCE_TABLES[source]
    return scoped_rows(model, fields, viewer)


def get_dashboard_rows(user_id: UUID) -> dict:
    """One participant's own rows for the dashboard cards."""
    return {
        'progress': list(ParticipantProgress.objects.filter(user_id=user_id).values('status')),
        'submissions': list(TaskSubmission.objects.filter(user_id=user_id).values('status')),
        'documents': list(Document.objects.filter(user_id=user_id).values('status')),
        'trades': list(Trade.objects.filter(user_id=user_id).values('status', 'amount')),
        'attendance_count': Attendance.objects.filter(user_id=user_id).count(),
    }
