"""
Coach Selectors

Review queues and the rows behind the facilitator summary, both limited
to the coach's assigned participants (every participant for admins).
"""
from apps.core.authentication import AuthenticatedUser
from apps.core.models import (
    Document,
    EnrollmentSubmission,
    JourneyStage,
    ParticipantProgress,
    TaskSubmission,
    Trade,
)
from apps.core.selectors import get_scoped_participants, profile_rows
from apps.core.workflows import (
    DocumentStatus,
    EnrollmentStatus,
    TaskStatus,
    TradeStatus,
)
from apps.documents.selectors import get_documents
from apps.journey.selectors import get_enrollment_queue
from apps.tasks.selectors import get_submissions
from apps.trades.selectors import get_trades


def get_review_queues(viewer: AuthenticatedUser) -> dict:
    """Everything waiting on the viewer, one queryset per record type."""
    return {
        'participants': get_scoped_participants(viewer),
        'tasks': get_submissions(viewer=viewer, status=TaskStatus.SUBMITTED),
        'documents': get_documents(viewer=viewer, status=DocumentStatus.SUBMITTED),
        'trades': get_trades(viewer=viewer, status=TradeStatus.PENDING),
        'enrollments': get_enrollment_queue(viewer=viewer),
    }


def get_facilitator_rows(viewer: AuthenticatedUser) -> dict:
    participants = profile_rows(get_scoped_participants(viewer))
    user_ids = [p['id'] for p in participants]

    def pending(model, status):
        return list(model.objects.for_users(user_ids).filter(status=status).values('id', 'user_id'))

    return {
        'participants': participants,
        'stages': list(JourneyStage.objects.filter(is_active=True).values('id', 'stage_order')),
        'progress': list(
            ParticipantProgress.objects
            .for_users(user_ids)
            .values('user_id', 'stage_id', 'status')
        ),
        'pending_tasks': pending(TaskSubmission, TaskStatus.SUBMITTED),
        'pending_documents': pending(Document, DocumentStatus.SUBMITTED),
        'pending_trades': pending(Trade, TradeStatus.PENDING),
        'pending_enrollments': pending(EnrollmentSubmission, EnrollmentStatus.SUBMITTED),
    }
