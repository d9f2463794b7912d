"""
Journey Selectors

Read queries for the journey page: stage catalog with a participant's
progress, the participant's headline stats, batch session links and the
enrollment review queue.
"""
import logging
from uuid import UUID

from django.db.models import Q

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import REQUIRED_DOCUMENTS_PER_PARTICIPANT
from apps.core.models import (
    Document,
    EnrollmentSubmission,
    JourneyStage,
    ParticipantProgress,
    SpecialSessionLink,
    Task,
    TaskSubmission,
)
from apps.core.permissions import can_mutate_stage
from apps.core.workflows import ENROLLMENT_QUEUE_STATUSES, ProgressStatus
from services.base import percent

logger = logging.getLogger(__name__)


def get_active_stages():
    return JourneyStage.objects.filter(is_active=True).order_by('stage_order')


def get_stage_board(*, viewer: AuthenticatedUser, participant_id: UUID) -> list[dict]:
    """
    Active stages with the participant's progress on each.

    Each entry carries `can_update`, the advisory flag telling the client
    whether the viewer's role may change that stage.
    """
    progress_by_stage = {
        p.stage_id: p
        for p in ParticipantProgress.objects.filter(user_id=participant_id)
    }

    board = []
    for stage in get_active_stages():
        progress = progress_by_stage.get(stage.id)
        board.append({
            'id': str(stage.id),
            'name': stage.name,
            'description': stage.description,
            'stage_order': stage.stage_order,
            'status': progress.status if progress else ProgressStatus.NOT_STARTED,
            'progress_id': str(progress.id) if progress else None,
            'started_at': progress.started_at if progress else None,
            'completed_at': progress.completed_at if progress else None,
            'can_update': can_mutate_stage(viewer.role, stage.name),
        })
    return board


def get_journey_stats(participant_id: UUID) -> dict:
    """Headline numbers shown above the journey timeline."""
    total_stages = get_active_stages().count()
    completed_stages = ParticipantProgress.objects.filter(
        user_id=participant_id,
        status=ProgressStatus.COMPLETED,
        stage__is_active=True,
    ).count()
    total_tasks = Task.objects.filter(is_active=True).count()
    completed_tasks = TaskSubmission.objects.filter(user_id=participant_id, status='verified').count()
    documents_approved = Document.objects.filter(user_id=participant_id, status='approved').count()

    return {
        'completedStages': completed_stages,
        'totalStages': total_stages,
        'completedTasks': completed_tasks,
        'totalTasks': total_tasks,
        'documentsApproved': documents_approved,
        'totalDocuments': REQUIRED_DOCUMENTS_PER_PARTICIPANT,
        'overallProgress': percent(completed_stages, total_stages),
    }


def get_special_links(batch_number: str | None):
    """Active links targeted at everyone or at the given batch."""
    batch_filter = Q(target_batch__isnull=True)
    if batch_number:
        batch_filter |= Q(target_batch=batch_number)
    return SpecialSessionLink.objects.filter(batch_filter, is_active=True).order_by('-created_at')


def get_enrollment(user_id: UUID) -> EnrollmentSubmission | None:
    return EnrollmentSubmission.objects.filter(user_id=user_id).first()


def get_enrollment_queue(*, viewer: AuthenticatedUser, status: str | None = None):
    """
    Enrollment submissions for staff review.

    Without a status filter the queue holds submissions waiting on the
    office (newly submitted or papers received back).
    """
    qs = EnrollmentSubmission.objects.visible_to(viewer).select_related('user')
    if status and status != 'all':
        qs = qs.filter(status=status)
    elif not status:
        qs = qs.filter(status__in=ENROLLMENT_QUEUE_STATUSES)
    return qs.order_by('-submitted_at')
