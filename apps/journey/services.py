"""
Journey Services

Stage progress writes and the enrollment workflow.
"""
import logging
from uuid import UUID

from django.utils import timezone

from apps.core.audit import record_audit
from apps.core.authentication import AuthenticatedUser
from apps.core.bulk import run_sequentially
from apps.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from apps.core.models import EnrollmentSubmission, JourneyStage, ParticipantProgress
from apps.core.permissions import can_mutate_stage
from apps.core.selectors import get_visible_profile
from apps.core.storage import upload_user_file
from apps.core.workflows import (
    EnrollmentStatus,
    ProgressStatus,
    WorkflowError,
    can_participant_resubmit_enrollment,
    next_enrollment_status_for_participant,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Stage progress
# =============================================================================

def set_stage_progress(
    *,
    actor: AuthenticatedUser,
    user_id: UUID,
    stage_id: UUID,
    status: str,
) -> ParticipantProgress:
    """
    Create or update a participant's progress on one stage.

    started_at is stamped when work starts, completed_at when the stage is
    completed. Moving back to not_started clears both.

    Raises:
        NotFoundError: unknown stage or participant
        PermissionDeniedError: the actor's role does not own this stage, or
            the participant is outside the actor's scope
    """
    stage = JourneyStage.objects.filter(id=stage_id).first()
    if stage is None:
        raise NotFoundError('Stage not found')
    if not can_mutate_stage(actor.role, stage.name):
        raise PermissionDeniedError(f'Your role cannot update the {stage.name} stage')
    get_visible_profile(actor, user_id)

    now = timezone.now()
    progress = ParticipantProgress.objects.filter(user_id=user_id, stage_id=stage_id).first()
    old_status = progress.status if progress else None

    if progress is None:
        progress = ParticipantProgress(user_id=user_id, stage_id=stage_id)

    progress.status = status
    if status == ProgressStatus.NOT_STARTED:
        progress.started_at = None
        progress.completed_at = None
    elif status == ProgressStatus.IN_PROGRESS:
        progress.started_at = progress.started_at or now
        progress.completed_at = None
    else:
        progress.started_at = progress.started_at or now
        progress.completed_at = now
    progress.save()

    record_audit(
        table_name='participant_progress',
        record_id=progress.id,
        action='status_changed',
        changed_by=actor.id,
        user_id=user_id,
        old_status=old_status,
        new_status=status,
        notes=stage.name,
    )
    logger.info(f'Stage {stage.name} for {user_id}: {old_status} -> {status} by {actor.id}')
    return progress


def bulk_complete_stages(*, actor: AuthenticatedUser, user_id: UUID, stage_ids: list[UUID]) -> int:
    """Mark several stages completed for one participant, one write per stage."""
    return run_sequentially(
        stage_ids,
        lambda stage_id: set_stage_progress(
            actor=actor,
            user_id=user_id,
            stage_id=stage_id,
            status=ProgressStatus.COMPLETED,
        ),
        label='complete stages',
    )


# =============================================================================
# Enrollment
# =============================================================================

ENROLLMENT_FIELDS = ['full_name', 'address', 'city', 'email', 'phone', 'date_of_birth', 'notes']


def submit_enrollment(*, user: AuthenticatedUser, data: dict, attachment=None) -> EnrollmentSubmission:
    """
    Participant submits (or resubmits) the enrollment form.

    The attachment is uploaded first; if the row write then fails the file
    stays in storage.

    Raises:
        ConflictError: the office has already moved the enrollment along
    """
    enrollment = EnrollmentSubmission.objects.filter(user_id=user.id).first()
    current = enrollment.status if enrollment else None
    if not can_participant_resubmit_enrollment(current):
        raise ConflictError(
            'Enrollment can no longer be edited',
            details={'status': current},
        )

    attachment_url = None
    if attachment is not None:
        attachment_url = upload_user_file('enrollment', user.id, attachment).public_url

    if enrollment is None:
        enrollment = EnrollmentSubmission(user_id=user.id)

    for field in ENROLLMENT_FIELDS:
        if field in data:
            setattr(enrollment, field, data[field])
    if attachment_url:
        enrollment.attachment_url = attachment_url
    enrollment.status = EnrollmentStatus.SUBMITTED
    enrollment.submitted_at = timezone.now()
    enrollment.updated_by = user.id
    enrollment.save()

    record_audit(
        table_name='enrollment_submissions',
        record_id=enrollment.id,
        action='submitted' if current is None else 'resubmitted',
        changed_by=user.id,
        user_id=user.id,
        old_status=current,
        new_status=EnrollmentStatus.SUBMITTED,
    )
    return enrollment


def mark_enrollment_documents_sent(*, user: AuthenticatedUser) -> EnrollmentSubmission:
    """
    Participant confirms they posted the signed papers back to the office.

    Raises:
        NotFoundError: no enrollment on file
        ConflictError: the enrollment is not waiting on the participant
    """
    enrollment = EnrollmentSubmission.objects.filter(user_id=user.id).first()
    if enrollment is None:
        raise NotFoundError('Enrollment not found')

    try:
        target = next_enrollment_status_for_participant(enrollment.status)
    except WorkflowError as e:
        raise ConflictError(str(e), details={'status': enrollment.status}) from e

    old_status = enrollment.status
    enrollment.status = target
    enrollment.updated_by = user.id
    enrollment.save(update_fields=['status', 'updated_by', 'updated_at'])

    record_audit(
        table_name='enrollment_submissions',
        record_id=enrollment.id,
        action='documents_sent',
        changed_by=user.id,
        user_id=user.id,
        old_status=old_status,
        new_status=target,
    )
    return enrollment


def update_enrollment_status(*, actor: AuthenticatedUser, enrollment_id: UUID, status: str) -> EnrollmentSubmission:
    """Staff set any enrollment status directly."""
    enrollment = EnrollmentSubmission.objects.filter(id=enrollment_id).select_related('user').first()
    if enrollment is None:
        raise NotFoundError('Enrollment not found')
    get_visible_profile(actor, enrollment.user_id)

    old_status = enrollment.status
    enrollment.status = status
    enrollment.updated_by = actor.id
    enrollment.save(update_fields=['status', 'updated_by', 'updated_at'])

    record_audit(
        table_name='enrollment_submissions',
        record_id=enrollment.id,
        action='status_changed',
        changed_by=actor.id,
        user_id=enrollment.user_id,
        old_status=old_status,
        new_status=status,
    )
    return enrollment
