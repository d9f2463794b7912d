"""
Task Services

Participant submissions, reviewer decisions and the admin corrections
(reopen, submit on behalf, bulk approve).
"""
import logging
from uuid import UUID

from django.utils import timezone

from apps.core.audit import record_audit
from apps.core.authentication import AuthenticatedUser
from apps.core.bulk import run_sequentially
from apps.core.exceptions import ConflictError, NotFoundError
from apps.core.models import Task, TaskSubmission
from apps.core.selectors import get_visible_profile
from apps.core.storage import upload_user_file
from apps.core.workflows import (
    TASK_REVIEW_TRANSITIONS,
    TaskStatus,
    WorkflowError,
    can_transition,
    reopen_target,
)

from .selectors import get_submission

logger = logging.getLogger(__name__)

ON_BEHALF_SUBMISSION_NOTES = 'Submitted by admin on behalf of user'
ON_BEHALF_VERIFICATION_NOTES = 'Auto-verified - submitted by admin'
BULK_SUBMISSION_NOTES = 'Bulk submitted by admin'
BULK_VERIFICATION_NOTES = 'Bulk approved by admin'


def _load_submission(submission_id: UUID) -> TaskSubmission:
    submission = get_submission(submission_id)
    if submission is None:
        raise NotFoundError('Task submission not found')
    return submission


def submit_task(
    *,
    user: AuthenticatedUser,
    task_id: UUID,
    notes: str,
    attachment=None,
) -> TaskSubmission:
    """
    Participant submits a task for review.

    A rejected task may be resubmitted; a verified one may not.

    Raises:
        NotFoundError: unknown or inactive task
        ConflictError: the submission is already verified
    """
    if not Task.objects.filter(id=task_id, is_active=True).exists():
        raise NotFoundError('Task not found')

    submission = TaskSubmission.objects.filter(user_id=user.id, task_id=task_id).first()
    current = submission.status if submission else None
    if not can_transition(TASK_REVIEW_TRANSITIONS, current, TaskStatus.SUBMITTED):
        raise ConflictError('Task has already been verified', details={'status': current})

    attachment_url = None
    if attachment is not None:
        attachment_url = upload_user_file('task_attachment', user.id, attachment, task_id=task_id).public_url

    if submission is None:
        submission = TaskSubmission(user_id=user.id, task_id=task_id)

    submission.submission_notes = notes
    if attachment_url:
        submission.attachment_url = attachment_url
    submission.status = TaskStatus.SUBMITTED
    submission.submitted_at = timezone.now()
    submission.save()

    record_audit(
        table_name='task_submissions',
        record_id=submission.id,
        action='submitted',
        changed_by=user.id,
        user_id=user.id,
        old_status=current,
        new_status=TaskStatus.SUBMITTED,
    )
    return submission


def review_task_submission(
    *,
    actor: AuthenticatedUser,
    submission_id: UUID,
    decision: str,
    notes: str | None = None,
) -> TaskSubmission:
    """Verify or reject a submission."""
    submission = _load_submission(submission_id)
    get_visible_profile(actor, submission.user_id)

    old_status = submission.status
    submission.status = TaskStatus.VERIFIED if decision == 'approve' else TaskStatus.REJECTED
    submission.verified_by = actor.id
    submission.verified_at = timezone.now()
    submission.verification_notes = notes or None
    submission.save()

    record_audit(
        table_name='task_submissions',
        record_id=submission.id,
        action=submission.status,
        changed_by=actor.id,
        user_id=submission.user_id,
        old_status=old_status,
        new_status=submission.status,
        notes=notes,
    )
    return submission


def reopen_task_submission(*, actor: AuthenticatedUser, submission_id: UUID) -> TaskSubmission:
    """
    Admin correction: send a decided submission back to review.

    Clears verified_by, verified_at and verification_notes.

    Raises:
        ConflictError: the submission has not been decided yet
    """
    submission = _load_submission(submission_id)
    old_status = submission.status
    try:
        target = reopen_target('task_submissions', old_status)
    except WorkflowError as e:
        raise ConflictError(str(e), details={'status': old_status}) from e

    submission.status = target
    submission.verified_by = None
    submission.verified_at = None
    submission.verification_notes = None
    submission.save()

    record_audit(
        table_name='task_submissions',
        record_id=submission.id,
        action='reopened',
        changed_by=actor.id,
        user_id=submission.user_id,
        old_status=old_status,
        new_status=target,
    )
    logger.info(f'Task submission {submission.id} reopened by {actor.id}')
    return submission


def _write_verified(
    *,
    actor: AuthenticatedUser,
    user_id: UUID,
    task_id: UUID,
    submission_notes: str,
    verification_notes: str,
    overwrite_notes: bool,
) -> TaskSubmission:
    now = timezone.now()
    submission = TaskSubmission.objects.filter(user_id=user_id, task_id=task_id).first()
    old_status = submission.status if submission else None

    if submission is None:
        submission = TaskSubmission(
            user_id=user_id,
            task_id=task_id,
            submission_notes=submission_notes,
            submitted_at=now,
        )
    elif overwrite_notes:
        submission.submission_notes = submission_notes
        submission.submitted_at = now

    submission.status = TaskStatus.VERIFIED
    submission.verified_by = actor.id
    submission.verified_at = now
    submission.verification_notes = verification_notes
    submission.save()

    record_audit(
        table_name='task_submissions',
        record_id=submission.id,
        action='verified',
        changed_by=actor.id,
        user_id=user_id,
        old_status=old_status,
        new_status=TaskStatus.VERIFIED,
        notes=verification_notes,
    )
    return submission


def submit_task_on_behalf(
    *,
    actor: AuthenticatedUser,
    user_id: UUID,
    task_id: UUID,
    notes: str | None = None,
) -> TaskSubmission:
    """Admin completes a task for a participant; the result is verified at once."""
    get_visible_profile(actor, user_id)
    if not Task.objects.filter(id=task_id).exists():
        raise NotFoundError('Task not found')

    return _write_verified(
        actor=actor,
        user_id=user_id,
        task_id=task_id,
        submission_notes=notes or ON_BEHALF_SUBMISSION_NOTES,
        verification_notes=ON_BEHALF_VERIFICATION_NOTES,
        overwrite_notes=True,
    )


def bulk_approve_tasks(*, actor: AuthenticatedUser, user_id: UUID, task_ids: list[UUID]) -> int:
    """
    Verify several tasks for one participant, creating submissions where
    none exist. One write per task, no transaction.
    """
    get_visible_profile(actor, user_id)
    return run_sequentially(
        task_ids,
        lambda task_id: _write_verified(
            actor=actor,
            user_id=user_id,
            task_id=task_id,
            submission_notes=BULK_SUBMISSION_NOTES,
            verification_notes=BULK_VERIFICATION_NOTES,
            overwrite_notes=False,
        ),
        label='approve tasks',
    )
