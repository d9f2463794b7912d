"""
Status workflows for journey records.

Statuses are modelled as TextChoices with explicit transition tables.
Staff endpoints may still write any status directly; the tables gate the
participant self-service actions and the admin reopen action.
"""
from django.db import models


class ProgressStatus(models.TextChoices):
    NOT_STARTED = 'not_started', 'Not started'
    IN_PROGRESS = 'in_progress', 'In progress'
    COMPLETED = 'completed', 'Completed'


class TaskStatus(models.TextChoices):
    NOT_STARTED = 'not_started', 'Not started'
    IN_PROGRESS = 'in_progress', 'In progress'
    SUBMITTED = 'submitted', 'Submitted'
    VERIFIED = 'verified', 'Verified'
    REJECTED = 'rejected', 'Rejected'


class DocumentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    SUBMITTED = 'submitted', 'Submitted'
    UNDER_REVIEW = 'under_review', 'Under review'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class TradeStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'


class EnrollmentStatus(models.TextChoices):
    SUBMITTED = 'submitted', 'Submitted'
    DOCUMENTS_SENT_TO_USER = 'documents_sent_to_user', 'Documents sent to user'
    DOCUMENTS_SENT_TO_OFFICE = 'documents_sent_to_office', 'Documents sent to office'
    COMPLETED = 'completed', 'Completed'


class SetupStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    IN_PROGRESS = 'in_progress', 'In progress'
    COMPLETED = 'completed', 'Completed'


class WorkflowError(Exception):
    """Raised when a status change is not in the transition table."""

    def __init__(self, current: str | None, target: str):
        self.current = current
        self.target = target
        super().__init__(f'Cannot move from {current or "none"} to {target}')


# =============================================================================
# Enrollment
# =============================================================================

# The only move a participant may make on their own enrollment
ENROLLMENT_PARTICIPANT_TRANSITIONS = {
    EnrollmentStatus.DOCUMENTS_SENT_TO_USER: EnrollmentStatus.DOCUMENTS_SENT_TO_OFFICE,
}

# Statuses that appear in the coach review queue
ENROLLMENT_QUEUE_STATUSES = [
    EnrollmentStatus.SUBMITTED,
    EnrollmentStatus.DOCUMENTS_SENT_TO_OFFICE,
]


def next_enrollment_status_for_participant(current: str) -> str:
    """Return the status a participant action moves the enrollment to."""
    try:
        return ENROLLMENT_PARTICIPANT_TRANSITIONS[EnrollmentStatus(current)]
    except (KeyError, ValueError) as err:
        raise WorkflowError(current, EnrollmentStatus.DOCUMENTS_SENT_TO_OFFICE) from err


def can_participant_resubmit_enrollment(current: str | None) -> bool:
    """A participant may (re)submit the form until the office has the papers."""
    return current in (None, EnrollmentStatus.SUBMITTED)


# =============================================================================
# Review (tasks, documents, trades)
# =============================================================================

TASK_REVIEW_TRANSITIONS = {
    TaskStatus.NOT_STARTED: {TaskStatus.SUBMITTED},
    TaskStatus.IN_PROGRESS: {TaskStatus.SUBMITTED},
    TaskStatus.SUBMITTED: {TaskStatus.VERIFIED, TaskStatus.REJECTED, TaskStatus.SUBMITTED},
    TaskStatus.REJECTED: {TaskStatus.SUBMITTED},
    TaskStatus.VERIFIED: set(),
}

DOCUMENT_REVIEW_TRANSITIONS = {
    DocumentStatus.PENDING: {DocumentStatus.SUBMITTED, DocumentStatus.APPROVED, DocumentStatus.REJECTED},
    DocumentStatus.SUBMITTED: {DocumentStatus.UNDER_REVIEW, DocumentStatus.APPROVED, DocumentStatus.REJECTED},
    DocumentStatus.UNDER_REVIEW: {DocumentStatus.APPROVED, DocumentStatus.REJECTED},
    DocumentStatus.REJECTED: {DocumentStatus.PENDING, DocumentStatus.SUBMITTED},
    DocumentStatus.APPROVED: set(),
}

TRADE_REVIEW_TRANSITIONS = {
    TradeStatus.PENDING: {TradeStatus.APPROVED, TradeStatus.REJECTED},
    TradeStatus.APPROVED: set(),
    TradeStatus.REJECTED: set(),
}

# Corrections of a mistaken decision: back to the reviewable status
REOPEN_TRANSITIONS = {
    'task_submissions': ({TaskStatus.VERIFIED, TaskStatus.REJECTED}, TaskStatus.SUBMITTED),
    'documents': ({DocumentStatus.APPROVED, DocumentStatus.REJECTED}, DocumentStatus.PENDING),
    'ecommerce_setups': ({SetupStatus.COMPLETED}, SetupStatus.IN_PROGRESS),
}


def can_transition(table: dict, current: str | None, target: str) -> bool:
    """Check a move against one of the review transition tables."""
    if current is None:
        return True
    return target in table.get(current, set())


def reopen_target(table_name: str, current: str) -> str:
    """
    Return the status a reopen moves a record back to.

    Raises:
        WorkflowError: if the record is not in a reopenable state
    """
    sources, target = REOPEN_TRANSITIONS[table_name]
    if current not in sources:
        raise WorkflowError(current, target)
    return target
