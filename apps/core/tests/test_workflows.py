"""
Workflow Unit Tests

Transition tables for enrollment, reviews and admin reopen.
"""
import pytest

from apps.core.workflows import (
    DOCUMENT_REVIEW_TRANSITIONS,
    TASK_REVIEW_TRANSITIONS,
    TRADE_REVIEW_TRANSITIONS,
    DocumentStatus,
    EnrollmentStatus,
    SetupStatus,
    TaskStatus,
    WorkflowError,
    can_participant_resubmit_enrollment,
    can_transition,
    next_enrollment_status_for_participant,
    reopen_target,
)


class TestEnrollmentWorkflow:

    def test_statuses_follow_the_enrollment_steps(self):
        assert list(EnrollmentStatus.values) == [
            'submitted',
            'documents_sent_to_user',
            'documents_sent_to_office',
            'completed',
        ]

    def test_participant_confirms_documents_sent(self):
        assert (
            next_enrollment_status_for_participant('documents_sent_to_user')
            == EnrollmentStatus.DOCUMENTS_SENT_TO_OFFICE
        )

    @pytest.mark.parametrize('current', ['submitted', 'documents_sent_to_office', 'completed', 'bogus'])
    def test_participant_cannot_move_from_other_statuses(self, current):
        with pytest.raises(WorkflowError) as exc_info:
            next_enrollment_status_for_participant(current)
        assert exc_info.value.current == current

    def test_resubmit_allowed_until_office_acts(self):
        assert can_participant_resubmit_enrollment(None)
        assert can_participant_resubmit_enrollment('submitted')
        assert not can_participant_resubmit_enrollment('documents_sent_to_user')
        assert not can_participant_resubmit_enrollment('completed')


class TestReviewTransitions:

    def test_new_record_may_take_any_status(self):
        assert can_transition(TASK_REVIEW_TRANSITIONS, None, TaskStatus.SUBMITTED)

    def test_rejected_task_can_be_resubmitted(self):
        assert can_transition(TASK_REVIEW_TRANSITIONS, 'rejected', TaskStatus.SUBMITTED)

    def test_verified_task_is_final(self):
        assert not can_transition(TASK_REVIEW_TRANSITIONS, 'verified', TaskStatus.SUBMITTED)

    def test_approved_document_is_final(self):
        assert not can_transition(DOCUMENT_REVIEW_TRANSITIONS, 'approved', DocumentStatus.PENDING)

    def test_decided_trade_is_final(self):
        assert can_transition(TRADE_REVIEW_TRANSITIONS, 'pending', 'approved')
        assert not can_transition(TRADE_REVIEW_TRANSITIONS, 'rejected', 'approved')

    def test_unknown_current_status_blocks(self):
        assert not can_transition(TASK_REVIEW_TRANSITIONS, 'archived', TaskStatus.SUBMITTED)


class TestReopen:

    @pytest.mark.parametrize('table,current,expected', [
        ('task_submissions', 'verified', TaskStatus.SUBMITTED),
        ('task_submissions', 'rejected', TaskStatus.SUBMITTED),
        ('documents', 'approved', DocumentStatus.PENDING),
        ('documents', 'rejected', DocumentStatus.PENDING),
        ('ecommerce_setups', 'completed', SetupStatus.IN_PROGRESS),
    ])
    def test_reopen_targets(self, table, current, expected):
        assert reopen_target(table, current) == expected

    @pytest.mark.parametrize('table,current', [
        ('task_submissions', 'submitted'),
        ('documents', 'pending'),
        ('ecommerce_setups', 'in_progress'),
    ])
    def test_undecided_records_cannot_reopen(self, table, current):
        with pytest.raises(WorkflowError, match='Cannot move from'):
            reopen_target(table, current)
