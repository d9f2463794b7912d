"""
Integration Tests for the Tasks API

Submission, review, admin reopen and bulk approval against real rows.
"""
import uuid

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.core.models import AuditLog, TaskSubmission
from tests.factories import TaskFactory, TaskSubmissionFactory


@pytest.mark.django_db
class TestTaskCatalog:

    def test_lists_active_tasks_with_submission(self, participant_client, participant_profile):
        task = TaskFactory()
        TaskFactory(is_active=False)
        TaskSubmissionFactory(user=participant_profile, task=task, verified=True)

        response = participant_client.get('/api/tasks')

        assert response.status_code == 200
        data = response.json()
        assert data['total'] == 1
        assert data['completed'] == 1
        assert data['tasks'][0]['submission']['status'] == 'verified'

    def test_requires_authentication(self, api_client):
        assert api_client.get('/api/tasks').status_code in (401, 403)


@pytest.mark.django_db
class TestTaskSubmit:

    def test_submit_with_attachment(self, participant_client, mock_upload):
        task = TaskFactory()
        attachment = SimpleUploadedFile('proof.pdf', b'%PDF-1.4', content_type='application/pdf')

        response = participant_client.post(
            '/api/tasks/submit',
            {'task_id': str(task.id), 'notes': 'Done', 'attachment': attachment},
            format='multipart',
        )

        assert response.status_code == 201
        submission = response.json()['submission']
        assert submission['status'] == 'submitted'
        assert submission['attachment_url'].endswith('task_attachment.pdf')

    def test_notes_are_required(self, participant_client):
        task = TaskFactory()
        response = participant_client.post('/api/tasks/submit', {'task_id': str(task.id), 'notes': ''}, format='json')
        assert response.status_code == 400

    def test_rejected_task_can_be_resubmitted(self, participant_client, participant_profile):
        submission = TaskSubmissionFactory(user=participant_profile, status='rejected')

        response = participant_client.post(
            '/api/tasks/submit',
            {'task_id': str(submission.task_id), 'notes': 'Fixed it'},
            format='json',
        )

        assert response.status_code == 201
        submission.refresh_from_db()
        assert submission.status == 'submitted'
        assert submission.submission_notes == 'Fixed it'

    def test_verified_task_cannot_be_resubmitted(self, participant_client, participant_profile):
        submission = TaskSubmissionFactory(user=participant_profile, verified=True)

        response = participant_client.post(
            '/api/tasks/submit',
            {'task_id': str(submission.task_id), 'notes': 'Again'},
            format='json',
        )

        assert response.status_code == 409


@pytest.mark.django_db
class TestTaskReview:

    def test_coach_verifies_assigned_participant(self, coach_client, coach_profile, participant_profile):
        submission = TaskSubmissionFactory(user=participant_profile)

        response = coach_client.post(
            f'/api/tasks/submissions/{submission.id}/review',
            {'decision': 'approve', 'notes': 'Nice'},
            format='json',
        )

        assert response.status_code == 200
        submission.refresh_from_db()
        assert submission.status == 'verified'
        assert submission.verified_by == coach_profile.id
        assert AuditLog.objects.filter(record_id=submission.id, action='verified').exists()

    def test_coach_cannot_review_unassigned_participant(self, coach_client, other_participant):
        submission = TaskSubmissionFactory(user=other_participant)

        response = coach_client.post(
            f'/api/tasks/submissions/{submission.id}/review',
            {'decision': 'reject'},
            format='json',
        )

        assert response.status_code in (403, 404)
        submission.refresh_from_db()
        assert submission.status == 'submitted'

    def test_participant_cannot_review(self, participant_client, participant_profile):
        submission = TaskSubmissionFactory(user=participant_profile)
        response = participant_client.post(
            f'/api/tasks/submissions/{submission.id}/review',
            {'decision': 'approve'},
            format='json',
        )
        assert response.status_code == 403

    def test_review_queue_is_scoped_to_coach(self, coach_client, participant_profile, other_participant):
        mine = TaskSubmissionFactory(user=participant_profile)
        TaskSubmissionFactory(user=other_participant)

        response = coach_client.get('/api/tasks/submissions')

        ids = [row['id'] for row in response.json()['submissions']]
        assert ids == [str(mine.id)]


@pytest.mark.django_db
class TestTaskReopen:

    def test_admin_reopens_verified_task(self, admin_client, participant_profile):
        submission = TaskSubmissionFactory(user=participant_profile, verified=True)

        response = admin_client.post(f'/api/tasks/submissions/{submission.id}/reopen')

        assert response.status_code == 200
        submission.refresh_from_db()
        assert submission.status == 'submitted'
        assert submission.verified_by is None
        assert submission.verified_at is None
        assert submission.verification_notes is None

        history = admin_client.get(f'/api/tasks/submissions/{submission.id}/history').json()['history']
        assert history[0]['action'] == 'reopened'

    def test_pending_submission_cannot_be_reopened(self, admin_client, participant_profile):
        submission = TaskSubmissionFactory(user=participant_profile)
        response = admin_client.post(f'/api/tasks/submissions/{submission.id}/reopen')
        assert response.status_code == 409

    def test_coach_cannot_reopen(self, coach_client, participant_profile):
        submission = TaskSubmissionFactory(user=participant_profile, verified=True)
        response = coach_client.post(f'/api/tasks/submissions/{submission.id}/reopen')
        assert response.status_code == 403

    def test_unknown_submission(self, admin_client):
        response = admin_client.post(f'/api/tasks/submissions/{uuid.uuid4()}/reopen')
        assert response.status_code == 404


@pytest.mark.django_db
class TestAdminTaskCorrections:

    def test_submit_on_behalf_is_verified(self, admin_client, admin_profile, participant_profile):
        task = TaskFactory()

        response = admin_client.post(
            '/api/tasks/submit-on-behalf',
            {'user_id': str(participant_profile.id), 'task_id': str(task.id)},
            format='json',
        )

        assert response.status_code == 201
        submission = TaskSubmission.objects.get(user=participant_profile, task=task)
        assert submission.status == 'verified'
        assert submission.verified_by == admin_profile.id
        assert submission.submission_notes == 'Submitted by admin on behalf of user'

    def test_bulk_approve_creates_missing_submissions(self, admin_client, participant_profile):
        existing = TaskSubmissionFactory(user=participant_profile, submission_notes='Mine')
        new_task = TaskFactory()

        response = admin_client.post(
            '/api/tasks/bulk-approve',
            {'user_id': str(participant_profile.id), 'task_ids': [str(existing.task_id), str(new_task.id)]},
            format='json',
        )

        assert response.status_code == 200
        assert response.json()['processed'] == 2
        existing.refresh_from_db()
        assert existing.status == 'verified'
        assert existing.submission_notes == 'Mine'
        created = TaskSubmission.objects.get(user=participant_profile, task=new_task)
        assert created.submission_notes == 'Bulk submitted by admin'
