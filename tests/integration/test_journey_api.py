"""
Integration Tests for the Journey API

Stage ownership by role, enrollment workflow and batch session links.
"""
import pytest

from apps.core.models import EnrollmentSubmission, ParticipantProgress
from tests.factories import (
    EnrollmentSubmissionFactory,
    JourneyStageFactory,
    ParticipantProgressFactory,
    SpecialSessionLinkFactory,
)


@pytest.fixture
def stages(db):
    return {
        'orientation': JourneyStageFactory(name='Orientation', stage_order=1),
        'fees': JourneyStageFactory(name='Fees Paid', stage_order=2),
        'ecommerce': JourneyStageFactory(name='E-Commerce Setup', stage_order=3),
    }


def set_progress(client, participant, stage, status='completed'):
    return client.post(
        '/api/journey/progress',
        {'user_id': str(participant.id), 'stage_id': str(stage.id), 'status': status},
        format='json',
    )


@pytest.mark.django_db
class TestStageProgress:

    def test_coach_completes_coach_stage(self, coach_client, participant_profile, stages):
        response = set_progress(coach_client, participant_profile, stages['orientation'])

        assert response.status_code == 200
        progress = ParticipantProgress.objects.get(user=participant_profile, stage=stages['orientation'])
        assert progress.status == 'completed'
        assert progress.started_at is not None
        assert progress.completed_at is not None

    def test_coach_cannot_touch_fee_stage(self, coach_client, participant_profile, stages):
        response = set_progress(coach_client, participant_profile, stages['fees'])
        assert response.status_code == 403
        assert not ParticipantProgress.objects.exists()

    def test_finance_owns_fee_stage_only(self, client_for, finance_profile, participant_profile, stages):
        client = client_for(finance_profile)
        assert set_progress(client, participant_profile, stages['fees']).status_code == 200
        assert set_progress(client, participant_profile, stages['orientation']).status_code == 403

    def test_ecommerce_owns_ecommerce_stage(self, client_for, ecommerce_profile, participant_profile, stages):
        client = client_for(ecommerce_profile)
        assert set_progress(client, participant_profile, stages['ecommerce']).status_code == 200
        assert set_progress(client, participant_profile, stages['fees']).status_code == 403

    def test_admin_updates_any_stage(self, admin_client, participant_profile, stages):
        for stage in stages.values():
            assert set_progress(admin_client, participant_profile, stage).status_code == 200

    def test_back_to_not_started_clears_timestamps(self, admin_client, participant_profile, stages):
        ParticipantProgressFactory(user=participant_profile, stage=stages['orientation'], completed=True)

        set_progress(admin_client, participant_profile, stages['orientation'], 'not_started')

        progress = ParticipantProgress.objects.get(user=participant_profile, stage=stages['orientation'])
        assert progress.started_at is None
        assert progress.completed_at is None

    def test_participant_cannot_update_progress(self, participant_client, participant_profile, stages):
        response = set_progress(participant_client, participant_profile, stages['orientation'])
        assert response.status_code == 403

    def test_board_flags_follow_role(self, client_for, finance_profile, participant_profile, stages):
        response = client_for(finance_profile).get('/api/journey/stages', {'user_id': str(participant_profile.id)})
        assert response.status_code == 200
        flags = {row['name']: row['can_update'] for row in response.json()['stages']}
        assert flags == {'Orientation': False, 'Fees Paid': True, 'E-Commerce Setup': False}

        response = client_for(participant_profile).get('/api/journey/stages')
        flags = {row['name']: row['can_update'] for row in response.json()['stages']}
        assert flags == {'Orientation': False, 'Fees Paid': False, 'E-Commerce Setup': False}

    def test_bulk_complete(self, admin_client, participant_profile, stages):
        response = admin_client.post(
            '/api/journey/progress/bulk-complete',
            {'user_id': str(participant_profile.id), 'stage_ids': [str(s.id) for s in stages.values()]},
            format='json',
        )

        assert response.json()['processed'] == 3
        assert ParticipantProgress.objects.filter(user=participant_profile, status='completed').count() == 3

    def test_stats(self, participant_client, participant_profile, stages):
        ParticipantProgressFactory(user=participant_profile, stage=stages['orientation'], completed=True)

        stats = participant_client.get('/api/journey/stats').json()

        assert stats['completedStages'] == 1
        assert stats['totalStages'] == 3
        assert stats['overallProgress'] == 33


@pytest.mark.django_db
class TestEnrollment:

    def test_submit_enrollment(self, participant_client, participant_profile):
        response = participant_client.post(
            '/api/journey/enrollment',
            {'full_name': 'Asha Patil', 'city': 'Pune'},
            format='json',
        )

        assert response.status_code == 201
        enrollment = EnrollmentSubmission.objects.get(user=participant_profile)
        assert enrollment.status == 'submitted'
        assert enrollment.city == 'Pune'

    def test_cannot_resubmit_after_office_acts(self, participant_client, participant_profile):
        EnrollmentSubmissionFactory(user=participant_profile, status='documents_sent_to_user')
        response = participant_client.post('/api/journey/enrollment', {'full_name': 'Asha'}, format='json')
        assert response.status_code == 409

    def test_participant_confirms_documents_sent(self, participant_client, participant_profile):
        enrollment = EnrollmentSubmissionFactory(user=participant_profile, status='documents_sent_to_user')

        response = participant_client.post('/api/journey/enrollment/documents-sent')

        assert response.status_code == 200
        enrollment.refresh_from_db()
        assert enrollment.status == 'documents_sent_to_office'

    def test_documents_sent_requires_waiting_status(self, participant_client, participant_profile):
        EnrollmentSubmissionFactory(user=participant_profile, status='submitted')
        assert participant_client.post('/api/journey/enrollment/documents-sent').status_code == 409

    def test_staff_queue_and_status_update(self, coach_client, participant_profile, other_participant):
        enrollment = EnrollmentSubmissionFactory(user=participant_profile)
        EnrollmentSubmissionFactory(user=other_participant)

        queue = coach_client.get('/api/journey/enrollments').json()['enrollments']
        assert [row['id'] for row in queue] == [str(enrollment.id)]

        response = coach_client.patch(
            f'/api/journey/enrollments/{enrollment.id}',
            {'status': 'documents_sent_to_user'},
            format='json',
        )
        assert response.status_code == 200
        enrollment.refresh_from_db()
        assert enrollment.status == 'documents_sent_to_user'


@pytest.mark.django_db
class TestSpecialLinks:

    def test_links_for_batch_and_everyone(self, participant_client):
        everyone = SpecialSessionLinkFactory(target_batch=None)
        mine = SpecialSessionLinkFactory(target_batch='B1')
        SpecialSessionLinkFactory(target_batch='B2')
        SpecialSessionLinkFactory(target_batch='B1', is_active=False)

        links = participant_client.get('/api/journey/special-links').json()['links']

        assert {row['id'] for row in links} == {str(everyone.id), str(mine.id)}
