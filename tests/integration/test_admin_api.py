"""
Integration Tests for the Admin API

Role changes, coach assignment, batch moves, unique ids and the audit log.
"""
import pytest
from django.db import DatabaseError

from apps.core.models import AuditLog, Profile, UserRole
from tests.factories import AuditLogFactory


@pytest.mark.django_db
class TestUserList:

    def test_lists_users_with_roles(self, admin_client, admin_profile, participant_profile, coach_profile):
        data = admin_client.get('/api/admin/users').json()

        roles = {row['id']: row['role'] for row in data['users']}
        assert roles[str(participant_profile.id)] == 'participant'
        assert roles[str(coach_profile.id)] == 'coach'
        assert {c['id'] for c in data['coaches']} >= {str(coach_profile.id), str(admin_profile.id)}

    def test_role_filter(self, admin_client, participant_profile, coach_profile):
        data = admin_client.get('/api/admin/users', {'role': 'coach'}).json()
        assert [row['id'] for row in data['users']] == [str(coach_profile.id)]

    def test_non_admin_forbidden(self, coach_client):
        assert coach_client.get('/api/admin/users').status_code == 403


@pytest.mark.django_db
class TestRoleManagement:

    def test_promote_participant_to_coach(self, admin_client, admin_profile, participant_profile):
        response = admin_client.patch(
            f'/api/admin/users/{participant_profile.id}/role',
            {'role': 'coach'},
            format='json',
        )

        assert response.status_code == 200
        assert list(UserRole.objects.filter(user=participant_profile).values_list('role', flat=True)) == ['coach']
        audit = AuditLog.objects.get(table_name='user_roles', record_id=participant_profile.id)
        assert audit.action == 'role_changed'
        assert audit.new_status == 'coach'
        assert audit.changed_by == admin_profile.id

    def test_role_change_replaces_existing_role(self, admin_client, coach_profile):
        admin_client.patch(f'/api/admin/users/{coach_profile.id}/role', {'role': 'finance'}, format='json')
        assert list(UserRole.objects.filter(user=coach_profile).values_list('role', flat=True)) == ['finance']

    def test_admin_cannot_demote_self(self, admin_client, admin_profile):
        response = admin_client.patch(f'/api/admin/users/{admin_profile.id}/role', {'role': 'coach'}, format='json')

        assert response.status_code == 400
        assert UserRole.objects.filter(user=admin_profile, role='admin').exists()

    def test_invalid_role(self, admin_client, participant_profile):
        response = admin_client.patch(
            f'/api/admin/users/{participant_profile.id}/role',
            {'role': 'superuser'},
            format='json',
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestCoachAndBatch:

    def test_assign_coach(self, admin_client, other_participant, coach_profile):
        response = admin_client.patch(
            f'/api/admin/users/{other_participant.id}/coach',
            {'coach_id': str(coach_profile.id)},
            format='json',
        )

        assert response.status_code == 200
        other_participant.refresh_from_db()
        assert other_participant.assigned_coach_id == coach_profile.id

    def test_assignee_must_be_coach(self, admin_client, other_participant, participant_profile):
        response = admin_client.patch(
            f'/api/admin/users/{other_participant.id}/coach',
            {'coach_id': str(participant_profile.id)},
            format='json',
        )
        assert response.status_code == 400

    def test_clear_coach(self, admin_client, participant_profile):
        admin_client.patch(f'/api/admin/users/{participant_profile.id}/coach', {'coach_id': None}, format='json')
        participant_profile.refresh_from_db()
        assert participant_profile.assigned_coach_id is None

    def test_batch_update(self, admin_client, participant_profile, other_participant):
        response = admin_client.post(
            '/api/admin/users/batch',
            {'user_ids': [str(participant_profile.id), str(other_participant.id)], 'batch_number': ' B9 '},
            format='json',
        )

        assert response.json()['processed'] == 2
        assert set(Profile.objects.filter(batch_number='B9').values_list('id', flat=True)) == {
            participant_profile.id,
            other_participant.id,
        }

    def test_blank_batch_clears(self, admin_client, participant_profile):
        admin_client.post(
            '/api/admin/users/batch',
            {'user_ids': [str(participant_profile.id)], 'batch_number': ''},
            format='json',
        )
        participant_profile.refresh_from_db()
        assert participant_profile.batch_number is None


@pytest.mark.django_db
class TestRegenerateUniqueId:

    def test_regenerate(self, admin_client, participant_profile, mocker):
        mocker.patch.object(Profile, 'regenerate_unique_id', return_value='JRN99999')
        old_id = participant_profile.unique_id

        response = admin_client.post(f'/api/admin/users/{participant_profile.id}/regenerate-unique-id')

        assert response.status_code == 200
        assert response.json()['unique_id'] == 'JRN99999'
        audit = AuditLog.objects.get(action='unique_id_regenerated')
        assert audit.old_status == old_id
        assert audit.new_status == 'JRN99999'

    def test_database_failure(self, admin_client, participant_profile, mocker):
        mocker.patch.object(Profile, 'regenerate_unique_id', side_effect=DatabaseError('function missing'))
        response = admin_client.post(f'/api/admin/users/{participant_profile.id}/regenerate-unique-id')
        assert response.status_code == 503


@pytest.mark.django_db
class TestAuditLogs:

    def test_filters_and_names(self, admin_client, admin_profile, participant_profile):
        AuditLogFactory(user_id=participant_profile.id, changed_by=admin_profile.id, table_name='documents')
        AuditLogFactory(table_name='task_submissions')

        data = admin_client.get('/api/admin/audit-logs', {'table_name': 'documents'}).json()

        assert data['count'] == 1
        row = data['logs'][0]
        assert row['user_name'] == participant_profile.full_name
        assert row['changed_by_name'] == admin_profile.full_name

    def test_record_history(self, admin_client):
        log = AuditLogFactory()
        data = admin_client.get(f'/api/admin/audit-logs/task_submissions/{log.record_id}').json()
        assert [row['action'] for row in data['history']] == ['verified']
