"""
Integration Tests for the health check
"""
import pytest
from django.db import DatabaseError


@pytest.mark.django_db
class TestHealthCheck:

    def test_healthy_without_auth(self, api_client):
        response = api_client.get('/api/health')

        assert response.status_code == 200
        body = response.json()
        assert body['status'] == 'healthy'
        assert body['database'] == 'connected'
        assert body['supabase_configured'] is True
        assert 'user' not in body

    def test_reports_caller_role(self, coach_client, coach_profile):
        body = coach_client.get('/api/health').json()

        assert body['user'] == {'id': str(coach_profile.id), 'role': 'coach'}

    def test_database_failure_returns_503(self, api_client, mocker):
        mocker.patch('apps.core.views._database_state', side_effect=DatabaseError('down'))

        response = api_client.get('/api/health')

        assert response.status_code == 503
        assert response.json()['database'] == 'unavailable'
