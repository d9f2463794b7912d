"""
Integration Tests for the Settings API

Branding, per-role navigation, custom links, notifications and profile.
"""
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.core.models import RoleNavigationSetting
from tests.factories import AppSettingsFactory, NotificationFactory, RoleNavigationSettingFactory


@pytest.mark.django_db
class TestAppSettings:

    def test_readable_without_login(self, api_client):
        AppSettingsFactory(app_name='Export Academy')

        response = api_client.get('/api/settings/app')

        assert response.status_code == 200
        assert response.json()['app_name'] == 'Export Academy'

    def test_defaults_when_no_row(self, api_client):
        assert api_client.get('/api/settings/app').json()['app_name'] == 'Journey'

    def test_only_admin_updates(self, admin_client, coach_client):
        assert coach_client.patch('/api/settings/app', {'app_name': 'X'}, format='json').status_code == 403

        response = admin_client.patch('/api/settings/app', {'primary_color': '#000000'}, format='json')

        assert response.status_code == 200
        assert response.json()['primary_color'] == '#000000'


@pytest.mark.django_db
class TestEffectiveNavigation:

    def test_fallback_without_rows(self, coach_client):
        data = coach_client.get('/api/settings/navigation').json()

        assert data['source'] == 'fallback'
        assert data['default_page'] == '/coach'
        assert [(link['page_path'], link['label_key'], link['icon_name']) for link in data['links']] == [
            ('/coach', 'sidebar.verification', 'CheckSquare'),
            ('/analytics', 'sidebar.analytics', 'BarChart3'),
        ]

    def test_stored_rows_in_order(self, participant_client):
        RoleNavigationSettingFactory(page_path='/tasks', label_key='sidebar.tasks', display_order=2)
        RoleNavigationSettingFactory(page_path='/journey', label_key='sidebar.myJourney', display_order=1)
        RoleNavigationSettingFactory(page_path='/trades', label_key='sidebar.tradeUpdates', display_order=3, is_visible=False)

        data = participant_client.get('/api/settings/navigation').json()

        assert data['source'] == 'settings'
        assert [link['page_path'] for link in data['links']] == ['/journey', '/tasks']
        assert data['default_page'] == '/journey'

    def test_stored_default_wins_even_when_hidden(self, participant_client):
        RoleNavigationSettingFactory(page_path='/journey', display_order=1)
        RoleNavigationSettingFactory(page_path='/tasks', display_order=2, is_visible=False, is_default=True)

        assert participant_client.get('/api/settings/navigation').json()['default_page'] == '/tasks'

    def test_external_links_are_never_the_default(self, participant_client):
        RoleNavigationSettingFactory(
            page_path='https://example.com/handbook',
            label_key='custom',
            is_custom=True,
            is_external=True,
            display_order=1,
        )
        RoleNavigationSettingFactory(page_path='/tasks', display_order=2)

        assert participant_client.get('/api/settings/navigation').json()['default_page'] == '/tasks'


@pytest.mark.django_db
class TestNavigationManagement:

    def test_manage_lists_every_system_page(self, admin_client):
        RoleNavigationSettingFactory(role='coach', page_path='/coach', is_default=True)

        data = admin_client.get('/api/settings/navigation/manage', {'role': 'coach'}).json()

        paths = [item['page_path'] for item in data['items']]
        assert '/finance' in paths and '/coach' in paths
        assert data['default_page'] == '/coach'

    def test_manage_requires_role(self, admin_client):
        assert admin_client.get('/api/settings/navigation/manage').status_code == 400

    def test_hiding_default_clears_flag(self, admin_client):
        RoleNavigationSettingFactory(role='coach', page_path='/coach', is_default=True)

        response = admin_client.patch(
            '/api/settings/navigation/visibility',
            {'role': 'coach', 'page_path': '/coach', 'is_visible': False},
            format='json',
        )

        assert response.status_code == 200
        row = RoleNavigationSetting.objects.get(role='coach', page_path='/coach')
        assert row.is_visible is False
        assert row.is_default is False

    def test_showing_unstored_page_creates_row(self, admin_client):
        admin_client.patch(
            '/api/settings/navigation/visibility',
            {'role': 'finance', 'page_path': '/analytics', 'is_visible': True},
            format='json',
        )
        row = RoleNavigationSetting.objects.get(role='finance', page_path='/analytics')
        assert row.label_key == 'sidebar.analytics'
        assert row.icon_name == 'BarChart3'
        assert row.display_order == 10

    def test_manage_items_follow_catalog_order(self, admin_client):
        items = admin_client.get('/api/settings/navigation/manage', {'role': 'finance'}).json()['items']

        assert [item['page_path'] for item in items] == [
            '/dashboard', '/journey', '/tasks', '/documents', '/attendance', '/trades',
            '/coach', '/ecommerce', '/finance', '/analytics', '/admin',
        ]
        store = next(item for item in items if item['page_path'] == '/ecommerce')
        assert (store['label_key'], store['icon_name'], store['display_order']) == ('sidebar.ecommerce', 'Store', 8)

    def test_default_must_be_visible(self, admin_client):
        RoleNavigationSettingFactory(role='coach', page_path='/analytics', is_visible=False)

        response = admin_client.post(
            '/api/settings/navigation/default',
            {'role': 'coach', 'page_path': '/analytics'},
            format='json',
        )

        assert response.status_code == 400

    def test_single_default_per_role(self, admin_client):
        old = RoleNavigationSettingFactory(role='coach', page_path='/coach', is_default=True)
        RoleNavigationSettingFactory(role='coach', page_path='/analytics')

        admin_client.post('/api/settings/navigation/default', {'role': 'coach', 'page_path': '/analytics'}, format='json')

        old.refresh_from_db()
        assert old.is_default is False
        assert RoleNavigationSetting.objects.get(role='coach', is_default=True).page_path == '/analytics'

    def test_reorder(self, admin_client):
        RoleNavigationSettingFactory(role='admin', page_path='/journey', display_order=1)
        RoleNavigationSettingFactory(role='admin', page_path='/tasks', display_order=2)

        response = admin_client.post(
            '/api/settings/navigation/reorder',
            {'role': 'admin', 'page_paths': ['/tasks', '/admin', '/journey']},
            format='json',
        )

        assert response.json()['processed'] == 3
        order = dict(RoleNavigationSetting.objects.filter(role='admin').values_list('page_path', 'display_order'))
        assert order == {'/tasks': 1, '/admin': 2, '/journey': 3}
        assert RoleNavigationSetting.objects.get(role='admin', page_path='/admin').is_visible is False

    def test_reorder_rejects_unknown_paths(self, admin_client):
        response = admin_client.post(
            '/api/settings/navigation/reorder',
            {'role': 'admin', 'page_paths': ['/nowhere']},
            format='json',
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestCustomLinks:

    def test_create_toggle_delete(self, admin_client):
        RoleNavigationSettingFactory(page_path='/journey', display_order=4)

        response = admin_client.post(
            '/api/settings/navigation/custom-links',
            {'role': 'participant', 'label': ' Handbook ', 'url': 'https://example.com/h', 'is_external': True},
            format='json',
        )
        assert response.status_code == 201
        link = response.json()
        assert link['display_order'] == 5
        assert link['custom_label'] == 'Handbook'
        assert link['icon_name'] == 'LinkIcon'

        toggled = admin_client.post(f'/api/settings/navigation/custom-links/{link["id"]}/toggle').json()
        assert toggled['is_visible'] is False

        assert admin_client.delete(f'/api/settings/navigation/custom-links/{link["id"]}').status_code == 204
        assert not RoleNavigationSetting.objects.filter(id=link['id']).exists()

    def test_system_page_cannot_be_deleted(self, admin_client):
        row = RoleNavigationSettingFactory(page_path='/journey')
        assert admin_client.delete(f'/api/settings/navigation/custom-links/{row.id}').status_code == 404

    def test_label_required(self, admin_client):
        response = admin_client.post(
            '/api/settings/navigation/custom-links',
            {'role': 'participant', 'label': '  ', 'url': 'https://example.com'},
            format='json',
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestNotifications:

    def test_list_and_mark_read(self, participant_client, participant_profile, other_participant):
        first = NotificationFactory(user=participant_profile)
        NotificationFactory(user=participant_profile)
        NotificationFactory(user=other_participant)

        data = participant_client.get('/api/settings/notifications').json()
        assert len(data['notifications']) == 2
        assert data['unread_count'] == 2

        participant_client.post(f'/api/settings/notifications/{first.id}/read')
        assert participant_client.get('/api/settings/notifications', {'unread': 'true'}).json()['unread_count'] == 1

        response = participant_client.post('/api/settings/notifications/read-all')
        assert response.json()['updated'] == 1

    def test_cannot_read_someone_elses(self, participant_client, other_participant):
        notification = NotificationFactory(user=other_participant)
        assert participant_client.post(f'/api/settings/notifications/{notification.id}/read').status_code == 404


@pytest.mark.django_db
class TestOwnProfile:

    def test_get_and_update(self, participant_client, participant_profile):
        data = participant_client.get('/api/settings/profile').json()
        assert data['role'] == 'participant'

        response = participant_client.patch('/api/settings/profile', {'phone': '9876543210'}, format='json')

        assert response.status_code == 200
        participant_profile.refresh_from_db()
        assert participant_profile.phone == '9876543210'

    def test_avatar_upload(self, participant_client, participant_profile, mock_upload):
        avatar = SimpleUploadedFile('me.png', b'\x89PNG', content_type='image/png')

        response = participant_client.post('/api/settings/profile/avatar', {'file': avatar}, format='multipart')

        assert response.status_code == 200
        participant_profile.refresh_from_db()
        assert participant_profile.avatar_url == response.json()['avatar_url']
