"""
Settings API Views

Endpoints:
- GET    /api/settings/app                          - Branding (public)
- PATCH  /api/settings/app                          - Update branding (admin)
- GET    /api/settings/navigation                   - Caller's menu and default page
- GET    /api/settings/navigation/manage?role=      - All items for one role (admin)
- PATCH  /api/settings/navigation/visibility        - Show or hide a system page (admin)
- POST   /api/settings/navigation/default           - Set a role's landing page (admin)
- POST   /api/settings/navigation/reorder           - Renumber a role's menu (admin)
- POST   /api/settings/navigation/custom-links      - Add a custom link (admin)
- PATCH  /api/settings/navigation/custom-links/{id} - Edit a custom link (admin)
- DELETE /api/settings/navigation/custom-links/{id} - Remove a custom link (admin)
- POST   /api/settings/navigation/custom-links/{id}/toggle - Show/hide a custom link (admin)
- GET    /api/settings/notifications                - Caller's notifications
- POST   /api/settings/notifications/{id}/read      - Mark one read
- POST   /api/settings/notifications/read-all       - Mark all read
- GET    /api/settings/profile                      - Caller's profile
- PATCH  /api/settings/profile                      - Update name and phone
- POST   /api/settings/profile/avatar               - Upload avatar (multipart)
"""
import logging

from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import APP_ROLES
from apps.core.exceptions import ValidationError
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import IsAdmin, IsAuthenticated
from apps.core.selectors import get_profile
from apps.core.serializers import (
    AppSettingsSerializer,
    AvatarUploadSerializer,
    CustomLinkSerializer,
    CustomLinkUpdateSerializer,
    NavigationDefaultSerializer,
    NavigationReorderSerializer,
    NavigationVisibilitySerializer,
    NotificationSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RoleNavigationSettingSerializer,
)
from apps.core.throttles import UploadRateThrottle

from .selectors import (
    get_app_settings,
    get_effective_navigation,
    get_navigation_items,
    get_notifications,
    unread_count,
)
from .services import (
    create_custom_link,
    delete_custom_link,
    mark_all_notifications_read,
    mark_notification_read,
    reorder_navigation,
    set_default_page,
    set_page_visibility,
    toggle_custom_link,
    update_app_settings,
    update_custom_link,
    update_own_profile,
    upload_avatar,
)

logger = logging.getLogger(__name__)


class AppSettingsView(AuthenticatedAPIView, APIView):
    """
    GET   /api/settings/app
    PATCH /api/settings/app

    Branding is readable before login so the auth page can be themed.
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated(), IsAdmin()]

    @handle_api_errors('Failed to fetch app settings')
    def get(self, request):
        return Response(AppSettingsSerializer(get_app_settings()).data)

    @handle_api_errors('Failed to update app settings')
    def patch(self, request):
        user = self.get_user(request)
        serializer = AppSettingsSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError('Invalid request', details=serializer.errors)
        app_settings = update_app_settings(actor=user, data=serializer.validated_data)
        return Response(AppSettingsSerializer(app_settings).data)


class NavigationView(AuthenticatedAPIView, APIView):
    """
    GET /api/settings/navigation

    Response:
        {"links": [...], "default_page": "/dashboard", "source": "settings"}
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to fetch navigation')
    def get(self, request):
        user = self.get_user(request)
        return Response(get_effective_navigation(user.role))


class NavigationManageView(AuthenticatedAPIView, APIView):
    """
    GET /api/settings/navigation/manage

    Query params:
        role: Role to show (required)
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to fetch navigation settings')
    def get(self, request):
        role = request.query_params.get('role')
        if role not in APP_ROLES:
            raise ValidationError('A valid role is required', details={'role': role})
        items = get_navigation_items(role)
        default_page = next((item['page_path'] for item in items if item['is_default']), None)
        return Response({'role': role, 'items': items, 'default_page': default_page})


class NavigationVisibilityView(AuthenticatedAPIView, APIView):
    """
    PATCH /api/settings/navigation/visibility

    Request body:
        {"role": "coach", "page_path": "/analytics", "is_visible": false}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to update navigation')
    def patch(self, request):
        data = self.validated(NavigationVisibilitySerializer, request.data)
        row = set_page_visibility(role=data['role'], page_path=data['page_path'], is_visible=data['is_visible'])
        return Response(RoleNavigationSettingSerializer(row).data)


class NavigationDefaultView(AuthenticatedAPIView, APIView):
    """
    POST /api/settings/navigation/default

    Request body:
        {"role": "participant", "page_path": "/journey"}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to set default page')
    def post(self, request):
        data = self.validated(NavigationDefaultSerializer, request.data)
        row = set_default_page(role=data['role'], page_path=data['page_path'])
        return Response(RoleNavigationSettingSerializer(row).data)


class NavigationReorderView(AuthenticatedAPIView, APIView):
    """
    POST /api/settings/navigation/reorder

    Request body:
        {"role": "admin", "page_paths": ["/journey", "/tasks", ...]}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to save order')
    def post(self, request):
        data = self.validated(NavigationReorderSerializer, request.data)
        processed = reorder_navigation(role=data['role'], page_paths=data['page_paths'])
        return Response({'success': True, 'processed': processed})


class CustomLinkListView(AuthenticatedAPIView, APIView):
    """
    POST /api/settings/navigation/custom-links

    Request body:
        {"role": "participant", "label": "Handbook", "url": "https://...",
         "icon_name": "BookOpen", "is_external": true}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to create custom link')
    def post(self, request):
        data = self.validated(CustomLinkSerializer, request.data)
        link = create_custom_link(
            role=data['role'],
            label=data['label'],
            url=data['url'],
            icon_name=data['icon_name'],
            is_external=data['is_external'],
        )
        return Response(RoleNavigationSettingSerializer(link).data, status=status.HTTP_201_CREATED)


class CustomLinkDetailView(AuthenticatedAPIView, APIView):
    """
    PATCH  /api/settings/navigation/custom-links/{link_id}
    DELETE /api/settings/navigation/custom-links/{link_id}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to update custom link')
    def patch(self, request, link_id: str):
        data = self.validated(CustomLinkUpdateSerializer, request.data)
        link = update_custom_link(link_id=self.parse_uuid(link_id, 'link_id'), data=data)
        return Response(RoleNavigationSettingSerializer(link).data)

    @handle_api_errors('Failed to delete custom link')
    def delete(self, request, link_id: str):
        delete_custom_link(link_id=self.parse_uuid(link_id, 'link_id'))
        return Response(status=status.HTTP_204_NO_CONTENT)


class CustomLinkToggleView(AuthenticatedAPIView, APIView):
    """
    POST /api/settings/navigation/custom-links/{link_id}/toggle
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to toggle custom link')
    def post(self, request, link_id: str):
        link = toggle_custom_link(link_id=self.parse_uuid(link_id, 'link_id'))
        return Response(RoleNavigationSettingSerializer(link).data)


class NotificationListView(AuthenticatedAPIView, APIView):
    """
    GET /api/settings/notifications

    Query params:
        unread: 'true' to list unread only
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to fetch notifications')
    def get(self, request):
        user = self.get_user(request)
        unread_only = request.query_params.get('unread', '').lower() == 'true'
        notifications = get_notifications(user.id, unread_only=unread_only)
        return Response({
            'notifications': NotificationSerializer(notifications, many=True).data,
            'unread_count': unread_count(user.id),
        })


class NotificationReadView(AuthenticatedAPIView, APIView):
    """
    POST /api/settings/notifications/{notification_id}/read
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to mark notification read')
    def post(self, request, notification_id: str):
        user = self.get_user(request)
        notification = mark_notification_read(
            user=user,
            notification_id=self.parse_uuid(notification_id, 'notification_id'),
        )
        return Response(NotificationSerializer(notification).data)


class NotificationReadAllView(AuthenticatedAPIView, APIView):
    """
    POST /api/settings/notifications/read-all
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to mark notifications read')
    def post(self, request):
        user = self.get_user(request)
        return Response({'success': True, 'updated': mark_all_notifications_read(user=user)})


class ProfileView(AuthenticatedAPIView, APIView):
    """
    GET   /api/settings/profile
    PATCH /api/settings/profile

    Request body (PATCH):
        {"full_name": "...", "phone": "..."}
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to fetch profile')
    def get(self, request):
        user = self.get_user(request)
        profile = get_profile(user.id)
        return Response({**ProfileSerializer(profile).data, 'role': user.role})

    @handle_api_errors('Failed to update profile')
    def patch(self, request):
        user = self.get_user(request)
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            raise ValidationError('Invalid request', details=serializer.errors)
        profile = update_own_profile(user=user, data=serializer.validated_data)
        return Response({**ProfileSerializer(profile).data, 'role': user.role})


class AvatarUploadView(AuthenticatedAPIView, APIView):
    """
    POST /api/settings/profile/avatar

    Multipart body with a `file` field, at most 5MB.
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]
    throttle_classes = [UploadRateThrottle]

    @handle_api_errors('Failed to upload avatar')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(AvatarUploadSerializer, request.data)
        profile = upload_avatar(user=user, file=data['file'])
        return Response({'avatar_url': profile.avatar_url})
