"""
Settings URL Configuration
"""
from django.urls import path

from .views import (
    AppSettingsView,
    AvatarUploadView,
    CustomLinkDetailView,
    CustomLinkListView,
    CustomLinkToggleView,
    NavigationDefaultView,
    NavigationManageView,
    NavigationReorderView,
    NavigationView,
    NavigationVisibilityView,
    NotificationListView,
    NotificationReadAllView,
    NotificationReadView,
    ProfileView,
)

urlpatterns = [
    path('app', AppSettingsView.as_view(), name='settings-app'),
    path('navigation', NavigationView.as_view(), name='settings-navigation'),
    path('navigation/manage', NavigationManageView.as_view(), name='settings-navigation-manage'),
    path('navigation/visibility', NavigationVisibilityView.as_view(), name='settings-navigation-visibility'),
    path('navigation/default', NavigationDefaultView.as_view(), name='settings-navigation-default'),
    path('navigation/reorder', NavigationReorderView.as_view(), name='settings-navigation-reorder'),
    path('navigation/custom-links', CustomLinkListView.as_view(), name='settings-custom-links'),
    path('navigation/custom-links/<str:link_id>', CustomLinkDetailView.as_view(), name='settings-custom-link'),
    path(
        'navigation/custom-links/<str:link_id>/toggle',
        CustomLinkToggleView.as_view(),
        name='settings-custom-link-toggle'
    ),
    path('notifications', NotificationListView.as_view(), name='settings-notifications'),
    path('notifications/read-all', NotificationReadAllView.as_view(), name='settings-notifications-read-all'),
    path('notifications/<str:notification_id>/read', NotificationReadView.as_view(), name='settings-notification-read'),
    path('profile', ProfileView.as_view(), name='settings-profile'),
    path('profile/avatar', AvatarUploadView.as_view(), name='settings-avatar'),
]
