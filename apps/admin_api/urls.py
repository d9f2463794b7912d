"""
Admin API URL Configuration
"""
from django.urls import path

from .views import (
    AuditLogListView,
    BatchUpdateView,
    RecordHistoryView,
    RegenerateUniqueIdView,
    UserCoachView,
    UserListView,
    UserRoleView,
)

urlpatterns = [
    path('users', UserListView.as_view(), name='admin-users'),
    path('users/batch', BatchUpdateView.as_view(), name='admin-users-batch'),
    path('users/<str:user_id>/role', UserRoleView.as_view(), name='admin-user-role'),
    path('users/<str:user_id>/coach', UserCoachView.as_view(), name='admin-user-coach'),
    path('users/<str:user_id>/regenerate-unique-id', RegenerateUniqueIdView.as_view(), name='admin-user-unique-id'),
    path('audit-logs', AuditLogListView.as_view(), name='admin-audit-logs'),
    path('audit-logs/<str:table_name>/<str:record_id>', RecordHistoryView.as_view(), name='admin-record-history'),
]
