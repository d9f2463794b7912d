"""
URL Configuration for the Journey Backend API

All routes are prefixed with /api/, one group per client page.
"""
from django.urls import include, path

from apps.core.views import health_check

urlpatterns = [
    # Health check endpoint (public)
    path('api/health', health_check, name='health_check'),

    # Authentication endpoints
    path('api/auth/', include('apps.auth_api.urls')),

    # Participant journey: stages, progress, enrollment
    path('api/journey/', include('apps.journey.urls')),

    path('api/tasks/', include('apps.tasks.urls')),
    path('api/documents/', include('apps.documents.urls')),
    path('api/attendance/', include('apps.attendance.urls')),
    path('api/trades/', include('apps.trades.urls')),

    # Reporting
    path('api/analytics/', include('apps.analytics.urls')),
    path('api/finance/', include('apps.finance.urls')),
    path('api/ecommerce/', include('apps.ecommerce.urls')),

    # Staff
    path('api/coach/', include('apps.coach.urls')),
    path('api/admin/', include('apps.admin_api.urls')),

    # Branding, navigation, notifications, own profile
    path('api/settings/', include('apps.settings_api.urls')),
]
