"""
Analytics URL Configuration
"""
from django.urls import path

from .views import (
    ComparisonView,
    CustomReportExportView,
    CustomReportSourcesView,
    CustomReportView,
    DashboardView,
    DrillDownView,
    ProgramAnalyticsView,
)

urlpatterns = [
    path('', ProgramAnalyticsView.as_view(), name='analytics-program'),
    path('drill-down', DrillDownView.as_view(), name='analytics-drill-down'),
    path('comparison', ComparisonView.as_view(), name='analytics-comparison'),
    path('custom-report', CustomReportView.as_view(), name='analytics-custom-report'),
    path('custom-report/sources', CustomReportSourcesView.as_view(), name='analytics-custom-report-sources'),
    path('custom-report/export', CustomReportExportView.as_view(), name='analytics-custom-report-export'),
    path('dashboard', DashboardView.as_view(), name='analytics-dashboard'),
]
