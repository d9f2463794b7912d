"""
Journey URL Configuration
"""
from django.urls import path

from .views import (
    BulkStageCompleteView,
    EnrollmentDocumentsSentView,
    EnrollmentQueueView,
    EnrollmentStatusView,
    EnrollmentView,
    JourneyStatsView,
    SpecialLinksView,
    StageBoardView,
    StageProgressView,
)

urlpatterns = [
    path('stages', StageBoardView.as_view(), name='journey-stages'),
    path('stats', JourneyStatsView.as_view(), name='journey-stats'),
    path('special-links', SpecialLinksView.as_view(), name='journey-special-links'),
    path('progress', StageProgressView.as_view(), name='journey-progress'),
    path('progress/bulk-complete', BulkStageCompleteView.as_view(), name='journey-progress-bulk-complete'),
    path('enrollment', EnrollmentView.as_view(), name='journey-enrollment'),
    path('enrollment/documents-sent', EnrollmentDocumentsSentView.as_view(), name='journey-enrollment-documents-sent'),
    path('enrollments', EnrollmentQueueView.as_view(), name='journey-enrollments'),
    path('enrollments/<str:enrollment_id>', EnrollmentStatusView.as_view(), name='journey-enrollment-status'),
]
