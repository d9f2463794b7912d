"""
Attendance URL Configuration
"""
from django.urls import path

from .views import (
    AttendanceRecordDetailView,
    AttendanceRecordsView,
    AttendanceReportExportView,
    AttendanceReportView,
    AttendanceRosterView,
    AttendanceView,
    BulkAttendanceView,
    CheckInView,
    CheckOutView,
    MarkAllPresentView,
    SessionCompletionView,
    SessionListView,
)

urlpatterns = [
    path('', AttendanceView.as_view(), name='attendance-mine'),
    path('sessions', SessionListView.as_view(), name='attendance-sessions'),
    path('check-in', CheckInView.as_view(), name='attendance-check-in'),
    path('check-out', CheckOutView.as_view(), name='attendance-check-out'),
    path('records', AttendanceRecordsView.as_view(), name='attendance-records'),
    path('records/<str:attendance_id>', AttendanceRecordDetailView.as_view(), name='attendance-record-detail'),
    path('roster', AttendanceRosterView.as_view(), name='attendance-roster'),
    path('bulk', BulkAttendanceView.as_view(), name='attendance-bulk'),
    path('mark-all-present', MarkAllPresentView.as_view(), name='attendance-mark-all-present'),
    path('report', AttendanceReportView.as_view(), name='attendance-report'),
    path('report/export', AttendanceReportExportView.as_view(), name='attendance-report-export'),
    path('session-completions', SessionCompletionView.as_view(), name='attendance-session-completions'),
]
