"""
Attendance API Views

Endpoints:
- GET    /api/attendance                      - Own attendance history
- GET    /api/attendance/sessions             - Active sessions
- POST   /api/attendance/check-in             - Daily check-in (once per day)
- POST   /api/attendance/check-out            - Close today's check-in
- GET    /api/attendance/records              - Staff: recent records
- POST   /api/attendance/records              - Staff: mark one participant
- DELETE /api/attendance/records/{id}         - Staff: remove a record
- GET    /api/attendance/roster               - Staff: who is marked on a date
- POST   /api/attendance/bulk                 - Staff: mark several participants
- POST   /api/attendance/mark-all-present     - Staff: daily row for everyone missing one
- GET    /api/attendance/report               - Attendance report
- GET    /api/attendance/report/export        - Attendance report as CSV
- GET    /api/attendance/session-completions  - Completed sessions for a participant
- POST   /api/attendance/session-completions  - Toggle a session completion
"""
import logging
from dataclasses import asdict

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import ROLE_ADMIN, ROLE_COACH
from apps.core.exceptions import ValidationError
from apps.core.exports import csv_response
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import HasPageAccess, IsAdminOrCoach, IsAuthenticated
from apps.core.selectors import get_scoped_participants, get_visible_profile, profile_rows
from apps.core.serializers import (
    AttendanceMarkSerializer,
    AttendanceSerializer,
    BulkAttendanceSerializer,
    MarkAllPresentSerializer,
    SessionCompletionToggleSerializer,
    SessionSerializer,
)
from apps.core.throttles import BurstRateThrottle
from apps.core.utils import today
from services.attendance_report import EXPORT_COLUMNS, PERIODS, build_attendance_report, period_range
from services.base import ScopeFilter, to_dict

from .selectors import (
    attendance_rows,
    get_active_sessions,
    get_attendance_records,
    get_own_attendance,
    get_session_completions,
    present_user_ids,
)
from .services import (
    bulk_mark_attendance,
    check_in,
    check_out,
    delete_attendance,
    mark_all_present,
    mark_attendance,
    toggle_session_completion,
)

logger = logging.getLogger(__name__)


class AttendanceView(AuthenticatedAPIView, APIView):
    """
    GET /api/attendance
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/attendance'

    @handle_api_errors('Failed to fetch attendance')
    def get(self, request):
        user = self.get_user(request)
        records = get_own_attendance(user.id)
        checked_in_today = any(
            r.date == today() and r.attendance_type == 'daily' for r in records
        )
        return Response({
            'attendance': AttendanceSerializer(records, many=True).data,
            'checked_in_today': checked_in_today,
        })


class SessionListView(AuthenticatedAPIView, APIView):
    """
    GET /api/attendance/sessions
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to fetch sessions')
    def get(self, request):
        self.get_user(request)
        return Response({'sessions': SessionSerializer(get_active_sessions(), many=True).data})


class CheckInView(AuthenticatedAPIView, APIView):
    """
    POST /api/attendance/check-in
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/attendance'

    @handle_api_errors('Failed to check in')
    def post(self, request):
        user = self.get_user(request)
        record = check_in(user=user)
        return Response({'attendance': AttendanceSerializer(record).data}, status=status.HTTP_201_CREATED)


class CheckOutView(AuthenticatedAPIView, APIView):
    """
    POST /api/attendance/check-out
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/attendance'

    @handle_api_errors('Failed to check out')
    def post(self, request):
        user = self.get_user(request)
        record = check_out(user=user)
        return Response({'attendance': AttendanceSerializer(record).data})


class AttendanceRecordsView(AuthenticatedAPIView, APIView):
    """
    GET  /api/attendance/records?date=YYYY-MM-DD
    POST /api/attendance/records

    Request body (POST):
        {"user_id": "...", "date": "2025-01-15", "attendance_type": "session", "session_id": "..."}
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to fetch attendance records')
    def get(self, request):
        user = self.get_user(request)
        records = get_attendance_records(viewer=user, on=self.parse_date(request.query_params.get('date')))
        return Response({'records': AttendanceSerializer(records, many=True).data})

    @handle_api_errors('Failed to mark attendance')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(AttendanceMarkSerializer, request.data)
        record = mark_attendance(
            actor=user,
            user_id=data['user_id'],
            on=data['date'],
            attendance_type=data['attendance_type'],
            session_id=data.get('session_id'),
        )
        return Response({'attendance': AttendanceSerializer(record).data}, status=status.HTTP_201_CREATED)


class AttendanceRecordDetailView(AuthenticatedAPIView, APIView):
    """
    DELETE /api/attendance/records/{attendance_id}
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to delete attendance')
    def delete(self, request, attendance_id: str):
        user = self.get_user(request)
        delete_attendance(actor=user, attendance_id=self.parse_uuid(attendance_id, 'attendance_id'))
        return Response(status=status.HTTP_204_NO_CONTENT)


class AttendanceRosterView(AuthenticatedAPIView, APIView):
    """
    GET /api/attendance/roster

    Query params:
        date: Day to check (default: today)
        batch: Batch filter
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to fetch roster')
    def get(self, request):
        user = self.get_user(request)
        on = self.parse_date(request.query_params.get('date')) or today()
        present = present_user_ids(on)
        participants = [
            {**row, 'hasAttendanceToday': str(row['id']) in present}
            for row in profile_rows(get_scoped_participants(user, request.query_params.get('batch')))
        ]
        return Response({'date': on, 'participants': participants})


class BulkAttendanceView(AuthenticatedAPIView, APIView):
    """
    POST /api/attendance/bulk

    Request body:
        {"user_ids": [...], "date": "2025-01-15", "attendance_type": "daily"}
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]
    throttle_classes = [BurstRateThrottle]

    @handle_api_errors('Failed to mark attendance')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(BulkAttendanceSerializer, request.data)
        processed = bulk_mark_attendance(
            actor=user,
            user_ids=data['user_ids'],
            on=data['date'],
            attendance_type=data['attendance_type'],
            session_id=data.get('session_id'),
        )
        return Response({'success': True, 'processed': processed})


class MarkAllPresentView(AuthenticatedAPIView, APIView):
    """
    POST /api/attendance/mark-all-present

    Request body:
        {"date": "2025-01-15", "batch_number": "optional"}
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]
    throttle_classes = [BurstRateThrottle]

    @handle_api_errors('Failed to mark attendance')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(MarkAllPresentSerializer, request.data)
        processed = mark_all_present(actor=user, on=data['date'], batch_number=data.get('batch_number'))
        return Response({'success': True, 'processed': processed})


class AttendanceReportMixin:
    """Shared parameter handling for the report and its CSV export."""

    def build_report(self, request, user):
        period = request.query_params.get('period', 'monthly')
        if period not in PERIODS:
            raise ValidationError(f'period must be one of {", ".join(PERIODS)}')

        anchor = self.parse_date(request.query_params.get('date')) or today()
        start, end = period_range(
            period,
            anchor,
            self.parse_date(request.query_params.get('start_date')),
            self.parse_date(request.query_params.get('end_date')),
        )
        profiles = profile_rows(get_scoped_participants(user))
        return build_attendance_report(
            profiles,
            attendance_rows(start, end),
            period=period,
            start_date=start,
            end_date=end,
            scope=ScopeFilter(batch_number=request.query_params.get('batch')),
        )


class AttendanceReportView(AttendanceReportMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/attendance/report

    Query params:
        period: daily | weekly | monthly | custom (default: monthly)
        date: Anchor date (default: today)
        start_date / end_date: Bounds for the custom period
        batch: Batch filter ('all' for every batch)
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to build attendance report')
    def get(self, request):
        user = self.get_user(request)
        report = self.build_report(request, user)
        return Response({**to_dict(report), 'period_label': report.period_label})


class AttendanceReportExportView(AttendanceReportMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/attendance/report/export

    Same query params as the report, plus `lang` (en, hi, mr).
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to export attendance report')
    def get(self, request):
        user = self.get_user(request)
        report = self.build_report(request, user)
        return csv_response(
            [asdict(s) for s in report.summary],
            EXPORT_COLUMNS,
            f'attendance_report_{report.period_label}',
            self.export_language(request),
        )


class SessionCompletionView(AuthenticatedAPIView, APIView):
    """
    GET  /api/attendance/session-completions?user_id=...
    POST /api/attendance/session-completions

    Request body (POST):
        {"user_id": "...", "session_type": "ohm_meet", "notes": "optional"}
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to fetch session completions')
    def get(self, request):
        user = self.get_user(request)
        participant_id = user.id
        if not user.is_participant:
            participant_id = self.parse_uuid(request.query_params.get('user_id'), 'user_id')
            get_visible_profile(user, participant_id)
        return Response({'completions': get_session_completions(participant_id)})

    @handle_api_errors('Failed to update session completion')
    def post(self, request):
        user = self.get_user(request)
        self.require_role(user, ROLE_ADMIN, ROLE_COACH)
        data = self.validated(SessionCompletionToggleSerializer, request.data)
        completed = toggle_session_completion(
            actor=user,
            user_id=data['user_id'],
            session_type=data['session_type'],
            notes=data.get('notes'),
        )
        return Response({'completed': completed})
