"""
Analytics API Views

Endpoints:
- GET /api/analytics                          - Program analytics for the visible participants
- GET /api/analytics/drill-down               - Records behind one chart segment
- GET /api/analytics/comparison               - Side-by-side numbers for selected participants
- GET /api/analytics/custom-report/sources    - Data sources and their selectable fields
- GET /api/analytics/custom-report            - Custom report rows and status chart
- GET /api/analytics/custom-report/export     - Custom report as CSV
- GET /api/analytics/dashboard                - Participant dashboard cards
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import DASHBOARD_TARGETS, REQUIRED_DOCUMENTS_PER_PARTICIPANT
from apps.core.exceptions import ValidationError
from apps.core.exports import csv_response
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.models import JourneyStage, Task
from apps.core.permissions import HasPageAccess, IsAuthenticated
from services.analytics_report import (
    DRILL_DOWN_METRICS,
    build_comparison,
    build_dashboard_stats,
    build_drill_down,
    build_program_analytics,
)
from services.base import to_dict
from services.custom_report import (
    DATA_SOURCE_FIELDS,
    DATA_SOURCES,
    CustomReportFilters,
    build_custom_report,
)

from .selectors import (
    get_comparison_rows,
    get_dashboard_rows,
    get_program_rows,
    get_source_rows,
)

logger = logging.getLogger(__name__)


class ProgramAnalyticsView(AuthenticatedAPIView, APIView):
    """
    GET /api/analytics

    Query params:
        batch: Batch filter ('all' for every batch)
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/analytics'

    @handle_api_errors('Failed to fetch analytics')
    def get(self, request):
        user = self.get_user(request)
        rows = get_program_rows(user, request.query_params.get('batch'))
        analytics = build_program_analytics(
            rows['participants'],
            rows['stages'],
            rows['progress'],
            rows['tasks'],
            rows['submissions'],
            rows['documents'],
            rows['trades'],
            rows['attendance'],
            documents_per_participant=REQUIRED_DOCUMENTS_PER_PARTICIPANT,
        )
        return Response(to_dict(analytics))


class DrillDownView(AuthenticatedAPIView, APIView):
    """
    GET /api/analytics/drill-down

    Query params:
        metric: stage | task_status | document_status | trade_month | attendance_week
        key: Stage id, status, 'Mon YY' month label or 'Week N'
        batch: Batch filter
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/analytics'

    @handle_api_errors('Failed to fetch analytics details')
    def get(self, request):
        user = self.get_user(request)
        metric = request.query_params.get('metric')
        key = request.query_params.get('key')
        if metric not in DRILL_DOWN_METRICS:
            raise ValidationError(f'metric must be one of {", ".join(DRILL_DOWN_METRICS)}')
        if not key:
            raise ValidationError('key is required')

        rows = get_program_rows(user, request.query_params.get('batch'))
        records = build_drill_down(
            metric,
            key,
            rows['participants'],
            progress=rows['progress'],
            submissions=rows['submissions'],
            documents=rows['documents'],
            trades=rows['trades'],
            attendance=rows['attendance'],
            tasks=rows['tasks'],
        )
        return Response({'metric': metric, 'key': key, 'records': to_dict(records)})


class ComparisonView(AuthenticatedAPIView, APIView):
    """
    GET /api/analytics/comparison?user_ids=<uuid>,<uuid>
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/analytics'

    @handle_api_errors('Failed to compare participants')
    def get(self, request):
        user = self.get_user(request)
        raw_ids = [v for v in (request.query_params.get('user_ids') or '').split(',') if v.strip()]
        if not raw_ids:
            raise ValidationError('Select at least one participant')
        user_ids = [self.parse_uuid(v.strip(), 'user_ids') for v in raw_ids]

        rows = get_comparison_rows(user, user_ids)
        comparison = build_comparison(
            rows['participants'],
            rows['progress'],
            rows['submissions'],
            rows['documents'],
            rows['trades'],
            total_stages=rows['total_stages'],
            total_tasks=rows['total_tasks'],
        )
        return Response({'comparison': to_dict(comparison)})


class CustomReportSourcesView(AuthenticatedAPIView, APIView):
    """
    GET /api/analytics/custom-report/sources
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/analytics'

    @handle_api_errors('Failed to fetch report sources')
    def get(self, request):
        self.get_user(request)
        return Response({
            'sources': [
                {
                    'source': source,
                    'fields': [
                        {'key': f.key, 'label': f.label, 'default': f.default}
                        for f in DATA_SOURCE_FIELDS[source]
                    ],
                }
                for source in DATA_SOURCES
            ],
        })


class CustomReportMixin:
    """Parses the builder's query params and runs the report."""

    def build_report(self, request, user):
        source = request.query_params.get('source', 'profiles')
        if source not in DATA_SOURCES:
            raise ValidationError(f'Unknown data source: {source}')

        fields = [f for f in (request.query_params.get('fields') or '').split(',') if f]
        filters = CustomReportFilters(
            status=request.query_params.get('status') or 'all',
            batch=request.query_params.get('batch') or 'all',
            start_date=self.parse_date(request.query_params.get('start_date')),
            end_date=self.parse_date(request.query_params.get('end_date')),
        )

        task_titles = None
        stage_names = None
        if source == 'task_submissions':
            task_titles = {str(k): v for k, v in Task.objects.values_list('id', 'title')}
        elif source == 'participant_progress':
            stage_names = {str(k): v for k, v in JourneyStage.objects.values_list('id', 'name')}

        profiles = get_source_rows(user, 'profiles')
        rows = profiles if source == 'profiles' else get_source_rows(user, source)
        return build_custom_report(
            source,
            rows,
            profiles,
            filters=filters,
            fields=fields or None,
            task_titles=task_titles,
            stage_names=stage_names,
        )


class CustomReportView(CustomReportMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/analytics/custom-report

    Query params:
        source: Data source (default: profiles)
        fields: Comma-separated column keys (default: the source's default set)
        status: Status filter, ignored for profiles and attendance
        batch: Batch filter
        start_date / end_date: Date range on the source's date column
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/analytics'

    @handle_api_errors('Failed to generate report')
    def get(self, request):
        user = self.get_user(request)
        report = self.build_report(request, user)
        return Response({**to_dict(report), 'count': len(report.rows)})


class CustomReportExportView(CustomReportMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/analytics/custom-report/export
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/analytics'

    @handle_api_errors('Failed to export report')
    def get(self, request):
        user = self.get_user(request)
        report = self.build_report(request, user)
        return csv_response(
            report.rows,
            report.columns,
            report.export_name,
            self.export_language(request),
            labels=report.labels,
        )


class DashboardView(AuthenticatedAPIView, APIView):
    """
    GET /api/analytics/dashboard

    The caller's own progress against the program targets.
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/dashboard'

    @handle_api_errors('Failed to fetch dashboard')
    def get(self, request):
        user = self.get_user(request)
        rows = get_dashboard_rows(user.id)
        stats = build_dashboard_stats(
            rows['progress'],
            rows['submissions'],
            rows['documents'],
            rows['trades'],
            rows['attendance_count'],
            total_stages=DASHBOARD_TARGETS['total_stages'],
            total_tasks=DASHBOARD_TARGETS['total_tasks'],
            total_documents=DASHBOARD_TARGETS['total_documents'],
            attendance_days=DASHBOARD_TARGETS['attendance_days'],
        )
        return Response(to_dict(stats))
