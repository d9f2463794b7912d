"""
Finance API Views

Endpoints:
- GET  /api/finance                  - Participants with their fee status
- POST /api/finance/fee-status       - Set a participant's fee stage status
- GET  /api/finance/report           - Fee completion overall and per batch
- GET  /api/finance/report/export    - Fee status per participant as CSV
- GET  /api/finance/drill-down       - Participants behind one chart slice
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import NotFoundError, ValidationError
from apps.core.exports import csv_response
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import HasPageAccess, IsAuthenticated, IsFinanceOrAdmin
from apps.core.serializers import OwnedStageStatusSerializer
from apps.journey.services import set_stage_progress
from services.base import to_dict
from services.finance_report import (
    EXPORT_COLUMNS,
    FEE_SEGMENTS,
    build_finance_report,
    export_rows,
    fee_drill_down,
    stage_stats,
)

from .selectors import fee_stage_row, get_fee_stage, get_finance_rows

logger = logging.getLogger(__name__)


class FinanceOverviewView(AuthenticatedAPIView, APIView):
    """
    GET /api/finance

    Query params:
        batch: Batch filter ('all' for every batch)
        search: Name, email or batch substring
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/finance'

    @handle_api_errors('Failed to fetch finance data')
    def get(self, request):
        user = self.get_user(request)
        fee_stage = fee_stage_row(get_fee_stage())
        rows = get_finance_rows(user, request.query_params.get('batch'), request.query_params.get('search'))
        return Response({
            'fee_stage': fee_stage,
            'participants': export_rows(fee_stage, rows['profiles'], rows['progress']),
            'stage_stats': to_dict(stage_stats(fee_stage, rows['profiles'], rows['progress'])),
            'batches': rows['batches'],
        })


class FeeStatusView(AuthenticatedAPIView, APIView):
    """
    POST /api/finance/fee-status

    Request body:
        {"user_id": "...", "status": "completed"}
    """
    permission_classes = [IsAuthenticated, IsFinanceOrAdmin]

    @handle_api_errors('Failed to update fee status')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(OwnedStageStatusSerializer, request.data)
        fee_stage = get_fee_stage()
        if fee_stage is None:
            raise NotFoundError('Fee stage is not configured')
        progress = set_stage_progress(
            actor=user,
            user_id=data['user_id'],
            stage_id=fee_stage.id,
            status=data['status'],
        )
        return Response({
            'user_id': str(progress.user_id),
            'stage_id': str(progress.stage_id),
            'status': progress.status,
            'completed_at': progress.completed_at,
        })


class FinanceReportView(AuthenticatedAPIView, APIView):
    """
    GET /api/finance/report

    Query params:
        batch: Batch filter
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/finance'

    @handle_api_errors('Failed to build finance report')
    def get(self, request):
        user = self.get_user(request)
        fee_stage = fee_stage_row(get_fee_stage())
        rows = get_finance_rows(user, request.query_params.get('batch'))
        report = build_finance_report(fee_stage, rows['profiles'], rows['progress'])
        return Response(to_dict(report))


class FinanceReportExportView(AuthenticatedAPIView, APIView):
    """
    GET /api/finance/report/export
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/finance'

    @handle_api_errors('Failed to export finance report')
    def get(self, request):
        user = self.get_user(request)
        fee_stage = fee_stage_row(get_fee_stage())
        rows = get_finance_rows(user, request.query_params.get('batch'), request.query_params.get('search'))
        return csv_response(
            export_rows(fee_stage, rows['profiles'], rows['progress']),
            EXPORT_COLUMNS,
            'finance_report',
            self.export_language(request),
        )


class FinanceDrillDownView(AuthenticatedAPIView, APIView):
    """
    GET /api/finance/drill-down?segment=completed|in_progress|pending
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/finance'

    @handle_api_errors('Failed to fetch finance details')
    def get(self, request):
        user = self.get_user(request)
        segment = request.query_params.get('segment')
        if segment not in FEE_SEGMENTS:
            raise ValidationError(f'segment must be one of {", ".join(FEE_SEGMENTS)}')
        fee_stage = fee_stage_row(get_fee_stage())
        rows = get_finance_rows(user, request.query_params.get('batch'))
        return Response({
            'segment': segment,
            'records': fee_drill_down(fee_stage, rows['profiles'], rows['progress'], segment),
        })
