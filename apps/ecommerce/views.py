"""
E-commerce API Views

Endpoints:
- GET   /api/ecommerce                    - Participants with their E-Commerce Setup stage status
- POST  /api/ecommerce/stage-status       - Set a participant's E-Commerce Setup stage status
- GET   /api/ecommerce/setups             - Store setups
- POST  /api/ecommerce/setups             - Create a setup for a participant
- PATCH /api/ecommerce/setups/{id}        - Edit store details
- POST  /api/ecommerce/setups/{id}/complete - Mark completed
- POST  /api/ecommerce/setups/{id}/reopen   - Coach or admin: back to in progress
- GET   /api/ecommerce/report             - Setup and platform stats
- GET   /api/ecommerce/report/export      - Setups as CSV
- GET   /api/ecommerce/platforms          - Supported platforms
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.exceptions import NotFoundError
from apps.core.exports import csv_response
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import HasPageAccess, IsAdminOrCoach, IsAuthenticated, IsEcommerceOrAdmin
from apps.core.serializers import (
    ECommerceSetupCreateSerializer,
    ECommerceSetupSerializer,
    ECommerceSetupWriteSerializer,
    OwnedStageStatusSerializer,
)
from apps.journey.services import set_stage_progress
from services.base import to_dict
from services.ecommerce_report import EXPORT_COLUMNS, PLATFORMS, build_ecommerce_report, export_rows

from .selectors import get_ecommerce_stage, get_report_rows, get_setups, get_stage_overview
from .services import complete_setup, create_setup, reopen_setup, update_setup

logger = logging.getLogger(__name__)


class ECommerceOverviewView(AuthenticatedAPIView, APIView):
    """
    GET /api/ecommerce

    Query params:
        batch: Batch filter
        search: Name, email or batch substring
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/ecommerce'

    @handle_api_errors('Failed to fetch e-commerce data')
    def get(self, request):
        user = self.get_user(request)
        participants = get_stage_overview(
            user,
            request.query_params.get('batch'),
            request.query_params.get('search'),
        )
        return Response({'participants': participants})


class ECommerceStageStatusView(AuthenticatedAPIView, APIView):
    """
    POST /api/ecommerce/stage-status

    Request body:
        {"user_id": "...", "status": "in_progress"}
    """
    permission_classes = [IsAuthenticated, IsEcommerceOrAdmin]

    @handle_api_errors('Failed to update status')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(OwnedStageStatusSerializer, request.data)
        stage = get_ecommerce_stage()
        if stage is None:
            raise NotFoundError('E-Commerce Setup stage is not configured')
        progress = set_stage_progress(actor=user, user_id=data['user_id'], stage_id=stage.id, status=data['status'])
        return Response({
            'user_id': str(progress.user_id),
            'stage_id': str(progress.stage_id),
            'status': progress.status,
            'completed_at': progress.completed_at,
        })


class SetupListView(AuthenticatedAPIView, APIView):
    """
    GET  /api/ecommerce/setups?status=&platform=
    POST /api/ecommerce/setups
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/ecommerce'

    @handle_api_errors('Failed to fetch setups')
    def get(self, request):
        user = self.get_user(request)
        setups = get_setups(
            viewer=user,
            status=request.query_params.get('status'),
            platform=request.query_params.get('platform'),
        )
        return Response({'setups': ECommerceSetupSerializer(setups, many=True).data})

    @handle_api_errors('Failed to create setup')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(ECommerceSetupCreateSerializer, request.data)
        setup = create_setup(actor=user, data=data)
        return Response({'setup': ECommerceSetupSerializer(setup).data}, status=status.HTTP_201_CREATED)


class SetupDetailView(AuthenticatedAPIView, APIView):
    """
    PATCH /api/ecommerce/setups/{setup_id}
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/ecommerce'

    @handle_api_errors('Failed to update setup')
    def patch(self, request, setup_id: str):
        user = self.get_user(request)
        data = self.validated(ECommerceSetupWriteSerializer, request.data)
        setup = update_setup(actor=user, setup_id=self.parse_uuid(setup_id, 'setup_id'), data=data)
        return Response({'setup': ECommerceSetupSerializer(setup).data})


class SetupCompleteView(AuthenticatedAPIView, APIView):
    """
    POST /api/ecommerce/setups/{setup_id}/complete
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/ecommerce'

    @handle_api_errors('Failed to mark setup complete')
    def post(self, request, setup_id: str):
        user = self.get_user(request)
        setup = complete_setup(actor=user, setup_id=self.parse_uuid(setup_id, 'setup_id'))
        return Response({'setup': ECommerceSetupSerializer(setup).data})


class SetupReopenView(AuthenticatedAPIView, APIView):
    """
    POST /api/ecommerce/setups/{setup_id}/reopen

    Coaches and admins only.
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to reopen setup')
    def post(self, request, setup_id: str):
        user = self.get_user(request)
        setup = reopen_setup(actor=user, setup_id=self.parse_uuid(setup_id, 'setup_id'))
        return Response({'setup': ECommerceSetupSerializer(setup).data})


class ECommerceReportView(AuthenticatedAPIView, APIView):
    """
    GET /api/ecommerce/report?batch=
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/ecommerce'

    @handle_api_errors('Failed to build e-commerce report')
    def get(self, request):
        user = self.get_user(request)
        rows = get_report_rows(user, request.query_params.get('batch'))
        return Response(to_dict(build_ecommerce_report(rows['profiles'], rows['setups'])))


class ECommerceReportExportView(AuthenticatedAPIView, APIView):
    """
    GET /api/ecommerce/report/export?batch=&lang=
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/ecommerce'

    @handle_api_errors('Failed to export e-commerce report')
    def get(self, request):
        user = self.get_user(request)
        rows = get_report_rows(user, request.query_params.get('batch'))
        return csv_response(
            export_rows(rows['profiles'], rows['setups']),
            EXPORT_COLUMNS,
            'ecommerce_report',
            self.export_language(request),
        )


class PlatformListView(AuthenticatedAPIView, APIView):
    """
    GET /api/ecommerce/platforms
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'platforms': PLATFORMS})
