"""
Coach API Views

Endpoints:
- GET /api/coach           - Assigned participants and every pending review queue
- GET /api/coach/summary   - Facilitator summary: pending counts per participant
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import HasPageAccess, IsAuthenticated
from apps.core.serializers import (
    DocumentSerializer,
    EnrollmentSubmissionSerializer,
    ProfileMinimalSerializer,
    TaskSubmissionSerializer,
    TradeSerializer,
)
from services.base import to_dict
from services.facilitator import build_facilitator_summary

from .selectors import get_facilitator_rows, get_review_queues

logger = logging.getLogger(__name__)


class CoachQueuesView(AuthenticatedAPIView, APIView):
    """
    GET /api/coach
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/coach'

    @handle_api_errors('Failed to fetch review queues')
    def get(self, request):
        user = self.get_user(request)
        queues = get_review_queues(user)
        return Response({
            'participants': ProfileMinimalSerializer(queues['participants'], many=True).data,
            'pendingTasks': TaskSubmissionSerializer(queues['tasks'], many=True).data,
            'pendingDocuments': DocumentSerializer(queues['documents'], many=True).data,
            'pendingTrades': TradeSerializer(queues['trades'], many=True).data,
            'pendingEnrollments': EnrollmentSubmissionSerializer(queues['enrollments'], many=True).data,
        })


class FacilitatorSummaryView(AuthenticatedAPIView, APIView):
    """
    GET /api/coach/summary

    Participants sorted by how much is waiting on them, most first.
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/coach'

    @handle_api_errors('Failed to fetch facilitator summary')
    def get(self, request):
        user = self.get_user(request)
        rows = get_facilitator_rows(user)
        summary = build_facilitator_summary(
            rows['participants'],
            rows['stages'],
            rows['progress'],
            rows['pending_tasks'],
            rows['pending_documents'],
            rows['pending_trades'],
            rows['pending_enrollments'],
        )
        return Response(to_dict(summary))
