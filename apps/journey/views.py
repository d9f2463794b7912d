"""
Journey API Views

Endpoints:
- GET   /api/journey/stages                  - Stages with progress and can_update flags
- GET   /api/journey/stats                   - Participant headline stats
- GET   /api/journey/special-links           - Session links for the caller's batch
- POST  /api/journey/progress                - Set a participant's stage status
- POST  /api/journey/progress/bulk-complete  - Complete several stages for one participant
- GET   /api/journey/enrollment              - Own enrollment submission
- POST  /api/journey/enrollment              - Submit or resubmit enrollment (multipart)
- POST  /api/journey/enrollment/documents-sent - Participant confirms papers were sent
- GET   /api/journey/enrollments             - Staff review queue
- PATCH /api/journey/enrollments/{id}        - Staff status update
"""
import logging

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import HasPageAccess, IsAuthenticated, IsStaff
from apps.core.selectors import get_visible_profile
from apps.core.serializers import (
    BulkStageCompleteSerializer,
    EnrollmentStatusSerializer,
    EnrollmentSubmissionSerializer,
    EnrollmentWriteSerializer,
    SpecialSessionLinkSerializer,
    StageProgressUpdateSerializer,
)
from apps.core.throttles import BurstRateThrottle, UploadRateThrottle

from .selectors import (
    get_enrollment,
    get_enrollment_queue,
    get_journey_stats,
    get_special_links,
    get_stage_board,
)
from .services import (
    bulk_complete_stages,
    mark_enrollment_documents_sent,
    set_stage_progress,
    submit_enrollment,
    update_enrollment_status,
)

logger = logging.getLogger(__name__)


class ParticipantTargetMixin:
    """Resolve ?user_id= for staff; participants always get themselves."""

    def target_participant_id(self, request, user):
        raw = request.query_params.get('user_id')
        if not raw or user.is_participant:
            return user.id
        participant_id = self.parse_uuid(raw, 'user_id')
        get_visible_profile(user, participant_id)
        return participant_id


class StageBoardView(ParticipantTargetMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/journey/stages

    Query params:
        user_id: Participant to show (staff only, default: caller)
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/journey'

    @handle_api_errors('Failed to fetch journey stages')
    def get(self, request):
        user = self.get_user(request)
        participant_id = self.target_participant_id(request, user)
        return Response({
            'user_id': str(participant_id),
            'stages': get_stage_board(viewer=user, participant_id=participant_id),
        })


class JourneyStatsView(ParticipantTargetMixin, AuthenticatedAPIView, APIView):
    """
    GET /api/journey/stats
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/journey'

    @handle_api_errors('Failed to fetch journey stats')
    def get(self, request):
        user = self.get_user(request)
        return Response(get_journey_stats(self.target_participant_id(request, user)))


class SpecialLinksView(AuthenticatedAPIView, APIView):
    """
    GET /api/journey/special-links

    Links with no target batch are shown to everyone.
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to fetch session links')
    def get(self, request):
        user = self.get_user(request)
        links = get_special_links(user.batch_number)
        return Response({'links': SpecialSessionLinkSerializer(links, many=True).data})


class StageProgressView(AuthenticatedAPIView, APIView):
    """
    POST /api/journey/progress

    Request body:
        {"user_id": "...", "stage_id": "...", "status": "completed"}

    Responds 403 when the caller's role does not own the stage.
    """
    permission_classes = [IsAuthenticated, IsStaff]

    @handle_api_errors('Failed to update stage progress')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(StageProgressUpdateSerializer, request.data)
        progress = set_stage_progress(
            actor=user,
            user_id=data['user_id'],
            stage_id=data['stage_id'],
            status=data['status'],
        )
        return Response({
            'id': str(progress.id),
            'user_id': str(progress.user_id),
            'stage_id': str(progress.stage_id),
            'status': progress.status,
            'started_at': progress.started_at,
            'completed_at': progress.completed_at,
        })


class BulkStageCompleteView(AuthenticatedAPIView, APIView):
    """
    POST /api/journey/progress/bulk-complete

    Request body:
        {"user_id": "...", "stage_ids": ["...", "..."]}
    """
    permission_classes = [IsAuthenticated, IsStaff]
    throttle_classes = [BurstRateThrottle]

    @handle_api_errors('Failed to complete stages')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(BulkStageCompleteSerializer, request.data)
        processed = bulk_complete_stages(actor=user, user_id=data['user_id'], stage_ids=data['stage_ids'])
        return Response({'success': True, 'processed': processed})


class EnrollmentView(AuthenticatedAPIView, APIView):
    """
    GET  /api/journey/enrollment
    POST /api/journey/enrollment

    POST accepts multipart with an optional `attachment` file.
    """
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_throttles(self):
        if self.request.method == 'POST':
            return [UploadRateThrottle()]
        return super().get_throttles()

    @handle_api_errors('Failed to fetch enrollment')
    def get(self, request):
        user = self.get_user(request)
        enrollment = get_enrollment(user.id)
        return Response({
            'enrollment': EnrollmentSubmissionSerializer(enrollment).data if enrollment else None,
        })

    @handle_api_errors('Failed to submit enrollment')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(EnrollmentWriteSerializer, request.data)
        enrollment = submit_enrollment(user=user, data=data, attachment=data.get('attachment'))
        return Response(
            {'enrollment': EnrollmentSubmissionSerializer(enrollment).data},
            status=status.HTTP_201_CREATED
        )


class EnrollmentDocumentsSentView(AuthenticatedAPIView, APIView):
    """
    POST /api/journey/enrollment/documents-sent
    """
    permission_classes = [IsAuthenticated]

    @handle_api_errors('Failed to update enrollment')
    def post(self, request):
        user = self.get_user(request)
        enrollment = mark_enrollment_documents_sent(user=user)
        return Response({'enrollment': EnrollmentSubmissionSerializer(enrollment).data})


class EnrollmentQueueView(AuthenticatedAPIView, APIView):
    """
    GET /api/journey/enrollments

    Query params:
        status: Filter by status, 'all' for every status
                (default: submitted and documents_sent_to_office)
    """
    permission_classes = [IsAuthenticated, IsStaff]

    @handle_api_errors('Failed to fetch enrollments')
    def get(self, request):
        user = self.get_user(request)
        queue = get_enrollment_queue(viewer=user, status=request.query_params.get('status'))
        return Response({'enrollments': EnrollmentSubmissionSerializer(queue, many=True).data})


class EnrollmentStatusView(AuthenticatedAPIView, APIView):
    """
    PATCH /api/journey/enrollments/{enrollment_id}

    Request body:
        {"status": "documents_sent_to_user"}
    """
    permission_classes = [IsAuthenticated, IsStaff]

    @handle_api_errors('Failed to update enrollment')
    def patch(self, request, enrollment_id: str):
        user = self.get_user(request)
        data = self.validated(EnrollmentStatusSerializer, request.data)
        enrollment = update_enrollment_status(
            actor=user,
            enrollment_id=self.parse_uuid(enrollment_id, 'enrollment_id'),
            status=data['status'],
        )
        return Response({'enrollment': EnrollmentSubmissionSerializer(enrollment).data})
