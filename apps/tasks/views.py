"""
Tasks API Views

Endpoints:
- GET  /api/tasks                              - Task catalog with the participant's submissions
- POST /api/tasks/submit                       - Submit a task (multipart, notes required)
- GET  /api/tasks/submissions                  - Review queue (staff)
- POST /api/tasks/submissions/{id}/review      - Verify or reject
- POST /api/tasks/submissions/{id}/reopen      - Admin: back to submitted
- GET  /api/tasks/submissions/{id}/history     - Audit trail for one submission
- POST /api/tasks/submit-on-behalf             - Admin: submit and verify for a participant
- POST /api/tasks/bulk-approve                 - Admin: verify several tasks for a participant
"""
import logging

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.audit import history_for
from apps.core.exceptions import NotFoundError
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import HasPageAccess, IsAdmin, IsAdminOrCoach, IsAuthenticated
from apps.core.selectors import get_visible_profile
from apps.core.serializers import (
    BulkTaskApproveSerializer,
    ReviewDecisionSerializer,
    SubmitOnBehalfSerializer,
    TaskSerializer,
    TaskSubmissionSerializer,
    TaskSubmitSerializer,
)
from apps.core.throttles import BurstRateThrottle, UploadRateThrottle

from .selectors import get_submission, get_submissions, get_task_catalog
from .services import (
    bulk_approve_tasks,
    reopen_task_submission,
    review_task_submission,
    submit_task,
    submit_task_on_behalf,
)

logger = logging.getLogger(__name__)


class TaskCatalogView(AuthenticatedAPIView, APIView):
    """
    GET /api/tasks

    Query params:
        user_id: Participant to show (staff only, default: caller)
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/tasks'

    @handle_api_errors('Failed to fetch tasks')
    def get(self, request):
        user = self.get_user(request)
        participant_id = user.id
        if not user.is_participant and request.query_params.get('user_id'):
            participant_id = self.parse_uuid(request.query_params.get('user_id'), 'user_id')
            get_visible_profile(user, participant_id)

        catalog = get_task_catalog(participant_id)
        tasks = [
            {
                **TaskSerializer(item['task']).data,
                'submission': TaskSubmissionSerializer(item['submission']).data if item['submission'] else None,
            }
            for item in catalog
        ]
        completed = sum(1 for item in catalog if item['submission'] and item['submission'].status == 'verified')
        return Response({'tasks': tasks, 'completed': completed, 'total': len(tasks)})


class TaskSubmitView(AuthenticatedAPIView, APIView):
    """
    POST /api/tasks/submit

    Multipart body:
        task_id, notes (required), attachment (optional, 10MB)
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    throttle_classes = [UploadRateThrottle]
    page_path = '/tasks'

    @handle_api_errors('Failed to submit task')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(TaskSubmitSerializer, request.data)
        submission = submit_task(
            user=user,
            task_id=data['task_id'],
            notes=data['notes'],
            attachment=data.get('attachment'),
        )
        return Response(
            {'submission': TaskSubmissionSerializer(submission).data},
            status=status.HTTP_201_CREATED
        )


class TaskSubmissionListView(AuthenticatedAPIView, APIView):
    """
    GET /api/tasks/submissions

    Query params:
        status: Filter by status (default: submitted, 'all' for every status)
        user_id: Limit to one participant
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to fetch task submissions')
    def get(self, request):
        user = self.get_user(request)
        submissions = get_submissions(
            viewer=user,
            status=request.query_params.get('status', 'submitted'),
            user_id=self.parse_uuid_optional(request.query_params.get('user_id')),
        )
        return Response({'submissions': TaskSubmissionSerializer(submissions, many=True).data})


class TaskReviewView(AuthenticatedAPIView, APIView):
    """
    POST /api/tasks/submissions/{submission_id}/review

    Request body:
        {"decision": "approve" | "reject", "notes": "..."}
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to review task')
    def post(self, request, submission_id: str):
        user = self.get_user(request)
        data = self.validated(ReviewDecisionSerializer, request.data)
        submission = review_task_submission(
            actor=user,
            submission_id=self.parse_uuid(submission_id, 'submission_id'),
            decision=data['decision'],
            notes=data.get('notes'),
        )
        return Response({'submission': TaskSubmissionSerializer(submission).data})


class TaskReopenView(AuthenticatedAPIView, APIView):
    """
    POST /api/tasks/submissions/{submission_id}/reopen
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to reopen task')
    def post(self, request, submission_id: str):
        user = self.get_user(request)
        submission = reopen_task_submission(
            actor=user,
            submission_id=self.parse_uuid(submission_id, 'submission_id'),
        )
        return Response({'submission': TaskSubmissionSerializer(submission).data})


class TaskHistoryView(AuthenticatedAPIView, APIView):
    """
    GET /api/tasks/submissions/{submission_id}/history
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to fetch history')
    def get(self, request, submission_id: str):
        user = self.get_user(request)
        submission = get_submission(self.parse_uuid(submission_id, 'submission_id'))
        if submission is None:
            raise NotFoundError('Task submission not found')
        get_visible_profile(user, submission.user_id)
        return Response({'history': history_for('task_submissions', submission.id)})


class SubmitOnBehalfView(AuthenticatedAPIView, APIView):
    """
    POST /api/tasks/submit-on-behalf

    Request body:
        {"user_id": "...", "task_id": "...", "notes": "optional"}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to submit task')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(SubmitOnBehalfSerializer, request.data)
        submission = submit_task_on_behalf(
            actor=user,
            user_id=data['user_id'],
            task_id=data['task_id'],
            notes=data.get('notes'),
        )
        return Response(
            {'submission': TaskSubmissionSerializer(submission).data},
            status=status.HTTP_201_CREATED
        )


class BulkTaskApproveView(AuthenticatedAPIView, APIView):
    """
    POST /api/tasks/bulk-approve

    Request body:
        {"user_id": "...", "task_ids": ["...", "..."]}
    """
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [BurstRateThrottle]

    @handle_api_errors('Failed to approve tasks')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(BulkTaskApproveSerializer, request.data)
        processed = bulk_approve_tasks(actor=user, user_id=data['user_id'], task_ids=data['task_ids'])
        return Response({'success': True, 'processed': processed})
