"""
Admin API Views

Endpoints:
- GET   /api/admin/users                              - Every user with role and coach
- PATCH /api/admin/users/{id}/role                    - Replace a user's role
- PATCH /api/admin/users/{id}/coach                   - Assign or clear a coach
- POST  /api/admin/users/batch                        - Move several users into a batch
- POST  /api/admin/users/{id}/regenerate-unique-id    - Issue a new unique id
- GET   /api/admin/audit-logs                         - Latest audit rows
- GET   /api/admin/audit-logs/{table}/{record_id}     - History for one record
"""
import logging

from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.audit import history_for
from apps.core.constants import AUDIT_LOG_LIMIT
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import IsAdmin, IsAuthenticated
from apps.core.serializers import BatchUpdateSerializer, CoachAssignSerializer, RoleUpdateSerializer
from apps.core.throttles import BurstRateThrottle

from .selectors import get_audit_logs, get_coaches, get_users_with_roles
from .services import assign_coach, regenerate_unique_id, update_batches, update_user_role

logger = logging.getLogger(__name__)


class UserListView(AuthenticatedAPIView, APIView):
    """
    GET /api/admin/users

    Query params:
        search: Matches name, email or unique id
        role: Only users with this role ('all' for everyone)
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to fetch users')
    def get(self, request):
        users = get_users_with_roles(
            search=request.query_params.get('search'),
            role=request.query_params.get('role'),
        )
        coaches = [
            {'id': str(c['id']), 'full_name': c['full_name'], 'email': c['email']}
            for c in get_coaches()
        ]
        batches = sorted({u['batch_number'] for u in users if u['batch_number']})
        return Response({'users': users, 'coaches': coaches, 'batches': batches})


class UserRoleView(AuthenticatedAPIView, APIView):
    """
    PATCH /api/admin/users/{user_id}/role

    Request body:
        {"role": "coach"}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to update role')
    def patch(self, request, user_id: str):
        user = self.get_user(request)
        data = self.validated(RoleUpdateSerializer, request.data)
        role = update_user_role(actor=user, user_id=self.parse_uuid(user_id, 'user_id'), role=data['role'])
        return Response({'user_id': user_id, 'role': role})


class UserCoachView(AuthenticatedAPIView, APIView):
    """
    PATCH /api/admin/users/{user_id}/coach

    Request body:
        {"coach_id": "..."} or {"coach_id": null} to unassign
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to assign coach')
    def patch(self, request, user_id: str):
        user = self.get_user(request)
        data = self.validated(CoachAssignSerializer, request.data)
        profile = assign_coach(
            actor=user,
            user_id=self.parse_uuid(user_id, 'user_id'),
            coach_id=data.get('coach_id'),
        )
        return Response({
            'user_id': str(profile.id),
            'assigned_coach_id': str(profile.assigned_coach_id) if profile.assigned_coach_id else None,
        })


class BatchUpdateView(AuthenticatedAPIView, APIView):
    """
    POST /api/admin/users/batch

    Request body:
        {"user_ids": ["...", "..."], "batch_number": "B12"}
    """
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [BurstRateThrottle]

    @handle_api_errors('Failed to update batches')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(BatchUpdateSerializer, request.data)
        processed = update_batches(actor=user, user_ids=data['user_ids'], batch_number=data.get('batch_number'))
        return Response({'success': True, 'processed': processed})


class RegenerateUniqueIdView(AuthenticatedAPIView, APIView):
    """
    POST /api/admin/users/{user_id}/regenerate-unique-id
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to regenerate unique id')
    def post(self, request, user_id: str):
        user = self.get_user(request)
        new_id = regenerate_unique_id(actor=user, user_id=self.parse_uuid(user_id, 'user_id'))
        return Response({'user_id': user_id, 'unique_id': new_id})


class AuditLogListView(AuthenticatedAPIView, APIView):
    """
    GET /api/admin/audit-logs

    Query params:
        table_name, action: Exact filters ('all' to skip)
        user_id: Participant the rows belong to
        start_date, end_date: YYYY-MM-DD
        limit: At most 100
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to fetch audit logs')
    def get(self, request):
        params = request.query_params
        try:
            limit = int(params.get('limit', AUDIT_LOG_LIMIT))
        except ValueError:
            limit = AUDIT_LOG_LIMIT

        logs = get_audit_logs(
            table_name=params.get('table_name'),
            action=params.get('action'),
            user_id=self.parse_uuid_optional(params.get('user_id')),
            start_date=self.parse_date(params.get('start_date')),
            end_date=self.parse_date(params.get('end_date')),
            limit=max(limit, 1),
        )
        return Response({'logs': logs, 'count': len(logs)})


class RecordHistoryView(AuthenticatedAPIView, APIView):
    """
    GET /api/admin/audit-logs/{table_name}/{record_id}
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to fetch history')
    def get(self, request, table_name: str, record_id: str):
        history = history_for(table_name, self.parse_uuid(record_id, 'record_id'))
        return Response({'history': history})
