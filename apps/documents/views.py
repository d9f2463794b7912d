"""
Documents API Views

Endpoints:
- GET    /api/documents                  - Own documents, or the review list for staff
- POST   /api/documents/upload           - Upload a file for one document type (multipart)
- POST   /api/documents/{id}/submit      - Send for review (notes required)
- DELETE /api/documents/{id}             - Remove own pending document
- POST   /api/documents/{id}/review      - Approve or reject
- POST   /api/documents/{id}/reopen      - Admin: back to pending
- GET    /api/documents/{id}/history     - Audit trail for one document
- POST   /api/documents/bulk-approve     - Admin: approve several documents
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
    BulkIdsSerializer,
    DocumentSerializer,
    DocumentSubmitSerializer,
    DocumentUploadSerializer,
    ReviewDecisionSerializer,
)
from apps.core.throttles import BurstRateThrottle, UploadRateThrottle

from .selectors import document_progress, get_document, get_documents, get_own_documents
from .services import (
    bulk_approve_documents,
    delete_document,
    reopen_document,
    review_document,
    submit_document,
    upload_document,
)

logger = logging.getLogger(__name__)


class DocumentListView(AuthenticatedAPIView, APIView):
    """
    GET /api/documents

    Participants get their own documents. Staff get the documents of the
    participants they can see.

    Query params (staff):
        status: Filter by status ('all' for every status)
        user_id: Limit to one participant
        document_type: Limit to one type
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/documents'

    @handle_api_errors('Failed to fetch documents')
    def get(self, request):
        user = self.get_user(request)
        if user.is_participant:
            return Response({
                'documents': DocumentSerializer(get_own_documents(user.id), many=True).data,
                'progress': document_progress(user.id),
            })

        documents = get_documents(
            viewer=user,
            status=request.query_params.get('status'),
            user_id=self.parse_uuid_optional(request.query_params.get('user_id')),
            document_type=request.query_params.get('document_type') or None,
        )
        return Response({'documents': DocumentSerializer(documents, many=True).data})


class DocumentUploadView(AuthenticatedAPIView, APIView):
    """
    POST /api/documents/upload

    Multipart body:
        document_type, file (10MB), expiry_date (optional)
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    parser_classes = [MultiPartParser, FormParser]
    throttle_classes = [UploadRateThrottle]
    page_path = '/documents'

    @handle_api_errors('Failed to upload document')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(DocumentUploadSerializer, request.data)
        document = upload_document(
            user=user,
            document_type=data['document_type'],
            uploaded_file=data['file'],
            expiry_date=data.get('expiry_date'),
        )
        return Response(
            {'document': DocumentSerializer(document).data},
            status=status.HTTP_201_CREATED
        )


class DocumentSubmitView(AuthenticatedAPIView, APIView):
    """
    POST /api/documents/{document_id}/submit

    Request body:
        {"notes": "..."}
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    parser_classes = [JSONParser, FormParser]
    page_path = '/documents'

    @handle_api_errors('Failed to submit document')
    def post(self, request, document_id: str):
        user = self.get_user(request)
        data = self.validated(DocumentSubmitSerializer, request.data)
        document = submit_document(
            user=user,
            document_id=self.parse_uuid(document_id, 'document_id'),
            notes=data['notes'],
        )
        return Response({'document': DocumentSerializer(document).data})


class DocumentDetailView(AuthenticatedAPIView, APIView):
    """
    DELETE /api/documents/{document_id}
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    page_path = '/documents'

    @handle_api_errors('Failed to delete document')
    def delete(self, request, document_id: str):
        user = self.get_user(request)
        delete_document(user=user, document_id=self.parse_uuid(document_id, 'document_id'))
        return Response(status=status.HTTP_204_NO_CONTENT)


class DocumentReviewView(AuthenticatedAPIView, APIView):
    """
    POST /api/documents/{document_id}/review

    Request body:
        {"decision": "approve" | "reject", "notes": "..."}
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to review document')
    def post(self, request, document_id: str):
        user = self.get_user(request)
        data = self.validated(ReviewDecisionSerializer, request.data)
        document = review_document(
            actor=user,
            document_id=self.parse_uuid(document_id, 'document_id'),
            decision=data['decision'],
            notes=data.get('notes'),
        )
        return Response({'document': DocumentSerializer(document).data})


class DocumentReopenView(AuthenticatedAPIView, APIView):
    """
    POST /api/documents/{document_id}/reopen
    """
    permission_classes = [IsAuthenticated, IsAdmin]

    @handle_api_errors('Failed to reopen document')
    def post(self, request, document_id: str):
        user = self.get_user(request)
        document = reopen_document(actor=user, document_id=self.parse_uuid(document_id, 'document_id'))
        return Response({'document': DocumentSerializer(document).data})


class DocumentHistoryView(AuthenticatedAPIView, APIView):
    """
    GET /api/documents/{document_id}/history
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to fetch history')
    def get(self, request, document_id: str):
        user = self.get_user(request)
        document = get_document(self.parse_uuid(document_id, 'document_id'))
        if document is None:
            raise NotFoundError('Document not found')
        get_visible_profile(user, document.user_id)
        return Response({'history': history_for('documents', document.id)})


class BulkDocumentApproveView(AuthenticatedAPIView, APIView):
    """
    POST /api/documents/bulk-approve

    Request body:
        {"ids": ["...", "..."]}
    """
    permission_classes = [IsAuthenticated, IsAdmin]
    throttle_classes = [BurstRateThrottle]

    @handle_api_errors('Failed to approve documents')
    def post(self, request):
        user = self.get_user(request)
        data = self.validated(BulkIdsSerializer, request.data)
        processed = bulk_approve_documents(actor=user, document_ids=data['ids'])
        return Response({'success': True, 'processed': processed})
