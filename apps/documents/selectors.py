"""
Documents Selectors
"""
from uuid import UUID

from apps.core.authentication import AuthenticatedUser
from apps.core.constants import REQUIRED_DOCUMENTS_PER_PARTICIPANT
from apps.core.models import Document
from apps.core.workflows import DocumentStatus


def get_own_documents(user_id: UUID):
    return Document.objects.filter(user_id=user_id).order_by('document_type')


def get_documents(
    *,
    viewer: AuthenticatedUser,
    status: str | None = None,
    user_id: UUID | None = None,
    document_type: str | None = None,
):
    """
    Documents the viewer may review, most recently submitted first.

    Args:
        viewer: The authenticated user
        status: Filter by status ('all' or empty for every status)
        user_id: Limit to one participant
        document_type: Limit to one document type
    """
    qs = Document.objects.visible_to(viewer).select_related('user')
    if status and status != 'all':
        qs = qs.filter(status=status)
    if user_id:
        qs = qs.filter(user_id=user_id)
    if document_type:
        qs = qs.filter(document_type=document_type)
    return qs.order_by('-submitted_at', '-created_at')


def get_document(document_id: UUID) -> Document | None:
    return Document.objects.select_related('user').filter(id=document_id).first()


def document_progress(user_id: UUID) -> dict:
    """Approved count against the required set, for the documents page header."""
    approved = Document.objects.filter(user_id=user_id, status=DocumentStatus.APPROVED).count()
    return {'approved': approved, 'required': REQUIRED_DOCUMENTS_PER_PARTICIPANT}
