"""
Document Services

Upload and submit by participants, review by staff, and the admin
corrections (reopen, bulk approve).
"""
import logging
from uuid import UUID

from django.utils import timezone

from apps.core.audit import record_audit
from apps.core.authentication import AuthenticatedUser
from apps.core.bulk import run_sequentially
from apps.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from apps.core.models import Document
from apps.core.selectors import get_visible_profile
from apps.core.storage import bucket_for, delete_file, storage_path_from_url, upload_user_file
from apps.core.workflows import (
    DOCUMENT_REVIEW_TRANSITIONS,
    DocumentStatus,
    WorkflowError,
    can_transition,
    reopen_target,
)

from .selectors import get_document

logger = logging.getLogger(__name__)

BULK_REVIEW_NOTES = 'Bulk approved by admin'


def _load_document(document_id: UUID) -> Document:
    document = get_document(document_id)
    if document is None:
        raise NotFoundError('Document not found')
    return document


def upload_document(
    *,
    user: AuthenticatedUser,
    document_type: str,
    uploaded_file,
    expiry_date=None,
) -> Document:
    """
    Store a file for one document type, replacing any earlier upload.

    The record goes back to pending; the participant submits it for review
    as a separate step.

    Raises:
        ConflictError: the document of this type is already approved
    """
    document = Document.objects.filter(user_id=user.id, document_type=document_type).first()
    old_status = document.status if document else None
    if old_status == DocumentStatus.APPROVED:
        raise ConflictError('Document is already approved', details={'status': old_status})

    result = upload_user_file('document', user.id, uploaded_file, document_type=document_type)

    if document is None:
        document = Document(user_id=user.id, document_type=document_type)
    document.file_url = result.public_url
    document.document_name = uploaded_file.name
    document.status = DocumentStatus.PENDING
    if expiry_date is not None:
        document.expiry_date = expiry_date
    document.save()

    record_audit(
        table_name='documents',
        record_id=document.id,
        action='uploaded',
        changed_by=user.id,
        user_id=user.id,
        old_status=old_status,
        new_status=DocumentStatus.PENDING,
        notes=document_type,
    )
    return document


def submit_document(*, user: AuthenticatedUser, document_id: UUID, notes: str) -> Document:
    """
    Participant sends an uploaded document for review.

    Raises:
        NotFoundError: unknown document
        PermissionDeniedError: the document belongs to someone else
        ValidationError: no file has been uploaded yet
        ConflictError: the document is not pending or rejected
    """
    document = _load_document(document_id)
    if document.user_id != user.id:
        raise PermissionDeniedError('You can only submit your own documents')
    if not document.file_url:
        raise ValidationError('Upload a file before submitting')

    old_status = document.status
    if not can_transition(DOCUMENT_REVIEW_TRANSITIONS, old_status, DocumentStatus.SUBMITTED):
        raise ConflictError('Document cannot be submitted now', details={'status': old_status})

    document.status = DocumentStatus.SUBMITTED
    document.submitted_at = timezone.now()
    document.submission_notes = notes.strip()
    document.save()

    record_audit(
        table_name='documents',
        record_id=document.id,
        action='submitted',
        changed_by=user.id,
        user_id=user.id,
        old_status=old_status,
        new_status=DocumentStatus.SUBMITTED,
        notes=document.submission_notes,
    )
    return document


def review_document(
    *,
    actor: AuthenticatedUser,
    document_id: UUID,
    decision: str,
    notes: str | None = None,
) -> Document:
    """Approve or reject a document."""
    document = _load_document(document_id)
    get_visible_profile(actor, document.user_id)

    old_status = document.status
    document.status = DocumentStatus.APPROVED if decision == 'approve' else DocumentStatus.REJECTED
    document.reviewed_by = actor.id
    document.reviewed_at = timezone.now()
    document.review_notes = notes or None
    document.save()

    record_audit(
        table_name='documents',
        record_id=document.id,
        action=document.status,
        changed_by=actor.id,
        user_id=document.user_id,
        old_status=old_status,
        new_status=document.status,
        notes=notes,
    )
    return document


def reopen_document(*, actor: AuthenticatedUser, document_id: UUID) -> Document:
    """
    Admin correction: move a decided document back to pending.

    Clears reviewed_by, reviewed_at and review_notes.

    Raises:
        ConflictError: the document has not been approved or rejected
    """
    document = _load_document(document_id)
    old_status = document.status
    try:
        target = reopen_target('documents', old_status)
    except WorkflowError as e:
        raise ConflictError(str(e), details={'status': old_status}) from e

    document.status = target
    document.reviewed_by = None
    document.reviewed_at = None
    document.review_notes = None
    document.save()

    record_audit(
        table_name='documents',
        record_id=document.id,
        action='reopened',
        changed_by=actor.id,
        user_id=document.user_id,
        old_status=old_status,
        new_status=target,
    )
    logger.info(f'Document {document.id} reopened by {actor.id}')
    return document


def bulk_approve_documents(*, actor: AuthenticatedUser, document_ids: list[UUID]) -> int:
    """Approve several documents, one write per document."""
    return run_sequentially(
        document_ids,
        lambda document_id: review_document(
            actor=actor,
            document_id=document_id,
            decision='approve',
            notes=BULK_REVIEW_NOTES,
        ),
        label='approve documents',
    )


def delete_document(*, user: AuthenticatedUser, document_id: UUID) -> None:
    """
    Participant removes their own document before it is reviewed.

    The stored file is removed too; a storage failure is logged and the
    record is still deleted.

    Raises:
        PermissionDeniedError: the document belongs to someone else
        ConflictError: the document is already under review or decided
    """
    document = _load_document(document_id)
    if document.user_id != user.id:
        raise PermissionDeniedError('You can only delete your own documents')
    if document.status != DocumentStatus.PENDING:
        raise ConflictError('Only pending documents can be deleted', details={'status': document.status})

    bucket = bucket_for('document')
    storage_path = storage_path_from_url(document.file_url, bucket)
    if storage_path:
        result = delete_file(bucket, storage_path)
        if not result.success:
            logger.warning(f'Could not remove stored file for document {document.id}: {result.error}')

    record_audit(
        table_name='documents',
        record_id=document.id,
        action='deleted',
        changed_by=user.id,
        user_id=user.id,
        old_status=document.status,
    )
    document.delete()
