"""
Audit trail writes.

Audit rows are written after the mutation they describe and outside its
transaction. A failed audit write is logged and swallowed so the user's
action still succeeds.
"""
import logging
from uuid import UUID

from django.db import DatabaseError

from .models import AuditLog

logger = logging.getLogger(__name__)


def record_audit(
    *,
    table_name: str,
    record_id: UUID | None,
    action: str,
    changed_by: UUID | None,
    user_id: UUID | None = None,
    old_status: str | None = None,
    new_status: str | None = None,
    notes: str | None = None,
) -> AuditLog | None:
    """
    Append one audit_logs row.

    Args:
        table_name: Table the change happened in, e.g. 'task_submissions'
        record_id: Primary key of the changed row
        action: Short verb, e.g. 'verified', 'reopened', 'bulk_approved'
        changed_by: Profile id of the actor
        user_id: Participant the record belongs to
        old_status / new_status: Status before and after
        notes: Free text shown in the history popup

    Returns:
        The AuditLog row, or None when the write failed
    """
    try:
        return AuditLog.objects.create(
            table_name=table_name,
            record_id=record_id,
            action=action,
            changed_by=changed_by,
            user_id=user_id,
            old_status=old_status,
            new_status=new_status,
            notes=notes,
        )
    except DatabaseError as e:
        logger.warning(f'Audit write for {table_name}/{record_id} ({action}) failed: {e}')
        return None


def history_for(table_name: str, record_id: UUID, limit: int = 50) -> list[dict]:
    """Audit rows for a single record, newest first."""
    rows = (
        AuditLog.objects
        .filter(table_name=table_name, record_id=record_id)
        .order_by('-created_at')[:limit]
    )
    return [
        {
            'id': row.id,
            'action': row.action,
            'old_status': row.old_status,
            'new_status': row.new_status,
            'changed_by': row.changed_by,
            'notes': row.notes,
            'created_at': row.created_at,
        }
        for row in rows
    ]
