"""
Trade Services
"""
import logging
from uuid import UUID

from django.utils import timezone

from apps.core.audit import record_audit
from apps.core.authentication import AuthenticatedUser
from apps.core.constants import DEFAULT_CURRENCY
from apps.core.exceptions import ConflictError, NotFoundError
from apps.core.models import Trade
from apps.core.selectors import get_visible_profile
from apps.core.storage import upload_user_file
from apps.core.workflows import TRADE_REVIEW_TRANSITIONS, TradeStatus, can_transition

from .selectors import get_trade

logger = logging.getLogger(__name__)


def log_trade(*, user: AuthenticatedUser, data: dict, attachment) -> Trade:
    """
    Participant records an import or export.

    The receipt is uploaded before the row is written. A failed insert
    leaves the receipt in storage.
    """
    result = upload_user_file('trade_receipt', user.id, attachment)

    trade = Trade.objects.create(
        user_id=user.id,
        trade_type=data['trade_type'],
        product_service=data['product_service'],
        country=data['country'],
        state=data.get('state') or None,
        amount=data['amount'],
        currency=DEFAULT_CURRENCY,
        trade_date=data['trade_date'],
        notes=data.get('notes') or None,
        status=TradeStatus.PENDING,
        attachment_url=result.public_url,
    )
    logger.info(f'Trade {trade.id} logged by {user.id}')
    return trade


def review_trade(
    *,
    actor: AuthenticatedUser,
    trade_id: UUID,
    decision: str,
    notes: str | None = None,
) -> Trade:
    """
    Approve or reject a pending trade.

    Raises:
        NotFoundError: unknown trade
        ConflictError: the trade was already decided
    """
    trade = get_trade(trade_id)
    if trade is None:
        raise NotFoundError('Trade not found')
    get_visible_profile(actor, trade.user_id)

    target = TradeStatus.APPROVED if decision == 'approve' else TradeStatus.REJECTED
    old_status = trade.status
    if not can_transition(TRADE_REVIEW_TRANSITIONS, old_status, target):
        raise ConflictError('Trade has already been reviewed', details={'status': old_status})

    trade.status = target
    trade.approved_by = actor.id
    trade.approved_at = timezone.now()
    trade.approval_notes = notes or None
    trade.save()

    record_audit(
        table_name='trades',
        record_id=trade.id,
        action=target,
        changed_by=actor.id,
        user_id=trade.user_id,
        old_status=old_status,
        new_status=target,
        notes=notes,
    )
    return trade
