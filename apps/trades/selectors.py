"""
Trades Selectors
"""
from decimal import Decimal
from uuid import UUID

from django.db.models import Count, Q, Sum

from apps.core.authentication import AuthenticatedUser
from apps.core.models import Trade
from apps.core.workflows import TradeStatus


def get_own_trades(user_id: UUID):
    return Trade.objects.filter(user_id=user_id).order_by('-trade_date')


def get_trades(
    *,
    viewer: AuthenticatedUser,
    status: str | None = None,
    user_id: UUID | None = None,
):
    """Trades of the participants the viewer can see, newest first."""
    qs = Trade.objects.visible_to(viewer).select_related('user')
    if status and status != 'all':
        qs = qs.filter(status=status)
    if user_id:
        qs = qs.filter(user_id=user_id)
    return qs.order_by('-created_at')


def get_trade(trade_id: UUID) -> Trade | None:
    return Trade.objects.select_related('user').filter(id=trade_id).first()


def trade_totals(user_id: UUID) -> dict:
    """Header numbers on the trades page: counts per direction and approved volume."""
    totals = Trade.objects.filter(user_id=user_id).aggregate(
        total=Count('id'),
        exports=Count('id', filter=Q(trade_type='export')),
        imports=Count('id', filter=Q(trade_type='import')),
        approved_volume=Sum('amount', filter=Q(status=TradeStatus.APPROVED)),
    )
    totals['approved_volume'] = float(totals['approved_volume'] or Decimal('0'))
    return totals
