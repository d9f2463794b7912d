"""
Trades API Views

Endpoints:
- GET  /api/trades               - Own trades (participants) or the scoped list (staff)
- POST /api/trades               - Log a trade (multipart, attachment required)
- POST /api/trades/{id}/review   - Approve or reject
"""
import logging

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.constants import ROLE_PARTICIPANT
from apps.core.mixins import AuthenticatedAPIView, handle_api_errors
from apps.core.permissions import HasPageAccess, IsAdminOrCoach, IsAuthenticated
from apps.core.serializers import ReviewDecisionSerializer, TradeCreateSerializer, TradeSerializer
from apps.core.throttles import UploadRateThrottle

from .selectors import get_own_trades, get_trades, trade_totals
from .services import log_trade, review_trade

logger = logging.getLogger(__name__)


class TradeListView(AuthenticatedAPIView, APIView):
    """
    GET  /api/trades
    POST /api/trades

    Query params (staff):
        status: Filter by status ('all' for every status)
        user_id: Limit to one participant
    """
    permission_classes = [IsAuthenticated, HasPageAccess]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    page_path = '/trades'

    def get_throttles(self):
        if self.request.method == 'POST':
            return [UploadRateThrottle()]
        return super().get_throttles()

    @handle_api_errors('Failed to fetch trades')
    def get(self, request):
        user = self.get_user(request)
        if user.is_participant:
            return Response({
                'trades': TradeSerializer(get_own_trades(user.id), many=True).data,
                'totals': trade_totals(user.id),
            })

        trades = get_trades(
            viewer=user,
            status=request.query_params.get('status'),
            user_id=self.parse_uuid_optional(request.query_params.get('user_id')),
        )
        return Response({'trades': TradeSerializer(trades, many=True).data})

    @handle_api_errors('Failed to log trade')
    def post(self, request):
        user = self.get_user(request)
        self.require_role(user, ROLE_PARTICIPANT)
        data = self.validated(TradeCreateSerializer, request.data)
        trade = log_trade(user=user, data=data, attachment=data['attachment'])
        return Response({'trade': TradeSerializer(trade).data}, status=status.HTTP_201_CREATED)


class TradeReviewView(AuthenticatedAPIView, APIView):
    """
    POST /api/trades/{trade_id}/review

    Request body:
        {"decision": "approve" | "reject", "notes": "..."}
    """
    permission_classes = [IsAuthenticated, IsAdminOrCoach]

    @handle_api_errors('Failed to review trade')
    def post(self, request, trade_id: str):
        user = self.get_user(request)
        data = self.validated(ReviewDecisionSerializer, request.data)
        trade = review_trade(
            actor=user,
            trade_id=self.parse_uuid(trade_id, 'trade_id'),
            decision=data['decision'],
            notes=data.get('notes'),
        )
        return Response({'trade': TradeSerializer(trade).data})
