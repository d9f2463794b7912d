"""
Core Views for the Journey Backend

Liveness probe used by the deployment platform.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny

from .authentication import AuthenticatedUser

logger = logging.getLogger(__name__)


def _database_state() -> str:
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
        cursor.fetchone()
    return 'connected'


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """
    GET /api/health

    200 when the Supabase database answers, 503 otherwise. Storage and auth
    are reported as configured or not; they are not called.
    """
    payload = {
        'status': 'healthy',
        'service': 'journey-backend',
        'supabase_configured': bool(settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY),
    }

    try:
        payload['database'] = _database_state()
    except DatabaseError as e:
        logger.error(f'Health check database probe failed: {e}')
        payload['status'] = 'unhealthy'
        payload['database'] = 'unavailable'
        return JsonResponse(payload, status=503)

    user = getattr(request, 'user', None)
    if isinstance(user, AuthenticatedUser):
        payload['user'] = {'id': str(user.id), 'role': user.role}

    return JsonResponse(payload)
