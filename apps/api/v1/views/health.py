# apps/api/v1/views/health.py
"""
Health check endpoint for load balancers and monitoring.

No authentication required.
"""
import logging

from asgiref.sync import async_to_sync
from django.conf import settings
from django.db import DatabaseError, connection
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """
    GET /api/v1/health/

    Reports database and channel layer status. A broken channel layer only
    degrades the service, since websocket notifications are best effort.
    """
    report = {
        'status': 'healthy',
        'database': 'unknown',
        'channel_layer': 'unknown',
    }

    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        report['database'] = 'connected'
    except DatabaseError as e:
        logger.error('Health check: database unavailable', exc_info=True)
        report['database'] = f'error: {type(e).__name__}'
        report['status'] = 'unhealthy'
        return Response(report, status=503)

    backend = settings.CHANNEL_LAYERS.get('default', {}).get('BACKEND', '')
    if 'Redis' not in backend:
        report['channel_layer'] = 'in-memory'
        return Response(report, status=200)

    from channels.layers import get_channel_layer

    layer = get_channel_layer()
    try:
        async_to_sync(layer.send)('health-check', {'type': 'health.check'})
        async_to_sync(layer.receive)('health-check')
        report['channel_layer'] = 'connected'
    except Exception as e:
        logger.warning('Health check: channel layer unavailable', exc_info=True)
        report['channel_layer'] = f'error: {type(e).__name__}'
        report['status'] = 'degraded'

    return Response(report, status=200)
