"""
WebSocket broadcast helper functions.

Called by the service layer after a transaction commits to push real-time
updates to connected clients. Broadcast failures are logged and never
raised, so a missing or broken channel layer cannot undo a committed change.
"""

import logging

from channels.layers import get_channel_layer
from asgiref.sync import async_to_sync

logger = logging.getLogger(__name__)


def _get_channel_layer():
    """Get the channel layer, returning None if unavailable."""
    try:
        layer = get_channel_layer()
        if layer is None:
            logger.debug('Channel layer is not configured')
        return layer
    except Exception:
        logger.debug('Failed to get channel layer', exc_info=True)
        return None


def consolidated_orders_group(user_id):
    """Group name for a user's consolidated order events."""
    return f'consolidated_orders_{user_id}'


# ─── Consolidated Order Broadcasts ──────────────────────────────────────────────

def broadcast_consolidated_order_sent(supplier_id, order_id, quote_id, data=None):
    """
    Tell a supplier that a distributor sent them a consolidated order.

    Args:
        supplier_id: Supplier user primary key (receives the event)
        order_id: ConsolidatedOrder primary key
        quote_id: Primary key of the outbound quote created on send
        data: Optional dict with additional order data
    """
    layer = _get_channel_layer()
    if not layer:
        return

    try:
        payload = {
            'type': 'consolidated_order_sent',
            'order_id': order_id,
            'quote_id': quote_id,
        }
        if data:
            payload['data'] = data

        async_to_sync(layer.group_send)(
            consolidated_orders_group(supplier_id),
            {
                'type': 'consolidated.order.sent',
                'data': payload,
            }
        )
    except Exception:
        logger.warning('Failed to broadcast consolidated order %s', order_id, exc_info=True)
