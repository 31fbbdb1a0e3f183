"""
WebSocket consumers for real-time features.

Consumers handle WebSocket connections and forward events to connected clients.
"""

import logging
import time
from collections import deque

from channels.generic.websocket import AsyncJsonWebsocketConsumer
from django.contrib.auth.models import AnonymousUser

from apps.api.ws_signals import consolidated_orders_group

logger = logging.getLogger(__name__)

# Rate limiting configuration
RATE_LIMIT_MESSAGES = 30  # Max messages per window
RATE_LIMIT_WINDOW_SECONDS = 60  # Time window in seconds


class ConsolidatedOrderConsumer(AsyncJsonWebsocketConsumer):
    """
    WebSocket consumer for consolidated order events.

    Joins a user-scoped group so suppliers only receive orders sent to them.

    Groups:
        - consolidated_orders_{user_id}: Per-user consolidated order events
    """

    async def connect(self):
        """Authenticate and join the user-scoped group."""
        user = self.scope.get('user')

        if not user or isinstance(user, AnonymousUser):
            logger.warning('WebSocket connection rejected (consolidated orders): unauthenticated')
            await self.close()
            return

        self._message_timestamps = deque()
        self.group_name = consolidated_orders_group(user.id)

        await self.channel_layer.group_add(
            self.group_name,
            self.channel_name
        )

        await self.accept()
        logger.info(
            'WebSocket connected (consolidated orders): user=%s, channel=%s',
            user.username, self.channel_name,
        )

        await self.send_json({
            'type': 'connection_established',
            'message': 'Connected to consolidated order updates',
        })

    def _is_rate_limited(self) -> bool:
        """Check if the connection has exceeded the rate limit."""
        now = time.time()
        window_start = now - RATE_LIMIT_WINDOW_SECONDS

        while self._message_timestamps and self._message_timestamps[0] < window_start:
            self._message_timestamps.popleft()

        if len(self._message_timestamps) >= RATE_LIMIT_MESSAGES:
            return True

        self._message_timestamps.append(now)
        return False

    async def disconnect(self, close_code):
        """Leave the group on disconnect."""
        if hasattr(self, 'group_name'):
            await self.channel_layer.group_discard(
                self.group_name,
                self.channel_name
            )
        logger.info('WebSocket disconnected (consolidated orders): channel=%s, code=%s', self.channel_name, close_code)

    async def receive_json(self, content):
        """Handle incoming messages (ping/pong)."""
        if self._is_rate_limited():
            logger.warning('WebSocket rate limit exceeded (consolidated orders): channel=%s', self.channel_name)
            await self.send_json({
                'type': 'error',
                'message': 'Rate limit exceeded. Please slow down.',
            })
            return

        msg_type = content.get('type')

        if msg_type == 'ping':
            await self.send_json({'type': 'pong'})
        else:
            logger.debug('Unknown message type (consolidated orders): %s', msg_type)

    async def consolidated_order_sent(self, event):
        """Forward a sent consolidated order to the supplier."""
        await self.send_json(event['data'])
