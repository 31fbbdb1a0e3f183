"""
WebSocket URL routing for the API app.

Defines WebSocket endpoints for real-time features:
- /ws/consolidated-orders/  - Consolidated orders sent to the connected supplier
"""

from django.urls import re_path

from apps.api.consumers import ConsolidatedOrderConsumer

websocket_urlpatterns = [
    re_path(r'ws/consolidated-orders/$', ConsolidatedOrderConsumer.as_asgi()),
]
