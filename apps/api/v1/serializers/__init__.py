# API Serializers
from .consolidation import (
    ConsolidatedOrderItemSerializer,
    DraftSummarySerializer, DraftCreateSerializer,
    ItemAddSerializer, ItemQuantitySerializer, NotesSerializer,
    SendOrderSerializer, SyncResultSerializer,
    QuoteItemSerializer, QuoteSerializer,
)
