# API Views
from .consolidation import ConsolidatedOrderViewSet, ConsolidatedOrderItemViewSet
from .health import health_check
