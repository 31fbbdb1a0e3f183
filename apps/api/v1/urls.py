# apps/api/v1/urls.py
"""
URL routing for API v1.

All API endpoints are mounted under /api/v1/
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from .views.consolidation import ConsolidatedOrderViewSet, ConsolidatedOrderItemViewSet
from .views.health import health_check

# Create router and register viewsets
router = DefaultRouter()

# Consolidated orders
router.register(r'consolidated-orders', ConsolidatedOrderViewSet, basename='consolidatedorder')
router.register(r'consolidated-order-items', ConsolidatedOrderItemViewSet, basename='consolidatedorderitem')

urlpatterns = [
    # JWT Authentication endpoints
    path('auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # Health check (no auth)
    path('health/', health_check, name='health_check'),

    # Router URLs
    path('', include(router.urls)),
]
