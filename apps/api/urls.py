# apps/api/urls.py
"""
API URL configuration, mounted at /api/.

- /api/v1/          consolidated orders, JWT tokens, health check
- /api/schema/      OpenAPI schema
- /api/docs/        Swagger UI
- /api/redoc/       ReDoc
"""
from django.urls import path, include
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

urlpatterns = [
    path('v1/', include('apps.api.v1.urls')),
    path('schema/', SpectacularAPIView.as_view(), name='schema'),
    path('docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
