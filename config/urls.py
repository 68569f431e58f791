"""URL configuration for the hotel reservations project.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the routers of each app and the OpenAPI schema views.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from apps.reservations.views import HealthCheckView

urlpatterns = [
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/rooms/', include('apps.rooms.urls')),
    path('api/guests/', include('apps.guests.urls')),
    path('api/reservations/', include('apps.reservations.urls')),
    path('api/analytics/', include('apps.analytics.urls')),
    path('api/health/', HealthCheckView.as_view(), name='health'),
    # drf-spectacular URLs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
