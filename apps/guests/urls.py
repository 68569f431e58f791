"""URL routing for the guests domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import GuestViewSet

router = SimpleRouter()
router.register(r"", GuestViewSet, basename="guest")

urlpatterns = [
    path("", include(router.urls)),
]
