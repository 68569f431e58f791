"""Guest API views."""

from __future__ import annotations

from django.db.models import Count  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.filters import SearchFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from .models import Guest
from .serializers import GuestSerializer


class GuestViewSet(viewsets.ReadOnlyModelViewSet):
    """Staff-only read access to guests; guests are written through reservations."""

    queryset = Guest.objects.annotate(reservation_count=Count("reservations"))
    serializer_class = GuestSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [SearchFilter]
    search_fields = ["name", "email", "phone"]

    def list(self, request, *args, **kwargs):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({"success": True, "guests": serializer.data, "total": len(serializer.data)})

    def retrieve(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(self.get_object())
        return Response({"success": True, "guest": serializer.data})
