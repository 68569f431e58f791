"""API views for analytics.

Front desk dashboard numbers: room inventory by status, reservation
counts, occupancy and revenue, plus today's arrivals and departures.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework.views import APIView  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.guests.models import Guest
from apps.reservations.models import Reservation
from apps.rooms.models import Room


def _counts_by_status(queryset, choices) -> dict[str, int]:
    counts = {value: 0 for value in choices.values}
    for row in queryset.values("status").annotate(total=models.Count("id")):
        counts[row["status"]] = row["total"]
    return counts


class OverviewAnalyticsView(APIView):
    """Return dashboard statistics for the whole hotel."""

    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):  # type: ignore
        rooms_by_status = _counts_by_status(Room.objects.all(), Room.Status)
        reservations_by_status = _counts_by_status(Reservation.objects.all(), Reservation.Status)

        total_rooms = sum(rooms_by_status.values())
        occupied = rooms_by_status[Room.Status.OCCUPIED]
        occupancy_rate = round(occupied * 100 / total_rooms, 1) if total_rooms else 0.0

        revenue = (
            Reservation.objects.exclude(status=Reservation.Status.CANCELLED)
            .aggregate(total=models.Sum("total_amount"))
            .get("total")
            or Decimal("0")
        )

        today = timezone.localdate()
        active = Reservation.objects.filter(status__in=Reservation.ACTIVE_STATUSES)

        return Response(
            {
                "success": True,
                "totalRooms": total_rooms,
                "roomsByStatus": rooms_by_status,
                "activeReservations": sum(reservations_by_status[s] for s in Reservation.ACTIVE_STATUSES),
                "reservationsByStatus": reservations_by_status,
                "occupancyRate": occupancy_rate,
                "revenue": revenue,
                "currency": settings.HOTEL_RESERVATIONS.get("CURRENCY", "INR"),
                "totalGuests": Guest.objects.count(),
                "todayCheckIns": active.filter(check_in__date=today).count(),
                "todayCheckOuts": active.filter(check_out__date=today).count(),
            }
        )
