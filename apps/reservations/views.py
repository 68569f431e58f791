"""API views for the reservation domain."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .serializers import (
    ReservationCreateSerializer,
    ReservationSerializer,
    ReservationUpdateSerializer,
)
from .services import ReservationManager, get_reservation_manager


class ReservationViewSet(viewsets.ViewSet):
    """Front desk operations on reservations, routed through the ReservationManager."""

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = ReservationSerializer

    def get_manager(self) -> ReservationManager:
        if not hasattr(self, "_manager"):
            self._manager = get_reservation_manager()
        return self._manager

    def list(self, request):  # type: ignore
        reservations = self.get_manager().list_reservations()
        data = ReservationSerializer(reservations, many=True).data
        return Response({"success": True, "reservations": data, "total": len(data)})

    def create(self, request):  # type: ignore
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = self.get_manager().create_reservation(**serializer.validated_data)
        return Response(
            {
                "success": True,
                "reservation": ReservationSerializer(reservation).data,
                "message": "Reservation created successfully",
            },
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):  # type: ignore
        reservation = self.get_manager().get_reservation(pk)
        return Response({"success": True, "reservation": ReservationSerializer(reservation).data})

    def update(self, request, pk=None):  # type: ignore
        # PUT and PATCH both apply only the fields present in the body.
        serializer = ReservationUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        reservation = self.get_manager().update_reservation(pk, serializer.validated_data)
        return Response(
            {
                "success": True,
                "reservation": ReservationSerializer(reservation).data,
                "message": "Reservation updated successfully",
            }
        )

    def partial_update(self, request, pk=None):  # type: ignore
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):  # type: ignore
        self.get_manager().delete_reservation(pk)
        return Response({"success": True, "message": "Reservation deleted successfully"})

    @action(detail=True, methods=["get"])
    def room(self, request, pk=None):  # type: ignore
        assignment = self.get_manager().get_room_by_reservation(pk)
        return Response(
            {
                "success": True,
                "roomNumber": assignment.room_number,
                "reservation": ReservationSerializer(assignment.reservation).data,
            }
        )

    @action(detail=True, methods=["get"], url_path="checkout-timing")
    def checkout_timing(self, request, pk=None):  # type: ignore
        timing = self.get_manager().checkout_timing(pk)
        reservation_data = ReservationSerializer(timing.reservation).data
        return Response(
            {
                "success": True,
                "reservationId": timing.reservation.pk,
                "roomNumber": reservation_data["roomNumber"],
                "checkOut": reservation_data["checkOut"],
                "remaining": timing.countdown.as_dict(),
                "overdue": timing.countdown.overdue,
            }
        )


class HealthCheckView(APIView):
    """Database liveness probe."""

    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def get(self, request):  # type: ignore
        result = get_reservation_manager().store.health_check()
        code = status.HTTP_200_OK if result["status"] == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE
        return Response({"status": result["status"], "message": result["message"]}, status=code)
