"""Serializers for the reservation API.

Request and response bodies keep the camelCase field names the front
desk client already speaks; validated data comes out in snake_case so it
can be handed to the ReservationManager unchanged.
"""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Reservation


class ReservationSerializer(serializers.ModelSerializer):
    """Reservation with denormalized guest and room display fields."""

    guestId = serializers.ReadOnlyField(source="guest.id")
    guestName = serializers.ReadOnlyField(source="guest.name")
    guestEmail = serializers.ReadOnlyField(source="guest.email")
    guestPhone = serializers.ReadOnlyField(source="guest.phone")
    roomId = serializers.ReadOnlyField(source="room.id")
    roomNumber = serializers.ReadOnlyField(source="room.number")
    roomType = serializers.ReadOnlyField(source="room.room_type")
    checkIn = serializers.DateTimeField(source="check_in", read_only=True)
    checkOut = serializers.DateTimeField(source="check_out", read_only=True)
    numberOfGuests = serializers.IntegerField(source="number_of_guests", read_only=True)
    totalAmount = serializers.DecimalField(
        source="total_amount",
        max_digits=12,
        decimal_places=2,
        coerce_to_string=False,
        read_only=True,
    )
    specialRequests = serializers.CharField(source="special_requests", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "guestId",
            "guestName",
            "guestEmail",
            "guestPhone",
            "roomId",
            "roomNumber",
            "roomType",
            "checkIn",
            "checkOut",
            "numberOfGuests",
            "totalAmount",
            "status",
            "specialRequests",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class _ReservationDatesMixin:
    def validate(self, attrs):  # type: ignore
        check_in = attrs.get("check_in")
        check_out = attrs.get("check_out")
        if check_in is not None and check_out is not None and check_out <= check_in:
            raise serializers.ValidationError({"checkOut": ["Check-out must be after check-in."]})
        return attrs


class ReservationCreateSerializer(_ReservationDatesMixin, serializers.Serializer):
    """Input for booking a room."""

    guestName = serializers.CharField(source="guest_name", max_length=255)
    guestEmail = serializers.EmailField(source="guest_email")
    guestPhone = serializers.CharField(source="guest_phone", max_length=32, required=False, allow_blank=True, default="")
    roomId = serializers.IntegerField(source="room_id", min_value=1)
    checkIn = serializers.DateTimeField(source="check_in")
    checkOut = serializers.DateTimeField(source="check_out")
    numberOfGuests = serializers.IntegerField(source="number_of_guests", min_value=1, default=1)
    specialRequests = serializers.CharField(
        source="special_requests",
        required=False,
        allow_blank=True,
        default="",
    )


class ReservationUpdateSerializer(_ReservationDatesMixin, serializers.Serializer):
    """Partial changes to guest details, dates, head count or status."""

    guestName = serializers.CharField(source="guest_name", max_length=255, required=False)
    guestEmail = serializers.EmailField(source="guest_email", required=False)
    guestPhone = serializers.CharField(source="guest_phone", max_length=32, required=False, allow_blank=True)
    checkIn = serializers.DateTimeField(source="check_in", required=False)
    checkOut = serializers.DateTimeField(source="check_out", required=False)
    numberOfGuests = serializers.IntegerField(source="number_of_guests", min_value=1, required=False)
    status = serializers.CharField(max_length=20, required=False)
    specialRequests = serializers.CharField(source="special_requests", required=False, allow_blank=True)

    def validate(self, attrs):  # type: ignore
        unknown = sorted(set(self.initial_data) - set(self.fields))
        if unknown:
            raise serializers.ValidationError({name: ["This field cannot be changed."] for name in unknown})
        return super().validate(attrs)
