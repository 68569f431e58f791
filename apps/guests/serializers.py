"""Serializers for the guests domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Guest


class GuestSerializer(serializers.ModelSerializer):
    reservationCount = serializers.IntegerField(source="reservation_count", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Guest
        fields = ["id", "name", "email", "phone", "address", "reservationCount", "createdAt"]
        read_only_fields = fields
