"""Serializers for the rooms domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    """Room as exposed by the API: ``type`` and a flat list of amenity names."""

    type = serializers.CharField(source="room_type", read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    amenities = serializers.SlugRelatedField(many=True, read_only=True, slug_field="name")

    class Meta:
        model = Room
        fields = ["id", "number", "type", "price", "status", "amenities", "description"]
        read_only_fields = fields
