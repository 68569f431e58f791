"""Admin registrations for the rooms domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Amenity, Room


@admin.register(Amenity)
class AmenityAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("number", "room_type", "price", "status", "updated_at")
    list_filter = ("room_type", "status")
    search_fields = ("number", "description")
    filter_horizontal = ("amenities",)
    readonly_fields = ("created_at", "updated_at")
