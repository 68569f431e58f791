"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "room",
        "guest",
        "status",
        "check_in",
        "check_out",
        "number_of_guests",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "room__room_type", "check_in", "check_out")
    search_fields = ("guest__name", "guest__email", "room__number")
    list_select_related = ("guest", "room")
    readonly_fields = ("total_amount", "created_at", "updated_at")
