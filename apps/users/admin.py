"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin

from .models import StaffProfile


@admin.register(StaffProfile)
class StaffProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "phone", "created_at")
    list_filter = ("role",)
    search_fields = ("user__username", "user__email", "phone")
    list_select_related = ("user",)
    readonly_fields = ("created_at", "updated_at")
