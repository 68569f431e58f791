"""Reservation models."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import StayPeriod


class Reservation(models.Model):
    """A guest's stay in one room."""

    class Status(models.TextChoices):
        CONFIRMED = "confirmed", _("Confirmed")
        CHECKED_IN = "checked_in", _("Checked in")
        CHECKED_OUT = "checked_out", _("Checked out")
        CANCELLED = "cancelled", _("Cancelled")

    # Statuses that occupy the room and block overlapping bookings.
    ACTIVE_STATUSES = (Status.CONFIRMED, Status.CHECKED_IN)

    guest = models.ForeignKey(
        "guests.Guest",
        on_delete=models.CASCADE,
        related_name="reservations",
    )
    room = models.ForeignKey(
        "rooms.Room",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    check_in = models.DateTimeField()
    check_out = models.DateTimeField()
    number_of_guests = models.PositiveSmallIntegerField(default=1)
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Nights multiplied by the room's nightly price."),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.CONFIRMED,
    )
    special_requests = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="reservation_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(number_of_guests__gte=1),
                name="reservation_min_one_guest",
            ),
        ]
        indexes = [
            models.Index(fields=["room", "check_in", "check_out"], name="reservation_room_dates_idx"),
            models.Index(fields=["status"], name="reservation_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.pk} for room {self.room_id}"

    @property
    def period(self) -> StayPeriod:
        return StayPeriod(self.check_in, self.check_out)
