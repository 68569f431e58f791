"""Room inventory models."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Amenity(models.Model):
    """Room amenity (WiFi, TV, Mini Bar...)."""

    name = models.CharField(max_length=100, unique=True)

    class Meta:
        verbose_name = _("Amenity")
        verbose_name_plural = _("Amenities")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Room(models.Model):
    """A bookable hotel room."""

    class RoomType(models.TextChoices):
        SINGLE = "single", _("Single")
        DOUBLE = "double", _("Double")
        SUITE = "suite", _("Suite")
        DELUXE = "deluxe", _("Deluxe")

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")
        MAINTENANCE = "maintenance", _("Maintenance")
        CLEANING = "cleaning", _("Cleaning")

    number = models.CharField(max_length=10, unique=True)
    room_type = models.CharField(
        max_length=20,
        choices=RoomType.choices,
        default=RoomType.SINGLE,
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Price per night."),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
        help_text=_("Derived from reservation activity; maintenance and cleaning are set by staff."),
    )
    amenities = models.ManyToManyField(Amenity, blank=True, related_name="rooms")
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["number"]
        indexes = [
            models.Index(fields=["status"], name="rooms_room_status_idx"),
            models.Index(fields=["room_type"], name="rooms_room_type_idx"),
        ]

    def __str__(self) -> str:
        return f"Room {self.number} ({self.room_type})"

    @property
    def is_available(self) -> bool:
        return self.status == self.Status.AVAILABLE

    @property
    def is_out_of_service(self) -> bool:
        return self.status in (self.Status.MAINTENANCE, self.Status.CLEANING)
