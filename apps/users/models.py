"""Staff account models."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone format. Use the international format without spaces."),
)


def normalize_phone(phone: str) -> str:
    """Strip spaces and dashes so phones are stored uniformly."""
    return (phone or "").replace(" ", "").replace("-", "")


class StaffProfile(models.Model):
    """Role and contact details of a hotel staff member."""

    class Role(models.TextChoices):
        ADMIN = "admin", _("Administrator")
        MANAGER = "manager", _("Manager")
        STAFF = "staff", _("Staff")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="staff_profile",
    )
    phone = models.CharField(max_length=20, blank=True, validators=[PHONE_VALIDATOR])
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STAFF)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Staff profile")
        verbose_name_plural = _("Staff profiles")

    def __str__(self) -> str:
        return f"{self.user} ({self.role})"
