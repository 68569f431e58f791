"""Guest models."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class GuestManager(models.Manager):
    @staticmethod
    def normalize_email(email: str) -> str:
        """Emails are unique case-insensitively; store them lower-cased."""
        return (email or "").strip().lower()

    def get_by_email(self, email: str):
        return self.get(email=self.normalize_email(email))


class Guest(models.Model):
    """Hotel guest."""

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=32, blank=True)
    address = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = GuestManager()

    class Meta:
        verbose_name = _("Guest")
        verbose_name_plural = _("Guests")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    def save(self, *args, **kwargs):  # type: ignore
        self.email = Guest.objects.normalize_email(self.email)
        super().save(*args, **kwargs)
