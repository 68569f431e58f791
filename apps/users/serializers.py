"""Serializers for user-related API responses."""

from __future__ import annotations

from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Staff user as returned by register and login."""

    role = serializers.SerializerMethodField()
    phone = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ["id", "username", "email", "role", "phone"]
        read_only_fields = fields

    @staticmethod
    def _profile(user):
        return getattr(user, "staff_profile", None)

    def get_role(self, user) -> str | None:
        profile = self._profile(user)
        return profile.role if profile else None

    def get_phone(self, user) -> str:
        profile = self._profile(user)
        return profile.phone if profile else ""
