"""FilterSet definitions for room listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Count, Q  # type: ignore

from .models import Room


class RoomFilterSet(django_filters.FilterSet):
    """Filters used by the room list endpoint."""

    type = django_filters.ChoiceFilter(field_name="room_type", choices=Room.RoomType.choices)
    status = django_filters.ChoiceFilter(field_name="status", choices=Room.Status.choices)
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    # CSV of amenity names, requires all selected amenities
    amenities = django_filters.CharFilter(method="filter_amenities")

    class Meta:
        model = Room
        fields = ["type", "status"]

    def filter_amenities(self, queryset, name, value):  # type: ignore
        names = [item.strip() for item in str(value).split(",") if item.strip()]
        if not names:
            return queryset
        lowered = [item.lower() for item in names]
        matching = Q()
        for item in lowered:
            matching |= Q(amenities__name__iexact=item)
        return (
            queryset.filter(matching)
            .annotate(matched_amenities=Count("amenities", filter=matching, distinct=True))
            .filter(matched_amenities=len(set(lowered)))
            .distinct()
        )
