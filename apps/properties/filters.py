"""FilterSet definitions for properties search and listing."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Property


class PropertyFilterSet(django_filters.FilterSet):
    """Listing filters: type, price window, party size and free-text location."""

    type = django_filters.ChoiceFilter(field_name="property_type", choices=Property.PropertyType.choices)
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")
    location = django_filters.CharFilter(method="filter_location")
    host = django_filters.NumberFilter(field_name="host_id")

    class Meta:
        model = Property
        fields = ["type", "min_price", "max_price", "guests", "location", "host"]

    def filter_location(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(city__icontains=value) | Q(state__icontains=value) | Q(country__icontains=value)
        )


def search_properties(queryset, query: str):  # type: ignore
    """Case-insensitive match over title, description and location parts."""
    query = (query or "").strip()
    if not query:
        return queryset.none()
    return queryset.filter(
        Q(title__icontains=query)
        | Q(description__icontains=query)
        | Q(city__icontains=query)
        | Q(state__icontains=query)
        | Q(country__icontains=query)
    )
