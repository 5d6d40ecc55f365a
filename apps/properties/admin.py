"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "city",
        "country",
        "property_type",
        "price",
        "currency",
        "max_guests",
        "rating",
        "host",
    )
    list_filter = ("property_type", "country", "currency")
    search_fields = ("title", "city", "state", "country", "host__email")
    list_select_related = ("host",)
    readonly_fields = ("rating", "created_at", "updated_at")
