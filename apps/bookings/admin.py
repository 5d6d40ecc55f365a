"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "guest",
        "status",
        "payment_status",
        "check_in",
        "check_out",
        "number_of_guests",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "check_in")
    search_fields = ("id", "property__title", "guest__email")
    list_select_related = ("property", "guest")
    readonly_fields = (
        "id",
        "total_price",
        "currency",
        "created_at",
        "updated_at",
    )
