"""Serializers for the booking domain.

Each operation has its own input serializer that turns validated data
into a command object; handlers never see raw request payloads. Status
values leave the API upper-cased.
"""

from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone

from django.utils.dateparse import parse_date  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.users.serializers import UserSummarySerializer
from shared.domain.value_objects import DateRange, as_utc_datetime

from .application.command_handlers import CreateBookingCommand, UpdateBookingCommand
from .models import Booking


class StayBoundaryField(serializers.DateTimeField):
    """Check-in/check-out instant. A bare ``YYYY-MM-DD`` means midnight UTC."""

    def __init__(self, **kwargs):  # type: ignore
        kwargs.setdefault("default_timezone", dt_timezone.utc)
        super().__init__(**kwargs)

    def to_internal_value(self, value):  # type: ignore
        if isinstance(value, date) and not isinstance(value, datetime):
            return as_utc_datetime(value)
        if isinstance(value, str):
            parsed = parse_date(value.strip()) if len(value.strip()) == 10 else None
            if parsed is not None:
                return as_utc_datetime(parsed)
        return as_utc_datetime(super().to_internal_value(value))


class UpperCaseField(serializers.ReadOnlyField):
    def to_representation(self, value):  # type: ignore
        return str(value).upper() if value is not None else None


class AvailabilityQuerySerializer(serializers.Serializer):
    property_id = serializers.IntegerField(min_value=1)
    check_in = StayBoundaryField()
    check_out = StayBoundaryField()


class CreateBookingSerializer(serializers.Serializer):
    property_id = serializers.IntegerField(min_value=1)
    check_in = StayBoundaryField()
    check_out = StayBoundaryField()
    number_of_guests = serializers.IntegerField(min_value=1)

    def to_command(self, guest_id: int) -> CreateBookingCommand:
        data = self.validated_data
        return CreateBookingCommand(
            property_id=data["property_id"],
            guest_id=guest_id,
            check_in=data["check_in"],
            check_out=data["check_out"],
            number_of_guests=data["number_of_guests"],
        )


class UpdateBookingSerializer(serializers.Serializer):
    check_in = StayBoundaryField(required=False)
    check_out = StayBoundaryField(required=False)
    number_of_guests = serializers.IntegerField(min_value=1, required=False)

    def validate(self, attrs):  # type: ignore
        if not attrs:
            raise serializers.ValidationError(
                "Provide at least one of check_in, check_out or number_of_guests."
            )
        return attrs

    def to_command(self, booking_id, actor_id: int) -> UpdateBookingCommand:  # type: ignore
        data = self.validated_data
        return UpdateBookingCommand(
            booking_id=booking_id,
            actor_id=actor_id,
            check_in=data.get("check_in"),
            check_out=data.get("check_out"),
            number_of_guests=data.get("number_of_guests"),
        )


class BookingPropertySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    title = serializers.CharField(read_only=True)
    city = serializers.CharField(read_only=True)
    country = serializers.CharField(read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    host_id = serializers.IntegerField(read_only=True)


class BookingSerializer(serializers.ModelSerializer):
    """Booking as returned by every booking endpoint."""

    property = BookingPropertySerializer(read_only=True)
    guest = UserSummarySerializer(read_only=True)
    status = UpperCaseField()
    payment_status = UpperCaseField()
    nights = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "property",
            "guest",
            "check_in",
            "check_out",
            "nights",
            "number_of_guests",
            "total_price",
            "currency",
            "status",
            "payment_status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_nights(self, obj: Booking) -> int:
        return DateRange(obj.check_in, obj.check_out).nights
