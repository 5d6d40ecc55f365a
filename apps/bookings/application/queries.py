"""
Booking Queries

Read-side use cases. They return ORM querysets ready for serialization
and raise domain errors that fail the whole request.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from django.db.models import QuerySet

from apps.bookings.application.command_handlers import make_date_range
from apps.bookings.domain.availability import AvailabilityChecker
from apps.bookings.models import Booking as BookingModel
from apps.bookings.repositories import DjangoBookingRepository
from apps.properties.models import Property
from shared.domain.exceptions import AuthorizationError, NotFoundError

AVAILABLE_MESSAGE = "Property is available for these dates"
UNAVAILABLE_MESSAGE = "Property is not available for these dates"


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    message: str


def _bookings() -> QuerySet:
    return BookingModel.objects.select_related("property", "property__host", "guest")


def check_availability(property_id: int, check_in: datetime, check_out: datetime) -> AvailabilityResult:
    """Side-effect free; repeated calls agree until a booking is written."""
    dates = make_date_range(check_in, check_out)
    if not Property.objects.filter(pk=property_id).exists():
        raise NotFoundError("Property not found")

    available = AvailabilityChecker(DjangoBookingRepository()).is_available(property_id, dates)
    return AvailabilityResult(
        available=available,
        message=AVAILABLE_MESSAGE if available else UNAVAILABLE_MESSAGE,
    )


def get_booking_for_actor(booking_id: UUID, actor_id: int) -> BookingModel:
    booking = _bookings().filter(pk=booking_id).first()
    if booking is None:
        raise NotFoundError("Booking not found")
    if booking.guest_id != actor_id and booking.property.host_id != actor_id:
        raise AuthorizationError("Not authorized to view this booking")
    return booking


def my_bookings(guest_id: int) -> QuerySet:
    return _bookings().filter(guest_id=guest_id).order_by("-created_at")


def property_bookings(property_id: int, actor_id: int) -> QuerySet:
    property_obj = Property.objects.filter(pk=property_id).only("id", "host_id").first()
    if property_obj is None:
        raise NotFoundError("Property not found")
    if property_obj.host_id != actor_id:
        raise AuthorizationError("Not authorized to view these bookings")
    return _bookings().filter(property_id=property_id).order_by("check_in")
