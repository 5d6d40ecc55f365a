"""
Availability Checker

Decides whether a property can take a stay for a given date range.

Every booking that is not CANCELLED blocks its dates (PENDING,
CONFIRMED and COMPLETED alike). Ranges are compared as closed
intervals: a stay checking out on the instant another one checks in
still collides, so same-day turnover is refused.

The check is a pure read. Callers that act on the answer must hold the
per-property lock for the whole check-then-write sequence, see
apps.bookings.application.locks.
"""

from typing import Iterable, Protocol
from uuid import UUID

from shared.domain.value_objects import DateRange


def ranges_overlap(a: DateRange, b: DateRange) -> bool:
    """a.start <= b.end and a.end >= b.start"""
    return a.overlaps_with(b)


class BlockingBookingSource(Protocol):
    """Read side the checker needs from the booking store."""

    def find_blocking(
        self,
        property_id: int,
        dates: DateRange,
        exclude_booking_id: UUID | None = None,
    ) -> Iterable[tuple[UUID, DateRange]]:
        """Active bookings of the property whose range may touch ``dates``."""
        ...


class AvailabilityChecker:
    """
    Usage:
        checker = AvailabilityChecker(booking_repo)
        if not checker.is_available(property_id, dates):
            raise ConflictError()

    ``exclude_booking_id`` drops one booking from the overlap set, used
    when the booking being edited is checked against its own property.
    """

    def __init__(self, source: BlockingBookingSource):
        self.source = source

    def conflicts(
        self,
        property_id: int,
        dates: DateRange,
        exclude_booking_id: UUID | None = None,
    ) -> list[UUID]:
        """Ids of active bookings overlapping ``dates``."""
        return [
            booking_id
            for booking_id, booked in self.source.find_blocking(property_id, dates, exclude_booking_id)
            if booking_id != exclude_booking_id and ranges_overlap(booked, dates)
        ]

    def is_available(
        self,
        property_id: int,
        dates: DateRange,
        exclude_booking_id: UUID | None = None,
    ) -> bool:
        return not self.conflicts(property_id, dates, exclude_booking_id)
