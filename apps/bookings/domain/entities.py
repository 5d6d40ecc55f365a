"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a reservation
- BookingStatus: FSM states for booking lifecycle
- PaymentStatus: Payment state tracking
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.exceptions import InvalidStateError, ValidationError
from shared.domain.value_objects import DateRange, Money


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (host accepted, payment taken)
    - PENDING -> CANCELLED (guest or host cancelled)
    - CONFIRMED -> COMPLETED (stay finished)
    - CONFIRMED -> CANCELLED (guest or host cancelled)
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class PaymentStatus(Enum):
    """Payment status tracking"""
    PENDING = 'pending'     # Waiting for confirmation
    PAID = 'paid'           # Taken on confirmation
    REFUNDED = 'refunded'   # Returned after cancellation


TERMINAL_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED})


def calculate_total_price(nightly_price: Money, dates: DateRange) -> Money:
    """Nightly price times the number of nights, partial days rounded up."""
    return nightly_price * dates.nights


@dataclass(frozen=True)
class PropertyTerms:
    """The parts of a listing a booking depends on: owner, price and capacity."""
    property_id: int
    host_id: int
    nightly_price: Money
    max_guests: int

    def is_host(self, user_id: int) -> bool:
        return self.host_id == user_id


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a guest's reservation of a property for specific dates.

    Key invariants:
    - check_in < check_out (enforced by DateRange)
    - 1 <= guests_count <= property capacity
    - CANCELLED and COMPLETED are terminal
    - every status except CANCELLED blocks the property's dates
    """

    property_id: int
    guest_id: int
    dates: DateRange
    guests_count: int
    total_price: Money
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING

    def __post_init__(self):
        if self.guests_count < 1:
            raise ValidationError("Number of guests must be at least 1")

    @classmethod
    def create(
        cls,
        *,
        property_id: int,
        guest_id: int,
        dates: DateRange,
        guests_count: int,
        max_guests: int,
        nightly_price: Money,
        today: date,
    ) -> 'Booking':
        """
        Open a new PENDING booking

        Validates the stay against ``today`` and the property's capacity and
        prices it. Availability is the caller's concern.
        Events: BookingCreated
        """
        if dates.starts_before(today):
            raise ValidationError("Check-in date cannot be in the past")
        _check_capacity(guests_count, max_guests)

        booking = cls(
            property_id=property_id,
            guest_id=guest_id,
            dates=dates,
            guests_count=guests_count,
            total_price=calculate_total_price(nightly_price, dates),
        )

        from apps.bookings.domain.events import BookingCreated

        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            property_id=property_id,
            guest_id=guest_id,
            dates=dates,
            total_price=booking.total_price,
        ))
        return booking

    def reschedule(self, dates: DateRange, nightly_price: Money, today: date):
        """Move the stay and reprice it from the current nightly price."""
        self._ensure_editable()
        if dates.start != self.dates.start and dates.starts_before(today):
            raise ValidationError("Check-in date cannot be in the past")
        self.dates = dates
        self.total_price = calculate_total_price(nightly_price, dates)

    def change_guests(self, guests_count: int, max_guests: int):
        self._ensure_editable()
        _check_capacity(guests_count, max_guests)
        self.guests_count = guests_count

    def record_update(self, changed_fields: list[str]):
        """Stamp the aggregate after an edit. Events: BookingUpdated"""
        if not changed_fields:
            return

        from apps.bookings.domain.events import BookingUpdated

        self.touch()
        self.add_event(BookingUpdated(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            changed_fields=tuple(changed_fields),
            dates=self.dates,
            total_price=self.total_price,
        ))

    def confirm(self):
        """
        Confirm booking (PENDING -> CONFIRMED)

        Payment is taken at this point.
        Events: BookingConfirmed
        """
        if self.status != BookingStatus.PENDING:
            raise InvalidStateError(
                f"Cannot confirm booking with status {self.status.value}. "
                f"Booking must be PENDING."
            )

        from apps.bookings.domain.events import BookingConfirmed

        self.status = BookingStatus.CONFIRMED
        self.payment_status = PaymentStatus.PAID
        self.touch()

        self.add_event(BookingConfirmed(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            guest_id=self.guest_id,
            dates=self.dates,
        ))

    def complete(self):
        """
        Complete booking (CONFIRMED -> COMPLETED)

        Events: BookingCompleted
        """
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidStateError(
                f"Cannot complete booking with status {self.status.value}. "
                f"Booking must be CONFIRMED."
            )

        from apps.bookings.domain.events import BookingCompleted

        self.status = BookingStatus.COMPLETED
        self.touch()

        self.add_event(BookingCompleted(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            guest_id=self.guest_id,
        ))

    def cancel(self, cancelled_by: int):
        """
        Cancel booking

        Allowed from PENDING or CONFIRMED. Any payment is refunded.
        Events: BookingCancelled
        """
        if self.is_terminal:
            raise InvalidStateError(
                f"Cannot cancel booking with status {self.status.value}"
            )

        from apps.bookings.domain.events import BookingCancelled

        old_status = self.status
        self.status = BookingStatus.CANCELLED
        self.payment_status = PaymentStatus.REFUNDED
        self.touch()

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            cancelled_by=cancelled_by,
            old_status=old_status.value,
        ))

    def mark_deleted(self, deleted_by: int):
        from apps.bookings.domain.events import BookingDeleted

        self.add_event(BookingDeleted(
            aggregate_id=self.id,
            booking_id=self.id,
            property_id=self.property_id,
            deleted_by=deleted_by,
        ))

    def _ensure_editable(self):
        if self.is_terminal:
            raise InvalidStateError(
                f"Cannot modify booking with status {self.status.value}"
            )

    def blocks_dates(self) -> bool:
        """Every booking that is not cancelled keeps its dates."""
        return self.status != BookingStatus.CANCELLED

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @property
    def nights(self) -> int:
        return len(self.dates)

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, property_id={self.property_id}, "
            f"status={self.status.value}, dates={self.dates})"
        )


def _check_capacity(guests_count: int, max_guests: int):
    if guests_count < 1:
        raise ValidationError("Number of guests must be at least 1")
    if guests_count > max_guests:
        raise ValidationError(f"Number of guests exceeds property capacity of {max_guests}")


__all__ = [
    'Booking',
    'PropertyTerms',
    'BookingStatus',
    'PaymentStatus',
    'TERMINAL_STATUSES',
    'calculate_total_price',
]
