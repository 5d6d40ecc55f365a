"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange, Money


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created (status PENDING)

    Triggers:
    - Audit log entry
    - Host notification (not wired)
    """
    booking_id: UUID
    property_id: int
    guest_id: int
    dates: DateRange
    total_price: Money

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            property_id=self.property_id,
            guest_id=self.guest_id,
            check_in=self.dates.start.isoformat(),
            check_out=self.dates.end.isoformat(),
            total_price=str(self.total_price.amount),
        )
        return data


@dataclass(kw_only=True)
class BookingUpdated(DomainEvent):
    """Event: Guest changed dates and/or guest count"""
    booking_id: UUID
    property_id: int
    changed_fields: tuple
    dates: DateRange
    total_price: Money

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            property_id=self.property_id,
            changed_fields=list(self.changed_fields),
            total_price=str(self.total_price.amount),
        )
        return data


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """Event: Host confirmed the booking (PENDING -> CONFIRMED)"""
    booking_id: UUID
    property_id: int
    guest_id: int
    dates: DateRange


@dataclass(kw_only=True)
class BookingCompleted(DomainEvent):
    """Event: Stay finished (CONFIRMED -> COMPLETED)"""
    booking_id: UUID
    property_id: int
    guest_id: int


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    The dates become available again.
    """
    booking_id: UUID
    property_id: int
    cancelled_by: int
    old_status: str  # Status before cancellation

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            property_id=self.property_id,
            cancelled_by=self.cancelled_by,
            old_status=self.old_status,
        )
        return data


@dataclass(kw_only=True)
class BookingDeleted(DomainEvent):
    """Event: An administrator physically removed the booking record"""
    booking_id: UUID
    property_id: int
    deleted_by: int
