"""
Booking Event Handlers

Subscribers for booking domain events. They run after the producing
transaction has committed. The audit trail is one structured log line
per lifecycle transition.
"""

import structlog

from shared.application.message_bus import message_bus
from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    BookingDeleted,
    BookingUpdated,
)

audit_logger = structlog.get_logger("apps.bookings.audit")


def audit_booking_event(event) -> None:
    payload = event.to_dict()
    audit_logger.info(
        payload.pop("event_type"),
        booking_id=str(event.booking_id),
        property_id=event.property_id,
        **{key: value for key, value in payload.items() if key not in ("aggregate_id", "property_id")},
    )


AUDITED_EVENTS = (
    BookingCreated,
    BookingUpdated,
    BookingConfirmed,
    BookingCompleted,
    BookingCancelled,
    BookingDeleted,
)


def register_event_handlers(bus=message_bus) -> None:
    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_booking_event)
