"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Open a PENDING booking for a guest
- UpdateBookingCommand: Guest changes dates and/or party size
- CancelBookingCommand: Guest or host cancels
- ConfirmBookingCommand: Host confirms (payment taken)
- CompleteBookingCommand: Host marks the stay finished
- DeleteBookingCommand: Administrator removes the record

Every handler that can change which dates a property has taken runs
under the property's write lock and inside one unit of work, with the
property row locked for update. Domain events go out after commit.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable
from uuid import UUID
import logging

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from shared.domain.value_objects import DateRange
from apps.bookings.application.locks import property_lock
from apps.bookings.domain.availability import AvailabilityChecker
from apps.bookings.domain.entities import Booking, PropertyTerms
from apps.bookings.repositories import (
    DjangoBookingRepository,
    DjangoPropertyTermsRepository,
    DjangoUserRepository,
    utc_today,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


def make_date_range(check_in: datetime, check_out: datetime) -> DateRange:
    try:
        return DateRange(check_in, check_out)
    except ValueError as exc:
        raise ValidationError("Check-out date must be after check-in date") from exc


# ===== Commands =====

@dataclass(frozen=True)
class CreateBookingCommand:
    property_id: int
    guest_id: int
    check_in: datetime
    check_out: datetime
    number_of_guests: int


@dataclass(frozen=True)
class UpdateBookingCommand:
    """Only the fields that are set are changed."""
    booking_id: UUID
    actor_id: int
    check_in: datetime | None = None
    check_out: datetime | None = None
    number_of_guests: int | None = None

    @property
    def changes_dates(self) -> bool:
        return self.check_in is not None or self.check_out is not None


@dataclass(frozen=True)
class CancelBookingCommand:
    booking_id: UUID
    actor_id: int  # guest or host


@dataclass(frozen=True)
class ConfirmBookingCommand:
    booking_id: UUID
    actor_id: int  # host


@dataclass(frozen=True)
class CompleteBookingCommand:
    booking_id: UUID
    actor_id: int  # host


@dataclass(frozen=True)
class DeleteBookingCommand:
    booking_id: UUID
    actor_id: int  # admin


# ===== Command Handlers =====

class BookingCommandHandler:
    """Shared wiring: repositories, availability checker and clock."""

    def __init__(
        self,
        booking_repo: DjangoBookingRepository | None = None,
        property_repo: DjangoPropertyTermsRepository | None = None,
        user_repo: DjangoUserRepository | None = None,
        today: Clock = utc_today,
    ):
        self.today = today
        self.booking_repo = booking_repo or DjangoBookingRepository(today=today)
        self.property_repo = property_repo or DjangoPropertyTermsRepository()
        self.user_repo = user_repo or DjangoUserRepository()
        self.checker = AvailabilityChecker(self.booking_repo)

    def _get_booking(self, booking_id: UUID, lock: bool = False) -> Booking:
        booking = self.booking_repo.get(booking_id, lock=lock)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def _get_terms(self, property_id: int, lock: bool = False) -> PropertyTerms:
        terms = self.property_repo.get(property_id, lock=lock)
        if terms is None:
            raise NotFoundError("Property not found")
        return terms

    def _ensure_available(self, terms: PropertyTerms, dates: DateRange, exclude_booking_id: UUID | None = None):
        conflicts = self.checker.conflicts(terms.property_id, dates, exclude_booking_id)
        if conflicts:
            logger.warning(
                "Dates %s on property %s collide with %d booking(s)",
                dates, terms.property_id, len(conflicts),
            )
            raise ConflictError()


class CreateBookingHandler(BookingCommandHandler):
    """
    Handler for CreateBooking command

    Strategy:
    1. Take the in-process lock for the property
    2. Start the unit of work and lock the property row (SELECT FOR UPDATE)
    3. Validate the guest, dates and party size
    4. Check availability against active bookings
    5. Persist; on PostgreSQL the exclusion constraint backs up step 4
    6. Publish BookingCreated after commit
    """

    def handle(self, command: CreateBookingCommand) -> Booking:
        logger.info(
            "Creating booking for property %s, guest %s, %s - %s",
            command.property_id, command.guest_id, command.check_in, command.check_out,
        )

        with property_lock(command.property_id):
            with DjangoUnitOfWork() as uow:
                terms = self._get_terms(command.property_id, lock=True)
                if not self.user_repo.exists(command.guest_id):
                    raise NotFoundError("Guest not found")

                dates = make_date_range(command.check_in, command.check_out)
                booking = Booking.create(
                    property_id=terms.property_id,
                    guest_id=command.guest_id,
                    dates=dates,
                    guests_count=command.number_of_guests,
                    max_guests=terms.max_guests,
                    nightly_price=terms.nightly_price,
                    today=self.today(),
                )
                self._ensure_available(terms, dates)

                self.booking_repo.save(booking)
                uow.collect_events(booking)

        logger.info("Booking %s created, total %s", booking.id, booking.total_price)
        return booking


class UpdateBookingHandler(BookingCommandHandler):
    """Guest-only edit of dates and party size."""

    def handle(self, command: UpdateBookingCommand) -> Booking:
        property_id = self._get_booking(command.booking_id).property_id

        with property_lock(property_id):
            with DjangoUnitOfWork() as uow:
                terms = self._get_terms(property_id, lock=True)
                booking = self._get_booking(command.booking_id, lock=True)
                if booking.guest_id != command.actor_id:
                    raise AuthorizationError("Not authorized to update this booking")

                changed: list[str] = []
                if command.changes_dates:
                    dates = make_date_range(
                        command.check_in or booking.dates.start,
                        command.check_out or booking.dates.end,
                    )
                    booking.reschedule(dates, terms.nightly_price, self.today())
                    self._ensure_available(terms, dates, exclude_booking_id=booking.id)
                    changed += ["check_in", "check_out", "total_price"]

                if command.number_of_guests is not None:
                    booking.change_guests(command.number_of_guests, terms.max_guests)
                    changed.append("number_of_guests")

                booking.record_update(changed)
                self.booking_repo.save(booking)
                uow.collect_events(booking)

        logger.info("Booking %s updated (%s)", booking.id, ", ".join(changed) or "no changes")
        return booking


class CancelBookingHandler(BookingCommandHandler):
    """Guest or host cancels; dates are released and payment refunded."""

    def handle(self, command: CancelBookingCommand) -> Booking:
        property_id = self._get_booking(command.booking_id).property_id

        with property_lock(property_id):
            with DjangoUnitOfWork() as uow:
                terms = self._get_terms(property_id, lock=True)
                booking = self._get_booking(command.booking_id, lock=True)
                if booking.guest_id != command.actor_id and not terms.is_host(command.actor_id):
                    raise AuthorizationError("Not authorized to cancel this booking")

                booking.cancel(cancelled_by=command.actor_id)
                self.booking_repo.save(booking)
                uow.collect_events(booking)

        logger.info("Booking %s cancelled by %s", booking.id, command.actor_id)
        return booking


class ConfirmBookingHandler(BookingCommandHandler):
    def handle(self, command: ConfirmBookingCommand) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = self._get_booking(command.booking_id, lock=True)
            terms = self._get_terms(booking.property_id)
            if not terms.is_host(command.actor_id):
                raise AuthorizationError("Not authorized to confirm this booking")

            booking.confirm()
            self.booking_repo.save(booking)
            uow.collect_events(booking)

        logger.info("Booking %s confirmed", booking.id)
        return booking


class CompleteBookingHandler(BookingCommandHandler):
    def handle(self, command: CompleteBookingCommand) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = self._get_booking(command.booking_id, lock=True)
            terms = self._get_terms(booking.property_id)
            if not terms.is_host(command.actor_id):
                raise AuthorizationError("Not authorized to complete this booking")

            booking.complete()
            self.booking_repo.save(booking)
            uow.collect_events(booking)

        logger.info("Booking %s completed", booking.id)
        return booking


class DeleteBookingHandler(BookingCommandHandler):
    """Administrative hard delete. Any status may be removed."""

    def handle(self, command: DeleteBookingCommand) -> Booking:
        if not self.user_repo.is_admin(command.actor_id):
            raise AuthorizationError("Only administrators can delete bookings")

        with DjangoUnitOfWork() as uow:
            booking = self._get_booking(command.booking_id, lock=True)
            booking.mark_deleted(deleted_by=command.actor_id)
            self.booking_repo.delete(booking)
            uow.collect_events(booking)

        logger.info("Booking %s deleted by admin %s", booking.id, command.actor_id)
        return booking
