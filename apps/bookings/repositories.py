"""
Booking Repositories

Map booking rows to Booking aggregates and back. Store-level rule
violations surface as domain errors: model validation and CHECK
constraints as ValidationError, the PostgreSQL overlap exclusion
constraint as ConflictError.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Iterable
from uuid import UUID

from django.contrib.auth import get_user_model  # type: ignore
from django.core.exceptions import ValidationError as DjangoValidationError  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.domain.entities import Booking, BookingStatus, PaymentStatus, PropertyTerms
from apps.bookings.models import Booking as BookingModel
from apps.properties.models import Property as PropertyModel
from shared.domain.exceptions import ConflictError, ValidationError
from shared.domain.value_objects import DateRange, Money

logger = logging.getLogger(__name__)

OVERLAP_CONSTRAINT_NAME = "booking_no_overlapping_active_stays"


def utc_today() -> date:
    return timezone.now().date()


def _lock_queryset_if_possible(queryset):  # type: ignore
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _flatten_messages(exc: DjangoValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(str(message) for messages in exc.message_dict.values() for message in messages)
    return "; ".join(str(message) for message in exc.messages)


def to_entity(row: BookingModel) -> Booking:
    return Booking(
        id=row.pk,
        created_at=row.created_at,
        updated_at=row.updated_at,
        property_id=row.property_id,
        guest_id=row.guest_id,
        dates=DateRange(row.check_in, row.check_out),
        guests_count=row.number_of_guests,
        total_price=Money(row.total_price, row.currency),
        status=BookingStatus(row.status),
        payment_status=PaymentStatus(row.payment_status),
    )


class DjangoPropertyTermsRepository:
    """Read the listing terms a booking depends on."""

    def get(self, property_id: int, lock: bool = False) -> PropertyTerms | None:
        queryset = PropertyModel.objects.filter(pk=property_id)
        if lock:
            # Serializes booking writers of one property across processes.
            queryset = _lock_queryset_if_possible(queryset)
        row = queryset.only("id", "host_id", "price", "currency", "max_guests").first()
        if row is None:
            return None
        return PropertyTerms(
            property_id=row.pk,
            host_id=row.host_id,
            nightly_price=Money(row.price, row.currency),
            max_guests=row.max_guests,
        )


class DjangoUserRepository:
    def exists(self, user_id: int) -> bool:
        return get_user_model().objects.filter(pk=user_id, is_active=True).exists()

    def is_admin(self, user_id: int) -> bool:
        user = get_user_model().objects.filter(pk=user_id, is_active=True).first()
        return user is not None and user.is_admin()


class DjangoBookingRepository:
    """
    Usage:
        repo = DjangoBookingRepository()
        booking = repo.get(booking_id, lock=True)
        booking.confirm()
        repo.save(booking)

    ``today`` feeds the store's "check-in not in the past" rule.
    """

    def __init__(self, today: Callable[[], date] = utc_today):
        self.today = today

    def get(self, booking_id: UUID, lock: bool = False) -> Booking | None:
        queryset = BookingModel.objects.filter(pk=booking_id)
        if lock:
            queryset = _lock_queryset_if_possible(queryset)
        row = queryset.first()
        return to_entity(row) if row is not None else None

    def find_blocking(
        self,
        property_id: int,
        dates: DateRange,
        exclude_booking_id: UUID | None = None,
    ) -> Iterable[tuple[UUID, DateRange]]:
        queryset = BookingModel.objects.overlapping(property_id, dates.start, dates.end)
        if exclude_booking_id is not None:
            queryset = queryset.exclude(pk=exclude_booking_id)
        return [
            (pk, DateRange(check_in, check_out))
            for pk, check_in, check_out in queryset.values_list("pk", "check_in", "check_out")
        ]

    def save(self, booking: Booking) -> None:
        row = BookingModel.objects.select_related("property").filter(pk=booking.id).first()
        if row is None:
            row = BookingModel(id=booking.id, created_at=booking.created_at)

        row.property_id = booking.property_id
        row.guest_id = booking.guest_id
        row.check_in = booking.dates.start
        row.check_out = booking.dates.end
        row.number_of_guests = booking.guests_count
        row.total_price = booking.total_price.amount
        row.currency = booking.total_price.currency
        row.status = booking.status.value
        row.payment_status = booking.payment_status.value

        try:
            row.save(today=self.today())
        except DjangoValidationError as exc:
            raise ValidationError(_flatten_messages(exc)) from exc
        except IntegrityError as exc:
            if OVERLAP_CONSTRAINT_NAME in str(exc):
                logger.warning("Overlap constraint rejected booking %s", booking.id)
                raise ConflictError() from exc
            raise ValidationError("Booking violates a storage constraint") from exc

        booking.updated_at = row.updated_at

    def delete(self, booking: Booking) -> None:
        BookingModel.objects.filter(pk=booking.id).delete()
