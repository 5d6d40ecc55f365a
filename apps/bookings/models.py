"""Booking storage model.

The model re-validates the stay on every save, independently of the
application layer: dates in order, check-in not in the past for new
rows, and a non-negative total. Party size is checked against the
property's capacity when the row is new or its property or party size
changes, so lowering a listing's capacity never blocks status changes
of bookings already taken. Violations raise
``django.core.exceptions.ValidationError``.
"""

from __future__ import annotations

import builtins
import uuid
from datetime import date, timezone as dt_timezone
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models, transaction  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BookingQuerySet(models.QuerySet):
    def active(self):  # type: ignore
        return self.exclude(status=Booking.Status.CANCELLED)

    def overlapping(self, property_id: int, check_in, check_out):  # type: ignore
        """Active bookings of a property touching the closed range [check_in, check_out]."""
        return self.active().filter(
            property_id=property_id,
            check_in__lte=check_out,
            check_out__gte=check_in,
        )


class Booking(models.Model):
    """Reservation of a property by a guest."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        REFUNDED = "refunded", _("Refunded")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    check_in = models.DateTimeField()
    check_out = models.DateTimeField()
    number_of_guests = models.PositiveSmallIntegerField(default=1)
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="USD")
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=16,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(number_of_guests__gte=1),
                name="booking_positive_guests",
            ),
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="booking_non_negative_total",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "check_in", "check_out"], name="booking_property_range_idx"),
            models.Index(fields=["guest", "created_at"], name="booking_guest_created_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.pk} for property {self.property_id}"

    @classmethod
    def from_db(cls, db, field_names, values):  # type: ignore
        instance = super().from_db(db, field_names, values)
        instance._stored_party = instance._party()
        return instance

    def _party(self) -> tuple:
        return (self.__dict__.get("property_id"), self.__dict__.get("number_of_guests"))

    def _party_changed(self) -> bool:
        """New rows and edits to the property or party size; status-only saves are not."""
        if self._state.adding:
            return True
        return getattr(self, "_stored_party", None) != self._party()

    def clean(self, today: date | None = None) -> None:  # type: ignore[override]
        errors: dict[str, list[str]] = {}

        if self.check_in and self.check_out and self.check_out <= self.check_in:
            errors.setdefault("check_out", []).append(_("Check-out must be after check-in."))

        if self._state.adding and self.check_in:
            today = today or timezone.now().date()
            if self.check_in.astimezone(dt_timezone.utc).date() < today:
                errors.setdefault("check_in", []).append(_("Check-in date cannot be in the past."))

        if self.number_of_guests is None or self.number_of_guests < 1:
            errors.setdefault("number_of_guests", []).append(_("At least one guest is required."))
        elif (
            self.property_id
            and self._party_changed()
            and self.number_of_guests > self.property.max_guests
        ):
            errors.setdefault("number_of_guests", []).append(
                _("Number of guests exceeds property capacity.")
            )

        if self.total_price is not None and self.total_price < 0:
            errors.setdefault("total_price", []).append(_("Total price cannot be negative."))

        if errors:
            raise ValidationError(errors)

    def save(self, *args, today: date | None = None, **kwargs):  # type: ignore
        with transaction.atomic():
            self.clean(today=today)
            super().save(*args, **kwargs)
        self._stored_party = self._party()

    @builtins.property
    def is_active(self) -> bool:
        return self.status != self.Status.CANCELLED
