"""Property domain models.

A property is a listing published by a host for short-term rental. The
nightly ``price`` is what booking totals are computed from and
``max_guests`` caps the party size of every booking against it.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Property(models.Model):
    """Listing available for nightly rental."""

    class PropertyType(models.TextChoices):
        HOUSE = "HOUSE", _("House")
        APARTMENT = "APARTMENT", _("Apartment")
        VILLA = "VILLA", _("Villa")
        CABIN = "CABIN", _("Cabin")
        COTTAGE = "COTTAGE", _("Cottage")

    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=100)
    description = models.TextField()

    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    country = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=20)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
        help_text=_("Nightly price."),
    )
    currency = models.CharField(max_length=3, default="USD")
    amenities = models.JSONField(default=list, blank=True)
    max_guests = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    property_type = models.CharField(max_length=20, choices=PropertyType.choices)
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("5"))],
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Property")
        verbose_name_plural = _("Properties")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["city", "price"], name="property_city_price_idx"),
            models.Index(fields=["state", "price"], name="property_state_price_idx"),
            models.Index(fields=["country", "price"], name="property_country_price_idx"),
            models.Index(fields=["property_type"], name="property_type_idx"),
            models.Index(fields=["host"], name="property_host_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def is_hosted_by(self, user) -> bool:  # type: ignore
        return user is not None and self.host_id == getattr(user, "pk", None)

    def can_be_managed_by(self, user) -> bool:  # type: ignore
        """Hosts manage their own listings; admins manage everything."""
        if user is None or not user.is_authenticated:
            return False
        return self.is_hosted_by(user) or user.is_admin()
