"""Models for the review domain.

A ``Review`` is a guest's rating (1 to 5) with an optional comment. A
user reviews a given property at most once; the property's ``rating``
is the average over its reviews.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore


class Review(models.Model):
    """Represents a review left by a guest for a property."""

    property = models.ForeignKey(
        "properties.Property", on_delete=models.CASCADE, related_name="reviews"
    )
    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews"
    )
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="Rating from 1 to 5",
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["property", "guest"], name="review_one_per_guest"),
            models.CheckConstraint(
                condition=models.Q(rating__gte=1) & models.Q(rating__lte=5),
                name="review_rating_range",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "-created_at"], name="review_property_created_idx"),
            models.Index(fields=["guest"], name="review_guest_idx"),
        ]

    def __str__(self) -> str:
        return f"Review by {self.guest_id} for property {self.property_id} (Rating: {self.rating})"

    def can_be_managed_by(self, user) -> bool:  # type: ignore
        return user.pk == self.guest_id or user.is_admin()
