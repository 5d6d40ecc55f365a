"""Review write operations.

Every mutation recomputes the owning property's average rating inside
the same transaction. Failures are raised as domain errors and mapped
to ``{success: false, ...}`` responses by the views.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import IntegrityError, transaction  # type: ignore
from django.db.models import Avg  # type: ignore

from apps.properties.models import Property
from shared.domain.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError

from .models import Review

logger = logging.getLogger(__name__)

RATING_QUANTUM = Decimal("0.01")
DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this property"


def _check_rating(rating: int) -> None:
    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5")


def recompute_property_rating(property_id: int) -> Decimal | None:
    """Store the average review rating on the property; ``None`` when it has no reviews."""
    average = Review.objects.filter(property_id=property_id).aggregate(avg=Avg("rating"))["avg"]
    rating = None
    if average is not None:
        rating = Decimal(str(average)).quantize(RATING_QUANTUM, rounding=ROUND_HALF_UP)
    listing = Property.objects.get(pk=property_id)
    listing.rating = rating
    # Goes through save() so post_save invalidates the listing search cache.
    listing.save(update_fields=["rating", "updated_at"])
    return rating


def _get_review_for(review_id: int, user) -> Review:  # type: ignore
    review = Review.objects.select_for_update().filter(pk=review_id).first()
    if review is None:
        raise NotFoundError("Review not found")
    if not review.can_be_managed_by(user):
        raise AuthorizationError("Not authorized to modify this review")
    return review


def create_review(*, property_id: int, guest, rating: int, comment: str = "") -> Review:  # type: ignore
    _check_rating(rating)
    with transaction.atomic():
        if not Property.objects.filter(pk=property_id).exists():
            raise NotFoundError("Property not found")
        if Review.objects.filter(property_id=property_id, guest=guest).exists():
            raise ConflictError(DUPLICATE_REVIEW_MESSAGE)
        try:
            with transaction.atomic():
                review = Review.objects.create(
                    property_id=property_id, guest=guest, rating=rating, comment=comment
                )
        except IntegrityError as exc:
            raise ConflictError(DUPLICATE_REVIEW_MESSAGE) from exc
        recompute_property_rating(property_id)
    logger.info("Review %s created by user %s for property %s", review.pk, guest.pk, property_id)
    return review


def update_review(*, review_id: int, user, rating: int | None = None, comment: str | None = None) -> Review:  # type: ignore
    if rating is not None:
        _check_rating(rating)
    with transaction.atomic():
        review = _get_review_for(review_id, user)
        if rating is not None:
            review.rating = rating
        if comment is not None:
            review.comment = comment
        review.save()
        recompute_property_rating(review.property_id)
    logger.info("Review %s updated by user %s", review.pk, user.pk)
    return review


def delete_review(*, review_id: int, user) -> None:  # type: ignore
    with transaction.atomic():
        review = _get_review_for(review_id, user)
        property_id = review.property_id
        review.delete()
        recompute_property_rating(property_id)
    logger.info("Review %s deleted by user %s", review_id, user.pk)
