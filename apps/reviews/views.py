"""API views for managing reviews."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import DomainError, ValidationError

from . import services
from .models import Review
from .serializers import ReviewCreateSerializer, ReviewSerializer, ReviewUpdateSerializer

logger = logging.getLogger(__name__)


def review_failure(exc: DomainError, errors=None) -> Response:  # type: ignore
    body = {"success": False, "message": exc.message, "code": exc.code, "review": None}
    if errors:
        body["errors"] = errors
    return Response(body, status=exc.status_code)


class ReviewViewSet(viewsets.ViewSet):
    """Public review listing; author-or-admin mutations."""

    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    lookup_value_regex = r"\d+"

    def _present(self, review: Review) -> dict:
        review = Review.objects.select_related("property", "guest").get(pk=review.pk)
        return ReviewSerializer(review, context={"request": self.request}).data

    def list(self, request):  # type: ignore
        """Reviews of ``?property=`` or by ``?user=``, newest first."""
        queryset = Review.objects.select_related("property", "guest")
        property_id = request.query_params.get("property")
        user_id = request.query_params.get("user")
        if property_id:
            if not property_id.isdigit():
                raise ValidationError("property must be a numeric id")
            queryset = queryset.filter(property_id=property_id)
        if user_id:
            if not user_id.isdigit():
                raise ValidationError("user must be a numeric id")
            queryset = queryset.filter(guest_id=user_id)
        return Response(ReviewSerializer(queryset.order_by("-created_at"), many=True).data)

    def create(self, request):  # type: ignore
        serializer = ReviewCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return review_failure(ValidationError(), serializer.errors)
        try:
            review = services.create_review(guest=request.user, **serializer.validated_data)
        except DomainError as exc:
            logger.warning("createReview refused for user %s: %s", request.user.pk, exc.message)
            return review_failure(exc)
        return Response(
            {"success": True, "message": "Review created successfully", "review": self._present(review)},
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):  # type: ignore
        serializer = ReviewUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return review_failure(ValidationError(), serializer.errors)
        try:
            review = services.update_review(review_id=pk, user=request.user, **serializer.validated_data)
        except DomainError as exc:
            logger.warning("updateReview refused for user %s: %s", request.user.pk, exc.message)
            return review_failure(exc)
        return Response(
            {"success": True, "message": "Review updated successfully", "review": self._present(review)}
        )

    def destroy(self, request, pk=None):  # type: ignore
        try:
            services.delete_review(review_id=pk, user=request.user)
        except DomainError as exc:
            logger.warning("deleteReview refused for user %s: %s", request.user.pk, exc.message)
            return review_failure(exc)
        return Response({"success": True, "message": "Review deleted successfully"})
