"""Property API views."""

from __future__ import annotations

import logging

from django.db.models import Count, ProtectedError  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.application.queries import property_bookings
from apps.bookings.serializers import BookingSerializer
from shared.domain.exceptions import ConflictError

from .cache import get_cached_page
from .filters import PropertyFilterSet, search_properties
from .models import Property
from .serializers import PropertySerializer, PropertyWriteSerializer

logger = logging.getLogger(__name__)


class IsPropertyHostOrAdmin(permissions.BasePermission):
    """Hosts and admins may list properties; only the owning host or an admin may change one."""

    message = "Not authorized to manage this property"

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if getattr(view, "action", None) == "create":
            return user.can_list_properties()
        return True

    def has_object_permission(self, request, view, obj: Property):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.can_be_managed_by(request.user)


class PropertyViewSet(viewsets.ModelViewSet):
    """Listings: public browsing, host-managed writes."""

    queryset = Property.objects.select_related("host").annotate(review_count=Count("reviews"))
    permission_classes = [permissions.IsAuthenticatedOrReadOnly, IsPropertyHostOrAdmin]
    filter_backends = [DjangoFilterBackend]
    filterset_class = PropertyFilterSet
    lookup_value_regex = r"\d+"

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve", "search"}:
            return [permissions.AllowAny()]
        if self.action in {"mine", "bookings"}:
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return PropertyWriteSerializer
        return PropertySerializer

    def list(self, request, *args, **kwargs):  # type: ignore
        """Filtered, paginated listing. Pages are cached by their query string."""
        queryset = self.filter_queryset(self.get_queryset())
        paginator = self.paginator
        limit = paginator.get_limit(request)
        offset = paginator.get_offset(request)
        params = {key: request.query_params.get(key) for key in request.query_params}
        params.update(limit=limit, offset=offset)

        def build_page():  # type: ignore
            ids = list(queryset.values_list("id", flat=True)[offset:offset + limit])
            return {"count": queryset.count(), "ids": ids}

        page = get_cached_page(params, build_page)
        rows = self.get_queryset().in_bulk(page["ids"])
        properties = [rows[pk] for pk in page["ids"] if pk in rows]

        paginator.request = request
        paginator.limit = limit
        paginator.offset = offset
        paginator.count = page["count"]
        serializer = PropertySerializer(properties, many=True, context=self.get_serializer_context())
        return paginator.get_paginated_response(serializer.data)

    def perform_create(self, serializer):  # type: ignore
        listing = serializer.save(host=self.request.user)
        logger.info("Property %s listed by host %s", listing.pk, self.request.user.pk)

    def perform_destroy(self, instance):  # type: ignore
        try:
            instance.delete()
        except ProtectedError as exc:
            raise ConflictError("Property has bookings and cannot be deleted") from exc
        logger.info("Property %s deleted by %s", instance.pk, self.request.user.pk)

    @action(detail=False, methods=["get"])
    def mine(self, request):  # type: ignore
        queryset = self.get_queryset().filter(host=request.user)
        page = self.paginate_queryset(queryset)
        serializer = PropertySerializer(page, many=True, context=self.get_serializer_context())
        return self.get_paginated_response(serializer.data)

    @action(detail=False, methods=["get"])
    def search(self, request):  # type: ignore
        """Free-text search over title, description and location."""
        queryset = search_properties(self.get_queryset(), request.query_params.get("q", ""))
        page = self.paginate_queryset(queryset)
        serializer = PropertySerializer(page, many=True, context=self.get_serializer_context())
        return self.get_paginated_response(serializer.data)

    @action(detail=True, methods=["get"])
    def bookings(self, request, pk=None):  # type: ignore
        """propertyBookings: host only, ordered by check-in."""
        bookings = property_bookings(int(pk), request.user.pk)
        return Response(BookingSerializer(bookings, many=True, context={"request": request}).data)
