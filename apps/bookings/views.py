"""API views for the booking domain.

Mutations always answer ``{success, message, booking}``; a refused
operation adds ``code`` and uses the HTTP status of its domain error.
Reads let domain errors propagate to the project exception handler,
which fails the whole request.
"""

from __future__ import annotations

import logging
from typing import Callable
from uuid import UUID

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.domain.base import Aggregate
from shared.domain.exceptions import DomainError, ValidationError
from shared.infrastructure.exception_handler import INTERNAL_ERROR_MESSAGE

from .application import queries
from .application.command_handlers import (
    CancelBookingCommand,
    CancelBookingHandler,
    CompleteBookingCommand,
    CompleteBookingHandler,
    ConfirmBookingCommand,
    ConfirmBookingHandler,
    CreateBookingHandler,
    DeleteBookingCommand,
    DeleteBookingHandler,
    UpdateBookingHandler,
)
from .models import Booking
from .serializers import (
    AvailabilityQuerySerializer,
    BookingSerializer,
    CreateBookingSerializer,
    UpdateBookingSerializer,
)

logger = logging.getLogger(__name__)


def mutation_success(booking_data, message: str, status_code: int = status.HTTP_200_OK) -> Response:  # type: ignore
    return Response({"success": True, "message": message, "booking": booking_data}, status=status_code)


def mutation_failure(exc: DomainError, errors=None) -> Response:  # type: ignore
    body = {"success": False, "message": exc.message, "code": exc.code, "booking": None}
    if errors:
        body["errors"] = errors
    return Response(body, status=exc.status_code)


class BookingViewSet(viewsets.ViewSet):
    """Booking lifecycle endpoints."""

    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = "[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    def get_permissions(self):  # type: ignore
        if self.action == "availability":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def _serialize(self, booking_id) -> dict:  # type: ignore
        row = Booking.objects.select_related("property", "guest").get(pk=booking_id)
        return BookingSerializer(row, context={"request": self.request}).data

    def _run_mutation(
        self,
        operation: str,
        run: Callable[[], Aggregate],
        message: str,
        status_code: int = status.HTTP_200_OK,
        present: Callable[[Aggregate], dict | None] | None = None,
    ) -> Response:
        try:
            booking = run()
        except DomainError as exc:
            logger.warning(
                "%s refused for user %s: %s (%s)", operation, self.request.user.pk, exc.message, exc.code
            )
            return mutation_failure(exc)
        except Exception:
            logger.exception("%s failed for user %s", operation, self.request.user.pk)
            return Response(
                {"success": False, "message": INTERNAL_ERROR_MESSAGE, "booking": None},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        data = present(booking) if present is not None else self._serialize(booking.id)
        return mutation_success(data, message, status_code)

    # ----- queries -----

    @action(detail=False, methods=["get"])
    def availability(self, request):  # type: ignore
        """checkAvailability: public, side-effect free."""
        serializer = AvailabilityQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        result = queries.check_availability(**serializer.validated_data)
        return Response({"available": result.available, "message": result.message})

    def list(self, request):  # type: ignore
        """myBookings: bookings where the caller is the guest, newest first."""
        bookings = queries.my_bookings(request.user.pk)
        return Response(BookingSerializer(bookings, many=True, context={"request": request}).data)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = queries.get_booking_for_actor(pk, request.user.pk)
        return Response(BookingSerializer(booking, context={"request": request}).data)

    # ----- mutations -----

    def create(self, request):  # type: ignore
        serializer = CreateBookingSerializer(data=request.data)
        if not serializer.is_valid():
            return mutation_failure(ValidationError(), serializer.errors)
        command = serializer.to_command(guest_id=request.user.pk)
        return self._run_mutation(
            "createBooking",
            lambda: CreateBookingHandler().handle(command),
            "Booking created successfully",
            status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):  # type: ignore
        serializer = UpdateBookingSerializer(data=request.data)
        if not serializer.is_valid():
            return mutation_failure(ValidationError(), serializer.errors)
        command = serializer.to_command(booking_id=UUID(pk), actor_id=request.user.pk)
        return self._run_mutation(
            "updateBooking",
            lambda: UpdateBookingHandler().handle(command),
            "Booking updated successfully",
        )

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        command = CancelBookingCommand(booking_id=UUID(pk), actor_id=request.user.pk)
        return self._run_mutation(
            "cancelBooking",
            lambda: CancelBookingHandler().handle(command),
            "Booking cancelled successfully",
        )

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        command = ConfirmBookingCommand(booking_id=UUID(pk), actor_id=request.user.pk)
        return self._run_mutation(
            "confirmBooking",
            lambda: ConfirmBookingHandler().handle(command),
            "Booking confirmed successfully",
        )

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):  # type: ignore
        command = CompleteBookingCommand(booking_id=UUID(pk), actor_id=request.user.pk)
        return self._run_mutation(
            "completeBooking",
            lambda: CompleteBookingHandler().handle(command),
            "Booking completed successfully",
        )

    def destroy(self, request, pk=None):  # type: ignore
        """Admin delete path: the record is removed, not cancelled."""
        command = DeleteBookingCommand(booking_id=UUID(pk), actor_id=request.user.pk)
        snapshot = Booking.objects.select_related("property", "guest").filter(pk=pk).first()
        return self._run_mutation(
            "deleteBooking",
            lambda: DeleteBookingHandler().handle(command),
            "Booking deleted successfully",
            present=lambda _: BookingSerializer(snapshot, context={"request": request}).data,
        )
