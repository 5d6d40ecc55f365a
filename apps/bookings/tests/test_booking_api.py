"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock
from uuid import uuid4

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.properties.models import Property
from apps.users.models import User


class BookingAPITests(APITestCase):
    """Covers creation, conflicts, lifecycle actions and response shapes."""

    def setUp(self) -> None:
        self.host = User.objects.create_user(
            email="host@example.com", password="HostPass123", name="Host", role=User.Role.HOST
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123", name="Guest")
        self.stranger = User.objects.create_user(
            email="stranger@example.com", password="StrangerPass123", name="Stranger"
        )
        self.property = Property.objects.create(
            host=self.host,
            title="Modern apartment",
            description="Spacious apartment in the city centre.",
            address="12 Market St",
            city="Austin",
            state="TX",
            country="USA",
            zip_code="73301",
            price=Decimal("100.00"),
            max_guests=4,
            property_type=Property.PropertyType.APARTMENT,
        )
        self.today = timezone.now().date()
        self.list_url = reverse("bookings:booking-list")
        self.client.force_authenticate(self.guest)

    def _day(self, offset: int) -> str:
        return str(self.today + timedelta(days=offset))

    def _payload(self, start: int, end: int, guests: int = 2) -> dict:
        return {
            "property_id": self.property.id,
            "check_in": self._day(start),
            "check_out": self._day(end),
            "number_of_guests": guests,
        }

    def _create(self, start: int = 10, end: int = 13) -> dict:
        response = self.client.post(self.list_url, self._payload(start, end), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data["booking"]

    def test_guest_can_create_booking(self) -> None:
        response = self.client.post(self.list_url, self._payload(10, 13), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["message"], "Booking created successfully")
        booking = response.data["booking"]
        self.assertEqual(booking["status"], "PENDING")
        self.assertEqual(booking["payment_status"], "PENDING")
        self.assertEqual(Decimal(booking["total_price"]), Decimal("300.00"))
        self.assertEqual(booking["nights"], 3)
        self.assertEqual(booking["guest"]["id"], self.guest.id)
        self.assertEqual(booking["property"]["id"], self.property.id)
        self.assertTrue(booking["check_in"].startswith(self._day(10)))

    def test_prevent_double_booking_on_overlap(self) -> None:
        self._create(10, 13)

        overlap = self.client.post(self.list_url, self._payload(12, 14), format="json")
        self.assertEqual(overlap.status_code, status.HTTP_409_CONFLICT, overlap.data)
        self.assertEqual(
            overlap.data,
            {
                "success": False,
                "message": "Property is not available for these dates",
                "code": "CONFLICT",
                "booking": None,
            },
        )

        turnover = self.client.post(self.list_url, self._payload(13, 15), format="json")
        self.assertEqual(turnover.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Booking.objects.count(), 1)

    def test_invalid_input_is_a_structured_failure(self) -> None:
        reversed_dates = self.client.post(self.list_url, self._payload(13, 10), format="json")
        self.assertEqual(reversed_dates.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(reversed_dates.data["success"])
        self.assertEqual(reversed_dates.data["code"], "VALIDATION_ERROR")

        missing_field = self.client.post(self.list_url, {"property_id": self.property.id}, format="json")
        self.assertEqual(missing_field.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("check_in", missing_field.data["errors"])

        too_many = self.client.post(self.list_url, self._payload(10, 12, guests=5), format="json")
        self.assertEqual(too_many.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("capacity", too_many.data["message"])
        self.assertFalse(Booking.objects.exists())

    def test_unknown_property_is_not_found(self) -> None:
        payload = self._payload(10, 12)
        payload["property_id"] = self.property.id + 100
        response = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "NOT_FOUND")

    def test_availability_is_public(self) -> None:
        self._create(10, 13)
        self.client.force_authenticate(None)
        url = reverse("bookings:booking-availability")

        taken = self.client.get(
            url, {"property_id": self.property.id, "check_in": self._day(13), "check_out": self._day(15)}
        )
        self.assertEqual(taken.status_code, status.HTTP_200_OK)
        self.assertEqual(taken.data, {"available": False, "message": "Property is not available for these dates"})

        free = self.client.get(
            url, {"property_id": self.property.id, "check_in": self._day(14), "check_out": self._day(15)}
        )
        self.assertTrue(free.data["available"])

    def test_anonymous_mutation_is_rejected(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.post(self.list_url, self._payload(10, 12), format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_my_bookings_lists_newest_first(self) -> None:
        first = self._create(10, 12)
        second = self._create(20, 22)

        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data], [second["id"], first["id"]])

        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get(self.list_url).data, [])

    def test_retrieve_is_limited_to_guest_and_host(self) -> None:
        booking = self._create()
        url = reverse("bookings:booking-detail", args=[booking["id"]])

        self.client.force_authenticate(self.host)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(self.stranger)
        forbidden = self.client.get(url)
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(forbidden.data["code"], "FORBIDDEN")

        missing = self.client.get(reverse("bookings:booking-detail", args=[uuid4()]))
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(missing.data, {"detail": "Booking not found", "code": "NOT_FOUND"})

    def test_guest_cannot_confirm(self) -> None:
        booking = self._create()
        response = self.client.post(reverse("bookings:booking-confirm", args=[booking["id"]]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["code"], "FORBIDDEN")

    def test_host_confirms_then_completes(self) -> None:
        booking = self._create()
        self.client.force_authenticate(self.host)

        confirmed = self.client.post(reverse("bookings:booking-confirm", args=[booking["id"]]))
        self.assertEqual(confirmed.status_code, status.HTTP_200_OK, confirmed.data)
        self.assertEqual(confirmed.data["booking"]["status"], "CONFIRMED")
        self.assertEqual(confirmed.data["booking"]["payment_status"], "PAID")

        completed = self.client.post(reverse("bookings:booking-complete", args=[booking["id"]]))
        self.assertEqual(completed.data["booking"]["status"], "COMPLETED")

        again = self.client.post(reverse("bookings:booking-cancel", args=[booking["id"]]))
        self.assertEqual(again.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(again.data["code"], "INVALID_STATE")

    def test_guest_cancels_and_dates_free_up(self) -> None:
        booking = self._create(10, 13)

        response = self.client.post(reverse("bookings:booking-cancel", args=[booking["id"]]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Booking cancelled successfully")
        self.assertEqual(response.data["booking"]["status"], "CANCELLED")
        self.assertEqual(response.data["booking"]["payment_status"], "REFUNDED")

        self._create(11, 12)

    def test_guest_updates_dates(self) -> None:
        booking = self._create(10, 13)
        url = reverse("bookings:booking-detail", args=[booking["id"]])

        response = self.client.patch(url, {"check_out": self._day(15)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(Decimal(response.data["booking"]["total_price"]), Decimal("500.00"))

        empty = self.client.patch(url, {}, format="json")
        self.assertEqual(empty.status_code, status.HTTP_400_BAD_REQUEST)

        self.client.force_authenticate(self.host)
        forbidden = self.client.patch(url, {"number_of_guests": 1}, format="json")
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_is_admin_only(self) -> None:
        booking = self._create()
        url = reverse("bookings:booking-detail", args=[booking["id"]])

        refused = self.client.delete(url)
        self.assertEqual(refused.status_code, status.HTTP_403_FORBIDDEN)

        admin = User.objects.create_superuser(email="admin@example.com", password="AdminPass123", name="Admin")
        self.client.force_authenticate(admin)
        deleted = self.client.delete(url)
        self.assertEqual(deleted.status_code, status.HTTP_200_OK, deleted.data)
        self.assertEqual(deleted.data["booking"]["id"], booking["id"])
        self.assertFalse(Booking.objects.exists())

    def test_unexpected_failure_is_generic(self) -> None:
        with mock.patch(
            "apps.bookings.views.CreateBookingHandler.handle", side_effect=RuntimeError("db down")
        ):
            response = self.client.post(self.list_url, self._payload(10, 12), format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(
            response.data, {"success": False, "message": "Internal server error", "booking": None}
        )
