"""API tests for property listings."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.properties.cache import build_cache_key, invalidate_search_cache
from apps.properties.models import Property
from apps.users.models import User


def make_property(host: User, **overrides) -> Property:  # type: ignore
    fields = {
        "title": "City apartment",
        "description": "Bright apartment close to the old town.",
        "address": "10 Main St",
        "city": "Lisbon",
        "state": "Lisboa",
        "country": "Portugal",
        "zip_code": "1100-148",
        "price": Decimal("100.00"),
        "max_guests": 4,
        "property_type": Property.PropertyType.APARTMENT,
    }
    fields.update(overrides)
    return Property.objects.create(host=host, **fields)


class PropertyAPITests(APITestCase):
    def setUp(self) -> None:
        self.host = User.objects.create_user(
            email="host@example.com", password="HostPass123", name="Host", role=User.Role.HOST
        )
        self.other_host = User.objects.create_user(
            email="other-host@example.com", password="HostPass123", name="Other Host", role=User.Role.HOST
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123", name="Guest")
        self.apartment = make_property(self.host)
        self.villa = make_property(
            self.other_host,
            title="Seaside villa",
            description="Villa with a pool.",
            city="Faro",
            state="Algarve",
            price=Decimal("450.00"),
            max_guests=10,
            property_type=Property.PropertyType.VILLA,
        )
        self.list_url = reverse("properties:property-list")

    def _payload(self) -> dict:
        return {
            "title": "  Mountain cabin  ",
            "description": "Wooden cabin.",
            "address": "1 Ridge Rd",
            "city": "Aspen",
            "state": "CO",
            "country": "USA",
            "zip_code": "81611",
            "price": "180.00",
            "max_guests": 3,
            "type": "CABIN",
            "amenities": ["wifi", "fireplace", "wifi"],
        }

    def test_list_is_public_and_paginated(self) -> None:
        response = self.client.get(self.list_url, {"limit": 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(len(response.data["results"]), 1)
        self.assertIsNotNone(response.data["next"])

    def test_filters(self) -> None:
        by_type = self.client.get(self.list_url, {"type": "VILLA"})
        self.assertEqual([item["id"] for item in by_type.data["results"]], [self.villa.id])

        by_price = self.client.get(self.list_url, {"min_price": "50", "max_price": "200"})
        self.assertEqual([item["id"] for item in by_price.data["results"]], [self.apartment.id])

        by_guests = self.client.get(self.list_url, {"guests": 6})
        self.assertEqual([item["id"] for item in by_guests.data["results"]], [self.villa.id])

        by_location = self.client.get(self.list_url, {"location": "algarve"})
        self.assertEqual([item["id"] for item in by_location.data["results"]], [self.villa.id])

    def test_listing_reflects_writes_despite_cache(self) -> None:
        first = self.client.get(self.list_url)
        self.assertEqual(first.data["count"], 2)

        make_property(self.host, title="Second apartment")

        second = self.client.get(self.list_url)
        self.assertEqual(second.data["count"], 3)

    def test_invalidation_changes_cache_key(self) -> None:
        params = {"type": "VILLA", "limit": 10, "offset": 0}
        before = build_cache_key(params)
        invalidate_search_cache()
        self.assertNotEqual(before, build_cache_key(params))

    def test_host_can_create_property(self) -> None:
        self.client.force_authenticate(self.host)
        response = self.client.post(self.list_url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["title"], "Mountain cabin")
        self.assertEqual(response.data["amenities"], ["wifi", "fireplace"])
        self.assertEqual(response.data["type"], "CABIN")
        self.assertEqual(response.data["host"]["id"], self.host.id)

    def test_guest_cannot_create_property(self) -> None:
        self.client.force_authenticate(self.guest)
        response = self.client.post(self.list_url, self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_only_owner_or_admin_can_update(self) -> None:
        url = reverse("properties:property-detail", args=[self.apartment.id])

        self.client.force_authenticate(self.other_host)
        forbidden = self.client.patch(url, {"price": "90.00"}, format="json")
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.host)
        allowed = self.client.patch(url, {"price": "90.00"}, format="json")
        self.assertEqual(allowed.status_code, status.HTTP_200_OK, allowed.data)
        self.apartment.refresh_from_db()
        self.assertEqual(self.apartment.price, Decimal("90.00"))

    def test_property_with_bookings_cannot_be_deleted(self) -> None:
        check_in = timezone.now() + timedelta(days=5)
        Booking.objects.create(
            property=self.apartment,
            guest=self.guest,
            check_in=check_in,
            check_out=check_in + timedelta(days=2),
            number_of_guests=2,
            total_price=Decimal("200.00"),
        )
        self.client.force_authenticate(self.host)

        response = self.client.delete(reverse("properties:property-detail", args=[self.apartment.id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "CONFLICT")
        self.assertTrue(Property.objects.filter(pk=self.apartment.pk).exists())

    def test_property_without_bookings_can_be_deleted(self) -> None:
        self.client.force_authenticate(self.other_host)
        response = self.client.delete(reverse("properties:property-detail", args=[self.villa.id]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Property.objects.filter(pk=self.villa.pk).exists())

    def test_mine_returns_only_own_listings(self) -> None:
        self.client.force_authenticate(self.host)
        response = self.client.get(reverse("properties:property-mine"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data["results"]], [self.apartment.id])

    def test_search(self) -> None:
        response = self.client.get(reverse("properties:property-search"), {"q": "pool"})
        self.assertEqual([item["id"] for item in response.data["results"]], [self.villa.id])

        empty = self.client.get(reverse("properties:property-search"), {"q": "  "})
        self.assertEqual(empty.data["count"], 0)

    def test_property_bookings_is_host_only(self) -> None:
        check_in = timezone.now() + timedelta(days=3)
        for offset in (10, 0):
            start = check_in + timedelta(days=offset)
            Booking.objects.create(
                property=self.apartment,
                guest=self.guest,
                check_in=start,
                check_out=start + timedelta(days=2),
                number_of_guests=1,
                total_price=Decimal("200.00"),
            )
        url = reverse("properties:property-bookings", args=[self.apartment.id])

        self.client.force_authenticate(self.guest)
        forbidden = self.client.get(url)
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(forbidden.data["code"], "FORBIDDEN")

        self.client.force_authenticate(self.host)
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        check_ins = [item["check_in"] for item in response.data]
        self.assertEqual(len(check_ins), 2)
        self.assertEqual(check_ins, sorted(check_ins))
        self.assertEqual(response.data[0]["status"], "PENDING")

    def test_property_bookings_for_missing_property(self) -> None:
        self.client.force_authenticate(self.host)
        response = self.client.get(reverse("properties:property-bookings", args=[9999]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["detail"], "Property not found")
