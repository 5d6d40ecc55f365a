"""API tests for reviews and property rating aggregation."""

from __future__ import annotations

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import Property
from apps.reviews.models import Review
from apps.users.models import User


class ReviewAPITests(APITestCase):
    def setUp(self) -> None:
        self.host = User.objects.create_user(
            email="host@example.com", password="HostPass123", name="Host", role=User.Role.HOST
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="GuestPass123", name="Guest")
        self.other = User.objects.create_user(email="other@example.com", password="OtherPass123", name="Other")
        self.property = Property.objects.create(
            host=self.host,
            title="Lake cabin",
            description="Quiet cabin by the lake.",
            address="1 Shore Rd",
            city="Tahoe",
            state="CA",
            country="USA",
            zip_code="96150",
            price=Decimal("120.00"),
            max_guests=4,
            property_type=Property.PropertyType.CABIN,
        )
        self.list_url = reverse("reviews:review-list")

    def _create(self, user: User, rating: int, comment: str = "") -> dict:
        self.client.force_authenticate(user)
        response = self.client.post(
            self.list_url,
            {"property_id": self.property.id, "rating": rating, "comment": comment},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def test_create_review_updates_property_rating(self) -> None:
        body = self._create(self.guest, 4, "Lovely stay")
        self._create(self.other, 5)

        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "Review created successfully")
        self.assertEqual(body["review"]["guest"]["id"], self.guest.id)
        self.property.refresh_from_db()
        self.assertEqual(self.property.rating, Decimal("4.50"))

    def test_second_review_by_same_guest_is_rejected(self) -> None:
        self._create(self.guest, 3)

        response = self.client.post(
            self.list_url, {"property_id": self.property.id, "rating": 5}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["message"], "You have already reviewed this property")
        self.assertEqual(Review.objects.count(), 1)

    def test_rating_out_of_range_is_a_validation_failure(self) -> None:
        self.client.force_authenticate(self.guest)
        response = self.client.post(
            self.list_url, {"property_id": self.property.id, "rating": 6}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "VALIDATION_ERROR")
        self.assertIn("rating", response.data["errors"])

    def test_review_for_missing_property(self) -> None:
        self.client.force_authenticate(self.guest)
        response = self.client.post(self.list_url, {"property_id": 9999, "rating": 4}, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Property not found")

    def test_only_author_or_admin_may_update(self) -> None:
        review_id = self._create(self.guest, 2)["review"]["id"]
        url = reverse("reviews:review-detail", args=[review_id])

        self.client.force_authenticate(self.other)
        forbidden = self.client.patch(url, {"rating": 5}, format="json")
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(forbidden.data["code"], "FORBIDDEN")

        admin = User.objects.create_superuser(email="admin@example.com", password="AdminPass123", name="Admin")
        self.client.force_authenticate(admin)
        allowed = self.client.patch(url, {"rating": 5}, format="json")
        self.assertEqual(allowed.status_code, status.HTTP_200_OK, allowed.data)
        self.assertEqual(allowed.data["review"]["rating"], 5)
        self.property.refresh_from_db()
        self.assertEqual(self.property.rating, Decimal("5.00"))

    def test_deleting_last_review_clears_rating(self) -> None:
        review_id = self._create(self.guest, 4)["review"]["id"]

        response = self.client.delete(reverse("reviews:review-detail", args=[review_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.property.refresh_from_db()
        self.assertIsNone(self.property.rating)

    def test_list_filters_by_property_and_user(self) -> None:
        self._create(self.guest, 4)
        self._create(self.other, 3)
        self.client.force_authenticate(None)

        by_property = self.client.get(self.list_url, {"property": self.property.id})
        self.assertEqual(by_property.status_code, status.HTTP_200_OK)
        self.assertEqual(len(by_property.data), 2)

        by_user = self.client.get(self.list_url, {"user": self.guest.id})
        self.assertEqual([item["guest"]["id"] for item in by_user.data], [self.guest.id])

    def test_anonymous_cannot_create(self) -> None:
        response = self.client.post(
            self.list_url, {"property_id": self.property.id, "rating": 4}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
