"""API tests for authentication endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "name": "Guest User",
            "email": "guest@example.com",
            "password": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        self.assertIn("access", response.data["tokens"])
        self.assertEqual(response.data["user"]["email"], payload["email"])
        self.assertEqual(response.data["user"]["role"], User.Role.GUEST)

    def test_register_rejects_duplicate_email(self) -> None:
        User.objects.create_user(email="taken@example.com", password="StrongPass123", name="Taken")

        response = self.client.post(
            reverse("auth:register"),
            {"name": "Other", "email": "taken@example.com", "password": "StrongPass123"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_login_with_valid_and_invalid_credentials(self) -> None:
        User.objects.create_user(email="login@example.com", password="CorrectPassword1", name="Login")
        url = reverse("auth:login")

        bad = self.client.post(url, {"email": "login@example.com", "password": "wrong"}, format="json")
        self.assertEqual(bad.status_code, status.HTTP_400_BAD_REQUEST)

        good = self.client.post(
            url, {"email": "login@example.com", "password": "CorrectPassword1"}, format="json"
        )
        self.assertEqual(good.status_code, status.HTTP_200_OK, good.data)
        self.assertIn("refresh", good.data["tokens"])

    def test_me_requires_authentication(self) -> None:
        response = self.client.get(reverse("auth:me"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_updates_name_but_not_role(self) -> None:
        user = User.objects.create_user(email="me@example.com", password="StrongPass123", name="Me")
        self.client.force_authenticate(user)

        response = self.client.patch(
            reverse("auth:me"), {"name": "Renamed", "role": User.Role.ADMIN}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        user.refresh_from_db()
        self.assertEqual(user.name, "Renamed")
        self.assertEqual(user.role, User.Role.GUEST)

    def test_become_host_promotes_guest_once(self) -> None:
        user = User.objects.create_user(email="host@example.com", password="StrongPass123", name="Host")
        self.client.force_authenticate(user)
        url = reverse("auth:become-host")

        first = self.client.post(url)
        self.assertTrue(first.data["success"])
        self.assertEqual(first.data["user"]["role"], User.Role.HOST)

        second = self.client.post(url)
        self.assertFalse(second.data["success"])


class UserModelTests(APITestCase):
    def test_superuser_is_admin(self) -> None:
        admin = User.objects.create_superuser(email="root@example.com", password="x", name="Root")
        self.assertEqual(admin.role, User.Role.ADMIN)
        self.assertTrue(admin.is_admin())
        self.assertTrue(admin.can_list_properties())

    def test_guest_cannot_list_properties(self) -> None:
        guest = User.objects.create_user(email="g@example.com", password="x", name="G")
        self.assertFalse(guest.can_list_properties())
