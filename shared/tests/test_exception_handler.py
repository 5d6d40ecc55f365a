"""Tests for the project-wide DRF exception handler."""

from __future__ import annotations

from rest_framework import exceptions

from shared.domain.exceptions import ConflictError, InvalidStateError, NotFoundError
from shared.infrastructure.exception_handler import api_exception_handler


def test_domain_errors_keep_status_and_code() -> None:
    response = api_exception_handler(NotFoundError("Booking not found"), {})
    assert response.status_code == 404
    assert response.data == {"detail": "Booking not found", "code": "NOT_FOUND"}

    response = api_exception_handler(InvalidStateError(), {})
    assert response.status_code == 409
    assert response.data["code"] == "INVALID_STATE"


def test_default_messages() -> None:
    assert ConflictError().message == "Property is not available for these dates"


def test_drf_errors_pass_through() -> None:
    response = api_exception_handler(exceptions.NotAuthenticated(), {})
    assert response.status_code == 401


def test_unknown_errors_become_generic_500() -> None:
    response = api_exception_handler(RuntimeError("connection refused to 10.0.0.5"), {})
    assert response.status_code == 500
    assert response.data == {"detail": "Internal server error", "code": "INTERNAL_ERROR"}
