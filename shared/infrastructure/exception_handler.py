"""Project-wide DRF exception handler.

Domain errors that escape a view become regular DRF error responses with
the error's HTTP status and code. Anything DRF does not know about is
logged with its traceback and answered with a generic 500 body.
"""

from __future__ import annotations

import logging

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler as drf_exception_handler  # type: ignore

from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def domain_error_payload(exc: DomainError) -> dict[str, str]:
    return {"detail": exc.message, "code": exc.code}


def api_exception_handler(exc, context):  # type: ignore
    if isinstance(exc, DomainError):
        return Response(domain_error_payload(exc), status=exc.status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    logger.error(
        "Unhandled error in %s",
        view.__class__.__name__ if view is not None else "unknown view",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return Response(
        {"detail": INTERNAL_ERROR_MESSAGE, "code": "INTERNAL_ERROR"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
