"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to proper
DRF ``Response`` objects so that views don't need per-endpoint
try/except boilerplate.

Every error body has the same shape::

    {"detail": "<human readable message>", "code": "<machine code>"}

Domain validation errors add ``"field"``; serializer validation errors
add ``"errors"`` with DRF's per-field messages.

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging

from django.db import OperationalError
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    Conflict,
    DomainError,
    DomainValidationError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    Unavailable,
)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status code
_STATUS_MAP: dict[type, int] = {
    DomainValidationError: 400,
    PermissionDenied:      403,
    NotFound:              404,
    InvalidTransition:     409,
    Conflict:              409,
    Unavailable:           503,
    DomainError:           400,  # catch-all base class last
}


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions and return an appropriate response.
    """
    # Let DRF handle its own exceptions (ValidationError, AuthN, etc.)
    response = drf_default_handler(exc, context)
    if response is not None:
        if isinstance(exc, ValidationError):
            response.data = {
                "detail": "Invalid input.",
                "code": DomainValidationError.code,
                "errors": response.data,
            }
            return response
        if isinstance(response.data, dict) and "detail" in response.data:
            response.data.setdefault(
                "code", getattr(exc, "default_code", "error"),
            )
        return response

    # Store errors that escaped store_operation (reads, login, profile)
    if isinstance(exc, OperationalError):
        logger.error(
            "Store unavailable in %s: %s", context.get("view", "unknown"), exc,
        )
        exc = Unavailable()

    # Most specific class first
    for exc_class, status_code in _STATUS_MAP.items():
        if isinstance(exc, exc_class):
            logger.warning(
                "Domain exception [%s] in %s: %s",
                type(exc).__name__,
                context.get("view", "unknown"),
                exc,
            )
            data = {"detail": str(exc), "code": exc.code}
            field = getattr(exc, "field", None)
            if field:
                data["field"] = field
            return Response(data, status=status_code)

    # Not a domain exception; let it propagate
    return None
