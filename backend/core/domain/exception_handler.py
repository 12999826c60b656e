"""
core.domain.exception_handler — DRF-compatible global exception handler.

Maps domain exceptions from ``core.domain.exceptions`` to DRF ``Response``
objects so that views don't need per-endpoint try/except boilerplate.

Error body shape (one entry per aggregated field error)::

    {"Errors": [{"code": "INVALID_SOURCE", "message": "The source: ..."}]}

Register in ``settings.py``::

    REST_FRAMEWORK = {
        ...
        'EXCEPTION_HANDLER': 'core.domain.exception_handler.domain_exception_handler',
    }
"""

from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import (
    Conflict,
    DomainError,
    NotFound,
    PermissionDenied,
    UpstreamError,
)

logger = logging.getLogger(__name__)

# Domain exception → HTTP status code
_STATUS_MAP: dict[type, int] = {
    PermissionDenied: 403,
    NotFound:         404,
    Conflict:         409,
    UpstreamError:    502,
    DomainError:      400,  # catch-all base class last
}


def error_payload(exc: DomainError) -> dict:
    """Render a domain error as the ``{"Errors": [...]}`` body."""
    return {
        "Errors": [
            {"code": code, "message": message}
            for code, message in exc.errors.items()
        ]
    }


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF exception handler that also handles ``core.domain.exceptions``.

    The default DRF handler is called first.  If it returns ``None``
    (meaning DRF doesn't recognise the exception), we check whether
    it's one of our domain exceptions and return an appropriate response.
    """
    response = drf_default_handler(exc, context)
    if response is not None:
        return response

    # Most specific first
    for exc_class, status_code in _STATUS_MAP.items():
        if isinstance(exc, exc_class):
            log = logger.error if status_code >= 500 else logger.warning
            log(
                "Domain exception [%s] in %s: %s",
                exc.code,
                context.get("view", "unknown"),
                exc,
            )
            return Response(error_payload(exc), status=status_code)

    return None
