"""
Unit tests for ``core.domain.exception_handler``: domain error kinds map
to HTTP statuses and the ``{"Errors": [...]}`` body.
"""

from __future__ import annotations

import pytest
from rest_framework.exceptions import ValidationError

from core.domain import exceptions as exc
from core.domain.exception_handler import domain_exception_handler


@pytest.mark.parametrize(
    "error,status_code",
    [
        (exc.InvalidSource(), 400),
        (exc.InvalidSearch(), 400),
        (exc.InvalidAssignment(), 400),
        (exc.InvalidAction(), 403),
        (exc.InvalidUpdate(), 404),
        (exc.BusinessServiceNotFound(), 404),
        (exc.WorkflowNotFound(), 409),
        (exc.ParsingError(), 502),
        (exc.WorkflowUnavailable(), 502),
        (exc.UpstreamError(), 502),
    ],
)
def test_status_mapping(error, status_code):
    response = domain_exception_handler(error, {})
    assert response.status_code == status_code
    assert response.data == {"Errors": [{"code": error.code, "message": error.message}]}


def test_aggregated_errors_become_one_entry_each():
    error = exc.InvalidRequest(
        "Invalid citizen details",
        errors={
            "INVALID_MOBILENUMBER": "Mobile number is required in the citizen object",
            "INVALID_USERNAME": "Username is required in the citizen object",
        },
    )
    response = domain_exception_handler(error, {})

    assert response.status_code == 400
    assert [e["code"] for e in response.data["Errors"]] == [
        "INVALID_MOBILENUMBER",
        "INVALID_USERNAME",
    ]


def test_drf_errors_keep_default_handling():
    response = domain_exception_handler(ValidationError({"tenantId": ["required"]}), {})
    assert response.status_code == 400
    assert response.data == {"tenantId": ["required"]}


def test_unknown_exceptions_are_not_handled():
    assert domain_exception_handler(RuntimeError("boom"), {}) is None
