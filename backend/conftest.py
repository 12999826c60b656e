"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``citizen`` / ``employee`` fixtures: ``RequestInfo`` values for the
    two common caller types.
  - ``harness`` factory fixture wiring a ``PgrService`` to in-memory
    collaborators (see ``pgr.tests.fakes``).
"""

from __future__ import annotations

import pytest
from rest_framework.test import APIClient


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client (the gateway authenticates callers)."""
    return APIClient()


@pytest.fixture()
def citizen():
    """A citizen caller whose identity is known to the fake identity service."""
    from pgr.tests.fakes import citizen_request_info

    return citizen_request_info()


@pytest.fixture()
def employee():
    from pgr.tests.fakes import employee_request_info

    return employee_request_info()


@pytest.fixture()
def harness():
    """
    Factory fixture returning a fully wired ``PgrHarness``.

    Usage::

        def test_something(harness):
            h = harness(departments={"emp-2": "DEPT_25"})
            h.service.create(...)
            assert h.identity_client.created == []
    """
    from pgr.tests.fakes import build_harness

    return build_harness
