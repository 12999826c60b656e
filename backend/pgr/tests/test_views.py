"""
Integration tests for the grievance endpoints.

The view layer is exercised end to end with ``APIClient``; the service it
builds from settings is swapped for one wired to in-memory collaborators.
"""

from unittest import mock

import httpx
import pytest

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from pgr.services import build_pgr_service

from .fakes import CITIZEN_UUID, SERVICE_CODE, TENANT, build_harness


def request_info(user_type="CITIZEN", uuid=CITIZEN_UUID, mobile="9999999999"):
    return {
        "apiId": "Rainmaker",
        "ver": "1.0",
        "ts": 1_760_000_000_000,
        "msgId": "20251009|en_IN",
        "userInfo": {
            "uuid": uuid,
            "type": user_type,
            "userName": mobile,
            "mobileNumber": mobile,
            "tenantId": "pb",
            "roles": [{"code": user_type, "name": user_type.title(), "tenantId": "pb"}],
        },
    }


def create_body(source="web"):
    return {
        "RequestInfo": request_info(),
        "service": {
            "tenantId": TENANT,
            "serviceCode": SERVICE_CODE,
            "description": "Street light not working near the market",
            "source": source,
            "address": {
                "locality": "SUN04",
                "city": "Amritsar",
                "geoLocation": {"latitude": 31.63, "longitude": 74.87},
            },
            "additionalDetail": {"landmark": "Golden Temple"},
        },
        "workflow": {"action": "CREATE"},
    }


class TestGrievanceEndpoints(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.h = build_harness()
        patcher = mock.patch("pgr.views.build_pgr_service", return_value=self.h.service)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _create(self, source="web"):
        return self.client.post(reverse("pgr-create"), create_body(source), format="json")

    def test_create_returns_wrapper(self):
        response = self._create()

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["ResponseInfo"]["msgId"], "20251009|en_IN")
        self.assertEqual(response.data["ResponseInfo"]["status"], "successful")

        wrapper = response.data["ServiceWrappers"][0]
        service = wrapper["service"]
        self.assertEqual(service["applicationStatus"], "PENDINGFORASSIGNMENT")
        self.assertEqual(service["accountId"], CITIZEN_UUID)
        self.assertEqual(service["serviceRequestId"], "PB-PGR-2025-10-09-000001")
        self.assertEqual(service["address"]["geoLocation"]["latitude"], 31.63)
        self.assertEqual(service["additionalDetail"], {"landmark": "Golden Temple"})
        self.assertEqual(service["auditDetails"]["createdBy"], CITIZEN_UUID)
        self.assertEqual(wrapper["workflow"]["action"], "CREATE")

    def test_invalid_source_error_body(self):
        response = self._create(source="whatsapp")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data,
            {"Errors": [{"code": "INVALID_SOURCE", "message": "The source: whatsapp is not valid"}]},
        )

    def test_malformed_body_is_rejected(self):
        response = self.client.post(reverse("pgr-create"), {"service": {}}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_unknown_grievance_is_404(self):
        body = create_body()
        body["service"]["id"] = "no-such-grievance"
        body["workflow"] = {"action": "RESOLVE"}

        response = self.client.post(reverse("pgr-update"), body, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["Errors"][0]["code"], "INVALID_UPDATE")

    def test_citizen_search_returns_own_grievances(self):
        self._create()

        response = self.client.post(
            f"{reverse('pgr-search')}?tenantId={TENANT}",
            {"RequestInfo": request_info()},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        wrappers = response.data["ServiceWrappers"]
        self.assertEqual(len(wrappers), 1)
        self.assertEqual(wrappers[0]["service"]["citizen"]["uuid"], CITIZEN_UUID)

    def test_employee_search_without_params_is_rejected(self):
        response = self.client.post(
            f"{reverse('pgr-search')}?tenantId={TENANT}",
            {"RequestInfo": request_info("EMPLOYEE", uuid="employee-1")},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            response.data["Errors"],
            [{"code": "INVALID_SEARCH", "message": "Search without params is not allowed"}],
        )

    def test_count(self):
        self._create()
        self._create()

        response = self.client.post(
            f"{reverse('pgr-count')}?tenantId={TENANT}&serviceCode={SERVICE_CODE}",
            {"RequestInfo": request_info("EMPLOYEE", uuid="employee-1")},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["count"], 2)

    def test_dynamic_data(self):
        response = self.client.post(
            f"{reverse('pgr-dynamic-data')}?tenantId={TENANT}",
            {"RequestInfo": request_info()},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data["complaintsResolved"], 0)
        self.assertEqual(response.data["averageResolutionTime"], 0)
        self.assertIn("ResponseInfo", response.data)

    def test_dynamic_data_requires_tenant(self):
        response = self.client.post(
            reverse("pgr-dynamic-data"),
            {"RequestInfo": request_info()},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class TestServiceLifetime(TestCase):
    def setUp(self):
        self.client = APIClient()
        build_pgr_service.cache_clear()
        self.addCleanup(build_pgr_service.cache_clear)

    def test_requests_share_one_service_and_its_http_clients(self):
        with mock.patch("core.clients.httpx.Client", wraps=httpx.Client) as spy:
            for _ in range(3):
                response = self.client.post(
                    f"{reverse('pgr-count')}?tenantId={TENANT}&serviceCode={SERVICE_CODE}",
                    {"RequestInfo": request_info("EMPLOYEE", uuid="employee-1")},
                    format="json",
                )
                self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)

        self.assertEqual(spy.call_count, 5)
        service = build_pgr_service()
        self.assertIs(service, build_pgr_service())

        with mock.patch("core.clients.httpx.Client.close") as close:
            service.close()
        self.assertEqual(close.call_count, 5)


@pytest.mark.django_db
def test_response_info_echoes_request_info(api_client, harness):
    h = harness()
    with mock.patch("pgr.views.build_pgr_service", return_value=h.service):
        response = api_client.post(
            f"{reverse('pgr-search')}?tenantId={TENANT}",
            {"RequestInfo": request_info()},
            format="json",
        )

    assert response.status_code == status.HTTP_200_OK
    assert response.data["ResponseInfo"] == {
        "apiId": "Rainmaker",
        "ver": "1.0",
        "ts": 1_760_000_000_000,
        "msgId": "20251009|en_IN",
        "status": "successful",
    }
    assert response.data["ServiceWrappers"] == []
