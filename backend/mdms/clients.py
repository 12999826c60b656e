"""
HTTP clients for the read-only reference collaborators.

- ``MasterDataClient``: service definitions (category → department,
  SLA) from the master-data service.
- ``HRMSClient``: current departments of employees.
- ``IdGenClient``: human-readable business ids.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from core.clients import RemoteServiceClient, request_info_payload
from core.constants import MDMS_SERVICE_DEFS_MASTER, PGR_MODULE_NAME
from core.domain.access import RequestInfo, state_level_tenant
from core.domain.exceptions import IdGenerationError, ParsingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MasterDataEntry:
    """One ``ServiceDefs`` row: a grievance category and its owning department."""

    service_code: str
    department: str | None = None
    name: str | None = None
    sla_hours: int | None = None
    active: bool = True


class MasterDataClient(RemoteServiceClient):
    service_name = "master data service"

    def __init__(
        self,
        host: str,
        *,
        search_path: str = "/egov-mdms-service/v1/_search",
        module_name: str = PGR_MODULE_NAME,
        master_name: str = MDMS_SERVICE_DEFS_MASTER,
        **kwargs: Any,
    ) -> None:
        super().__init__(host, **kwargs)
        self.search_path = search_path
        self.module_name = module_name
        self.master_name = master_name

    def fetch(
        self,
        tenant_id: str,
        service_code: str,
        request_info: RequestInfo | None = None,
    ) -> list[MasterDataEntry]:
        """
        Service definitions matching ``service_code`` for the tenant's
        state.  An empty list means the code is unknown.
        """
        body = self.post(
            self.search_path,
            {
                "RequestInfo": request_info_payload(request_info),
                "MdmsCriteria": {
                    "tenantId": state_level_tenant(tenant_id),
                    "moduleDetails": [
                        {
                            "moduleName": self.module_name,
                            "masterDetails": [{"name": self.master_name}],
                        }
                    ],
                },
            },
        )
        try:
            rows = body.get("MdmsRes", {}).get(self.module_name, {}).get(self.master_name, [])
        except AttributeError as e:
            raise ParsingError("Failed to parse mdms response") from e
        if not isinstance(rows, list):
            raise ParsingError("Failed to parse mdms response")

        return [
            MasterDataEntry(
                service_code=row["serviceCode"],
                department=row.get("department"),
                name=row.get("name"),
                sla_hours=row.get("slaHours"),
                active=bool(row.get("active", True)),
            )
            for row in rows
            if isinstance(row, dict) and row.get("serviceCode") == service_code
        ]


class HRMSClient(RemoteServiceClient):
    service_name = "hrms service"

    def __init__(
        self,
        host: str,
        *,
        search_path: str = "/egov-hrms/employees/_search",
        **kwargs: Any,
    ) -> None:
        super().__init__(host, **kwargs)
        self.search_path = search_path

    def departments_for_account_ids(
        self,
        account_ids: Iterable[str],
        request_info: RequestInfo | None = None,
    ) -> list[str]:
        """Departments of the employees' current assignments, one per assignment."""
        ids = list(account_ids)
        body = self.post(
            self.search_path,
            {"RequestInfo": request_info_payload(request_info)},
            params={"uuids": ",".join(ids)},
        )
        employees = body.get("Employees")
        if not isinstance(employees, list):
            raise ParsingError("Failed to parse HRMS response")

        departments: list[str] = []
        try:
            for employee in employees:
                for assignment in employee.get("assignments") or []:
                    if assignment.get("isCurrentAssignment"):
                        departments.append(assignment["department"])
        except (AttributeError, KeyError, TypeError) as e:
            raise ParsingError("Failed to parse HRMS response") from e
        return departments


class IdGenClient(RemoteServiceClient):
    service_name = "idgen service"

    def __init__(
        self,
        host: str,
        *,
        generate_path: str = "/egov-idgen/id/_generate",
        **kwargs: Any,
    ) -> None:
        super().__init__(host, **kwargs)
        self.generate_path = generate_path

    def generate(
        self,
        tenant_id: str,
        id_name: str,
        fmt: str,
        count: int = 1,
        request_info: RequestInfo | None = None,
    ) -> list[str]:
        """
        Raises:
            IdGenerationError: The service returned no ids.
        """
        body = self.post(
            self.generate_path,
            {
                "RequestInfo": request_info_payload(request_info),
                "idRequests": [
                    {"idName": id_name, "format": fmt, "tenantId": tenant_id}
                    for _ in range(count)
                ],
            },
        )
        responses = body.get("idResponses") or []
        if not isinstance(responses, list):
            raise ParsingError("Failed to parse idgen response")
        ids = [item["id"] for item in responses if isinstance(item, dict) and item.get("id")]
        if not ids:
            logger.error("idgen returned no ids for %s in %s", id_name, tenant_id)
            raise IdGenerationError("No ids returned from idgen Service")
        return ids
