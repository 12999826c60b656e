"""
Pre-mutation and search validation for grievances.

``PgrValidator`` runs before any identity, workflow or store write, so a
rejected request leaves no partial state behind.

Search policy is a lookup table keyed by ``CallerType``; adding a caller
type means adding one ``SearchPolicy`` row, not another branch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from core.constants import ACTION_REOPEN
from core.domain.access import (
    CallerType,
    RequestInfo,
    apply_caller_rule,
    is_state_level,
)
from core.domain.exceptions import (
    InvalidAction,
    InvalidAssignment,
    InvalidRequest,
    InvalidSearch,
    InvalidServiceCode,
    InvalidSource,
    InvalidUpdate,
)
from mdms.clients import HRMSClient, MasterDataClient, MasterDataEntry

from .conf import PgrConfig
from .entities import Grievance, GrievanceRequest, SearchCriteria
from .repository import PGRRepository
from .utils import current_millis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchPolicy:
    allowed_params: frozenset[str]
    requires_params: bool = False
    allows_state_level: bool = True


class PgrValidator:
    def __init__(
        self,
        config: PgrConfig,
        mdms: MasterDataClient,
        hrms: HRMSClient,
        repository: PGRRepository,
        clock: Callable[[], int] = current_millis,
    ) -> None:
        self.config = config
        self.mdms = mdms
        self.hrms = hrms
        self.repository = repository
        self.clock = clock
        self.search_policies: dict[CallerType, SearchPolicy] = {
            CallerType.CITIZEN: SearchPolicy(config.allowed_citizen_search_parameters),
            CallerType.EMPLOYEE: SearchPolicy(
                config.allowed_employee_search_parameters,
                requires_params=True,
                allows_state_level=False,
            ),
            CallerType.SYSTEM: SearchPolicy(config.allowed_employee_search_parameters),
        }

    # ── Create ──────────────────────────────────────────────────────

    def validate_create(self, request: GrievanceRequest) -> None:
        """
        Raises:
            InvalidRequest:     Employee filed without complete reporter details.
            InvalidSource:      Source outside the allow-list.
            InvalidServiceCode: Service code unknown to master data.
        """
        self._validate_reporter(request)
        self._validate_source(request.service.source)
        self._service_definitions(request.service, request.request_info)

    def _validate_reporter(self, request: GrievanceRequest) -> None:
        if not request.request_info.user_info.is_a(CallerType.EMPLOYEE):
            return

        errors: dict[str, str] = {}
        citizen = request.service.citizen
        if citizen is None:
            errors["INVALID_REQUEST"] = "Citizen object cannot be null"
        else:
            if not citizen.mobile_number:
                errors["INVALID_MOBILENUMBER"] = "Mobile number is required in the citizen object"
            if not citizen.user_name:
                errors["INVALID_USERNAME"] = "Username is required in the citizen object"

        if errors:
            raise InvalidRequest("Invalid citizen details", errors=errors)

    def _validate_source(self, source: str | None) -> None:
        if source not in self.config.allowed_sources:
            raise InvalidSource(f"The source: {source} is not valid")

    def _service_definitions(
        self,
        service: Grievance,
        request_info: RequestInfo,
    ) -> list[MasterDataEntry]:
        entries = self.mdms.fetch(service.tenant_id, service.service_code, request_info)
        if not entries:
            raise InvalidServiceCode(
                f"The service code: {service.service_code} is not present in MDMS"
            )
        return entries

    # ── Update ──────────────────────────────────────────────────────

    def validate_update(self, request: GrievanceRequest) -> Grievance:
        """
        Validate an update and return the stored grievance it targets.

        Raises:
            InvalidUpdate:      No stored grievance with the given id, or a
                                serviceRequestId that is not the stored one.
            InvalidSource:      Source outside the allow-list.
            InvalidServiceCode: Service code unknown to master data.
            InvalidAssignment:  An assignee belongs to another department.
            InvalidAction:      Reopen by someone other than the reporter,
                                or after the idle window has passed.
        """
        service = request.service
        existing = None
        if service.id:
            existing = self.repository.get_by_id(service.tenant_id, service.id)
        if existing is None:
            raise InvalidUpdate(
                "The record that you are trying to update does not exist in the system"
            )
        if service.service_request_id and service.service_request_id != existing.service_request_id:
            raise InvalidUpdate(
                f"The serviceRequestId: {service.service_request_id} does not belong to "
                f"the record being updated"
            )

        self._validate_source(service.source)
        entries = self._service_definitions(service, request.request_info)
        self._validate_assignees(request, entries[0])
        self._validate_reopen(request, existing)
        return existing

    def _validate_assignees(self, request: GrievanceRequest, definition: MasterDataEntry) -> None:
        assignees = request.workflow.assignees
        if not assignees:
            return

        departments = self.hrms.departments_for_account_ids(assignees, request.request_info)
        if not departments or any(d != definition.department for d in departments):
            logger.warning(
                "Assignment of %s to departments %s rejected; %s belongs to %s",
                request.service.service_request_id,
                departments,
                definition.service_code,
                definition.department,
            )
            raise InvalidAssignment(
                f"The application cannot be assigned to employee of department: "
                f"{', '.join(sorted(set(departments)))}"
            )

    def _validate_reopen(self, request: GrievanceRequest, existing: Grievance) -> None:
        if request.workflow.action != ACTION_REOPEN:
            return

        user = request.request_info.user_info
        if not user.is_a(CallerType.CITIZEN) or user.uuid != existing.account_id:
            raise InvalidAction("Only the citizen who filed the complaint can reopen it")

        last_modified = (existing.audit_details.last_modified_time
                         if existing.audit_details else None) or 0
        if self.clock() - last_modified > self.config.complain_max_idle_time:
            raise InvalidAction("Complaint is closed for reopening")

    # ── Search ──────────────────────────────────────────────────────

    def validate_search(self, request_info: RequestInfo, criteria: SearchCriteria) -> None:
        """
        Raises:
            InvalidSearch: Missing tenant, unknown caller type, empty
                           employee search, state-level employee search or
                           a predicate outside the caller's allow-list.
        """
        self.validate_tenant(criteria)
        policy = apply_caller_rule(
            self.search_policies, request_info.user_info, error=InvalidSearch,
        )

        if policy.requires_params and criteria.is_empty():
            raise InvalidSearch("Search without params is not allowed")

        if not policy.allows_state_level and is_state_level(criteria.tenant_id):
            raise InvalidSearch("Employees cannot perform state level searches.")

        for param in criteria.present_params():
            if param not in policy.allowed_params:
                raise InvalidSearch(f"Search on {param} is not allowed")

    @staticmethod
    def validate_tenant(criteria: SearchCriteria) -> None:
        if not criteria.tenant_id:
            raise InvalidSearch("TenantId is mandatory search param")
