"""
Tests for ``PgrValidator``.

Validation runs before any collaborator write, so these tests only need
the master-data / HRMS fakes and a dict-backed repository.
"""

from __future__ import annotations

import pytest

from core.domain.exceptions import (
    InvalidAction,
    InvalidAssignment,
    InvalidRequest,
    InvalidSearch,
    InvalidServiceCode,
    InvalidSource,
    InvalidUpdate,
)
from identity.entities import Citizen
from pgr.conf import PgrConfig
from pgr.entities import AuditDetails, Grievance, SearchCriteria
from pgr.validators import PgrValidator

from .fakes import (
    CITIZEN_UUID,
    DEPARTMENT,
    NOW,
    SERVICE_CODE,
    STATE_TENANT,
    TENANT,
    FakeClock,
    FakeHRMSClient,
    FakeMasterDataClient,
    StubRepository,
    citizen_request_info,
    employee_request_info,
    grievance_request,
    known_citizen,
)

GRIEVANCE_ID = "grievance-1"


def stored_grievance(last_modified_time: int, account_id: str = CITIZEN_UUID) -> Grievance:
    return Grievance(
        id=GRIEVANCE_ID,
        tenant_id=TENANT,
        service_code=SERVICE_CODE,
        service_request_id="PB-PGR-2025-10-09-000001",
        source="web",
        account_id=account_id,
        application_status="RESOLVED",
        audit_details=AuditDetails.for_create(account_id, last_modified_time),
    )


def make_validator(grievances=(), departments=None, config=None) -> PgrValidator:
    return PgrValidator(
        config or PgrConfig(),
        FakeMasterDataClient(),
        FakeHRMSClient(departments),
        StubRepository(grievances),
        clock=FakeClock(NOW),
    )


def update_request(request_info, *, action, assignees=(), source="web"):
    request = grievance_request(request_info, action=action, source=source)
    request = request.with_service(id=GRIEVANCE_ID)
    return request.with_envelope(request.envelope.with_workflow(assignees=tuple(assignees)))


class TestValidateCreate:

    def test_citizen_request_passes(self):
        make_validator().validate_create(grievance_request(citizen_request_info()))

    def test_unlisted_source_is_rejected(self):
        with pytest.raises(InvalidSource) as exc:
            make_validator().validate_create(
                grievance_request(citizen_request_info(), source="whatsapp")
            )
        assert exc.value.message == "The source: whatsapp is not valid"

    def test_unknown_service_code_is_rejected(self):
        with pytest.raises(InvalidServiceCode):
            make_validator().validate_create(
                grievance_request(citizen_request_info(), service_code="NoSuchComplaint")
            )

    def test_employee_must_supply_citizen(self):
        with pytest.raises(InvalidRequest) as exc:
            make_validator().validate_create(grievance_request(employee_request_info()))
        assert set(exc.value.errors) == {"INVALID_REQUEST"}

    def test_employee_citizen_errors_are_aggregated(self):
        incomplete = Citizen(name="Asha")
        with pytest.raises(InvalidRequest) as exc:
            make_validator().validate_create(
                grievance_request(employee_request_info(), citizen=incomplete)
            )
        assert set(exc.value.errors) == {"INVALID_MOBILENUMBER", "INVALID_USERNAME"}

    def test_employee_with_complete_citizen_passes(self):
        make_validator().validate_create(
            grievance_request(employee_request_info(), citizen=known_citizen())
        )


class TestValidateUpdate:

    def test_missing_record_is_rejected_first(self):
        request = update_request(citizen_request_info(), action="RATE", source="whatsapp")
        with pytest.raises(InvalidUpdate):
            make_validator().validate_update(request)

    def test_returns_stored_grievance(self):
        existing = stored_grievance(NOW)
        request = update_request(employee_request_info(), action="RESOLVE")
        assert make_validator([existing]).validate_update(request) == existing

    def test_foreign_service_request_id_is_rejected(self):
        request = update_request(employee_request_info(), action="RESOLVE")
        request = request.with_service(service_request_id="PB-PGR-2025-10-09-000002")
        with pytest.raises(InvalidUpdate, match="does not belong"):
            make_validator([stored_grievance(NOW)]).validate_update(request)

    def test_source_is_checked_on_update(self):
        request = update_request(employee_request_info(), action="RESOLVE", source="sms")
        with pytest.raises(InvalidSource):
            make_validator([stored_grievance(NOW)]).validate_update(request)

    def test_assignee_from_matching_department_passes(self):
        validator = make_validator([stored_grievance(NOW)], departments={"emp-2": DEPARTMENT})
        validator.validate_update(
            update_request(employee_request_info(), action="ASSIGN", assignees=["emp-2"])
        )

    def test_assignee_from_other_department_is_rejected(self):
        validator = make_validator(
            [stored_grievance(NOW)],
            departments={"emp-2": DEPARTMENT, "emp-3": "DEPT_9"},
        )
        with pytest.raises(InvalidAssignment) as exc:
            validator.validate_update(
                update_request(employee_request_info(), action="ASSIGN", assignees=["emp-2", "emp-3"])
            )
        assert "DEPT_9" in exc.value.message

    def test_assignee_without_department_is_rejected(self):
        validator = make_validator([stored_grievance(NOW)], departments={})
        with pytest.raises(InvalidAssignment):
            validator.validate_update(
                update_request(employee_request_info(), action="ASSIGN", assignees=["emp-2"])
            )


class TestReopen:

    def test_reopen_within_idle_window_passes(self):
        validator = make_validator([stored_grievance(NOW - 10_000)])
        validator.validate_update(update_request(citizen_request_info(), action="REOPEN"))

    def test_reopen_after_idle_window_is_rejected(self):
        validator = make_validator([stored_grievance(NOW - 90_000_000)])
        with pytest.raises(InvalidAction) as exc:
            validator.validate_update(update_request(citizen_request_info(), action="REOPEN"))
        assert exc.value.message == "Complaint is closed for reopening"

    def test_reopen_by_other_citizen_is_rejected(self):
        validator = make_validator([stored_grievance(NOW - 10_000)])
        with pytest.raises(InvalidAction) as exc:
            validator.validate_update(
                update_request(citizen_request_info(uuid="citizen-2"), action="REOPEN")
            )
        assert exc.value.message == "Only the citizen who filed the complaint can reopen it"

    def test_reopen_by_employee_is_rejected(self):
        validator = make_validator([stored_grievance(NOW - 10_000)])
        with pytest.raises(InvalidAction):
            validator.validate_update(update_request(employee_request_info(), action="REOPEN"))


class TestValidateSearch:

    def test_tenant_is_mandatory(self, citizen):
        with pytest.raises(InvalidSearch) as exc:
            make_validator().validate_search(citizen, SearchCriteria())
        assert exc.value.message == "TenantId is mandatory search param"

    def test_citizen_may_search_without_params(self, citizen):
        make_validator().validate_search(citizen, SearchCriteria(tenant_id=TENANT))

    def test_citizen_may_search_state_level(self):
        make_validator().validate_search(
            citizen_request_info(), SearchCriteria(tenant_id=STATE_TENANT)
        )

    def test_employee_search_without_params_is_rejected(self, employee):
        with pytest.raises(InvalidSearch) as exc:
            make_validator().validate_search(
                employee, SearchCriteria(tenant_id=TENANT)
            )
        assert exc.value.message == "Search without params is not allowed"

    def test_employee_state_level_search_is_rejected(self, employee):
        with pytest.raises(InvalidSearch) as exc:
            make_validator().validate_search(
                employee,
                SearchCriteria(tenant_id=STATE_TENANT, service_codes=frozenset({SERVICE_CODE})),
            )
        assert exc.value.message == "Employees cannot perform state level searches."

    def test_system_caller_uses_employee_params(self):
        make_validator().validate_search(
            employee_request_info(type="SYSTEM"),
            SearchCriteria(tenant_id=STATE_TENANT, ids=frozenset({GRIEVANCE_ID})),
        )

    def test_disallowed_param_is_rejected(self):
        config = PgrConfig(allowed_citizen_search_parameters=frozenset({"serviceCode"}))
        with pytest.raises(InvalidSearch) as exc:
            make_validator(config=config).validate_search(
                citizen_request_info(),
                SearchCriteria(tenant_id=TENANT, mobile_number="9999999999"),
            )
        assert exc.value.message == "Search on mobileNumber is not allowed"

    def test_unknown_caller_type_is_rejected(self):
        with pytest.raises(InvalidSearch) as exc:
            make_validator().validate_search(
                employee_request_info(type="ROBOT"),
                SearchCriteria(tenant_id=TENANT, ids=frozenset({GRIEVANCE_ID})),
            )
        assert "ROBOT" in exc.value.message
