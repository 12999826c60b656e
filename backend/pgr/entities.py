"""
Grievance value types.

Everything here is an immutable dataclass.  Pipeline stages in the
service layer never mutate a request in place: each stage receives a
value and returns a new one (``dataclasses.replace``), so the point at
which a field is filled in is visible in the code that fills it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from core.domain.access import RequestInfo
from identity.entities import Citizen
from workflow.entities import Workflow


@dataclass(frozen=True)
class AuditDetails:
    created_by: str | None = None
    last_modified_by: str | None = None
    created_time: int | None = None
    last_modified_time: int | None = None

    @classmethod
    def for_create(cls, by: str | None, now: int) -> AuditDetails:
        """Both created* and lastModified* set to the same actor and time."""
        return cls(
            created_by=by,
            last_modified_by=by,
            created_time=now,
            last_modified_time=now,
        )

    def refreshed(self, by: str | None, now: int) -> AuditDetails:
        """Keep created*, move lastModified* forward."""
        return replace(self, last_modified_by=by, last_modified_time=now)


@dataclass(frozen=True)
class GeoLocation:
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class Address:
    id: str | None = None
    tenant_id: str | None = None
    door_no: str | None = None
    plot_no: str | None = None
    building_name: str | None = None
    street: str | None = None
    landmark: str | None = None
    city: str | None = None
    district: str | None = None
    region: str | None = None
    state: str | None = None
    country: str | None = None
    pincode: str | None = None
    locality: str | None = None
    geo_location: GeoLocation | None = None
    additional_details: Any = None


@dataclass(frozen=True)
class Grievance:
    """
    A citizen complaint (the platform calls it a *service* request).

    ``id`` is generated on create and never reassigned;
    ``service_request_id`` is the human-readable business id the workflow
    engine correlates on; ``application_status`` mirrors the engine.
    """

    tenant_id: str
    service_code: str
    source: str | None = None
    id: str | None = None
    service_request_id: str | None = None
    description: str | None = None
    account_id: str | None = None
    citizen: Citizen | None = None
    application_status: str | None = None
    rating: int | None = None
    address: Address = field(default_factory=Address)
    audit_details: AuditDetails | None = None
    additional_details: Any = None
    active: bool = True


@dataclass(frozen=True)
class GrievanceEnvelope:
    """One grievance with its current workflow state."""

    service: Grievance
    workflow: Workflow = field(default_factory=Workflow)

    def with_service(self, **changes: Any) -> GrievanceEnvelope:
        return replace(self, service=replace(self.service, **changes))

    def with_workflow(self, **changes: Any) -> GrievanceEnvelope:
        return replace(self, workflow=replace(self.workflow, **changes))


@dataclass(frozen=True)
class GrievanceRequest:
    """A create / update request: caller metadata plus one envelope."""

    request_info: RequestInfo
    envelope: GrievanceEnvelope

    @property
    def service(self) -> Grievance:
        return self.envelope.service

    @property
    def workflow(self) -> Workflow:
        return self.envelope.workflow

    def with_envelope(self, envelope: GrievanceEnvelope) -> GrievanceRequest:
        return replace(self, envelope=envelope)

    def with_service(self, **changes: Any) -> GrievanceRequest:
        return self.with_envelope(self.envelope.with_service(**changes))


# Search parameter names as clients send them; the allow-lists in the
# ``PGR`` settings are expressed in these names.
PARAM_SERVICE_CODE = "serviceCode"
PARAM_SERVICE_REQUEST_ID = "serviceRequestId"
PARAM_APPLICATION_STATUS = "applicationStatus"
PARAM_MOBILE_NUMBER = "mobileNumber"
PARAM_IDS = "ids"


@dataclass(frozen=True)
class SearchCriteria:
    """
    Filters for grievance search and count.

    ``account_id`` and ``user_ids`` are never supplied by clients: they are
    filled in by criteria enrichment (caller self-filter and the account
    ids the identity service resolved for ``mobile_number``).
    """

    tenant_id: str | None = None
    service_codes: frozenset[str] | None = None
    service_request_id: str | None = None
    application_statuses: frozenset[str] | None = None
    mobile_number: str | None = None
    ids: frozenset[str] | None = None
    limit: int | None = None
    offset: int | None = None
    is_plain_search: bool = False
    account_id: str | None = None
    user_ids: frozenset[str] | None = None

    def present_params(self) -> list[str]:
        """Names of the client-supplied predicates that are set, in query order."""
        present = [
            (PARAM_SERVICE_CODE, self.service_codes),
            (PARAM_SERVICE_REQUEST_ID, self.service_request_id),
            (PARAM_APPLICATION_STATUS, self.application_statuses),
            (PARAM_MOBILE_NUMBER, self.mobile_number),
            (PARAM_IDS, self.ids),
        ]
        return [name for name, value in present if value]

    def is_empty(self) -> bool:
        """True when no predicate besides the tenant is set."""
        return not self.present_params()

    def account_filter(self) -> frozenset[str] | None:
        """
        The account-id set to filter on: mobile-resolved ids, narrowed to
        the caller's own account when a self-filter is in place.
        ``None`` means no account predicate at all.
        """
        if self.user_ids is None and self.account_id is None:
            return None
        if self.user_ids is None:
            return frozenset({self.account_id})
        if self.account_id is None:
            return self.user_ids
        return self.user_ids & {self.account_id}

    def matches_nothing(self) -> bool:
        """True when the account filter resolved to an empty set."""
        accounts = self.account_filter()
        return accounts is not None and not accounts
