"""
Enrichment stages of the grievance pipeline.

Each method takes a value and returns a new one; nothing is mutated in
place.  Caller-type-specific criteria rules are a lookup table
(``CRITERIA_RULES``) so a new caller type adds one row.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Callable

from core.domain.access import CallerType, RequestInfo, UserInfo
from identity.services import IdentityResolver
from mdms.clients import IdGenClient

from .conf import PgrConfig
from .entities import AuditDetails, Grievance, GrievanceRequest, SearchCriteria
from .utils import current_millis


def _citizen_criteria(criteria: SearchCriteria, user: UserInfo) -> SearchCriteria:
    """Citizens only ever see their own grievances; an empty search means 'mine'."""
    if criteria.is_empty():
        criteria = replace(criteria, mobile_number=user.mobile_number or user.user_name)
    return replace(criteria, account_id=user.uuid)


def _unchanged(criteria: SearchCriteria, user: UserInfo) -> SearchCriteria:
    return criteria


CRITERIA_RULES: dict[CallerType, Callable[[SearchCriteria, UserInfo], SearchCriteria]] = {
    CallerType.CITIZEN: _citizen_criteria,
    CallerType.EMPLOYEE: _unchanged,
    CallerType.SYSTEM: _unchanged,
}


def _new_id() -> str:
    return str(uuid.uuid4())


class EnrichmentService:
    def __init__(
        self,
        config: PgrConfig,
        identity: IdentityResolver,
        idgen: IdGenClient,
        clock: Callable[[], int] = current_millis,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.config = config
        self.identity = identity
        self.idgen = idgen
        self.clock = clock
        self.id_factory = id_factory

    # ── Create / update ─────────────────────────────────────────────

    @staticmethod
    def with_caller_account(request: GrievanceRequest) -> GrievanceRequest:
        """A citizen filing for themselves is the reporter."""
        user = request.request_info.user_info
        if user.is_a(CallerType.CITIZEN) and user.uuid:
            return request.with_service(account_id=user.uuid)
        return request

    def enrich_create(self, request: GrievanceRequest) -> GrievanceRequest:
        """
        Assign ids, the audit block and the business id.

        Raises:
            IdGenerationError: The id-generation service returned no id.
        """
        service = request.service
        caller = request.request_info.user_info.uuid
        now = self.clock()

        address = replace(
            service.address,
            id=self.id_factory(),
            tenant_id=service.tenant_id,
        )
        documents = tuple(
            replace(doc, id=self.id_factory())
            for doc in request.workflow.verification_documents
        )
        account_id = service.account_id or (service.citizen.uuid if service.citizen else None)

        envelope = request.envelope.with_service(
            id=self.id_factory(),
            address=address,
            active=True,
            account_id=account_id,
            audit_details=AuditDetails.for_create(caller, now),
            service_request_id=self._service_request_id(service, request.request_info),
        ).with_workflow(verification_documents=documents)
        return request.with_envelope(envelope)

    def enrich_update(self, request: GrievanceRequest, existing: Grievance) -> GrievanceRequest:
        """
        Pin the identity of the update to the stored record and refresh audit.

        ``id``, ``tenantId`` and ``serviceRequestId`` always come from
        ``existing``; the workflow transition is keyed by them.
        """
        stored = existing.audit_details or AuditDetails()
        audit = stored.refreshed(request.request_info.user_info.uuid, self.clock())
        address = replace(
            request.service.address,
            id=existing.address.id,
            tenant_id=existing.address.tenant_id or existing.tenant_id,
        )
        return request.with_service(
            id=existing.id,
            tenant_id=existing.tenant_id,
            service_request_id=existing.service_request_id,
            audit_details=audit,
            address=address,
        )

    def _service_request_id(self, service: Grievance, request_info: RequestInfo) -> str:
        ids = self.idgen.generate(
            service.tenant_id,
            self.config.service_request_id_gen_name,
            self.config.service_request_id_gen_format,
            1,
            request_info,
        )
        return ids[0]

    # ── Search / count ──────────────────────────────────────────────

    def enrich_search(self, request_info: RequestInfo, criteria: SearchCriteria) -> SearchCriteria:
        """
        Apply the caller's criteria rule, resolve a mobile-number filter
        to account ids, and default / clamp pagination.
        """
        user = request_info.user_info
        rule = CRITERIA_RULES.get(user.caller_type, _unchanged)
        criteria = rule(criteria, user)

        if criteria.mobile_number:
            tenant_id = criteria.tenant_id or user.tenant_id
            user_ids = self.identity.resolve_search_filter(
                tenant_id, criteria.mobile_number, request_info,
            )
            criteria = replace(criteria, user_ids=user_ids)

        limit = self.config.default_limit if criteria.limit is None else criteria.limit
        offset = self.config.default_offset if criteria.offset is None else criteria.offset
        return replace(criteria, limit=min(limit, self.config.max_limit), offset=offset)
