"""
Grievance Service Layer.

``PgrService`` is the single entry point for grievance operations.
Views stay thin: parse input, call one method here, render the result.

Pipelines
---------
create::

    validate_create → caller account id → identity resolution
      → ids / audit / business id → workflow transition
      → publish(create topic)

update::

    validate_update → audit refresh → identity resolution
      → workflow transition → publish(update topic)

search::

    validate_search → criteria enrichment → (empty → [])
      → query → (no rows → [])
      → identity ∥ workflow bulk resolution → merge
      → stable sort by createdTime desc

count::

    tenant check → criteria enrichment → non-plain count

Every stage returns a new value.  Validation runs before the first
external write; once identity or workflow have been written there is no
compensation if a later stage fails.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from functools import lru_cache

from core.constants import ACTION_CREATE, MILLIS_PER_DAY, STATUS_CLOSED_AFTER_RESOLUTION
from core.domain.access import RequestInfo
from identity.client import IdentityServiceClient
from identity.services import IdentityResolver
from mdms.clients import HRMSClient, IdGenClient, MasterDataClient
from workflow.client import WorkflowClient
from workflow.services import WorkflowCoordinator

from .conf import PgrConfig
from .enrichment import EnrichmentService
from .entities import GrievanceEnvelope, GrievanceRequest, SearchCriteria
from .producer import EventSink, load_event_sink
from .querybuilder import PGRQueryBuilder
from .repository import PGRRepository
from .validators import PgrValidator

logger = logging.getLogger(__name__)


class PgrService:
    def __init__(
        self,
        *,
        config: PgrConfig,
        validator: PgrValidator,
        enrichment: EnrichmentService,
        identity: IdentityResolver,
        workflow: WorkflowCoordinator,
        repository: PGRRepository,
        query_builder: PGRQueryBuilder,
        event_sink: EventSink,
    ) -> None:
        self.config = config
        self.validator = validator
        self.enrichment = enrichment
        self.identity = identity
        self.workflow = workflow
        self.repository = repository
        self.query_builder = query_builder
        self.event_sink = event_sink

    @classmethod
    def from_settings(cls, config: PgrConfig | None = None) -> PgrService:
        """Wire the service and its collaborators from the ``PGR`` settings."""
        config = config or PgrConfig.from_settings()
        timeout = config.http_timeout

        query_builder = PGRQueryBuilder(config)
        repository = PGRRepository(query_builder)
        identity = IdentityResolver(IdentityServiceClient(config.user_host, timeout=timeout))
        workflow = WorkflowCoordinator(
            WorkflowClient(config.workflow_host, timeout=timeout),
            business_service=config.business_service,
            module_name=config.module_name,
            cache_timeout=config.business_service_cache_timeout,
        )
        validator = PgrValidator(
            config,
            MasterDataClient(config.mdms_host, module_name=config.module_name, timeout=timeout),
            HRMSClient(config.hrms_host, timeout=timeout),
            repository,
        )
        enrichment = EnrichmentService(
            config,
            identity,
            IdGenClient(config.idgen_host, timeout=timeout),
        )
        return cls(
            config=config,
            validator=validator,
            enrichment=enrichment,
            identity=identity,
            workflow=workflow,
            repository=repository,
            query_builder=query_builder,
            event_sink=load_event_sink(config),
        )

    def close(self) -> None:
        """Release the connection pools of every collaborator client."""
        for client in (
            self.identity.client,
            self.workflow.client,
            self.validator.mdms,
            self.validator.hrms,
            self.enrichment.idgen,
        ):
            client.close()

    # ── Create ──────────────────────────────────────────────────────

    def create(self, request: GrievanceRequest) -> GrievanceEnvelope:
        self.validator.validate_create(request)

        request = self.enrichment.with_caller_account(request)
        request = self.identity.resolve_for_mutation(request)
        request = self.enrichment.enrich_create(request)

        if not request.workflow.action:
            request = request.with_envelope(
                request.envelope.with_workflow(action=ACTION_CREATE)
            )
        envelope = self._transition(request)

        self.event_sink.publish(self.config.create_topic, envelope)
        logger.info(
            "Grievance %s created in %s with status %s",
            envelope.service.service_request_id,
            envelope.service.tenant_id,
            envelope.service.application_status,
        )
        return envelope

    # ── Update ──────────────────────────────────────────────────────

    def update(self, request: GrievanceRequest) -> GrievanceEnvelope:
        existing = self.validator.validate_update(request)

        request = self.enrichment.enrich_update(request, existing)
        request = self.identity.resolve_for_mutation(request)
        envelope = self._transition(request)

        self.event_sink.publish(self.config.update_topic, envelope)
        logger.info(
            "Grievance %s updated by action %s to status %s",
            envelope.service.service_request_id,
            envelope.workflow.action,
            envelope.service.application_status,
        )
        return envelope

    def _transition(self, request: GrievanceRequest) -> GrievanceEnvelope:
        status = self.workflow.transition(request.envelope, request.request_info)
        return request.envelope.with_service(application_status=status)

    # ── Search ──────────────────────────────────────────────────────

    def search(self, request_info: RequestInfo, criteria: SearchCriteria) -> list[GrievanceEnvelope]:
        """
        Grievances matching ``criteria``, with reporter identity and
        current workflow state attached, newest first.
        """
        self.validator.validate_search(request_info, criteria)
        criteria = self.enrichment.enrich_search(request_info, criteria)

        if criteria.is_empty() or criteria.matches_nothing():
            return []

        sql, params = self.query_builder.build(replace(criteria, is_plain_search=False))
        envelopes = self.repository.query(sql, params)
        if not envelopes:
            return []

        with ThreadPoolExecutor(max_workers=2) as pool:
            users_future = pool.submit(self.identity.bulk_resolve, envelopes, request_info)
            workflows_future = pool.submit(self.workflow.enrich_workflow, envelopes, request_info)
            users = users_future.result()
            workflows = workflows_future.result()

        merged = [
            replace(env, workflow=workflows[env.service.service_request_id])
            for env in self.identity.attach(envelopes, users)
        ]
        return sorted(merged, key=_created_time_desc)

    # ── Count ───────────────────────────────────────────────────────

    def count(self, request_info: RequestInfo, criteria: SearchCriteria) -> int:
        self.validator.validate_tenant(criteria)
        criteria = self.enrichment.enrich_search(request_info, criteria)
        if criteria.matches_nothing():
            return 0

        sql, params = self.query_builder.build_count(replace(criteria, is_plain_search=False))
        return self.repository.scalar_count(sql, params)

    # ── Dashboard ───────────────────────────────────────────────────

    def dynamic_data(self, tenant_id: str) -> dict[str, int]:
        """Resolved-grievance count and their average resolution time in days."""
        status = STATUS_CLOSED_AFTER_RESOLUTION
        sql, params = self.query_builder.build_resolved_count(tenant_id, status)
        resolved = self.repository.scalar_count(sql, params)

        sql, params = self.query_builder.build_average_resolution_time(tenant_id, status)
        average_ms = self.repository.scalar(sql, params) or 0
        return {
            "complaintsResolved": resolved,
            "averageResolutionTime": int(average_ms // MILLIS_PER_DAY),
        }


def _created_time_desc(envelope: GrievanceEnvelope) -> int:
    audit = envelope.service.audit_details
    return -((audit.created_time if audit else None) or 0)


@lru_cache(maxsize=None)
def build_pgr_service() -> PgrService:
    """
    The process-wide service.

    Built on first use; its collaborator clients keep their connection
    pools for the life of the process.  Call ``cache_clear()`` after
    ``close()`` to rebuild from changed settings.
    """
    return PgrService.from_settings()
