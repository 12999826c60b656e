"""
Workflow Service Layer.

``WorkflowCoordinator`` drives the external workflow engine on behalf of
the grievance service.

The engine owns the state machine: which actions are legal from which
state, and which application status results.  The coordinator never
computes a status; it submits the requested action and hands back
whatever the engine answers, which the caller must write onto the
grievance.

Business-service cache
----------------------
Process metadata is looked up per ``(tenant, process name)`` through a
read-through cache.  The cache is an injected Django cache backend (the
``default`` cache unless told otherwise).  Two requests populating the
same key concurrently both compute the same value, so the race on first
population is harmless.
"""

from __future__ import annotations

import logging
from typing import Iterable

from django.core.cache import BaseCache, cache as default_cache

from core.constants import PGR_MODULE_NAME
from core.domain.access import RequestInfo
from core.domain.exceptions import (
    BusinessServiceNotFound,
    ParsingError,
    WorkflowNotFound,
)

from .client import WorkflowClient
from .entities import BusinessService, ProcessInstance, Workflow

logger = logging.getLogger(__name__)

_CACHE_KEY = "workflow:business-service:{tenant_id}:{name}"


class WorkflowCoordinator:
    """Submits workflow actions and reads current workflow state back."""

    def __init__(
        self,
        client: WorkflowClient,
        *,
        business_service: str,
        module_name: str = PGR_MODULE_NAME,
        cache: BaseCache | None = None,
        cache_timeout: int | None = None,
    ) -> None:
        self.client = client
        self.business_service_name = business_service
        self.module_name = module_name
        self.cache = cache if cache is not None else default_cache
        self.cache_timeout = cache_timeout

    # ── Business-process metadata ───────────────────────────────────

    def get_business_service(
        self,
        tenant_id: str,
        request_info: RequestInfo | None = None,
    ) -> BusinessService:
        """
        Read-through lookup of the tenant's business-process metadata.

        Raises
        ------
        BusinessServiceNotFound
            The engine has no process with the configured name for the tenant.
        """
        key = _CACHE_KEY.format(tenant_id=tenant_id, name=self.business_service_name)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        meta = self.client.search_business_service_meta(
            tenant_id, self.business_service_name, request_info,
        )
        if meta is None:
            raise BusinessServiceNotFound(
                f"The businessService {self.business_service_name} is not found"
            )
        self.cache.set(key, meta, self.cache_timeout)
        return meta

    # ── Transitions ─────────────────────────────────────────────────

    def transition(self, envelope, request_info: RequestInfo | None = None) -> str:
        """
        Submit ``envelope.workflow.action`` for the grievance and return
        the resulting application status.

        Raises
        ------
        BusinessServiceNotFound
            See ``get_business_service``.
        ParsingError
            The engine answered without an application status.
        WorkflowUnavailable
            Transport failure talking to the engine.
        """
        service = envelope.service
        workflow = envelope.workflow
        business_service = self.get_business_service(service.tenant_id, request_info)

        instance = ProcessInstance(
            business_id=service.service_request_id,
            tenant_id=service.tenant_id,
            business_service=business_service.business_service,
            module_name=self.module_name,
            action=workflow.action,
            assignees=workflow.assignees,
            comment=workflow.comments,
            documents=workflow.verification_documents,
        )
        result = self.client.transition(instance, request_info)

        if not result.application_status:
            raise ParsingError("Workflow transition response carries no applicationStatus")

        logger.info(
            "Workflow action %s on %s → %s",
            workflow.action,
            service.service_request_id,
            result.application_status,
        )
        return result.application_status

    # ── Bulk state resolution (search path) ─────────────────────────

    def bulk_resolve_state(
        self,
        tenant_id: str,
        business_ids: Iterable[str],
        request_info: RequestInfo | None = None,
    ) -> dict[str, Workflow]:
        """
        Current workflow state for each business id of one tenant.

        Raises
        ------
        WorkflowNotFound
            The engine did not return exactly one process instance per
            requested business id.  A partial answer is a data-integrity
            failure, never a partial success.
        """
        requested = list(dict.fromkeys(business_ids))
        instances = self.client.search_process_instances(tenant_id, requested, request_info)

        resolved = {instance.business_id: instance.to_workflow() for instance in instances}
        if len(instances) != len(requested) or resolved.keys() != set(requested):
            logger.error(
                "Workflow returned %d process instance(s) for %d business id(s) in %s",
                len(instances),
                len(requested),
                tenant_id,
            )
            raise WorkflowNotFound("The workflow object is not found")

        return resolved

    def enrich_workflow(
        self,
        envelopes: Iterable,
        request_info: RequestInfo | None = None,
    ) -> dict[str, Workflow]:
        """Group envelopes by tenant and resolve each tenant's batch."""
        by_tenant: dict[str, list[str]] = {}
        for env in envelopes:
            by_tenant.setdefault(env.service.tenant_id, []).append(
                env.service.service_request_id
            )

        resolved: dict[str, Workflow] = {}
        for tenant_id, business_ids in by_tenant.items():
            resolved.update(self.bulk_resolve_state(tenant_id, business_ids, request_info))
        return resolved
