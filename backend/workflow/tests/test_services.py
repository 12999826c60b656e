"""Tests for ``WorkflowCoordinator`` over the in-memory workflow client."""

from __future__ import annotations

import pytest

from core.domain.exceptions import BusinessServiceNotFound, ParsingError, WorkflowNotFound
from pgr.entities import Grievance, GrievanceEnvelope
from pgr.tests.fakes import FakeWorkflowClient, fresh_cache
from workflow.entities import ProcessInstance, Workflow
from workflow.services import WorkflowCoordinator


def envelope(business_id, tenant_id="pb.amritsar", action="CREATE", assignees=()):
    return GrievanceEnvelope(
        service=Grievance(
            tenant_id=tenant_id,
            service_code="StreetLightNotWorking",
            service_request_id=business_id,
        ),
        workflow=Workflow(action=action, assignees=tuple(assignees)),
    )


@pytest.fixture()
def client():
    return FakeWorkflowClient()


@pytest.fixture()
def coordinator(client):
    return WorkflowCoordinator(client, business_service="PGR", cache=fresh_cache())


class TestBusinessService:

    def test_lookup_is_cached_per_tenant(self, coordinator, client):
        first = coordinator.get_business_service("pb.amritsar")
        second = coordinator.get_business_service("pb.amritsar")

        assert first == second
        assert first.business_service == "PGR"
        assert client.meta_calls == 1

        coordinator.get_business_service("pb.jalandhar")
        assert client.meta_calls == 2

    def test_unknown_process(self, client):
        coordinator = WorkflowCoordinator(client, business_service="NOPE", cache=fresh_cache())
        with pytest.raises(BusinessServiceNotFound):
            coordinator.get_business_service("pb.amritsar")


class TestTransition:

    def test_returns_engine_status(self, coordinator, client):
        status = coordinator.transition(envelope("PB-PGR-1", action="ASSIGN", assignees=["emp-2"]))

        assert status == "PENDINGATLME"
        (submitted,) = client.transitions
        assert submitted.business_id == "PB-PGR-1"
        assert submitted.business_service == "PGR"
        assert submitted.module_name == "RAINMAKER-PGR"
        assert submitted.assignees == ("emp-2",)

    def test_missing_status_is_a_parsing_error(self, coordinator, client):
        client.transition = lambda instance, request_info=None: ProcessInstance(
            business_id=instance.business_id,
        )
        with pytest.raises(ParsingError):
            coordinator.transition(envelope("PB-PGR-1"))


class TestBulkResolution:

    def test_one_call_per_tenant(self, coordinator, client):
        for business_id, tenant in [("A", "pb.amritsar"), ("B", "pb.amritsar"), ("C", "pb.jalandhar")]:
            coordinator.transition(envelope(business_id, tenant_id=tenant))

        resolved = coordinator.enrich_workflow([
            envelope("A"), envelope("B"), envelope("C", tenant_id="pb.jalandhar"),
        ])

        assert set(resolved) == {"A", "B", "C"}
        assert resolved["A"].action == "CREATE"
        assert client.search_calls == [("pb.amritsar", ["A", "B"]), ("pb.jalandhar", ["C"])]

    def test_duplicate_ids_are_requested_once(self, coordinator, client):
        coordinator.transition(envelope("A"))
        coordinator.bulk_resolve_state("pb.amritsar", ["A", "A"])
        assert client.search_calls == [("pb.amritsar", ["A"])]

    def test_missing_instance_fails_the_batch(self, coordinator, client):
        coordinator.transition(envelope("A"))
        coordinator.transition(envelope("B"))
        client.hidden.add("B")

        with pytest.raises(WorkflowNotFound):
            coordinator.bulk_resolve_state("pb.amritsar", ["A", "B"])

    def test_unrequested_instance_fails_the_batch(self, coordinator, client):
        client.search_process_instances = lambda tenant_id, ids, request_info=None: [
            ProcessInstance(business_id="A"), ProcessInstance(business_id="Z"),
        ]
        with pytest.raises(WorkflowNotFound):
            coordinator.bulk_resolve_state("pb.amritsar", ["A", "B"])
