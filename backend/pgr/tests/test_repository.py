"""Tests for the grievance store: ``PersisterEventSink`` writes, ``PGRRepository`` reads."""

from dataclasses import replace

from django.test import TestCase

from pgr.conf import PgrConfig
from pgr.entities import (
    Address,
    AuditDetails,
    GeoLocation,
    Grievance,
    GrievanceEnvelope,
)
from pgr.producer import PersisterEventSink, load_event_sink
from pgr.querybuilder import PGRQueryBuilder
from pgr.repository import PGRRepository

from .fakes import CITIZEN_UUID, EMPLOYEE_UUID, NOW, SERVICE_CODE, TENANT


def make_envelope(grievance_id="grievance-1", business_id="PB-PGR-1"):
    return GrievanceEnvelope(
        service=Grievance(
            id=grievance_id,
            tenant_id=TENANT,
            service_code=SERVICE_CODE,
            service_request_id=business_id,
            description="Street light not working",
            account_id=CITIZEN_UUID,
            application_status="PENDINGFORASSIGNMENT",
            source="web",
            additional_details={"landmark": "Golden Temple"},
            address=Address(
                id=f"address-{grievance_id}",
                tenant_id=TENANT,
                locality="SUN04",
                geo_location=GeoLocation(latitude=31.63, longitude=74.87),
            ),
            audit_details=AuditDetails.for_create(CITIZEN_UUID, NOW),
        )
    )


class TestPersistAndRead(TestCase):
    def setUp(self):
        self.config = PgrConfig()
        self.sink = PersisterEventSink(self.config)
        self.repository = PGRRepository(PGRQueryBuilder(self.config))

    def test_created_grievance_reads_back(self):
        envelope = make_envelope()
        self.sink.publish(self.config.create_topic, envelope)

        stored = self.repository.get_by_id(TENANT, "grievance-1")

        self.assertEqual(stored, envelope.service)

    def test_update_changes_mutable_columns_only(self):
        envelope = make_envelope()
        self.sink.publish(self.config.create_topic, envelope)

        changed = envelope.with_service(
            application_status="RESOLVED",
            rating=4,
            service_code="SomethingElse",
            audit_details=envelope.service.audit_details.refreshed(EMPLOYEE_UUID, NOW + 1),
            address=replace(envelope.service.address, locality="SUN05"),
        )
        self.sink.publish(self.config.update_topic, changed)

        stored = self.repository.get_by_id(TENANT, "grievance-1")
        self.assertEqual(stored.application_status, "RESOLVED")
        self.assertEqual(stored.rating, 4)
        self.assertEqual(stored.service_code, SERVICE_CODE)
        self.assertEqual(stored.address.locality, "SUN05")
        self.assertEqual(stored.audit_details.created_by, CITIZEN_UUID)
        self.assertEqual(stored.audit_details.last_modified_by, EMPLOYEE_UUID)

    def test_exists_by_id(self):
        self.sink.publish(self.config.create_topic, make_envelope())

        self.assertTrue(self.repository.exists_by_id(TENANT, "grievance-1"))
        self.assertTrue(self.repository.exists_by_id("pb", "grievance-1"))
        self.assertFalse(self.repository.exists_by_id("pb.jalandhar", "grievance-1"))
        self.assertFalse(self.repository.exists_by_id(TENANT, "grievance-2"))

    def test_state_level_scope_stops_at_the_separator(self):
        self.sink.publish(self.config.create_topic, make_envelope())
        other = make_envelope("grievance-2", "PBX-PGR-1")
        other = other.with_service(
            tenant_id="pbx.amritsar",
            address=replace(other.service.address, tenant_id="pbx.amritsar"),
        )
        self.sink.publish(self.config.create_topic, other)

        self.assertTrue(self.repository.exists_by_id("pb", "grievance-1"))
        self.assertFalse(self.repository.exists_by_id("pb", "grievance-2"))
        self.assertTrue(self.repository.exists_by_id("pbx", "grievance-2"))

    def test_unknown_topic_is_refused(self):
        with self.assertRaises(ValueError):
            self.sink.publish("some-other-topic", make_envelope())


class TestLoadEventSink:

    def test_loads_configured_sink(self):
        sink = load_event_sink(PgrConfig(event_sink="pgr.producer.PersisterEventSink"))
        assert isinstance(sink, PersisterEventSink)

