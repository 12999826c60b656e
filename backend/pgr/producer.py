"""
Publication of grievance mutations.

The orchestrator hands every created / updated envelope to an
``EventSink`` under a topic name.  ``PersisterEventSink`` is the default
sink: it writes the envelope to the grievance tables in one transaction,
playing the part of the platform persister that consumes those topics.

Another sink (e.g. a message-bus producer) is selected with the dotted
path in ``PGR["EVENT_SINK"]``; it is constructed with the ``PgrConfig``.
"""

from __future__ import annotations

import abc
import logging

from django.db import transaction
from django.utils.module_loading import import_string

from .conf import PgrConfig
from .entities import GrievanceEnvelope
from .models import Address, Service

logger = logging.getLogger(__name__)


class EventSink(abc.ABC):
    @abc.abstractmethod
    def publish(self, topic: str, envelope: GrievanceEnvelope) -> None:
        """Deliver ``envelope`` under ``topic``."""


class PersisterEventSink(EventSink):
    """Persists create / update topics into ``eg_pgr_service_v2`` and ``eg_pgr_address_v2``."""

    def __init__(self, config: PgrConfig) -> None:
        self.config = config

    def publish(self, topic: str, envelope: GrievanceEnvelope) -> None:
        if topic == self.config.create_topic:
            self._insert(envelope)
        elif topic == self.config.update_topic:
            self._update(envelope)
        else:
            raise ValueError(f"No persister mapping for topic {topic!r}")
        logger.debug("Persisted %s from topic %s", envelope.service.service_request_id, topic)

    @transaction.atomic
    def _insert(self, envelope: GrievanceEnvelope) -> None:
        service = envelope.service
        audit = service.audit_details
        row = Service.objects.create(
            id=service.id,
            tenant_id=service.tenant_id,
            service_code=service.service_code,
            service_request_id=service.service_request_id,
            description=service.description,
            account_id=service.account_id,
            additional_details=service.additional_details,
            application_status=service.application_status,
            rating=service.rating,
            source=service.source,
            active=service.active,
            created_by=audit.created_by,
            created_time=audit.created_time,
            last_modified_by=audit.last_modified_by,
            last_modified_time=audit.last_modified_time,
        )
        Address.objects.create(parent=row, **self._address_fields(envelope))

    @transaction.atomic
    def _update(self, envelope: GrievanceEnvelope) -> None:
        service = envelope.service
        audit = service.audit_details
        Service.objects.filter(id=service.id).update(
            description=service.description,
            account_id=service.account_id,
            additional_details=service.additional_details,
            application_status=service.application_status,
            rating=service.rating,
            source=service.source,
            active=service.active,
            last_modified_by=audit.last_modified_by,
            last_modified_time=audit.last_modified_time,
        )
        if service.address.id:
            fields = self._address_fields(envelope)
            address_id = fields.pop("id")
            fields.pop("created_by")
            fields.pop("created_time")
            Address.objects.filter(id=address_id, parent_id=service.id).update(**fields)

    @staticmethod
    def _address_fields(envelope: GrievanceEnvelope) -> dict:
        service = envelope.service
        address = service.address
        audit = service.audit_details
        geo = address.geo_location
        return {
            "id": address.id,
            "tenant_id": address.tenant_id or service.tenant_id,
            "door_no": address.door_no,
            "plot_no": address.plot_no,
            "building_name": address.building_name,
            "street": address.street,
            "landmark": address.landmark,
            "city": address.city,
            "district": address.district,
            "region": address.region,
            "state": address.state,
            "country": address.country,
            "pincode": address.pincode,
            "locality": address.locality,
            "latitude": geo.latitude if geo else None,
            "longitude": geo.longitude if geo else None,
            "additional_details": address.additional_details,
            "created_by": audit.created_by,
            "created_time": audit.created_time,
            "last_modified_by": audit.last_modified_by,
            "last_modified_time": audit.last_modified_time,
        }


def load_event_sink(config: PgrConfig) -> EventSink:
    """Instantiate the sink named by ``config.event_sink``."""
    return import_string(config.event_sink)(config)
