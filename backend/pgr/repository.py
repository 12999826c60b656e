"""
Read side of the grievance store.

``PGRRepository`` executes ``PGRQueryBuilder`` output through Django's
database connection and maps rows back to ``GrievanceEnvelope`` values.
Writes never go through here: they are published to the event sink.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from django.db import connection

from .entities import (
    Address,
    AuditDetails,
    GeoLocation,
    Grievance,
    GrievanceEnvelope,
    SearchCriteria,
)
from .querybuilder import ADDRESS_PREFIX, PGRQueryBuilder


def _json(value: Any) -> Any:
    """JSON columns come back as text on some backends."""
    if isinstance(value, (str, bytes)):
        return json.loads(value)
    return value


def row_to_envelope(row: dict[str, Any]) -> GrievanceEnvelope:
    """Map one joined service/address row."""
    address = Address()
    if row.get(f"{ADDRESS_PREFIX}id") is not None:
        a = {key[len(ADDRESS_PREFIX):]: value for key, value in row.items()
             if key.startswith(ADDRESS_PREFIX)}
        geo = None
        if a.get("latitude") is not None or a.get("longitude") is not None:
            geo = GeoLocation(latitude=a.get("latitude"), longitude=a.get("longitude"))
        address = Address(
            id=a["id"],
            tenant_id=a.get("tenantid"),
            door_no=a.get("doorno"),
            plot_no=a.get("plotno"),
            building_name=a.get("buildingname"),
            street=a.get("street"),
            landmark=a.get("landmark"),
            city=a.get("city"),
            district=a.get("district"),
            region=a.get("region"),
            state=a.get("state"),
            country=a.get("country"),
            pincode=a.get("pincode"),
            locality=a.get("locality"),
            geo_location=geo,
            additional_details=_json(a.get("additionaldetails")),
        )

    service = Grievance(
        id=row["id"],
        tenant_id=row["tenantid"],
        service_code=row["servicecode"],
        service_request_id=row["servicerequestid"],
        description=row.get("description"),
        account_id=row.get("accountid"),
        additional_details=_json(row.get("additionaldetails")),
        application_status=row.get("applicationstatus"),
        rating=row.get("rating"),
        source=row.get("source"),
        active=bool(row.get("active")),
        address=address,
        audit_details=AuditDetails(
            created_by=row.get("createdby"),
            created_time=row.get("createdtime"),
            last_modified_by=row.get("lastmodifiedby"),
            last_modified_time=row.get("lastmodifiedtime"),
        ),
    )
    return GrievanceEnvelope(service=service)


class PGRRepository:
    """Runs grievance queries against the default database."""

    def __init__(self, query_builder: PGRQueryBuilder | None = None, using=None) -> None:
        self.query_builder = query_builder or PGRQueryBuilder()
        self._connection = using or connection

    def query(self, sql: str, params: Sequence[Any]) -> list[GrievanceEnvelope]:
        with self._connection.cursor() as cursor:
            cursor.execute(sql, list(params))
            columns = [col[0].lower() for col in cursor.description]
            return [row_to_envelope(dict(zip(columns, row))) for row in cursor.fetchall()]

    def scalar(self, sql: str, params: Sequence[Any]) -> Any:
        with self._connection.cursor() as cursor:
            cursor.execute(sql, list(params))
            row = cursor.fetchone()
        return row[0] if row else None

    def scalar_count(self, sql: str, params: Sequence[Any]) -> int:
        return int(self.scalar(sql, params) or 0)

    def get_by_id(self, tenant_id: str | None, grievance_id: str) -> Grievance | None:
        """Plain (non-paginated) lookup of one grievance."""
        sql, params = self.query_builder.build(
            SearchCriteria(
                tenant_id=tenant_id,
                ids=frozenset({grievance_id}),
                is_plain_search=True,
            )
        )
        found = self.query(sql, params)
        return found[0].service if found else None

    def exists_by_id(self, tenant_id: str | None, grievance_id: str) -> bool:
        sql, params = self.query_builder.build_count(
            SearchCriteria(tenant_id=tenant_id, ids=frozenset({grievance_id}))
        )
        return self.scalar_count(sql, params) > 0
