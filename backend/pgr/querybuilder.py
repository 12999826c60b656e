"""
Grievance search SQL.

``PGRQueryBuilder`` turns a ``SearchCriteria`` into ``(sql, params)`` for
``django.db.connection.cursor().execute``.  No value is ever formatted
into the SQL text: every predicate value is a ``%s`` placeholder and
``IN`` lists get one placeholder per value, so the generated text only
depends on *which* predicates are present.

Predicate order is fixed::

    tenant → service codes → service request id → application statuses
           → account ids → grievance ids
"""

from __future__ import annotations

from typing import Any, Iterable

from core.domain.access import TENANT_SEPARATOR, is_state_level

from .conf import PgrConfig
from .entities import SearchCriteria

SERVICE_TABLE = "eg_pgr_service_v2"
ADDRESS_TABLE = "eg_pgr_address_v2"

SERVICE_COLUMNS = (
    "id", "tenantid", "servicecode", "servicerequestid", "description",
    "accountid", "additionaldetails", "applicationstatus", "rating",
    "source", "active", "createdby", "createdtime", "lastmodifiedby",
    "lastmodifiedtime",
)

ADDRESS_COLUMNS = (
    "id", "tenantid", "doorno", "plotno", "buildingname", "street",
    "landmark", "city", "district", "region", "state", "country",
    "pincode", "locality", "latitude", "longitude", "additionaldetails",
)

# Address columns come back prefixed so they never shadow service columns.
ADDRESS_PREFIX = "ads_"

_SELECT = (
    "SELECT "
    + ", ".join(f"ser.{col}" for col in SERVICE_COLUMNS)
    + ", "
    + ", ".join(f"ads.{col} AS {ADDRESS_PREFIX}{col}" for col in ADDRESS_COLUMNS)
    + f" FROM {SERVICE_TABLE} ser"
    + f" LEFT OUTER JOIN {ADDRESS_TABLE} ads ON ads.parentid = ser.id"
)

_COUNT = f"SELECT COUNT(*) FROM {SERVICE_TABLE} ser"

_ORDER_BY = " ORDER BY ser.createdtime DESC, ser.id"


def _placeholders(values: Iterable[Any]) -> str:
    return ", ".join("%s" for _ in values)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PGRQueryBuilder:
    def __init__(self, config: PgrConfig | None = None) -> None:
        self.config = config or PgrConfig()

    # ── Search / count ──────────────────────────────────────────────

    def build(self, criteria: SearchCriteria) -> tuple[str, list[Any]]:
        """
        Paginated search query.  Plain searches (internal existence
        lookups) carry no ``LIMIT``/``OFFSET``.
        """
        where, params = self._where(criteria)
        sql = _SELECT + where + _ORDER_BY
        if not criteria.is_plain_search:
            limit, offset = self.page(criteria)
            sql += " LIMIT %s OFFSET %s"
            params.extend([limit, offset])
        return sql, params

    def build_count(self, criteria: SearchCriteria) -> tuple[str, list[Any]]:
        """Same filters as ``build``; no ordering, no pagination."""
        where, params = self._where(criteria)
        return _COUNT + where, params

    def page(self, criteria: SearchCriteria) -> tuple[int, int]:
        limit = criteria.limit if criteria.limit is not None else self.config.default_limit
        offset = criteria.offset if criteria.offset is not None else self.config.default_offset
        return min(limit, self.config.max_limit), offset

    # ── Dashboard figures ───────────────────────────────────────────

    def build_resolved_count(self, tenant_id: str, status: str) -> tuple[str, list[Any]]:
        clauses, params = self._tenant_clause(tenant_id)
        clauses.append("ser.applicationstatus = %s")
        params.append(status)
        return _COUNT + " WHERE " + " AND ".join(clauses), params

    def build_average_resolution_time(self, tenant_id: str, status: str) -> tuple[str, list[Any]]:
        """Average ``lastmodifiedtime - createdtime`` in ms over resolved grievances."""
        clauses, params = self._tenant_clause(tenant_id)
        clauses.append("ser.applicationstatus = %s")
        params.append(status)
        sql = (
            "SELECT AVG(ser.lastmodifiedtime - ser.createdtime)"
            f" FROM {SERVICE_TABLE} ser WHERE " + " AND ".join(clauses)
        )
        return sql, params

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _tenant_clause(tenant_id: str) -> tuple[list[str], list[Any]]:
        if is_state_level(tenant_id):
            return (
                ["(ser.tenantid = %s OR ser.tenantid LIKE %s ESCAPE '\\')"],
                [tenant_id, f"{_escape_like(tenant_id)}{TENANT_SEPARATOR}%"],
            )
        return ["ser.tenantid = %s"], [tenant_id]

    def _where(self, criteria: SearchCriteria) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []

        if criteria.tenant_id:
            tenant_clauses, tenant_params = self._tenant_clause(criteria.tenant_id)
            clauses.extend(tenant_clauses)
            params.extend(tenant_params)

        def add_in(column: str, values: Iterable[Any]) -> None:
            values = sorted(values)
            clauses.append(f"{column} IN ({_placeholders(values)})")
            params.extend(values)

        if criteria.service_codes:
            add_in("ser.servicecode", criteria.service_codes)

        if criteria.service_request_id:
            clauses.append("ser.servicerequestid = %s")
            params.append(criteria.service_request_id)

        if criteria.application_statuses:
            add_in("ser.applicationstatus", criteria.application_statuses)

        accounts = criteria.account_filter()
        if accounts is not None:
            if accounts:
                add_in("ser.accountid", accounts)
            else:
                # An empty account set matches no row.
                clauses.append("1 = 0")

        if criteria.ids:
            add_in("ser.id", criteria.ids)

        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params
