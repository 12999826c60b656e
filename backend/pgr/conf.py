"""
Grievance-service configuration.

All deployment-tunable values live in the ``PGR`` dict in Django
settings.  ``PgrConfig.from_settings()`` freezes them into a value the
service classes receive through their constructors, so a test can build
a ``PgrConfig`` directly instead of patching settings.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from django.conf import settings

from core.constants import PGR_MODULE_NAME


def _csv(value: Any) -> frozenset[str]:
    """Accept ``"a,b"`` or an iterable; return a set of trimmed names."""
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(item.strip() for item in value if item and item.strip())


@dataclass(frozen=True)
class PgrConfig:
    # ── Validation ──────────────────────────────────────────────────
    allowed_sources: frozenset[str] = frozenset({"web", "mobile"})
    allowed_citizen_search_parameters: frozenset[str] = frozenset(
        {"serviceCode", "serviceRequestId", "applicationStatus", "mobileNumber", "ids"}
    )
    allowed_employee_search_parameters: frozenset[str] = frozenset(
        {"serviceCode", "serviceRequestId", "applicationStatus", "mobileNumber", "ids"}
    )
    complain_max_idle_time: int = 86_400_000  # ms

    # ── Pagination ──────────────────────────────────────────────────
    default_limit: int = 10
    default_offset: int = 0
    max_limit: int = 100

    # ── Publication ─────────────────────────────────────────────────
    create_topic: str = "save-pgr-request"
    update_topic: str = "update-pgr-request"
    event_sink: str = "pgr.producer.PersisterEventSink"

    # ── Id generation ───────────────────────────────────────────────
    service_request_id_gen_name: str = "pgr.servicerequestid"
    service_request_id_gen_format: str = "PB-PGR-[cy:yyyy-MM-dd]-[SEQ_EG_PGR_ID]"

    # ── Workflow ────────────────────────────────────────────────────
    business_service: str = "PGR"
    module_name: str = PGR_MODULE_NAME
    business_service_cache_timeout: int | None = None  # seconds; None = forever

    # ── Collaborators ───────────────────────────────────────────────
    user_host: str = "http://egov-user:8080"
    workflow_host: str = "http://egov-workflow-v2:8080"
    mdms_host: str = "http://egov-mdms-service:8080"
    hrms_host: str = "http://egov-hrms:8080"
    idgen_host: str = "http://egov-idgen:8080"
    http_timeout: float = 10.0

    @classmethod
    def from_settings(cls) -> PgrConfig:
        raw = dict(getattr(settings, "PGR", {}))
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in raw.items():
            name = key.lower()
            if name not in known:
                continue
            if name.startswith("allowed_"):
                value = _csv(value)
            values[name] = value
        return cls(**values)
