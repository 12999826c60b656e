"""
Grievance API serializers.

The wire format is the platform's camelCase JSON; every field maps to a
snake_case attribute of the value types in ``pgr.entities`` through
``source=``.  The same serializers therefore parse request bodies into
``validated_data`` keyed like the dataclasses, and render those
dataclasses back out.

Structure
---------
1. Caller metadata (``RequestInfo``)
2. Reporter, address, grievance
3. Workflow
4. Request envelopes and search query parameters
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from core.domain.access import RequestInfo, Role, UserInfo
from identity.entities import Citizen
from workflow.entities import Document, Workflow

from .entities import (
    Address,
    GeoLocation,
    Grievance,
    GrievanceEnvelope,
    GrievanceRequest,
    SearchCriteria,
)


class CommaSeparatedField(serializers.CharField):
    """Query-string input: ``"a,b"`` parses to ``frozenset({"a", "b"})``."""

    def to_internal_value(self, data: Any) -> frozenset[str]:
        raw = super().to_internal_value(data)
        return frozenset(item.strip() for item in raw.split(",") if item.strip())


def _optional(field_class, **kwargs):
    kwargs.setdefault("required", False)
    kwargs.setdefault("allow_null", True)
    if issubclass(field_class, serializers.CharField):
        kwargs.setdefault("allow_blank", True)
    return field_class(**kwargs)


# ═══════════════════════════════════════════════════════════════════
#  1. Caller metadata
# ═══════════════════════════════════════════════════════════════════


class RoleSerializer(serializers.Serializer):
    code = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True)
    tenantId = _optional(serializers.CharField, source="tenant_id")


class UserInfoSerializer(serializers.Serializer):
    uuid = _optional(serializers.CharField)
    type = _optional(serializers.CharField)
    userName = _optional(serializers.CharField, source="user_name")
    name = _optional(serializers.CharField)
    mobileNumber = _optional(serializers.CharField, source="mobile_number")
    tenantId = _optional(serializers.CharField, source="tenant_id")
    roles = RoleSerializer(many=True, required=False)


class RequestInfoSerializer(serializers.Serializer):
    """The ``RequestInfo`` block the gateway forwards with every call."""

    apiId = _optional(serializers.CharField, source="api_id")
    ver = _optional(serializers.CharField)
    ts = _optional(serializers.IntegerField)
    action = _optional(serializers.CharField)
    msgId = _optional(serializers.CharField, source="msg_id")
    authToken = _optional(serializers.CharField, source="auth_token")
    userInfo = UserInfoSerializer(source="user_info", required=False)


# ═══════════════════════════════════════════════════════════════════
#  2. Reporter, address, grievance
# ═══════════════════════════════════════════════════════════════════


class CitizenSerializer(serializers.Serializer):
    uuid = _optional(serializers.CharField)
    id = _optional(serializers.IntegerField)
    userName = _optional(serializers.CharField, source="user_name")
    name = _optional(serializers.CharField)
    mobileNumber = _optional(serializers.CharField, source="mobile_number")
    emailId = _optional(serializers.CharField, source="email_id")
    gender = _optional(serializers.CharField)
    type = _optional(serializers.CharField)
    tenantId = _optional(serializers.CharField, source="tenant_id")
    active = serializers.BooleanField(required=False)
    roles = RoleSerializer(many=True, required=False)
    createdDate = serializers.IntegerField(source="created_date", read_only=True)
    lastModifiedDate = serializers.IntegerField(source="last_modified_date", read_only=True)
    dob = serializers.IntegerField(read_only=True)


class GeoLocationSerializer(serializers.Serializer):
    latitude = _optional(serializers.FloatField)
    longitude = _optional(serializers.FloatField)


class AddressSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    tenantId = _optional(serializers.CharField, source="tenant_id")
    doorNo = _optional(serializers.CharField, source="door_no")
    plotNo = _optional(serializers.CharField, source="plot_no")
    buildingName = _optional(serializers.CharField, source="building_name")
    street = _optional(serializers.CharField)
    landmark = _optional(serializers.CharField)
    city = _optional(serializers.CharField)
    district = _optional(serializers.CharField)
    region = _optional(serializers.CharField)
    state = _optional(serializers.CharField)
    country = _optional(serializers.CharField)
    pincode = _optional(serializers.CharField)
    locality = _optional(serializers.CharField)
    geoLocation = GeoLocationSerializer(source="geo_location", required=False, allow_null=True)
    additionalDetails = serializers.JSONField(source="additional_details", required=False, allow_null=True)


class AuditDetailsSerializer(serializers.Serializer):
    createdBy = serializers.CharField(source="created_by", read_only=True)
    lastModifiedBy = serializers.CharField(source="last_modified_by", read_only=True)
    createdTime = serializers.IntegerField(source="created_time", read_only=True)
    lastModifiedTime = serializers.IntegerField(source="last_modified_time", read_only=True)


class GrievanceSerializer(serializers.Serializer):
    """
    The ``service`` object.

    ``auditDetails`` is output-only: the audit block is always computed
    by the service (create) or carried over from the stored row (update).
    """

    id = _optional(serializers.CharField)
    tenantId = serializers.CharField(source="tenant_id")
    serviceCode = serializers.CharField(source="service_code")
    serviceRequestId = _optional(serializers.CharField, source="service_request_id")
    description = _optional(serializers.CharField)
    accountId = _optional(serializers.CharField, source="account_id")
    applicationStatus = _optional(serializers.CharField, source="application_status")
    source = _optional(serializers.CharField)
    rating = _optional(serializers.IntegerField, min_value=1, max_value=5)
    active = serializers.BooleanField(required=False)
    address = AddressSerializer(required=False)
    citizen = CitizenSerializer(required=False, allow_null=True)
    additionalDetail = serializers.JSONField(source="additional_details", required=False, allow_null=True)
    auditDetails = AuditDetailsSerializer(source="audit_details", read_only=True)


# ═══════════════════════════════════════════════════════════════════
#  3. Workflow
# ═══════════════════════════════════════════════════════════════════


class DocumentSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    documentType = _optional(serializers.CharField, source="document_type")
    fileStoreId = _optional(serializers.CharField, source="file_store_id")
    documentUid = _optional(serializers.CharField, source="document_uid")
    additionalDetails = serializers.JSONField(source="additional_details", required=False, allow_null=True)


class WorkflowSerializer(serializers.Serializer):
    action = _optional(serializers.CharField)
    assignes = serializers.ListField(
        child=serializers.CharField(),
        source="assignees",
        required=False,
        help_text="Account ids of the employees the grievance is assigned to.",
    )
    comments = _optional(serializers.CharField)
    verificationDocuments = DocumentSerializer(
        source="verification_documents", many=True, required=False,
    )


# ═══════════════════════════════════════════════════════════════════
#  4. Envelopes and query parameters
# ═══════════════════════════════════════════════════════════════════


class ServiceWrapperSerializer(serializers.Serializer):
    """One grievance with its workflow state; the unit of every response."""

    service = GrievanceSerializer()
    workflow = WorkflowSerializer()


class RequestInfoWrapperSerializer(serializers.Serializer):
    RequestInfo = RequestInfoSerializer(source="request_info")

    def to_request_info(self) -> RequestInfo:
        return build_request_info(self.validated_data["request_info"])


class ServiceRequestSerializer(RequestInfoWrapperSerializer):
    """Body of ``_create`` and ``_update``."""

    service = GrievanceSerializer()
    workflow = WorkflowSerializer(required=False)

    def to_request(self) -> GrievanceRequest:
        data = self.validated_data
        return GrievanceRequest(
            request_info=build_request_info(data["request_info"]),
            envelope=GrievanceEnvelope(
                service=build_grievance(data["service"]),
                workflow=build_workflow(data.get("workflow") or {}),
            ),
        )


class SearchCriteriaSerializer(serializers.Serializer):
    """Query parameters of ``_search`` and ``_count``."""

    tenantId = serializers.CharField(source="tenant_id", required=False)
    serviceCode = CommaSeparatedField(source="service_codes", required=False)
    serviceRequestId = serializers.CharField(source="service_request_id", required=False)
    applicationStatus = CommaSeparatedField(source="application_statuses", required=False)
    mobileNumber = serializers.CharField(source="mobile_number", required=False)
    ids = CommaSeparatedField(required=False)
    limit = serializers.IntegerField(required=False, min_value=0)
    offset = serializers.IntegerField(required=False, min_value=0)

    def to_criteria(self) -> SearchCriteria:
        return SearchCriteria(**self.validated_data)


class DynamicDataQuerySerializer(serializers.Serializer):
    tenantId = serializers.CharField(source="tenant_id")


# ── validated_data → value types ─────────────────────────────────────


def _roles(items) -> tuple[Role, ...]:
    return tuple(Role(**item) for item in items or ())


def build_request_info(data: dict[str, Any]) -> RequestInfo:
    data = dict(data)
    user = dict(data.pop("user_info", None) or {})
    user["roles"] = _roles(user.get("roles"))
    return RequestInfo(user_info=UserInfo(**user), **data)


def build_citizen(data: dict[str, Any] | None) -> Citizen | None:
    if data is None:
        return None
    data = dict(data)
    data["roles"] = _roles(data.get("roles"))
    return Citizen(**data)


def build_address(data: dict[str, Any] | None) -> Address:
    data = dict(data or {})
    geo = data.pop("geo_location", None)
    return Address(geo_location=GeoLocation(**geo) if geo else None, **data)


def build_grievance(data: dict[str, Any]) -> Grievance:
    data = dict(data)
    data["address"] = build_address(data.get("address"))
    data["citizen"] = build_citizen(data.get("citizen"))
    return Grievance(**data)


def build_workflow(data: dict[str, Any]) -> Workflow:
    data = dict(data)
    return Workflow(
        action=data.get("action"),
        assignees=tuple(data.get("assignees") or ()),
        comments=data.get("comments"),
        verification_documents=tuple(
            Document(**doc) for doc in data.get("verification_documents") or ()
        ),
    )
