"""
HTTP client for the workflow engine.

The engine owns the grievance state machine.  This client only submits
actions and reads process instances / business-service metadata back;
transport failures surface as ``WorkflowUnavailable``.
"""

from __future__ import annotations

from typing import Any, Iterable

from core.clients import RemoteServiceClient, request_info_payload
from core.domain.access import RequestInfo
from core.domain.exceptions import ParsingError, WorkflowUnavailable

from .entities import BusinessService, Document, ProcessInstance


def document_from_payload(data: dict[str, Any]) -> Document:
    return Document(
        id=data.get("id"),
        document_type=data.get("documentType"),
        file_store_id=data.get("fileStoreId"),
        document_uid=data.get("documentUid"),
        additional_details=data.get("additionalDetails"),
    )


def document_payload(document: Document) -> dict[str, Any]:
    return {
        "id": document.id,
        "documentType": document.document_type,
        "fileStoreId": document.file_store_id,
        "documentUid": document.document_uid,
        "additionalDetails": document.additional_details,
    }


def process_instance_from_payload(data: Any) -> ProcessInstance:
    if not isinstance(data, dict) or not data.get("businessId"):
        raise ParsingError("Failed to parse response of workflow processInstance search")
    state = data.get("state") or {}
    if not isinstance(state, dict):
        raise ParsingError("Failed to parse state of workflow processInstance")
    return ProcessInstance(
        business_id=data["businessId"],
        tenant_id=data.get("tenantId"),
        business_service=data.get("businessService"),
        module_name=data.get("moduleName"),
        action=data.get("action"),
        application_status=state.get("applicationStatus"),
        state=state.get("state"),
        assignees=tuple(
            a["uuid"] for a in data.get("assignes") or [] if isinstance(a, dict) and a.get("uuid")
        ),
        comment=data.get("comment"),
        documents=tuple(document_from_payload(d) for d in data.get("documents") or []),
    )


def process_instance_payload(instance: ProcessInstance) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "businessId": instance.business_id,
        "tenantId": instance.tenant_id,
        "businessService": instance.business_service,
        "moduleName": instance.module_name,
        "action": instance.action,
        "comment": instance.comment,
        "documents": [document_payload(d) for d in instance.documents] or None,
    }
    if instance.assignees:
        payload["assignes"] = [{"uuid": uuid} for uuid in instance.assignees]
    return payload


class WorkflowClient(RemoteServiceClient):
    """Calls the ``egov-workflow-v2`` process and business-service APIs."""

    service_name = "workflow service"
    unavailable_error = WorkflowUnavailable

    def __init__(
        self,
        host: str,
        *,
        transition_path: str = "/egov-workflow-v2/egov-wf/process/_transition",
        process_search_path: str = "/egov-workflow-v2/egov-wf/process/_search",
        business_service_search_path: str = "/egov-workflow-v2/egov-wf/businessservice/_search",
        **kwargs: Any,
    ) -> None:
        super().__init__(host, **kwargs)
        self.transition_path = transition_path
        self.process_search_path = process_search_path
        self.business_service_search_path = business_service_search_path

    def transition(
        self,
        instance: ProcessInstance,
        request_info: RequestInfo | None = None,
    ) -> ProcessInstance:
        """Submit one action; return the engine's resulting process instance."""
        body = self.post(
            self.transition_path,
            {
                "RequestInfo": request_info_payload(request_info),
                "ProcessInstances": [process_instance_payload(instance)],
            },
        )
        instances = body.get("ProcessInstances")
        if not isinstance(instances, list) or not instances:
            raise ParsingError("Failed to parse response of workflow transition")
        return process_instance_from_payload(instances[0])

    def search_process_instances(
        self,
        tenant_id: str,
        business_ids: Iterable[str],
        request_info: RequestInfo | None = None,
    ) -> list[ProcessInstance]:
        body = self.post(
            self.process_search_path,
            {"RequestInfo": request_info_payload(request_info)},
            params={"tenantId": tenant_id, "businessIds": ",".join(business_ids)},
        )
        instances = body.get("ProcessInstances")
        if instances is None:
            return []
        if not isinstance(instances, list):
            raise ParsingError("Failed to parse response of workflow processInstance search")
        return [process_instance_from_payload(item) for item in instances]

    def search_business_service_meta(
        self,
        tenant_id: str,
        process_name: str,
        request_info: RequestInfo | None = None,
    ) -> BusinessService | None:
        body = self.post(
            self.business_service_search_path,
            {"RequestInfo": request_info_payload(request_info)},
            params={"tenantId": tenant_id, "businessServices": process_name},
        )
        services = body.get("BusinessServices")
        if services is None:
            return None
        if not isinstance(services, list):
            raise ParsingError("Failed to parse response of workflow business service search")
        if not services:
            return None
        first = services[0]
        if not isinstance(first, dict) or not first.get("businessService"):
            raise ParsingError("Failed to parse response of workflow business service search")
        return BusinessService(
            tenant_id=first.get("tenantId", tenant_id),
            business_service=first["businessService"],
            business=first.get("business"),
            business_service_sla=first.get("businessServiceSla"),
            states=tuple(first.get("states") or ()),
        )
