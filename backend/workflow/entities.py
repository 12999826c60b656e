"""Workflow value types exchanged with the workflow engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Document:
    """A supporting document attached to a workflow action."""

    id: str | None = None
    document_type: str | None = None
    file_store_id: str | None = None
    document_uid: str | None = None
    additional_details: Any = None


@dataclass(frozen=True)
class Workflow:
    """
    The workflow side of a grievance: the action being requested (or the
    last action taken, when read back from the engine), who it is assigned
    to, comments and verification documents.

    Action values come from the business-process configuration; nothing
    here enumerates them.
    """

    action: str | None = None
    assignees: tuple[str, ...] = ()
    comments: str | None = None
    verification_documents: tuple[Document, ...] = ()


@dataclass(frozen=True)
class BusinessService:
    """Per-tenant business-process metadata (e.g. the ``PGR`` process)."""

    tenant_id: str
    business_service: str
    business: str | None = None
    business_service_sla: int | None = None
    states: tuple[dict, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class ProcessInstance:
    """The engine's record of one grievance's state-machine progress."""

    business_id: str
    tenant_id: str | None = None
    business_service: str | None = None
    module_name: str | None = None
    action: str | None = None
    application_status: str | None = None
    state: str | None = None
    assignees: tuple[str, ...] = ()
    comment: str | None = None
    documents: tuple[Document, ...] = ()

    def to_workflow(self) -> Workflow:
        return Workflow(
            action=self.action,
            assignees=self.assignees,
            comments=self.comment,
            verification_documents=self.documents,
        )
