"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations and collaborator
failures inside the service layers.  They are deliberately **not** DRF
exceptions so that the domain layer stays framework-agnostic.  The global
DRF exception handler (``core.domain.exception_handler``) maps them to
HTTP responses.

Every concrete error carries a stable ``code`` (the error *kind*) that
clients can switch on, a human-readable ``message`` and, for aggregated
validation failures, an ``errors`` dict of ``{code: message}``.

Mapping cheatsheet
------------------
┌──────────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception         │ Code                         │ HTTP │
├──────────────────────────┼──────────────────────────────┼──────┤
│ InvalidRequest           │ INVALID_REQUEST              │ 400  │
│ InvalidSource            │ INVALID_SOURCE               │ 400  │
│ InvalidServiceCode       │ INVALID_SERVICECODE          │ 400  │
│ InvalidSearch            │ INVALID_SEARCH               │ 400  │
│ InvalidAccountId         │ INVALID_ACCOUNTID            │ 400  │
│ InvalidAssignment        │ INVALID_ASSIGNMENT           │ 400  │
│ InvalidAction            │ INVALIDACTION                │ 403  │
│ InvalidUpdate            │ INVALID_UPDATE               │ 404  │
│ UserNotFound             │ USER_NOT_FOUND               │ 404  │
│ WorkflowNotFound         │ WORKFLOW_NOT_FOUND           │ 409  │
│ BusinessServiceNotFound  │ BUSINESSSERVICE_NOT_FOUND    │ 404  │
│ ParsingError             │ PARSING_ERROR                │ 502  │
│ IdGenerationError        │ IDGEN_ERROR                  │ 502  │
│ ServiceUnavailable       │ SERVICE_UNAVAILABLE          │ 502  │
│ WorkflowUnavailable      │ WORKFLOW_UNAVAILABLE         │ 502  │
└──────────────────────────┴──────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import InvalidSource

    if source not in config.allowed_sources:
        raise InvalidSource(f"The source: {source} is not valid")
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    code: str = "DOMAIN_ERROR"
    default_message: str = "A business rule was violated."

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: dict[str, str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = dict(errors) if errors else {self.code: self.message}
        super().__init__(self.message)


class PermissionDenied(DomainError):
    """
    The caller is not allowed to perform this action on the resource.

    Maps to HTTP 403.
    """

    code = "PERMISSION_DENIED"
    default_message = "You do not have permission to perform this action."


class NotFound(DomainError):
    """
    The requested resource does not exist.

    Maps to HTTP 404.
    """

    code = "NOT_FOUND"
    default_message = "The requested resource was not found."


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the resource or
    of a collaborator's records.

    Maps to HTTP 409.
    """

    code = "CONFLICT"
    default_message = "The operation conflicts with the current state."


class UpstreamError(DomainError):
    """
    A collaborator answered with something this service cannot use, or
    did not answer at all.

    Maps to HTTP 502.
    """

    code = "UPSTREAM_ERROR"
    default_message = "A downstream service failed."


# ── Validation kinds (400) ──────────────────────────────────────────


class InvalidRequest(DomainError):
    code = "INVALID_REQUEST"
    default_message = "The request is invalid."


class InvalidSource(DomainError):
    code = "INVALID_SOURCE"
    default_message = "The source is not valid."


class InvalidServiceCode(DomainError):
    code = "INVALID_SERVICECODE"
    default_message = "The service code is not present in master data."


class InvalidSearch(DomainError):
    code = "INVALID_SEARCH"
    default_message = "The search is not allowed."


class InvalidAccountId(DomainError):
    code = "INVALID_ACCOUNTID"
    default_message = "No user exist for the given accountId."


class InvalidAssignment(DomainError):
    code = "INVALID_ASSIGNMENT"
    default_message = "The application cannot be assigned to this employee."


# ── Authorization / existence kinds ─────────────────────────────────


class InvalidAction(PermissionDenied):
    """
    The requested workflow action is not allowed for this caller, or is
    no longer allowed for this grievance (e.g. reopen after the idle
    window has passed).
    """

    code = "INVALIDACTION"
    default_message = "The action is not allowed."


class InvalidUpdate(NotFound):
    code = "INVALID_UPDATE"
    default_message = "The record that you are trying to update does not exist in the system."


class UserNotFound(NotFound):
    code = "USER_NOT_FOUND"
    default_message = "No user found for the uuids."


class BusinessServiceNotFound(NotFound):
    code = "BUSINESSSERVICE_NOT_FOUND"
    default_message = "The businessService is not found."


class WorkflowNotFound(Conflict):
    """
    The workflow engine did not return exactly one process instance per
    requested business id.  Partial results are a data-integrity failure.
    """

    code = "WORKFLOW_NOT_FOUND"
    default_message = "The workflow object is not found."


# ── Collaborator failures (502) ─────────────────────────────────────


class ParsingError(UpstreamError):
    code = "PARSING_ERROR"
    default_message = "Failed to parse the response of a downstream service."


class IdGenerationError(UpstreamError):
    code = "IDGEN_ERROR"
    default_message = "No ids returned from idgen Service."


class ServiceUnavailable(UpstreamError):
    """Transport-level failure talking to a collaborator."""

    code = "SERVICE_UNAVAILABLE"
    default_message = "A downstream service is unavailable."


class WorkflowUnavailable(ServiceUnavailable):
    code = "WORKFLOW_UNAVAILABLE"
    default_message = "The workflow service is unavailable."
