"""
core.domain.access — Caller identity and caller-type policy dispatch.

Callers reach the service through an upstream gateway that has already
authenticated them; the request body carries a ``RequestInfo`` block
whose ``userInfo`` describes *who* is calling.  This module models that
block and provides the shared helpers every app uses to dispatch
caller-type-specific policy.

╔══════════════════════════════════════════════════════════════════╗
║  IMPORTANT — Per-app policy does NOT live here.                  ║
║  Each app owns its own ``{CallerType → rule}`` table.            ║
║  This module provides:                                           ║
║    1) ``CallerType``  — the closed set of caller kinds.          ║
║    2) ``apply_caller_rule`` — table lookup with a uniform error. ║
║    3) Tenant helpers (``state_level_tenant``, ``is_state_level``)║
╚══════════════════════════════════════════════════════════════════╝

Usage in an app's service layer::

    from core.domain.access import CallerType, apply_caller_rule

    SEARCH_RULES = {
        CallerType.CITIZEN:  citizen_rule,
        CallerType.EMPLOYEE: employee_rule,
    }

    rule = apply_caller_rule(SEARCH_RULES, request_info.user_info, error=InvalidSearch)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Mapping, TypeVar

from core.domain.exceptions import DomainError

R = TypeVar("R")

#: Separator between the state and locality segments of a tenant id.
TENANT_SEPARATOR = "."


class CallerType(str, enum.Enum):
    """The kinds of caller the gateway can forward."""

    CITIZEN = "CITIZEN"
    EMPLOYEE = "EMPLOYEE"
    SYSTEM = "SYSTEM"

    @classmethod
    def parse(cls, raw: str | None) -> CallerType | None:
        """Case-insensitive lookup; ``None`` for unknown or missing types."""
        if not raw:
            return None
        try:
            return cls(raw.upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class Role:
    code: str
    name: str = ""
    tenant_id: str | None = None


@dataclass(frozen=True)
class UserInfo:
    """The authenticated caller, as forwarded by the gateway."""

    uuid: str | None = None
    type: str | None = None
    user_name: str | None = None
    name: str | None = None
    mobile_number: str | None = None
    tenant_id: str | None = None
    roles: tuple[Role, ...] = ()

    @property
    def caller_type(self) -> CallerType | None:
        return CallerType.parse(self.type)

    def is_a(self, caller_type: CallerType) -> bool:
        return self.caller_type is caller_type


@dataclass(frozen=True)
class RequestInfo:
    """Request metadata echoed back in every ``ResponseInfo``."""

    api_id: str | None = None
    ver: str | None = None
    ts: int | None = None
    action: str | None = None
    msg_id: str | None = None
    auth_token: str | None = None
    user_info: UserInfo = field(default_factory=UserInfo)


def apply_caller_rule(
    rules: Mapping[CallerType, R],
    user_info: UserInfo,
    *,
    error: type[DomainError] = DomainError,
) -> R:
    """
    Return the rule registered for the caller's type.

    Args:
        rules:     ``{CallerType → rule}`` table owned by the calling app.
        user_info: The caller.
        error:     Domain error raised when the caller type is unknown or
                   has no rule in the table.

    Raises:
        ``error``: If no rule matches.
    """
    caller_type = user_info.caller_type
    if caller_type is None or caller_type not in rules:
        raise error(
            f"The userType: {user_info.type} does not have any search config"
        )
    return rules[caller_type]


def state_level_tenant(tenant_id: str) -> str:
    """``"pb.amritsar"`` → ``"pb"``."""
    return tenant_id.split(TENANT_SEPARATOR)[0]


def is_state_level(tenant_id: str) -> bool:
    """True when the tenant id has a single segment (``"pb"``)."""
    return len(tenant_id.split(TENANT_SEPARATOR)) == 1
