"""Identity value types returned by the identity service."""

from __future__ import annotations

from dataclasses import dataclass

from core.domain.access import Role


@dataclass(frozen=True)
class Citizen:
    """
    A canonical citizen identity.

    ``uuid`` is the account id grievances reference.  Dates are epoch
    milliseconds after normalisation by ``IdentityServiceClient``.
    """

    uuid: str | None = None
    id: int | None = None
    user_name: str | None = None
    name: str | None = None
    mobile_number: str | None = None
    email_id: str | None = None
    gender: str | None = None
    type: str | None = None
    tenant_id: str | None = None
    active: bool = True
    roles: tuple[Role, ...] = ()
    created_date: int | None = None
    last_modified_date: int | None = None
    dob: int | None = None
