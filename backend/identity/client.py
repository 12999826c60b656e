"""
HTTP client for the platform identity (user) service.

The identity service is the only index of citizens by mobile number and
the sole owner of identity records; this client is the only code that
writes to it.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from core.clients import RemoteServiceClient, request_info_payload
from core.constants import (
    DATETIME_FORMAT_D_M_Y_H_M_S,
    DOB_FORMAT_D_M_Y,
    DOB_FORMAT_Y_M_D,
)
from core.domain.access import CallerType, RequestInfo, Role
from core.domain.exceptions import ParsingError

from .entities import Citizen


def _to_millis(value: Any, fmt: str) -> int | None:
    """Parse an identity-service date string into epoch ms (UTC)."""
    if value is None or isinstance(value, int):
        return value
    try:
        parsed = datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
    except (TypeError, ValueError) as e:
        raise ParsingError(f"Invalid date format in user response: {value!r}") from e
    return int(parsed.timestamp() * 1000)


def citizen_from_payload(data: dict[str, Any], dob_format: str = DOB_FORMAT_Y_M_D) -> Citizen:
    """Build a ``Citizen`` from one entry of the ``user`` array."""
    if not isinstance(data, dict):
        raise ParsingError("Failed to parse user from user service response")
    roles = tuple(
        Role(code=r.get("code", ""), name=r.get("name", ""), tenant_id=r.get("tenantId"))
        for r in data.get("roles") or []
    )
    return Citizen(
        uuid=data.get("uuid"),
        id=data.get("id"),
        user_name=data.get("userName"),
        name=data.get("name"),
        mobile_number=data.get("mobileNumber"),
        email_id=data.get("emailId"),
        gender=data.get("gender"),
        type=data.get("type"),
        tenant_id=data.get("tenantId"),
        active=bool(data.get("active", True)),
        roles=roles,
        created_date=_to_millis(data.get("createdDate"), DATETIME_FORMAT_D_M_Y_H_M_S),
        last_modified_date=_to_millis(data.get("lastModifiedDate"), DATETIME_FORMAT_D_M_Y_H_M_S),
        dob=_to_millis(data.get("dob"), dob_format),
    )


def citizen_payload(citizen: Citizen) -> dict[str, Any]:
    """Serialise a ``Citizen`` for create / update calls."""
    payload = {
        "uuid": citizen.uuid,
        "id": citizen.id,
        "userName": citizen.user_name,
        "name": citizen.name,
        "mobileNumber": citizen.mobile_number,
        "emailId": citizen.email_id,
        "gender": citizen.gender,
        "type": citizen.type,
        "tenantId": citizen.tenant_id,
        "active": citizen.active,
        "roles": [
            {"code": r.code, "name": r.name, "tenantId": r.tenant_id}
            for r in citizen.roles
        ],
    }
    return {key: value for key, value in payload.items() if value is not None}


class IdentityServiceClient(RemoteServiceClient):
    """
    Calls ``/user/_search``, ``/user/users/_createnovalidate`` and
    ``/user/users/_updatenovalidate``.
    """

    service_name = "user service"

    def __init__(
        self,
        host: str,
        *,
        search_path: str = "/user/_search",
        create_path: str = "/user/users/_createnovalidate",
        update_path: str = "/user/users/_updatenovalidate",
        **kwargs: Any,
    ) -> None:
        super().__init__(host, **kwargs)
        self.search_path = search_path
        self.create_path = create_path
        self.update_path = update_path

    # ── Search ──────────────────────────────────────────────────────

    def search_by_account_id_or_mobile(
        self,
        tenant_scope: str,
        account_id: str | None = None,
        mobile_number: str | None = None,
        request_info: RequestInfo | None = None,
    ) -> list[Citizen]:
        """
        Look up an active citizen by uuid, or by mobile number used as
        the user name.  Returns ``[]`` when neither key is given.
        """
        if not account_id and not mobile_number:
            return []
        criteria: dict[str, Any] = {"tenantId": tenant_scope}
        if account_id:
            criteria["uuid"] = [account_id]
        if mobile_number:
            criteria["userName"] = mobile_number
        return self._search(criteria, request_info)

    def search_by_mobile(
        self,
        tenant_id: str,
        mobile_number: str,
        request_info: RequestInfo | None = None,
    ) -> list[Citizen]:
        return self._search(
            {"tenantId": tenant_id, "mobileNumber": mobile_number},
            request_info,
        )

    def bulk_search_by_ids(
        self,
        ids: Iterable[str],
        request_info: RequestInfo | None = None,
    ) -> list[Citizen]:
        return self._search({"uuid": list(ids)}, request_info)

    def _search(
        self,
        criteria: dict[str, Any],
        request_info: RequestInfo | None,
    ) -> list[Citizen]:
        payload = {
            "RequestInfo": request_info_payload(request_info),
            "active": True,
            "userType": CallerType.CITIZEN.value,
            **criteria,
        }
        body = self.post(self.search_path, payload)
        return self._users(body, DOB_FORMAT_Y_M_D)

    # ── Writes ──────────────────────────────────────────────────────

    def create(self, citizen: Citizen, request_info: RequestInfo | None = None) -> Citizen:
        body = self.post(
            self.create_path,
            {"RequestInfo": request_info_payload(request_info), "user": citizen_payload(citizen)},
        )
        return self._single(body, DOB_FORMAT_D_M_Y)

    def update(self, citizen: Citizen, request_info: RequestInfo | None = None) -> Citizen:
        body = self.post(
            self.update_path,
            {"RequestInfo": request_info_payload(request_info), "user": citizen_payload(citizen)},
        )
        return self._single(body, DOB_FORMAT_Y_M_D)

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _users(body: dict[str, Any], dob_format: str) -> list[Citizen]:
        users = body.get("user")
        if users is None:
            return []
        if not isinstance(users, list):
            raise ParsingError("Failed to parse user service response")
        return [citizen_from_payload(user, dob_format) for user in users]

    def _single(self, body: dict[str, Any], dob_format: str) -> Citizen:
        users = self._users(body, dob_format)
        if not users:
            raise ParsingError("User service returned no user for a write")
        return users[0]
