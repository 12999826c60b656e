"""
Identity Service Layer.

``IdentityResolver`` is the only component that reads or writes citizen
identities on behalf of the grievance service.

Architecture
------------
- ``resolve_for_mutation``: create/update path: make the grievance
  reference a canonical identity by account id (fetch, or upsert by
  mobile number).
- ``bulk_resolve`` / ``attach``: search path: one bulk lookup for all
  reporters of a result page, then attach each identity to its envelopes.
- ``resolve_search_filter``: translate a mobile-number filter into the
  account ids the query builder can filter on.

Upsert rules
------------
Search by mobile number (as user name) within the state-level tenant:

- found, same display name (case-insensitive) → reuse, **no write**;
- found, different display name               → update the name;
- not found                                   → create a citizen.

At most one identity write happens per mutation.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Mapping

from core.constants import CITIZEN_ROLE_CODE, CITIZEN_ROLE_NAME
from core.domain.access import CallerType, RequestInfo, Role, state_level_tenant
from core.domain.exceptions import InvalidAccountId, InvalidRequest, UserNotFound

from .client import IdentityServiceClient
from .entities import Citizen

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Resolves reporters of grievances to canonical citizen identities."""

    def __init__(self, client: IdentityServiceClient) -> None:
        self.client = client

    # ── Create / update path ────────────────────────────────────────

    def resolve_for_mutation(self, request):
        """
        Return a copy of ``request`` whose grievance carries a resolved
        ``account_id`` and ``citizen``.

        Raises
        ------
        InvalidAccountId
            The grievance names an account id the identity service does
            not know.
        InvalidRequest
            Neither an account id nor inline reporter details were given.
        """
        service = request.service
        tenant_scope = state_level_tenant(service.tenant_id)

        if service.account_id:
            citizen = self._fetch_by_account_id(
                tenant_scope, service.account_id, request.request_info,
            )
        elif service.citizen is not None:
            citizen = self._upsert(service.citizen, service.tenant_id, request.request_info)
        else:
            raise InvalidRequest("Either accountId or citizen details must be provided")

        return request.with_service(account_id=citizen.uuid, citizen=citizen)

    def _fetch_by_account_id(
        self,
        tenant_scope: str,
        account_id: str,
        request_info: RequestInfo,
    ) -> Citizen:
        users = self.client.search_by_account_id_or_mobile(
            tenant_scope, account_id=account_id, request_info=request_info,
        )
        if not users:
            raise InvalidAccountId("No user exist for the given accountId")
        return users[0]

    def _upsert(self, reporter: Citizen, tenant_id: str, request_info: RequestInfo) -> Citizen:
        tenant_scope = state_level_tenant(tenant_id)
        existing = self.client.search_by_account_id_or_mobile(
            tenant_scope, mobile_number=reporter.mobile_number, request_info=request_info,
        )

        if not existing:
            created = self.client.create(self._with_citizen_defaults(reporter, tenant_id), request_info)
            logger.info("Created citizen %s for mobile number ending %s",
                        created.uuid, (reporter.mobile_number or "")[-4:])
            return created

        found = existing[0]
        if (reporter.name or "").lower() == (found.name or "").lower():
            return found

        updated = self.client.update(replace(found, name=reporter.name), request_info)
        logger.info("Updated display name of citizen %s", updated.uuid)
        return updated

    @staticmethod
    def _with_citizen_defaults(reporter: Citizen, tenant_id: str) -> Citizen:
        """Citizen type and role, mobile number as user name, state-level tenant."""
        tenant_scope = state_level_tenant(tenant_id)
        return replace(
            reporter,
            type=CallerType.CITIZEN.value,
            user_name=reporter.mobile_number,
            tenant_id=tenant_scope,
            active=True,
            roles=(Role(code=CITIZEN_ROLE_CODE, name=CITIZEN_ROLE_NAME, tenant_id=tenant_scope),),
        )

    # ── Search path ─────────────────────────────────────────────────

    def bulk_resolve(
        self,
        envelopes: Iterable,
        request_info: RequestInfo | None = None,
    ) -> dict[str, Citizen]:
        """
        One bulk lookup for every distinct reporter account id.

        Returns
        -------
        dict
            ``{account id → Citizen}``.

        Raises
        ------
        UserNotFound
            The id set was non-empty but no identity came back.
        """
        account_ids = sorted({
            env.service.account_id for env in envelopes if env.service.account_id
        })
        if not account_ids:
            return {}

        users = self.client.bulk_search_by_ids(account_ids, request_info)
        if not users:
            raise UserNotFound("No user found for the uuids")
        return {user.uuid: user for user in users}

    @staticmethod
    def attach(envelopes: Iterable, users: Mapping[str, Citizen]) -> list:
        """Return new envelopes with ``service.citizen`` set from ``users``."""
        return [
            env.with_service(citizen=users.get(env.service.account_id))
            for env in envelopes
        ]

    def resolve_search_filter(
        self,
        tenant_id: str,
        mobile_number: str,
        request_info: RequestInfo | None = None,
    ) -> frozenset[str]:
        """Account ids registered against ``mobile_number`` in ``tenant_id``."""
        users = self.client.search_by_mobile(tenant_id, mobile_number, request_info)
        return frozenset(user.uuid for user in users if user.uuid)
