"""
Base HTTP client for the platform collaborators (identity, workflow,
master data, HR, id generation).

Every collaborator speaks JSON over POST and expects a ``RequestInfo``
block in the body.  ``RemoteServiceClient`` owns the ``httpx.Client``,
turns transport failures into ``ServiceUnavailable`` (or the subclass a
concrete client chooses) and non-JSON bodies into ``ParsingError``.

No retries happen here: a failed call is terminal for the request.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from core.domain.access import RequestInfo
from core.domain.exceptions import ParsingError, ServiceUnavailable, UpstreamError

logger = logging.getLogger(__name__)


def request_info_payload(request_info: RequestInfo | None) -> dict[str, Any]:
    """Serialise a ``RequestInfo`` into the camelCase wire shape."""
    if request_info is None:
        return {}
    user = request_info.user_info
    return {
        "apiId": request_info.api_id,
        "ver": request_info.ver,
        "ts": request_info.ts,
        "action": request_info.action,
        "msgId": request_info.msg_id,
        "authToken": request_info.auth_token,
        "userInfo": {
            "uuid": user.uuid,
            "type": user.type,
            "userName": user.user_name,
            "name": user.name,
            "mobileNumber": user.mobile_number,
            "tenantId": user.tenant_id,
            "roles": [
                {"code": role.code, "name": role.name, "tenantId": role.tenant_id}
                for role in user.roles
            ],
        },
    }


class RemoteServiceClient:
    """
    Thin JSON-over-HTTP client shared by all collaborator clients.

    Subclasses set ``service_name`` (used in logs and messages) and may
    override ``unavailable_error`` to surface transport failures as a more
    specific kind.
    """

    service_name: str = "remote service"
    unavailable_error: type[ServiceUnavailable] = ServiceUnavailable

    def __init__(
        self,
        host: str,
        *,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.host = host.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def post(
        self,
        path: str,
        payload: dict[str, Any],
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        POST ``payload`` to ``host + path`` and return the decoded JSON body.

        Raises:
            UpstreamError:      The collaborator rejected the call (4xx).
            ServiceUnavailable: Transport failure or 5xx (subclass per client).
            ParsingError:       The body is not a JSON object.
        """
        url = f"{self.host}{path}"
        logger.debug("Calling %s: %s", self.service_name, url)

        try:
            response = self._client.post(url, json=payload, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning(
                "%s returned HTTP %s for %s: %s",
                self.service_name,
                status_code,
                url,
                e.response.text[:500],
            )
            if status_code < 500:
                raise UpstreamError(
                    f"{self.service_name} rejected the request (HTTP {status_code}).",
                    errors=self._upstream_errors(e.response),
                ) from e
            raise self.unavailable_error(
                f"{self.service_name} failed with HTTP {status_code}."
            ) from e
        except httpx.HTTPError as e:
            logger.error("Could not reach %s at %s: %s", self.service_name, url, e)
            raise self.unavailable_error(
                f"{self.service_name} is unavailable: {e}"
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ParsingError(
                f"Failed to parse response of {self.service_name}"
            ) from e
        if not isinstance(body, dict):
            raise ParsingError(f"Failed to parse response of {self.service_name}")
        return body

    @staticmethod
    def _upstream_errors(response: httpx.Response) -> dict[str, str] | None:
        """Lift ``{"Errors": [{"code", "message"}]}`` out of an error body."""
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        errors = body.get("Errors") or []
        lifted = {
            err.get("code", "UPSTREAM_ERROR"): err.get("message", "")
            for err in errors
            if isinstance(err, dict)
        }
        return lifted or None

    def close(self) -> None:
        self._client.close()
