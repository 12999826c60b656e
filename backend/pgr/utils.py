"""Small helpers shared by the grievance service and its views."""

from __future__ import annotations

import time
from typing import Any

from core.domain.access import RequestInfo


def current_millis() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def response_info(request_info: RequestInfo | None, success: bool = True) -> dict[str, Any]:
    """The ``ResponseInfo`` block, echoing the caller's ``RequestInfo``."""
    request_info = request_info or RequestInfo()
    return {
        "apiId": request_info.api_id,
        "ver": request_info.ver,
        "ts": request_info.ts,
        "msgId": request_info.msg_id,
        "status": "successful" if success else "failed",
    }
