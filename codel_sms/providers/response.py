"""
Interpretation of gateway replies.
"""

from typing import Any, Dict, Optional

import httpx

from codel_sms.core.observability import get_logger


logger = get_logger(__name__)

FAILED_STATUSES = {"FAILED", "ERROR"}


class GatewayResponse:
    """
    Result of a dispatched send.

    A rejected message is a normal outcome: check `is_ok` rather than
    expecting an exception. Only HTTP 200 replies carry a parsed body.
    """

    def __init__(self, raw: httpx.Response, bulk: bool = False):
        self.raw = raw
        self.bulk = bulk
        self._body: Any = None

        if raw.status_code == 200:
            try:
                self._body = raw.json()
            except ValueError:
                logger.warning(
                    "Gateway returned a non-JSON body",
                    status_code=raw.status_code,
                    bulk=bulk
                )

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def body(self) -> Dict[str, Any]:
        """Parsed reply; for batches, the first status document."""
        if self.bulk:
            if isinstance(self._body, list) and self._body:
                first = self._body[0]
                return first if isinstance(first, dict) else {}
            return self._body if isinstance(self._body, dict) else {}
        return self._body if isinstance(self._body, dict) else {}

    @property
    def message_status(self) -> str:
        if self.bulk:
            status = self.body.get("status")
            if isinstance(status, dict) and status.get("error_status"):
                return str(status["error_status"]).upper()
            return "FAILED"
        return str(self.body.get("status", "FAILED"))

    @property
    def credits_used(self) -> Optional[int]:
        if self.bulk:
            return None
        return self.body.get("charge", 0) if self.body else 0

    @property
    def message_id(self) -> Optional[str]:
        if self.bulk:
            return None
        return self.body.get("messageId")

    @property
    def is_scheduled(self) -> bool:
        if self.bulk:
            return False
        return bool(self.body.get("scheduled", False))

    def is_ok(self) -> bool:
        return self.message_status.upper() not in FAILED_STATUSES

    def __repr__(self) -> str:
        return (
            f"GatewayResponse(status_code={self.status_code}, bulk={self.bulk}, "
            f"message_status={self.message_status!r})"
        )
