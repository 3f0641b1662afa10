"""
Transport layer: the HTTP calls to the SMS gateway.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from codel_sms.core.config import Settings, settings as default_settings
from codel_sms.core.exceptions import GatewayError
from codel_sms.core.observability import get_logger, MetricsCollector, trace_operation
from codel_sms.models.message import MessageUnit


logger = get_logger(__name__)


class Transport(ABC):
    """Abstract gateway transport."""

    @abstractmethod
    def send_single(self, unit: MessageUnit, sender_id: Optional[str] = None) -> httpx.Response:
        """Send one message."""

    @abstractmethod
    def send_batch(self, units: List[MessageUnit], sender_id: str, batch_token: str) -> httpx.Response:
        """Send many messages in one request."""

    @abstractmethod
    def get_balance(self, token: Optional[str] = None) -> httpx.Response:
        """Fetch the credit balance for `token`, or for the transport's own token."""

    def close(self):
        """Release any held connections."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class CodelTransport(Transport):
    """Codel gateway transport over a synchronous httpx client."""

    def __init__(
        self,
        token: str,
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.token = token
        self.settings = settings or default_settings
        self.client = client or httpx.Client(
            timeout=self.settings.request_timeout,
            headers={"Accept": "application/json"},
        )

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> httpx.Response:
        url = self.settings.url_for(endpoint)
        try:
            with MetricsCollector.track_duration(endpoint, enabled=self.settings.metrics_enabled):
                response = self.client.post(
                    url,
                    json=payload,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            MetricsCollector.track_gateway_error(
                endpoint, type(e).__name__, enabled=self.settings.metrics_enabled
            )
            logger.error(
                "Gateway request failed",
                endpoint=endpoint,
                error_type=type(e).__name__,
                error=str(e)
            )
            raise GatewayError(
                f"Gateway request failed: {e}",
                {"endpoint": endpoint, "error_type": type(e).__name__}
            ) from e

        logger.info(
            "Gateway replied",
            endpoint=endpoint,
            status_code=response.status_code
        )
        return response

    @trace_operation("codel_send_single")
    def send_single(self, unit: MessageUnit, sender_id: Optional[str] = None) -> httpx.Response:
        payload = {"token": self.token, **unit.to_payload()}
        if sender_id:
            payload["sender_id"] = sender_id
            endpoint = self.settings.single_sms_endpoint
        else:
            endpoint = self.settings.single_sms_default_sender_endpoint
        return self._post(endpoint, payload)

    @trace_operation("codel_send_batch")
    def send_batch(self, units: List[MessageUnit], sender_id: str, batch_token: str) -> httpx.Response:
        payload = {
            "auth": {
                "token": self.token,
                "senderID": sender_id,
            },
            "payload": {
                "batchNumber": batch_token,
                "messages": [unit.to_payload() for unit in units],
            },
        }
        return self._post(self.settings.bulk_sms_endpoint, payload)

    @trace_operation("codel_get_balance")
    def get_balance(self, token: Optional[str] = None) -> httpx.Response:
        return self._post(self.settings.balance_endpoint, {"token": token or self.token})

    def close(self):
        """Close HTTP client."""
        self.client.close()
