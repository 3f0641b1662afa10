"""
Public client for sending SMS through the Codel gateway.

    client = Client("api-token").configure("MyBrand")
    response = client.send(["263771000001", "263772000002"], "Hello")
    if not response.is_ok():
        ...
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Union

from codel_sms.core.config import Settings, settings as default_settings
from codel_sms.core.exceptions import ConfigInvalid, SmsError
from codel_sms.core.observability import get_logger, MetricsCollector, monitor_performance, trace_operation
from codel_sms.models.message import MAX_RECEIVERS, MAX_SMS_LENGTH, new_reference
from codel_sms.providers.base import CodelTransport, Transport
from codel_sms.providers.response import GatewayResponse
from codel_sms.services.dispatch import BatchDispatch, Dispatch, DispatchModeResolver
from codel_sms.services.personalization import PersonalizationCallback
from codel_sms.services.planner import ReceiverMessagePlanner


logger = get_logger(__name__)


@dataclass(frozen=True)
class ClientOptions:
    """Configuration snapshot consumed by one send call."""
    sender_id: Optional[str] = None
    callback: Optional[PersonalizationCallback] = None


class Client:
    """
    SMS client.

    `configure` and `personalize` return the client so calls can be chained;
    both persist for later sends. Every send works from a snapshot of that
    configuration taken when it starts. A client instance is meant for use
    from one thread at a time.
    """

    MAX_RECEIVERS = MAX_RECEIVERS
    MAX_SMS_LENGTH = MAX_SMS_LENGTH

    def __init__(
        self,
        token: Optional[str] = None,
        sender_id: Optional[str] = None,
        transport: Optional[Transport] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            token: API token; falls back to the configured `api_token`
            sender_id: Sender id for subsequent sends
            transport: Gateway transport, CodelTransport by default
            settings: Settings to use instead of the environment's, for the
                endpoints, country code, default validity and metrics switch

        Raises:
            ConfigInvalid: if no usable API token is available
        """
        self.settings = settings or default_settings

        if token is None:
            token = self.settings.api_token
        if not isinstance(token, str) or not token.strip():
            raise ConfigInvalid("Please provide an API Token for authentication.")

        self.token = token
        self.transport = transport or CodelTransport(token, self.settings)
        self.resolver = DispatchModeResolver()
        self.options = ClientOptions(sender_id=sender_id or self.settings.default_sender_id)

    def configure(self, sender_id: Optional[str] = None) -> "Client":
        """Set the sender id used by subsequent sends; None clears it."""
        self.options = replace(self.options, sender_id=sender_id or None)
        return self

    from_ = configure

    def personalize(self, callback: Optional[PersonalizationCallback]) -> "Client":
        """
        Set a callback producing each receiver's message.

        The callback is called as callback(receiver) or
        callback(receiver, context) and must return the message text or a
        MessageUnit. None clears it.
        """
        if callback is not None and not callable(callback):
            raise TypeError("Personalization callback must be callable")
        self.options = replace(self.options, callback=callback)
        return self

    @monitor_performance("send_sms")
    @trace_operation("send_sms")
    def send(self, receivers: Any, message: Optional[Any] = None) -> GatewayResponse:
        """
        Plan, validate and dispatch messages.

        Args:
            receivers: Number, comma-separated numbers, list of numbers,
                mapping of number to context, a MessageUnit or a list of them
            message: Text, list of texts/units, template MessageUnit,
                mapping of number to context, or None

        Returns:
            GatewayResponse; gateway rejections are reported there, not raised

        Raises:
            SmsError: any planning or validation failure, before any request
            GatewayError: the gateway could not be reached
        """
        options = self.options

        try:
            planner = ReceiverMessagePlanner(
                sender_id=options.sender_id,
                callback=options.callback,
                settings=self.settings,
            )
            ctx = planner.plan(receivers, message)
            dispatch = self.resolver.resolve(ctx)
        except SmsError as e:
            # Logged by monitor_performance.
            MetricsCollector.track_planning_failure(e.kind, enabled=self.settings.metrics_enabled)
            raise

        return self._dispatch(dispatch)

    def _dispatch(self, dispatch: Dispatch) -> GatewayResponse:
        if isinstance(dispatch, BatchDispatch):
            batch_token = new_reference()
            raw = self.transport.send_batch(dispatch.units, dispatch.sender_id, batch_token)
            response = GatewayResponse(raw, bulk=True)
            count = len(dispatch.units)
            log_context = {"batch_token": batch_token}
        else:
            raw = self.transport.send_single(dispatch.unit, dispatch.sender_id)
            response = GatewayResponse(raw)
            count = 1
            log_context = {"reference": dispatch.unit.reference}

        status = "sent" if response.is_ok() else "failed"
        MetricsCollector.track_messages(
            dispatch.mode.value, status, count, enabled=self.settings.metrics_enabled
        )

        logger.info(
            "Messages dispatched",
            mode=dispatch.mode.value,
            messages=count,
            status=response.message_status,
            status_code=response.status_code,
            **log_context
        )
        return response

    @trace_operation("get_balance")
    def get_balance(self) -> Union[int, Dict[str, Any]]:
        """
        Get the account's SMS credit balance.

        Returns:
            Balance as an int on success, otherwise the gateway's reply body
        """
        raw = self.transport.get_balance(self.token)

        try:
            body = raw.json()
        except ValueError:
            body = {"status_code": raw.status_code, "body": raw.text}

        if raw.status_code == 200 and isinstance(body, dict) and "sms_credit_balance" in body:
            return int(body["sms_credit_balance"])

        logger.warning("Balance lookup failed", status_code=raw.status_code)
        return body

    def close(self):
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
