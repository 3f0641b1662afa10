"""
Error taxonomy for planning, validation and gateway failures.

Every planning or validation error is raised before any network call.
Business-level rejections from the gateway are not errors; they come back
as a normal GatewayResponse.
"""

from typing import Any, Dict, Optional


class SmsError(Exception):
    """Base class for all client errors."""

    kind: str = "sms_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message, "details": self.details}


class ConfigInvalid(SmsError):
    """Authentication configuration is absent or malformed."""

    kind = "config_invalid"


class InvalidPhoneNumber(SmsError, ValueError):
    """Destination cannot be normalized."""

    kind = "invalid_phone_number"


class InvalidReceiverInput(SmsError, TypeError):
    """Receiver argument does not match any supported shape."""

    kind = "invalid_receiver_input"


class NoReceivers(SmsError, ValueError):
    """Nothing left to address once blank receivers are filtered out."""

    kind = "no_receivers"


class CountMismatch(SmsError, ValueError):
    """Receiver count differs from the explicit message count."""

    kind = "count_mismatch"


class EmptyMessage(SmsError, ValueError):
    """No text could be resolved for a receiver."""

    kind = "empty_message"


class InvalidCallbackResult(SmsError, TypeError):
    """Personalization callback returned neither text nor a message unit."""

    kind = "invalid_callback_result"


class SenderRequired(SmsError, ValueError):
    """Batch dispatch attempted without a sender id."""

    kind = "sender_required"


class TooManyReceivers(SmsError, ValueError):
    """Batch exceeds the maximum receiver count."""

    kind = "too_many_receivers"


class MessageTooLong(SmsError, ValueError):
    """Message text exceeds the maximum length."""

    kind = "message_too_long"


class GatewayError(SmsError):
    """The gateway could not be reached or did not answer in time."""

    kind = "gateway_error"


class InvalidMessageInput(SmsError, TypeError):
    """Message argument does not match any supported shape."""

    kind = "invalid_message_input"
