"""
Codel SMS client package.

Composes single and bulk SMS from loosely shaped input, validates them
locally, and dispatches them through the Codel messaging gateway.
"""

__version__ = "1.0.0"
__description__ = "Client library for the Codel SMS gateway"

from codel_sms.client import Client, ClientOptions
from codel_sms.core.exceptions import (
    SmsError,
    ConfigInvalid,
    InvalidPhoneNumber,
    InvalidReceiverInput,
    InvalidMessageInput,
    NoReceivers,
    CountMismatch,
    EmptyMessage,
    InvalidCallbackResult,
    SenderRequired,
    TooManyReceivers,
    MessageTooLong,
    GatewayError,
)
from codel_sms.models import MessageUnit, normalize
from codel_sms.providers import GatewayResponse, Transport, CodelTransport

__all__ = [
    "Client",
    "ClientOptions",
    "MessageUnit",
    "normalize",
    "GatewayResponse",
    "Transport",
    "CodelTransport",
    "SmsError",
    "ConfigInvalid",
    "InvalidPhoneNumber",
    "InvalidReceiverInput",
    "InvalidMessageInput",
    "NoReceivers",
    "CountMismatch",
    "EmptyMessage",
    "InvalidCallbackResult",
    "SenderRequired",
    "TooManyReceivers",
    "MessageTooLong",
    "GatewayError",
]
