"""Gateway transport and reply interpretation."""

from codel_sms.providers.base import Transport, CodelTransport
from codel_sms.providers.response import GatewayResponse

__all__ = [
    "Transport",
    "CodelTransport",
    "GatewayResponse",
]
