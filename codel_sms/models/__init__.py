"""Value objects and input variants."""

from codel_sms.models.phone import normalize
from codel_sms.models.message import MessageUnit, new_reference
from codel_sms.models.inputs import (
    ReceiverInput,
    SingleReceiver,
    ReceiverList,
    KeyedReceivers,
    UnitReceiver,
    UnitList,
    MessageInput,
    NoMessage,
    TextMessage,
    MessageList,
    TemplateMessage,
    ContextMap,
    classify_receivers,
    classify_message,
)

__all__ = [
    "normalize",
    "MessageUnit",
    "new_reference",
    "ReceiverInput",
    "SingleReceiver",
    "ReceiverList",
    "KeyedReceivers",
    "UnitReceiver",
    "UnitList",
    "MessageInput",
    "NoMessage",
    "TextMessage",
    "MessageList",
    "TemplateMessage",
    "ContextMap",
    "classify_receivers",
    "classify_message",
]
