"""
Tagged variants for the shapes callers may pass to Client.send.

Raw arguments are classified once at the boundary so the planner can branch
on a closed set of types.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from codel_sms.core.exceptions import InvalidMessageInput, InvalidReceiverInput
from codel_sms.models.message import MessageUnit


RECEIVER_SEPARATOR = ","


def _as_number(value: Any) -> Any:
    # Numbers given as ints are accepted; bools are not numbers here.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


# Receiver variants

@dataclass(frozen=True)
class SingleReceiver:
    number: str


@dataclass(frozen=True)
class ReceiverList:
    numbers: List[str]


@dataclass(frozen=True)
class KeyedReceivers:
    """Numbers as keys, per-receiver personalization context as values."""
    contexts: Dict[str, Any]

    @property
    def numbers(self) -> List[str]:
        return list(self.contexts)


@dataclass(frozen=True)
class UnitReceiver:
    unit: MessageUnit


@dataclass(frozen=True)
class UnitList:
    units: List[MessageUnit]


RECEIVER_VARIANTS = (SingleReceiver, ReceiverList, KeyedReceivers, UnitReceiver, UnitList)
ReceiverInput = Union[SingleReceiver, ReceiverList, KeyedReceivers, UnitReceiver, UnitList]


# Message variants

@dataclass(frozen=True)
class NoMessage:
    pass


@dataclass(frozen=True)
class TextMessage:
    text: str


@dataclass(frozen=True)
class MessageList:
    """Explicit per-receiver messages, paired with receivers by position."""
    items: List[Union[str, MessageUnit]] = field(default_factory=list)


@dataclass(frozen=True)
class TemplateMessage:
    unit: MessageUnit


@dataclass(frozen=True)
class ContextMap:
    """Per-receiver personalization context keyed by receiver number."""
    contexts: Dict[str, Any]


MESSAGE_VARIANTS = (NoMessage, TextMessage, MessageList, TemplateMessage, ContextMap)
MessageInput = Union[NoMessage, TextMessage, MessageList, TemplateMessage, ContextMap]


def classify_receivers(raw: Any) -> ReceiverInput:
    """
    Classify the receivers argument.

    Raises:
        InvalidReceiverInput: if the value fits none of the receiver shapes
    """
    if isinstance(raw, RECEIVER_VARIANTS):
        return raw

    raw = _as_number(raw)

    if isinstance(raw, MessageUnit):
        return UnitReceiver(raw)

    if isinstance(raw, str):
        if RECEIVER_SEPARATOR in raw:
            return ReceiverList(raw.split(RECEIVER_SEPARATOR))
        return SingleReceiver(raw)

    if isinstance(raw, Mapping):
        return KeyedReceivers({_as_number(k): v for k, v in raw.items()})

    if isinstance(raw, Sequence) and not isinstance(raw, (bytes, bytearray)):
        items = [_as_number(item) for item in raw]
        units = [item for item in items if isinstance(item, MessageUnit)]
        if units and len(units) == len(items):
            return UnitList(units)
        if units:
            raise InvalidReceiverInput(
                "Receivers cannot mix phone numbers and message units",
                {"units": len(units), "total": len(items)}
            )
        for item in items:
            if item is not None and not isinstance(item, str):
                raise InvalidReceiverInput(
                    f"Unsupported receiver entry: {type(item).__name__}",
                    {"type": type(item).__name__}
                )
        return ReceiverList(items)

    raise InvalidReceiverInput(
        f"Unsupported receivers argument: {type(raw).__name__}",
        {"type": type(raw).__name__}
    )


def classify_message(raw: Optional[Any]) -> MessageInput:
    """
    Classify the message argument.

    Raises:
        InvalidMessageInput: if the value fits none of the message shapes
    """
    if isinstance(raw, MESSAGE_VARIANTS):
        return raw

    if raw is None:
        return NoMessage()

    if isinstance(raw, str):
        return TextMessage(raw) if raw else NoMessage()

    if isinstance(raw, MessageUnit):
        return TemplateMessage(raw)

    if isinstance(raw, Mapping):
        return ContextMap({_as_number(k): v for k, v in raw.items()})

    if isinstance(raw, Sequence) and not isinstance(raw, (bytes, bytearray)):
        items = list(raw)
        for item in items:
            if not isinstance(item, (str, MessageUnit)):
                raise InvalidMessageInput(
                    f"Unsupported message entry: {type(item).__name__}",
                    {"type": type(item).__name__}
                )
        return MessageList(items)

    raise InvalidMessageInput(
        f"Unsupported message argument: {type(raw).__name__}",
        {"type": type(raw).__name__}
    )
