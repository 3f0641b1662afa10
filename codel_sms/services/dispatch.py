"""
Dispatch mode resolution: single send or batch send.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from codel_sms.core.exceptions import (
    CountMismatch,
    EmptyMessage,
    MessageTooLong,
    NoReceivers,
    SenderRequired,
    TooManyReceivers,
)
from codel_sms.core.observability import get_logger
from codel_sms.models.message import MAX_RECEIVERS, MAX_SMS_LENGTH, MessageUnit
from codel_sms.services.planner import PlanningContext


logger = get_logger(__name__)


class DispatchMode(str, Enum):
    """How a planned send reaches the gateway."""
    SINGLE = "single"
    BATCH = "batch"


@dataclass(frozen=True)
class SingleDispatch:
    unit: MessageUnit
    sender_id: Optional[str] = None
    mode: DispatchMode = DispatchMode.SINGLE


@dataclass(frozen=True)
class BatchDispatch:
    units: List[MessageUnit]
    sender_id: str
    mode: DispatchMode = DispatchMode.BATCH


Dispatch = Union[SingleDispatch, BatchDispatch]


def _check_length(unit: MessageUnit):
    if len(unit.text) > MAX_SMS_LENGTH:
        raise MessageTooLong(
            "Message length cannot exceed 6 message parts.",
            {"length": len(unit.text), "max_length": MAX_SMS_LENGTH, "destination": unit.destination}
        )


def _has_text(unit: Optional[MessageUnit]) -> bool:
    return unit is not None and bool(unit.text.strip())


class DispatchModeResolver:
    """Turns a finished plan into a single or batch dispatch, enforcing the limits of each."""

    def resolve(self, ctx: PlanningContext) -> Dispatch:
        """
        Classify and validate a plan.

        A plan whose batch shrank to one unit is sent as a single message.

        Raises:
            EmptyMessage, MessageTooLong, SenderRequired, CountMismatch,
            TooManyReceivers, NoReceivers
        """
        if len(ctx.planned_units) == 1:
            logger.debug("Collapsing one-unit batch into single dispatch")
            return self._resolve_single(ctx.planned_units[0], ctx.sender_id)

        if ctx.receiver_count > 1 or ctx.planned_units:
            return self._resolve_batch(ctx)

        if ctx.receiver_count == 0 and ctx.single_unit is None:
            raise NoReceivers("No receivers to send to.")

        return self._resolve_single(ctx.single_unit, ctx.sender_id)

    def _resolve_single(self, unit: Optional[MessageUnit], sender_id: Optional[str]) -> SingleDispatch:
        if not _has_text(unit):
            raise EmptyMessage("Message can not be empty.")
        _check_length(unit)
        return SingleDispatch(unit=unit, sender_id=sender_id or None)

    def _resolve_batch(self, ctx: PlanningContext) -> BatchDispatch:
        units = ctx.planned_units

        if not units:
            raise EmptyMessage("Messages can not be empty!", {"receivers": ctx.receiver_count})

        if not ctx.personalized and len(units) != ctx.receiver_count:
            raise CountMismatch(
                "Number of receivers and messages do not match.",
                {"receivers": ctx.receiver_count, "messages": len(units)}
            )

        for unit in units:
            if not _has_text(unit):
                raise EmptyMessage(
                    "Messages can not be empty!",
                    {"destination": unit.destination}
                )
            _check_length(unit)

        if not ctx.sender_id:
            raise SenderRequired(
                "Sender ID is required for bulk messages.",
                {"receivers": ctx.receiver_count}
            )

        if ctx.receiver_count > MAX_RECEIVERS:
            raise TooManyReceivers(
                f"Recipients cannot exceed {MAX_RECEIVERS}.",
                {"receivers": ctx.receiver_count, "max_receivers": MAX_RECEIVERS}
            )

        return BatchDispatch(units=list(units), sender_id=ctx.sender_id)


def resolve(ctx: PlanningContext) -> Dispatch:
    return DispatchModeResolver().resolve(ctx)
