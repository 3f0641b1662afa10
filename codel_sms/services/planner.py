"""
Receiver/message planning.

Reduces the caller's mixed-shape receivers and message arguments to either
one message unit for single dispatch or an ordered list of units for batch
dispatch. DispatchModeResolver validates the finished plan.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from codel_sms.core.config import Settings, settings as default_settings
from codel_sms.core.exceptions import (
    CountMismatch,
    EmptyMessage,
    MessageTooLong,
    NoReceivers,
    SenderRequired,
    TooManyReceivers,
)
from codel_sms.core.observability import get_logger
from codel_sms.models.inputs import (
    ContextMap,
    KeyedReceivers,
    MessageInput,
    MessageList,
    NoMessage,
    ReceiverList,
    TemplateMessage,
    TextMessage,
    UnitList,
    UnitReceiver,
    classify_message,
    classify_receivers,
)
from codel_sms.models.message import MAX_RECEIVERS, MAX_SMS_LENGTH, MessageUnit
from codel_sms.models.phone import is_blank, normalize
from codel_sms.services.personalization import PersonalizationCallback, PersonalizationEngine


logger = get_logger(__name__)


@dataclass
class PlanningContext:
    """Working state of one send call. Built fresh per call."""

    sender_id: Optional[str] = None
    callback: Optional[PersonalizationCallback] = None
    receivers: List[str] = field(default_factory=list)
    single_unit: Optional[MessageUnit] = None
    planned_units: List[MessageUnit] = field(default_factory=list)
    personalized: bool = False

    @property
    def receiver_count(self) -> int:
        return len(self.receivers)


@dataclass(frozen=True)
class _Entry:
    """A non-blank receiver and its position in the caller's input."""
    index: int
    key: Any


class ReceiverMessagePlanner:
    """
    Plans a send call.

    Rules, in order:
        1. a comma-separated string is split into receivers
        2. a mapping contributes its keys as receivers and its values as
           personalization context
        3. anything else becomes an ordered receiver sequence
        4. receiver and explicit message sequences must have equal length
        5. a lone message unit without a separate message is sent as-is
        6. a list of message units is already planned per receiver
        7. one receiver with text or a unit gives a single unit
        8. several receivers get a rebound template, shared text, or
           callback output, in that order

    Numbers are normalized when their unit is built, with the country code
    and default validity taken from `settings`.
    """

    def __init__(
        self,
        sender_id: Optional[str] = None,
        callback: Optional[PersonalizationCallback] = None,
        settings: Optional[Settings] = None,
    ):
        self.sender_id = sender_id
        self.callback = callback
        self.settings = settings or default_settings
        self.country_code = self.settings.default_country_code
        self.validity = self.settings.default_validity
        self.engine = PersonalizationEngine(
            callback,
            country_code=self.country_code,
            validity=self.validity,
        ) if callback else None

    def plan(self, receivers: Any, message: Optional[Any] = None) -> PlanningContext:
        """
        Plan receivers and message into message units.

        Args:
            receivers: Number, comma-separated numbers, list of numbers,
                mapping of number to context, a MessageUnit or a list of them
            message: Text, list of texts/units, template MessageUnit,
                mapping of number to context, or None

        Returns:
            PlanningContext with either `single_unit` or `planned_units` set

        Raises:
            CountMismatch: receiver and message sequences differ in length
            EmptyMessage: several receivers but no text and no callback
            NoReceivers: every receiver entry was blank
            InvalidPhoneNumber: a receiver cannot be normalized
        """
        receiver_input = classify_receivers(receivers)
        message_input = classify_message(message)

        if isinstance(receiver_input, UnitReceiver):
            return self._plan_unit(receiver_input.unit, message_input)

        if isinstance(receiver_input, UnitList):
            return self._plan_unit_list(receiver_input.units, message_input)

        contexts: Dict[Any, Any] = {}
        if isinstance(receiver_input, KeyedReceivers):
            raw_numbers = receiver_input.numbers
            contexts = receiver_input.contexts
        elif isinstance(receiver_input, ReceiverList):
            raw_numbers = list(receiver_input.numbers)
        else:
            raw_numbers = [receiver_input.number]

        self._check_parity(len(raw_numbers), message_input)

        entries = [
            _Entry(index=index, key=raw)
            for index, raw in enumerate(raw_numbers)
            if not is_blank(raw)
        ]
        if not entries:
            raise NoReceivers("No receivers to send to.", {"given": len(raw_numbers)})

        if len(entries) == 1:
            return self._plan_single(entries[0], message_input, contexts)
        return self._plan_batch(entries, message_input, contexts)

    def _context(self) -> PlanningContext:
        return PlanningContext(sender_id=self.sender_id, callback=self.callback)

    @staticmethod
    def _check_parity(receiver_count: int, message_input: MessageInput):
        if isinstance(message_input, MessageList):
            message_count = len(message_input.items)
        elif isinstance(message_input, ContextMap):
            message_count = len(message_input.contexts)
        else:
            return

        if receiver_count != message_count:
            raise CountMismatch(
                "Number of receivers and messages do not match.",
                {"receivers": receiver_count, "messages": message_count}
            )

    @staticmethod
    def _lookup(entry: _Entry, number: str, *sources: Dict[Any, Any]) -> Any:
        for source in sources:
            if entry.key in source:
                return source[entry.key]
            if number in source:
                return source[number]
        return None

    def _number(self, entry: _Entry) -> str:
        return normalize(entry.key, self.country_code)

    def _create(self, receiver: str, text: str) -> MessageUnit:
        return MessageUnit.create(receiver, text, validity=self.validity, country_code=self.country_code)

    def _pair(self, item: Union[str, MessageUnit], receiver: str) -> MessageUnit:
        if isinstance(item, MessageUnit):
            return item.rebind(receiver, self.country_code)
        return self._create(receiver, item)

    def _personalize(self, entry: _Entry, message_input: MessageInput, contexts: Dict[Any, Any]) -> MessageUnit:
        number = self._number(entry)
        if isinstance(message_input, TemplateMessage):
            return self.engine.run(number, message_input.unit)
        message_contexts = message_input.contexts if isinstance(message_input, ContextMap) else {}
        return self.engine.run(number, self._lookup(entry, number, message_contexts, contexts))

    def _plan_unit(self, unit: MessageUnit, message_input: MessageInput) -> PlanningContext:
        if not unit.is_bound:
            raise NoReceivers("Message unit has no destination.", {"reference": unit.reference})

        if isinstance(message_input, NoMessage):
            ctx = self._context()
            ctx.receivers = [unit.destination]
            ctx.single_unit = unit
            return ctx

        self._check_parity(1, message_input)
        return self._plan_single(_Entry(index=0, key=unit.destination), message_input, {})

    def _plan_unit_list(self, units: Sequence[MessageUnit], message_input: MessageInput) -> PlanningContext:
        self._check_parity(len(units), message_input)

        if not isinstance(message_input, NoMessage):
            logger.warning(
                "Message argument ignored for pre-built message units",
                units=len(units),
                message_type=type(message_input).__name__
            )

        bound = [unit for unit in units if unit.is_bound]
        if not bound:
            raise NoReceivers("No receivers to send to.", {"given": len(units)})

        ctx = self._context()
        ctx.receivers = [unit.destination for unit in bound]
        if len(bound) == 1:
            ctx.single_unit = bound[0]
        else:
            ctx.planned_units = list(bound)
        return ctx

    def _plan_single(self, entry: _Entry, message_input: MessageInput, contexts: Dict[Any, Any]) -> PlanningContext:
        ctx = self._context()

        if isinstance(message_input, TemplateMessage) and self.engine:
            unit = self._personalize(entry, message_input, contexts)
            ctx.personalized = True
        elif isinstance(message_input, TemplateMessage):
            unit = message_input.unit.rebind(self._number(entry), self.country_code)
        elif isinstance(message_input, TextMessage):
            unit = self._create(self._number(entry), message_input.text)
        elif isinstance(message_input, MessageList):
            unit = self._pair(message_input.items[entry.index], self._number(entry))
        elif self.engine:
            unit = self._personalize(entry, message_input, contexts)
            ctx.personalized = True
        else:
            # Nothing to send; the resolver reports the empty message.
            ctx.receivers = [str(entry.key).strip()]
            return ctx

        ctx.receivers = [unit.destination]
        ctx.single_unit = unit
        return ctx

    def _preflight_batch(self, entries: List[_Entry], message_input: MessageInput):
        """Checks that need no units, so nothing is built or called back for a doomed batch."""
        if isinstance(message_input, TextMessage) and len(message_input.text) > MAX_SMS_LENGTH:
            raise MessageTooLong(
                "Message length cannot exceed 6 message parts.",
                {"length": len(message_input.text), "max_length": MAX_SMS_LENGTH}
            )

        if not self.sender_id:
            raise SenderRequired(
                "Sender ID is required for bulk messages.",
                {"receivers": len(entries)}
            )

        if len(entries) > MAX_RECEIVERS:
            raise TooManyReceivers(
                f"Recipients cannot exceed {MAX_RECEIVERS}.",
                {"receivers": len(entries), "max_receivers": MAX_RECEIVERS}
            )

    def _plan_batch(self, entries: List[_Entry], message_input: MessageInput, contexts: Dict[Any, Any]) -> PlanningContext:
        ctx = self._context()

        if isinstance(message_input, (NoMessage, ContextMap)) and not self.engine:
            raise EmptyMessage(
                "Messages can not be empty!",
                {"receivers": len(entries)}
            )

        self._preflight_batch(entries, message_input)

        if isinstance(message_input, TemplateMessage) and self.engine:
            units = [self._personalize(entry, message_input, contexts) for entry in entries]
            ctx.personalized = True
        elif isinstance(message_input, TemplateMessage):
            units = [message_input.unit.rebind(self._number(entry), self.country_code) for entry in entries]
        elif isinstance(message_input, TextMessage):
            units = [self._create(self._number(entry), message_input.text) for entry in entries]
        elif isinstance(message_input, MessageList):
            units = [self._pair(message_input.items[entry.index], self._number(entry)) for entry in entries]
        else:
            units = [self._personalize(entry, message_input, contexts) for entry in entries]
            ctx.personalized = True

        ctx.receivers = [unit.destination for unit in units]
        ctx.planned_units = units

        logger.debug(
            "Batch planned",
            receivers=len(ctx.receivers),
            personalized=ctx.personalized
        )
        return ctx


def plan(
    receivers: Any,
    message: Optional[Any] = None,
    callback: Optional[PersonalizationCallback] = None,
    sender_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> PlanningContext:
    """Plan a send call without keeping a planner around."""
    return ReceiverMessagePlanner(sender_id=sender_id, callback=callback, settings=settings).plan(receivers, message)
