"""
Per-receiver personalization through a caller-supplied callback.
"""

import inspect
from typing import Any, Callable, Optional, Union

from codel_sms.core.exceptions import InvalidCallbackResult
from codel_sms.core.observability import get_logger
from codel_sms.models.message import MessageUnit


logger = get_logger(__name__)

CallbackResult = Union[str, MessageUnit]
PersonalizationCallback = Callable[..., CallbackResult]


def _accepts_context(callback: Callable) -> bool:
    """Whether the callback takes a second positional argument."""
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures get both arguments.
        return True

    positional = 0
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return True
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


class PersonalizationEngine:
    """Runs a personalization callback and coerces its result to a MessageUnit."""

    def __init__(
        self,
        callback: PersonalizationCallback,
        country_code: Optional[str] = None,
        validity: Optional[str] = None,
    ):
        if not callable(callback):
            raise TypeError("Personalization callback must be callable")
        self.callback = callback
        self.country_code = country_code
        self.validity = validity
        self._pass_context = _accepts_context(callback)

    def run(self, receiver: str, context: Optional[Any] = None) -> MessageUnit:
        """
        Produce the message unit for one receiver.

        Args:
            receiver: Normalized receiver number
            context: Per-receiver context value or template unit, if any

        Returns:
            MessageUnit addressed to `receiver` unless the callback bound
            another destination itself

        Raises:
            InvalidCallbackResult: if the callback returns anything but a
                string or a MessageUnit
        """
        if self._pass_context:
            result = self.callback(receiver, context)
        else:
            result = self.callback(receiver)

        if isinstance(result, str):
            return MessageUnit.create(receiver, result, validity=self.validity, country_code=self.country_code)

        if isinstance(result, MessageUnit):
            if not result.is_bound:
                return result.rebind(receiver, self.country_code)
            return result

        logger.warning(
            "Personalization callback returned unsupported value",
            receiver=receiver,
            result_type=type(result).__name__
        )
        raise InvalidCallbackResult(
            "Callback function should return a MessageUnit or message string.",
            {"receiver": receiver, "result_type": type(result).__name__}
        )


def run(callback: PersonalizationCallback, receiver: str, context: Optional[Any] = None) -> MessageUnit:
    """Single-shot form of PersonalizationEngine.run."""
    return PersonalizationEngine(callback).run(receiver, context)
