"""
Immutable message unit: one addressed message plus its scheduling metadata.
"""

import time
import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from codel_sms.core.config import settings
from codel_sms.models.phone import normalize


Timestamp = Union[int, float, datetime]

# Six concatenated SMS parts.
MAX_SMS_LENGTH = 6 * 160
MAX_RECEIVERS = 3500


def new_reference() -> str:
    """Fresh unique token for message references and batch numbers."""
    return uuid.uuid4().hex


def _epoch(value: Timestamp) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp())
    return int(value)


class MessageUnit(BaseModel):
    """
    One addressed message.

    Instances are frozen; rebinding a destination returns a new unit.
    An empty destination means the unit is a template still waiting for
    a receiver.
    """

    model_config = ConfigDict(frozen=True)

    destination: str = Field("", description="Normalized phone number")
    text: str = Field(..., description="Message body")
    reference: str = Field(default_factory=new_reference, description="Unique message reference")
    timestamp: int = Field(default_factory=lambda: int(time.time()), description="Epoch seconds to send at")
    validity: str = Field(
        default_factory=lambda: settings.default_validity,
        pattern=r"^\d{2}:\d{2}$",
        description="HH:MM validity window"
    )

    @field_validator("destination", mode="before")
    @classmethod
    def normalize_destination(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip():
            return normalize(v)
        return v

    @classmethod
    def create(
        cls,
        destination_or_text: str,
        text: Optional[str] = None,
        reference: Optional[str] = None,
        timestamp: Optional[Timestamp] = None,
        validity: Optional[str] = None,
        country_code: Optional[str] = None,
    ) -> "MessageUnit":
        """
        Build a message unit.

        With a single positional value the value is the message text and the
        destination is left unbound, to be filled in when receivers are
        known. A future timestamp without an explicit validity derives the
        validity from the timestamp's HH:MM.

        Args:
            destination_or_text: Receiver number, or the text when `text` is omitted
            text: Message body
            reference: Caller reference, generated when omitted
            timestamp: Send time as epoch seconds or datetime, defaults to now
            validity: HH:MM validity window, the configured default when omitted
            country_code: Code used to expand a trunk-prefixed destination

        Returns:
            New MessageUnit
        """
        if text is None:
            destination, text = "", destination_or_text
        else:
            destination = destination_or_text

        now = int(time.time())
        if not timestamp:
            timestamp = now
        else:
            timestamp = _epoch(timestamp)
            if timestamp >= now and not validity:
                validity = datetime.fromtimestamp(timestamp).strftime("%H:%M")

        # Normalized up front so a bad number raises InvalidPhoneNumber
        # rather than a pydantic ValidationError.
        if destination and destination.strip():
            destination = normalize(destination, country_code)

        return cls(
            destination=destination or "",
            text=text,
            reference=reference or new_reference(),
            timestamp=timestamp,
            validity=validity or settings.default_validity,
        )

    def rebind(self, destination: str, country_code: Optional[str] = None) -> "MessageUnit":
        """Return a copy addressed to `destination`; all other fields are kept."""
        return self.model_copy(update={"destination": normalize(destination, country_code)})

    @property
    def is_bound(self) -> bool:
        return bool(self.destination)

    def to_payload(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Serialize into the gateway's message fields."""
        now = now or datetime.now()
        return {
            "destination": self.destination,
            "messageText": self.text,
            "messageReference": self.reference,
            "messageDate": now.strftime("%Y%m%d%H%M%S"),
            "messageValidity": self.validity,
            "sendDateTime": datetime.fromtimestamp(self.timestamp).strftime("%H:%M"),
        }
