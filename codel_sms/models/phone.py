"""
Phone number normalization into the gateway's international numeric format.
"""

import re
from typing import Optional

from codel_sms.core.config import settings
from codel_sms.core.exceptions import InvalidPhoneNumber


# Separators people put into numbers: spaces, dashes, dots, slashes, brackets.
_DECORATION = re.compile(r"[\s\-./()\[\]]")
# E.164: country code + subscriber number, at most 15 digits, no leading zero.
_INTERNATIONAL = re.compile(r"^[1-9]\d{6,14}$")


def normalize(raw: str, country_code: Optional[str] = None) -> str:
    """
    Canonicalize a destination into digits-only international form.

    Accepted inputs, for country code 263:
        "+263 77 100 0001", "00263771000001" -> "263771000001"
        "0771000001" (trunk prefix)           -> "263771000001"

    A national number must keep its trunk "0"; without it the digits are
    taken as already international, so "771000001" stays as it is.
    An already-normalized number is returned unchanged.

    Raises:
        InvalidPhoneNumber: if nothing number-like remains after cleaning
    """
    if not isinstance(raw, str):
        raise InvalidPhoneNumber(
            "Phone number must be a string",
            {"type": type(raw).__name__}
        )

    code = country_code or settings.default_country_code
    digits = _DECORATION.sub("", raw.strip())

    if digits.startswith("+"):
        digits = digits[1:]
    elif digits.startswith("00"):
        digits = digits[2:]
    elif digits.startswith("0"):
        digits = code + digits[1:]

    if not _INTERNATIONAL.match(digits):
        raise InvalidPhoneNumber(
            f"Invalid phone number: {raw!r}",
            {"phone_number": raw}
        )

    return digits


def is_blank(raw) -> bool:
    """True for receiver entries that should be dropped before counting."""
    if raw is None:
        return True
    if isinstance(raw, str):
        return not raw.strip()
    return not raw
