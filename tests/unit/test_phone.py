import pytest

from codel_sms.core.exceptions import InvalidPhoneNumber
from codel_sms.models.phone import is_blank, normalize


@pytest.mark.parametrize("raw", [
    "263771000001",
    "+263771000001",
    "+263 77 100 0001",
    "00263771000001",
    "0771000001",
    "077-100-0001",
    "(077) 100.0001",
    "  263771000001  ",
])
def test_normalize_to_international_digits(raw):
    """Decorated and local forms normalize to the same number."""
    assert normalize(raw) == "263771000001"


def test_normalize_is_idempotent():
    """Normalizing an already-normalized number leaves it unchanged."""
    for raw in ["263771000001", "+44 20 7946 0958", "0772000002", "15551234567"]:
        once = normalize(raw)
        assert normalize(once) == once


def test_normalize_uses_given_country_code():
    assert normalize("0201234567", country_code="44") == "44201234567"


@pytest.mark.parametrize("raw", ["", "   ", "+", "abc", "26377100000a", "0", "12345", "2637710000011234567"])
def test_normalize_rejects_non_numbers(raw):
    with pytest.raises(InvalidPhoneNumber):
        normalize(raw)


def test_normalize_rejects_non_strings():
    with pytest.raises(InvalidPhoneNumber):
        normalize(None)


def test_invalid_phone_number_is_value_error():
    """Callers catching ValueError still see bad numbers."""
    with pytest.raises(ValueError):
        normalize("not a number")


def test_is_blank():
    assert is_blank("")
    assert is_blank("  ")
    assert is_blank(None)
    assert not is_blank("263771000001")


def test_national_number_needs_trunk_prefix():
    """Without its leading 0 a national number is taken as international."""
    assert normalize("0771000001") == "263771000001"
    assert normalize("771000001") == "771000001"
