import time
from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError

from codel_sms.core.exceptions import InvalidPhoneNumber
from codel_sms.models.message import MAX_RECEIVERS, MAX_SMS_LENGTH, MessageUnit


def test_limits():
    assert MAX_SMS_LENGTH == 960
    assert MAX_RECEIVERS == 3500


def test_create_with_destination_and_text():
    """Destination is normalized and defaults are filled in."""
    before = int(time.time())
    unit = MessageUnit.create("0771000001", "Hello")

    assert unit.destination == "263771000001"
    assert unit.text == "Hello"
    assert unit.reference
    assert unit.validity == "03:00"
    assert before <= unit.timestamp <= int(time.time())
    assert unit.is_bound


def test_create_with_text_only_leaves_destination_unbound():
    unit = MessageUnit.create("Hello later")

    assert unit.destination == ""
    assert unit.text == "Hello later"
    assert not unit.is_bound


def test_references_are_unique_by_default():
    first = MessageUnit.create("263771000001", "Hi")
    second = MessageUnit.create("263771000001", "Hi")
    assert first.reference != second.reference


def test_explicit_reference_is_kept():
    unit = MessageUnit.create("263771000001", "Hi", reference="ref-1")
    assert unit.reference == "ref-1"


def test_future_timestamp_derives_validity():
    """A scheduled unit without explicit validity uses the schedule's HH:MM."""
    scheduled = int(time.time()) + 300
    unit = MessageUnit.create("263771000001", "Later", timestamp=scheduled)

    assert unit.timestamp == scheduled
    assert unit.validity == datetime.fromtimestamp(scheduled).strftime("%H:%M")


def test_future_timestamp_keeps_explicit_validity():
    scheduled = int(time.time()) + 300
    unit = MessageUnit.create("263771000001", "Later", timestamp=scheduled, validity="05:30")
    assert unit.validity == "05:30"


def test_past_timestamp_keeps_default_validity():
    past = int(time.time()) - 3600
    unit = MessageUnit.create("263771000001", "Earlier", timestamp=past)

    assert unit.timestamp == past
    assert unit.validity == "03:00"


def test_datetime_timestamp_is_accepted():
    scheduled = datetime.now() + timedelta(minutes=5)
    unit = MessageUnit.create("263771000001", "Later", timestamp=scheduled)
    assert unit.timestamp == int(scheduled.timestamp())


def test_create_rejects_bad_destination():
    with pytest.raises(InvalidPhoneNumber):
        MessageUnit.create("not-a-number", "Hi")


def test_unit_is_immutable():
    unit = MessageUnit.create("263771000001", "Hi")
    with pytest.raises(ValidationError):
        unit.text = "changed"


def test_rebind_changes_only_destination():
    """Rebinding returns a new unit; every other field is preserved."""
    scheduled = int(time.time()) + 600
    original = MessageUnit.create("Template text", reference="ref-9", timestamp=scheduled, validity="04:00")

    bound = original.rebind("+263 77 200 0002")

    assert bound is not original
    assert original.destination == ""
    assert bound.destination == "263772000002"
    assert bound.text == original.text
    assert bound.reference == original.reference
    assert bound.timestamp == original.timestamp
    assert bound.validity == original.validity


def test_rebind_rejects_bad_destination():
    unit = MessageUnit.create("Template text")
    with pytest.raises(InvalidPhoneNumber):
        unit.rebind("")


def test_to_payload():
    scheduled = int(time.time()) + 120
    unit = MessageUnit.create("263771000001", "Hi", reference="ref-1", timestamp=scheduled)
    now = datetime(2024, 5, 6, 7, 8, 9)

    payload = unit.to_payload(now=now)

    assert payload == {
        "destination": "263771000001",
        "messageText": "Hi",
        "messageReference": "ref-1",
        "messageDate": "20240506070809",
        "messageValidity": unit.validity,
        "sendDateTime": datetime.fromtimestamp(scheduled).strftime("%H:%M"),
    }
