import pytest

from codel_sms.core.exceptions import InvalidCallbackResult
from codel_sms.models.message import MessageUnit
from codel_sms.services.personalization import PersonalizationEngine, run


def test_string_result_is_wrapped_for_receiver():
    engine = PersonalizationEngine(lambda receiver: f"Hi {receiver}")
    unit = engine.run("263771000001")

    assert unit.destination == "263771000001"
    assert unit.text == "Hi 263771000001"


def test_context_is_passed_to_two_argument_callbacks():
    seen = []

    def callback(receiver, user):
        seen.append((receiver, user))
        return f"Dear {user['name']}"

    unit = PersonalizationEngine(callback).run("263771000001", {"name": "John"})

    assert seen == [("263771000001", {"name": "John"})]
    assert unit.text == "Dear John"


def test_one_argument_callback_gets_receiver_only():
    calls = []

    def callback(receiver):
        calls.append(receiver)
        return "Hi"

    PersonalizationEngine(callback).run("263771000001", {"ignored": True})
    assert calls == ["263771000001"]


def test_varargs_callback_gets_context():
    unit = PersonalizationEngine(lambda *args: f"{len(args)} args").run("263771000001", None)
    assert unit.text == "2 args"


def test_unbound_unit_result_is_rebound():
    engine = PersonalizationEngine(lambda receiver, ctx: MessageUnit.create("Your bill is due", reference="r1"))
    unit = engine.run("263772000002")

    assert unit.destination == "263772000002"
    assert unit.reference == "r1"


def test_bound_unit_result_is_used_as_is():
    bound = MessageUnit.create("263779999999", "Forwarded")
    unit = PersonalizationEngine(lambda receiver: bound).run("263771000001")
    assert unit is bound


def test_template_is_available_as_context():
    template = MessageUnit.create("Template")
    unit = PersonalizationEngine(lambda receiver, tpl: tpl.text + "!").run("263771000001", template)
    assert unit.text == "Template!"


@pytest.mark.parametrize("result", [None, 42, ["Hi"], {"text": "Hi"}])
def test_other_results_are_rejected(result):
    engine = PersonalizationEngine(lambda receiver: result)
    with pytest.raises(InvalidCallbackResult):
        engine.run("263771000001")


def test_callback_must_be_callable():
    with pytest.raises(TypeError):
        PersonalizationEngine("not callable")


def test_module_level_run():
    unit = run(lambda receiver: "Hi", "0771000001")
    assert unit.destination == "263771000001"


def test_engine_applies_country_code_and_validity():
    engine = PersonalizationEngine(lambda receiver: "Hi", country_code="27", validity="05:00")
    unit = engine.run("0821234567")

    assert unit.destination == "27821234567"
    assert unit.validity == "05:00"


def test_unbound_unit_result_keeps_its_validity():
    engine = PersonalizationEngine(
        lambda receiver: MessageUnit.create("Hi", validity="01:30"),
        country_code="27",
        validity="05:00",
    )
    unit = engine.run("0821234567")

    assert unit.destination == "27821234567"
    assert unit.validity == "01:30"
