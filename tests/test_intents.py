import pytest

from portal.intents import INTENT_ANSWERS, PRODUCT_CATALOGUE_ANSWER, classify_intent, escalation_example, expand_query
from portal.types import INTENTS


def test_plain_escalation_uses_default_route():
    result = classify_intent("I want to speak to a manager right now!")
    assert result.intent == "escalation_needed"
    assert result.escalation_needed is True
    assert result.reason == "Customer satisfaction issue requiring immediate attention"
    assert result.escalation_path == "Support Agent → Customer Success Manager"


def test_urgent_escalation_overrides_route():
    result = classify_intent("This is urgent, I need a human manager now")
    assert result.intent == "escalation_needed"
    assert result.reason == "Urgent issue requiring immediate resolution"
    assert result.escalation_path == "Support Agent → Incident Response Team"


def test_tie_goes_to_declaration_order():
    result = classify_intent("I need immediate help with my billing issue and want to speak to a manager!")
    assert result.intent == "billing"
    assert result.answer == INTENT_ANSWERS["billing"]
    assert "escalation_needed" not in result.as_payload()


def test_direct_product_request():
    result = classify_intent("What products do you offer?")
    assert result.intent == "product_info"
    assert result.answer == PRODUCT_CATALOGUE_ANSWER


def test_no_keywords_defaults_to_product_info():
    assert classify_intent("zzz").intent == "product_info"


def test_non_string_input_never_raises():
    assert classify_intent(None).intent == "product_info"


def test_expand_query_appends_intent_and_common_terms():
    expanded = expand_query("refund please", "billing")
    assert expanded.startswith("refund please payment invoice")
    assert expanded.endswith("help support guide how assistance information")


def test_expand_query_escalation_adds_only_common_terms():
    assert expand_query("manager", "escalation_needed") == "manager help support guide how assistance information"


def test_escalation_examples():
    assert escalation_example("billing").reason == "Billing issue beyond support tier"
    assert escalation_example("urgent").escalation_path == "Support Agent → Incident Response Team"
    assert escalation_example("nope").reason == "Customer satisfaction issue requiring immediate attention"


@pytest.mark.parametrize(
    "message,reason",
    [
        ("I want a human manager or supervisor about this invoice error", "Billing issue beyond support tier"),
        (
            "I want a human manager or supervisor, there is an error",
            "Complex technical issue requiring specialist intervention",
        ),
        (
            "I want a human manager or supervisor to fix my profile",
            "Complex technical issue requiring specialist intervention",
        ),
        ("I want a human manager or supervisor for my profile", "Account management issue requiring elevated permissions"),
    ],
)
def test_escalation_route_priority(message, reason):
    result = classify_intent(message)
    assert result.intent == "escalation_needed"
    assert result.reason == reason


@pytest.mark.parametrize(
    "message",
    ["", "   ", "!!!???", "the and of", "hello", "ÜNÏCÖDÉ 🙂", "x" * 500, None, 42, ["list"], {"k": "v"}],
)
def test_always_returns_a_known_intent(message):
    result = classify_intent(message)
    assert result.intent in INTENTS
    assert result.answer
