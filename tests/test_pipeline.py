import pytest

from portal.errors import ValidationError
from portal.pipeline import fallback_answer


def test_faq_answer_with_metadata(pipeline):
    result = pipeline.respond("What are your business hours?")
    assert result.source == "FAQ"
    assert result.source_id == "faq-2"
    assert result.confidence >= 80
    assert len(result.related_questions) == 3
    assert result.metadata["userSentiment"] == "neutral"
    assert "timestamp" in result.metadata
    assert "conversationSummary" not in result.metadata


def test_repeat_question_is_served_from_cache(pipeline, store, clock):
    first = pipeline.respond("What are your business hours?")
    clock.advance(10)
    second = pipeline.respond("  what are your   BUSINESS hours?")
    assert second.as_payload() == first.as_payload()
    assert "what are your business hours?" in store.cache


def test_greeting_bypasses_the_scanner(pipeline, store):
    result = pipeline.respond("Hello there")
    assert result.source == "System"
    assert result.source_id == "greeting"
    assert result.confidence >= 95
    assert result.answer.startswith("Hello! Welcome to our AI Support Portal.")
    assert len(store.cache) == 0


def test_frustrated_greeting_is_clamped(pipeline):
    result = pipeline.respond("hi, this is ridiculous")
    assert result.confidence == 100
    assert "I understand you might be having some challenges." in result.answer


def test_returning_user_greeting(pipeline):
    result = pipeline.respond(
        "hey",
        user_id="u-1",
        session_data={"previousSessions": 2, "preferences": {"favoriteProduct": "Knowledge Hub"}},
    )
    assert result.answer.startswith("Welcome back to our AI Support Portal!")
    assert "interested in our Knowledge Hub" in result.answer
    assert result.metadata["personalized"] is True


@pytest.mark.parametrize(
    "question,source_id",
    [("1", "supportbot-details"), ("2", "knowledgehub-details"), ("the third product", "agentassist-details")],
)
def test_product_selection_ignores_history(pipeline, question, source_id):
    history = [{"role": "user", "content": "How do I reset my password?"}]
    result = pipeline.respond(question, history)
    assert result.source_id == source_id
    assert result.confidence == 95


def test_pricing_fast_path(pipeline):
    result = pipeline.respond("How much is SupportBot Pro?")
    assert result.source_id == "pricing-info"
    assert result.confidence == 95


def test_delivery_fast_path(pipeline):
    assert pipeline.respond("Do you ship internationally?").source_id == "delivery-info"


def test_short_reply_follows_product_context(pipeline):
    history = [
        {"role": "user", "content": "What products do you offer?"},
        {"role": "assistant", "content": "We offer SupportBot Pro and Knowledge Hub."},
    ]
    result = pipeline.respond("ok", history)
    assert result.source_id == "supportbot-details"
    assert result.confidence == 98


def test_acknowledgment_without_topic(pipeline):
    assert pipeline.respond("thanks").source_id == "default-followup"


def test_product_catalogue_request(pipeline):
    result = pipeline.respond("What products do you offer?")
    assert result.source_id == "faq-7"
    assert result.confidence == 95


@pytest.mark.parametrize("question", ["", "   ", None, 42])
def test_invalid_question_is_rejected(pipeline, question):
    with pytest.raises(ValidationError, match="Please provide a valid question."):
        pipeline.respond(question)


def test_every_response_is_recorded(pipeline, store):
    pipeline.respond("Hello")
    pipeline.respond("What are your business hours?")
    records = store.queries.records()
    assert [r.query for r in records] == ["What are your business hours?", "Hello"]
    assert records[0].successful is True


def test_long_history_adds_summary(pipeline):
    history = [
        {"role": "user" if i % 2 == 0 else "assistant", "content": "Tell me about the Enterprise Suite"}
        for i in range(6)
    ]
    result = pipeline.respond("What are your business hours?", history)
    assert result.metadata["conversationSummary"] == "Conversation about products"
    assert result.metadata["topicChain"] == ["initial", "products"]


def test_fallback_patterns():
    assert fallback_answer("what does it cost").source_id == "pricing-info"
    assert fallback_answer("anything available").confidence == 85
    assert fallback_answer("send it by mail").source_id == "delivery-info"
    default = fallback_answer("zzz")
    assert default.confidence == 40
    assert default.source == "System"


@pytest.mark.parametrize("preferences", ["Knowledge Hub", ["Knowledge Hub"], 3, None])
def test_returning_user_with_malformed_preferences(pipeline, preferences):
    result = pipeline.respond("hey", user_id="u-1", session_data={"previousSessions": 1, "preferences": preferences})
    assert result.answer.startswith("Welcome back to our AI Support Portal! How can I help you today?")
    assert result.metadata["personalized"] is True
