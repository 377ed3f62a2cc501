"""portal.answerer

Post-processing applied to a scanned or fallback answer before it is returned:
related questions, a conversational ending and response metadata.
"""

import random
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence

from .topics import conversation_summary, mentioned_products, smart_recommendations, topic_chain
from .types import MatchResult, Message

MAX_SUGGESTIONS = 3
SUMMARY_MIN_HISTORY = 6

PADDING_QUESTIONS = [
    "What's your most popular product?",
    "Do you offer volume discounts?",
    "How long has your company been in business?",
    "What integrations do you support?",
]

CONVERSATIONAL_ENDINGS = [
    "Is there anything specific about this you'd like to know?",
    "Does that help with what you were looking for?",
    "Would you like more details on any part of this?",
    "Is there anything else you'd like to know?",
]


def _product_suggestions(history: Sequence[Message]) -> List[str]:
    mentioned = mentioned_products(history)
    if mentioned:
        suggestions = []
        if not mentioned.get("supportbot"):
            suggestions.append("Tell me about SupportBot Pro")
        if not mentioned.get("knowledge_hub"):
            suggestions.append("What features does Knowledge Hub include?")
        if not mentioned.get("enterprise"):
            suggestions.append("How much does the Enterprise Suite cost?")
        if len(suggestions) < 2:
            suggestions.append("Can I try your products before purchasing?")
    else:
        suggestions = [
            "What features does SupportBot Pro include?",
            "How much does the Enterprise Suite cost?",
            "Can I try your products before purchasing?",
        ]
    if len(mentioned) > 1:
        suggestions.append("How do your products integrate with each other?")
    return suggestions


def _account_suggestions(history: Sequence[Message]) -> List[str]:
    suggestions = [
        "How do I change my email address?",
        "Can I set up two-factor authentication?",
        "What is your data retention policy?",
    ]
    if mentioned_products(history).get("enterprise"):
        suggestions.append("How does SSO work with the Enterprise Suite?")
    return suggestions


def build_suggestions(
    result: MatchResult,
    history: Sequence[Message],
    sentiment: str,
    rng: random.Random,
) -> List[str]:
    """Context-aware follow-up questions when the scan found no secondary matches."""
    answer = result.answer.lower()
    if result.source_type == "faq" and "product" in answer:
        suggestions = _product_suggestions(history)
    elif result.source_type == "faq" and ("password" in answer or "account" in answer):
        suggestions = _account_suggestions(history)
    elif result.source_type == "doc" and sentiment == "confused":
        suggestions = [
            "Can you explain that in simpler terms?",
            "What products do you offer?",
            "How do I contact a human support agent?",
        ]
    elif result.source_type == "doc":
        suggestions = [
            "What products do you offer?",
            "How do I contact support?",
            "Where can I find pricing information?",
        ]
    elif sentiment in ("frustrated", "negative"):
        suggestions = [
            "What makes your AI support different?",
            "Do you offer any discounts?",
            "How quickly can I get started?",
        ]
    else:
        suggestions = [
            "Tell me about your products",
            "How do your pricing plans work?",
            "What makes your AI support different?",
        ]

    padding = [q for q in PADDING_QUESTIONS if q not in suggestions]
    rng.shuffle(padding)
    while len(suggestions) < MAX_SUGGESTIONS and padding:
        suggestions.append(padding.pop())
    return suggestions[:MAX_SUGGESTIONS]


def add_conversational_ending(answer: str, rng: random.Random) -> str:
    if "Would you like" in answer or "Can I help" in answer or answer.endswith("?"):
        return answer
    return f"{answer} {rng.choice(CONVERSATIONAL_ENDINGS)}"


def build_metadata(
    history: Sequence[Message],
    sentiment: str,
    response_time_ms: int,
    now: float,
) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "responseTime": response_time_ms,
        "userSentiment": sentiment,
        "timestamp": datetime.fromtimestamp(now, tz=timezone.utc).isoformat(),
    }
    if len(history) >= SUMMARY_MIN_HISTORY:
        metadata["conversationSummary"] = conversation_summary(history)
        metadata["topicChain"] = topic_chain(history)
    return metadata


def enrich_answer(
    result: MatchResult,
    related: Sequence[MatchResult],
    history: Sequence[Message],
    topic: str,
    sentiment: str,
    rng: random.Random,
) -> MatchResult:
    if related:
        result.related_questions = [m.source_title for m in related][:MAX_SUGGESTIONS]
    else:
        result.related_questions = build_suggestions(result, history, sentiment, rng)

    result.answer = add_conversational_ending(result.answer, rng)

    if not result.related_questions or len(result.related_questions) < MAX_SUGGESTIONS:
        result.related_questions = smart_recommendations(history, topic)
    return result
