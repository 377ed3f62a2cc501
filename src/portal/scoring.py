import math
from typing import Dict, Tuple

from .text import extract_keywords, jaccard_similarity

TITLE_WEIGHT = 0.7
CONTENT_WEIGHT = 0.3
INTENT_BONUS = 0.15
PHRASE_BONUS = 0.1
SHORT_QUERY_LEN = 5
SHORT_QUERY_FLOOR = 0.4

# intent -> title words that earn the intent bonus
INTENT_TITLE_HINTS: Dict[str, Tuple[str, ...]] = {
    "billing": ("payment", "billing"),
    "technical_issue": ("error", "problem"),
    "account_settings": ("account", "settings"),
}


def intent_matches(user_intent: str, title: str, source_type: str) -> bool:
    if user_intent == "escalation_needed":
        return source_type == "escalation"
    hints = INTENT_TITLE_HINTS.get(user_intent, ())
    lowered = title.lower()
    return any(hint in lowered for hint in hints)


def calculate_confidence(
    query: str,
    expanded_query: str,
    title: str,
    content: str,
    source_type: str,
    user_intent: str,
) -> int:
    query_words = extract_keywords(query)
    expanded_words = extract_keywords(expanded_query)
    title_words = extract_keywords(title)
    content_words = extract_keywords(content)

    title_sim = max(
        jaccard_similarity(query_words, title_words),
        jaccard_similarity(expanded_words, title_words),
    )
    content_sim = max(
        jaccard_similarity(query_words, content_words),
        jaccard_similarity(expanded_words, content_words),
    )
    score = TITLE_WEIGHT * title_sim + CONTENT_WEIGHT * content_sim

    if intent_matches(user_intent, title, source_type):
        score += INTENT_BONUS

    if query in title.lower() or query in content.lower():
        score += PHRASE_BONUS

    if len(query) < SHORT_QUERY_LEN and score > 0:
        score = max(score, SHORT_QUERY_FLOOR)

    score = min(max(score, 0.0), 1.0)
    # half-up, not banker's rounding
    return int(math.floor(score * 100 + 0.5))
