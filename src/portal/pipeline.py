import logging
import random
import re
import time
from typing import Any, Callable, Dict, Optional, Sequence

from .answerer import build_metadata, enrich_answer
from .canned import canned
from .errors import ValidationError
from .fastpath import CONTEXT_RULES, OPENING_RULES, SELECTION_RULES, QueryContext, run_rules
from .intents import classify_intent, expand_query
from .retrieval import KnowledgeScanner
from .sentiment import analyze_sentiment
from .store import PortalStore
from .text import normalize_text
from .topics import to_messages, track_topic
from .types import KnowledgeBase, MatchResult

logger = logging.getLogger(__name__)

INVALID_QUESTION = "Please provide a valid question."

# tried in order when the knowledge scan finds nothing
FALLBACK_PATTERNS = [
    (re.compile(r"(cost|price|pricing|how much|subscription|fee)"), "pricing-info", 90),
    (re.compile(r"(product|products|offer|sell|available)"), "products-overview", 85),
    (re.compile(r"(delivery|shipping|ship|deliver|mail|package|sent|send)"), "delivery-info", 90),
]


def validate_question(question: Any) -> str:
    if not isinstance(question, str) or not question.strip():
        raise ValidationError(INVALID_QUESTION)
    return question


def fallback_answer(normalized: str) -> MatchResult:
    for pattern, key, confidence in FALLBACK_PATTERNS:
        if pattern.search(normalized):
            return canned(key, confidence=confidence)
    return canned("default")


class QueryPipeline:
    def __init__(
        self,
        config: Dict[str, Any],
        knowledge: KnowledgeBase,
        store: PortalStore,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.knowledge = knowledge
        self.store = store
        self.rng = rng or random.Random()
        self.clock = clock
        selector_cfg = config.get("selector", {})
        self.scanner = KnowledgeScanner(
            knowledge,
            related_min_confidence=selector_cfg.get("related_min_confidence", 60),
            max_related=selector_cfg.get("max_related", 3),
        )

    def respond(
        self,
        question: Any,
        history: Optional[Sequence] = None,
        user_id: Optional[str] = None,
        session_data: Optional[Dict[str, Any]] = None,
    ) -> MatchResult:
        started = self.clock()
        question = validate_question(question)
        normalized = normalize_text(question)
        messages = to_messages(history)
        ctx = QueryContext(
            question=question,
            normalized=normalized,
            sentiment=analyze_sentiment(normalized),
            history=messages,
            user_id=user_id,
            session_data=session_data or {},
            knowledge=self.knowledge,
        )

        hit = run_rules(OPENING_RULES, ctx)
        if hit:
            rule, result = hit
            logger.debug("Fast path %s for %r", rule.name, normalized)
            if rule.name == "greeting":
                result.metadata["responseTime"] = self._elapsed_ms(started)
            self._record(question, result)
            return result

        cached = self.store.cache.get(normalized)
        if cached is not None:
            logger.debug("Cache hit for %r", normalized)
            self._record(question, cached)
            return cached

        hit = run_rules(SELECTION_RULES, ctx)
        if hit:
            return self._finish_fast_path(hit, ctx, question)

        ctx.topic = track_topic(messages, normalized)
        logger.debug("Conversation topic %s for %r", ctx.topic.topic, normalized)

        hit = run_rules(CONTEXT_RULES, ctx)
        if hit:
            return self._finish_fast_path(hit, ctx, question)

        classification = classify_intent(normalized)
        expanded = expand_query(normalized, classification.intent)
        scan = self.scanner.scan(normalized, expanded, classification.intent)
        result = scan.best or fallback_answer(normalized)

        enrich_answer(result, scan.related, messages, ctx.topic.topic, ctx.sentiment, self.rng)
        result.metadata = build_metadata(messages, ctx.sentiment, self._elapsed_ms(started), self.clock())

        self._record(question, result, classification.intent)
        self.store.cache.set(normalized, result)
        self.store.cache.maybe_sweep()
        return result

    def _finish_fast_path(self, hit, ctx: QueryContext, question: str) -> MatchResult:
        rule, result = hit
        logger.debug("Fast path %s for %r", rule.name, ctx.normalized)
        self._record(question, result)
        if rule.cacheable:
            self.store.cache.set(ctx.normalized, result)
        return result

    def _elapsed_ms(self, started: float) -> int:
        return max(0, int(round((self.clock() - started) * 1000)))

    def _record(self, question: str, result: MatchResult, intent: Optional[str] = None) -> None:
        try:
            if intent is None:
                intent = classify_intent(question).intent
            self.store.queries.add(question, result.source, result.confidence, intent)
        except Exception:
            logger.exception("Failed to record analytics for %r", question)
