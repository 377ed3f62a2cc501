import logging
from typing import List

from .scoring import calculate_confidence
from .text import is_related_to_topic
from .types import SOURCE_LABELS, KnowledgeBase, KnowledgeEntry, MatchResult, ScanResult

logger = logging.getLogger(__name__)


def entry_to_match(entry: KnowledgeEntry, confidence: int) -> MatchResult:
    return MatchResult(
        answer=entry.answer,
        source=SOURCE_LABELS[entry.kind],
        source_type=entry.kind.value,
        source_id=entry.id,
        source_title=entry.title,
        confidence=confidence,
    )


class KnowledgeScanner:
    def __init__(self, knowledge: KnowledgeBase, related_min_confidence: int = 60, max_related: int = 3) -> None:
        self.knowledge = knowledge
        self.related_min_confidence = related_min_confidence
        self.max_related = max_related

    @staticmethod
    def is_candidate(entry: KnowledgeEntry, expanded_query: str) -> bool:
        return any(is_related_to_topic(text, expanded_query) for text in (entry.title, entry.question, entry.body))

    def scan(self, query: str, expanded_query: str, intent: str) -> ScanResult:
        best = None
        secondary: List[MatchResult] = []

        for collection in self.knowledge.collections():
            for entry in collection:
                if not self.is_candidate(entry, expanded_query):
                    continue
                confidence = calculate_confidence(
                    query,
                    expanded_query,
                    entry.match_title,
                    entry.body,
                    entry.kind.value,
                    intent,
                )
                if confidence > (best.confidence if best else 0):
                    if best is not None and best.confidence > self.related_min_confidence:
                        secondary.append(best)
                    best = entry_to_match(entry, confidence)
                elif confidence > self.related_min_confidence:
                    secondary.append(entry_to_match(entry, confidence))

        secondary.sort(key=lambda m: m.confidence, reverse=True)
        if best is not None:
            logger.debug("Best match %s (%s) for %r", best.source_id, best.confidence, query)
        return ScanResult(best=best, related=secondary[: self.max_related])
