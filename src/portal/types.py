from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SourceType(str, Enum):
    FAQ = "faq"
    DOC = "doc"
    RULE = "rule"
    ESCALATION = "escalation"


SOURCE_LABELS = {
    SourceType.FAQ: "FAQ",
    SourceType.DOC: "Docs",
    SourceType.RULE: "Rulebook",
    SourceType.ESCALATION: "Escalation",
}

INTENTS = ("product_info", "billing", "technical_issue", "account_settings", "escalation_needed")


@dataclass
class Message:
    role: str
    content: str


@dataclass
class KnowledgeEntry:
    id: str
    kind: SourceType
    title: str
    body: str
    source: str
    question: str = ""
    escalation_path: Optional[str] = None

    @property
    def match_title(self) -> str:
        if self.question:
            return f"{self.title} {self.question}"
        return self.title

    @property
    def answer(self) -> str:
        if self.kind is SourceType.ESCALATION and self.escalation_path:
            return f"{self.body}\n\nEscalation Path: {self.escalation_path}"
        return self.body


@dataclass
class KnowledgeBase:
    faqs: List[KnowledgeEntry]
    docs: List[KnowledgeEntry]
    rules: List[KnowledgeEntry]
    escalations: List[KnowledgeEntry]

    def collections(self) -> List[List[KnowledgeEntry]]:
        return [self.faqs, self.docs, self.rules, self.escalations]

    def __len__(self) -> int:
        return sum(len(c) for c in self.collections())


@dataclass
class Classification:
    intent: str
    answer: str
    escalation_needed: Optional[bool] = None
    reason: Optional[str] = None
    escalation_path: Optional[str] = None

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"intent": self.intent, "answer": self.answer}
        if self.escalation_needed:
            payload["escalation_needed"] = True
            payload["reason"] = self.reason
            payload["escalation_path"] = self.escalation_path
        return payload


@dataclass
class MatchResult:
    answer: str
    source: str
    source_type: str
    source_id: str
    source_title: str
    confidence: int
    related_questions: Optional[List[str]] = None
    metadata: Optional[Dict[str, Any]] = None

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "answer": self.answer,
            "source": self.source,
            "sourceType": self.source_type,
            "sourceId": self.source_id,
            "sourceTitle": self.source_title,
            "confidence": self.confidence,
        }
        if self.related_questions is not None:
            payload["relatedQuestions"] = list(self.related_questions)
        if self.metadata is not None:
            payload["metadata"] = dict(self.metadata)
        return payload


@dataclass
class ScanResult:
    best: Optional[MatchResult]
    related: List[MatchResult] = field(default_factory=list)


@dataclass
class QueryRecord:
    timestamp: float
    query: str
    response_source: str
    confidence: int
    intent: str
    successful: bool
