"""portal.fastpath

Ordered (predicate, builder) rules that answer common inputs without a
knowledge scan. Rules are grouped into stages; within a stage the first rule
whose predicate holds and whose builder returns a result wins.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .canned import ACKNOWLEDGMENT_REPLIES, COMMAND_REPLIES, canned, product_detail
from .sentiment import CONFIDENCE_ADJUSTMENTS
from .text import fuzzy_contains
from .topics import TopicState
from .types import KnowledgeBase, MatchResult, Message

GREETING_RE = re.compile(r"^(hello|hi|hey|greetings|howdy|hola|morning|evening|afternoon)\b", re.I)
DELIVERY_WORD_RE = re.compile(r"\b(deliver|shipping|ship|deliv|shipp)\b", re.I)
DELIVERY_HOW_RE = re.compile(r"how (do|can|will) (i|we|you) (get|receive|access|download)", re.I)
PRICING_RE = re.compile(r"\b(price|cost|pricing|subscription|fee|payment|(how much))\b", re.I)
PRODUCT_NUMBER_RE = re.compile(r"^[1-5]$")
ORDINAL_RE = re.compile(r"\b(first|1st|second|2nd|third|3rd|fourth|4th|fifth|5th|product ?[1-5])\b", re.I)
ACKNOWLEDGMENT_RE = re.compile(
    r"^(ok|okay|sure|yes|no|thanks|thank you|thx|good|great|nice|cool|got it|get|done)$", re.I
)
COMMAND_RE = re.compile(r"^(show|tell|list|explain|info|details|help|about)", re.I)
MORE_INFO_RE = re.compile(r"about|details|more|features|explain|info", re.I)
DELIVERY_KEYWORD_RE = re.compile(r"delivery|shipping|send|download|receive|access", re.I)

ORDINALS = {
    "first": 1, "1st": 1,
    "second": 2, "2nd": 2,
    "third": 3, "3rd": 3,
    "fourth": 4, "4th": 4,
    "fifth": 5, "5th": 5,
}

DELIVERY_TERMS = [
    "delivery", "shipping", "ship", "deliver", "sent", "send",
    "mail", "package", "dispatch", "transit", "arrival", "receive",
    "get product", "download", "access", "implement", "setup",
]
PRODUCT_TERMS = ["product", "products", "offer", "service", "services", "sell", "selling", "show", "list", "catalog"]
PRODUCT_FAQ_IDS = ("faq-7", "faq-8", "faq-9", "faq-11")

GREETING_RELATED = [
    "What products do you offer?",
    "How much do your products cost?",
    "Tell me about SupportBot Pro",
]
CATALOGUE_RELATED = [
    "Tell me about SupportBot Pro",
    "What features are included in the Enterprise Suite?",
    "Do you offer a free trial?",
]


@dataclass
class QueryContext:
    question: str
    normalized: str
    sentiment: str = "neutral"
    history: List[Message] = field(default_factory=list)
    user_id: Optional[str] = None
    session_data: Dict[str, Any] = field(default_factory=dict)
    topic: TopicState = field(default_factory=TopicState)
    knowledge: Optional[KnowledgeBase] = None

    @property
    def is_short(self) -> bool:
        return len(self.normalized.split(" ")) <= 2

    @property
    def is_numeric(self) -> bool:
        return bool(PRODUCT_NUMBER_RE.match(self.normalized))

    @property
    def is_command(self) -> bool:
        return bool(COMMAND_RE.match(self.normalized))

    @property
    def is_returning_user(self) -> bool:
        return bool(self.user_id and self.session_data.get("previousSessions"))


@dataclass
class FastPathRule:
    name: str
    matches: Callable[[QueryContext], bool]
    build: Callable[[QueryContext], Optional[MatchResult]]
    cacheable: bool = False


def _greeting(ctx: QueryContext) -> MatchResult:
    greeting = "Hello! Welcome to our AI Support Portal."
    if ctx.is_returning_user:
        greeting = "Welcome back to our AI Support Portal!"
        prefs = ctx.session_data.get("preferences")
        favorite = prefs.get("favoriteProduct") if isinstance(prefs, dict) else None
        if favorite:
            greeting += f" I remember you were interested in our {favorite}. "

    sentiment_note = ""
    if ctx.sentiment == "frustrated":
        sentiment_note = " I understand you might be having some challenges. I'm here to help resolve them quickly."
    elif ctx.sentiment == "urgent":
        sentiment_note = " I'll do my best to assist you right away."

    confidence = min(100, 98 + CONFIDENCE_ADJUSTMENTS.get(ctx.sentiment, 0))
    return MatchResult(
        answer=(
            f"{greeting}{sentiment_note} How can I help you today? "
            "You can ask about our products, account settings, or technical support."
        ),
        source="System",
        source_type="doc",
        source_id="greeting",
        source_title="Greeting",
        confidence=confidence,
        related_questions=list(GREETING_RELATED),
        metadata={
            "userSentiment": ctx.sentiment,
            "personalized": ctx.is_returning_user,
            "aiConfidence": confidence,
        },
    )


def _is_delivery_question(ctx: QueryContext) -> bool:
    q = ctx.normalized
    return bool(DELIVERY_WORD_RE.search(q)) or "delivery" in q or "shipping" in q or bool(DELIVERY_HOW_RE.search(q))


def product_number(ctx: QueryContext) -> int:
    if ctx.is_numeric:
        return int(ctx.normalized)
    match = ORDINAL_RE.search(ctx.normalized)
    if not match:
        return 0
    token = match.group(1).lower()
    if token.startswith("product"):
        return int(token[-1])
    return ORDINALS.get(token, 0)


def _product_context(ctx: QueryContext) -> bool:
    return ctx.topic.product_number is not None and (ctx.is_short or ctx.is_command)


def _topic_command(ctx: QueryContext) -> Optional[MatchResult]:
    topic = ctx.topic.topic
    if topic == "products" or "product" in ctx.topic.last_assistant:
        return canned(COMMAND_REPLIES["products"])
    if topic in COMMAND_REPLIES:
        return canned(COMMAND_REPLIES[topic])
    return None


def _is_acknowledgment(ctx: QueryContext) -> bool:
    if ACKNOWLEDGMENT_RE.match(ctx.normalized):
        return True
    return ctx.is_short and not ctx.is_numeric and len(ctx.normalized) < 8


def _acknowledgment(ctx: QueryContext) -> MatchResult:
    return canned(ACKNOWLEDGMENT_REPLIES.get(ctx.topic.topic, "default-followup"))


def _mentions_delivery(ctx: QueryContext) -> bool:
    q = ctx.normalized
    return "deliv" in q or "shipp" in q or "ship" in q or bool(DELIVERY_KEYWORD_RE.search(q))


def _product_catalogue(ctx: QueryContext) -> Optional[MatchResult]:
    if ctx.knowledge is None:
        return None
    product_faqs = [faq for faq in ctx.knowledge.faqs if faq.id in PRODUCT_FAQ_IDS]
    if not product_faqs:
        return None
    best = product_faqs[0]
    for faq in product_faqs:
        title = faq.title.lower()
        if "i want to see" in title or "what products" in title:
            best = faq
            break
    return MatchResult(
        answer=best.body,
        source="FAQ",
        source_type="faq",
        source_id=best.id,
        source_title=best.title,
        confidence=95,
        related_questions=list(CATALOGUE_RELATED),
    )


# before the cache lookup; never cached
OPENING_RULES: List[FastPathRule] = [
    FastPathRule("greeting", lambda ctx: bool(GREETING_RE.match(ctx.normalized)), _greeting),
    FastPathRule("delivery", _is_delivery_question, lambda ctx: canned("delivery-info")),
    FastPathRule("pricing", lambda ctx: bool(PRICING_RE.search(ctx.normalized)), lambda ctx: canned("pricing-info")),
]

# after the cache lookup; independent of history
SELECTION_RULES: List[FastPathRule] = [
    FastPathRule(
        "product_selection",
        lambda ctx: product_number(ctx) > 0,
        lambda ctx: product_detail(product_number(ctx)),
        cacheable=True,
    ),
]

# need the tracked conversation topic
CONTEXT_RULES: List[FastPathRule] = [
    FastPathRule("product_context", _product_context, lambda ctx: product_detail(ctx.topic.product_number, 98)),
    FastPathRule("topic_command", lambda ctx: ctx.is_command and bool(MORE_INFO_RE.search(ctx.normalized)), _topic_command),
    FastPathRule("acknowledgment", _is_acknowledgment, _acknowledgment),
    FastPathRule("delivery_keywords", _mentions_delivery, lambda ctx: canned("delivery-details")),
    FastPathRule(
        "delivery_typo",
        lambda ctx: fuzzy_contains(ctx.normalized, DELIVERY_TERMS),
        lambda ctx: canned("delivery-details", confidence=90),
    ),
    FastPathRule(
        "product_catalogue",
        lambda ctx: fuzzy_contains(ctx.normalized, PRODUCT_TERMS),
        _product_catalogue,
        cacheable=True,
    ),
]


def run_rules(rules: List[FastPathRule], ctx: QueryContext) -> Optional[Tuple[FastPathRule, MatchResult]]:
    for rule in rules:
        if not rule.matches(ctx):
            continue
        result = rule.build(ctx)
        if result is not None:
            return rule, result
    return None
