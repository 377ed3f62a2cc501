"""portal.topics

Conversation topic tracking over the client-supplied history.

The tracker only picks canned follow-ups for greetings, acknowledgments and
short commands; it never changes knowledge ranking. Everything here is
recomputed per request from the history list.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .types import Message

HISTORY_WINDOW = 6
MESSAGE_WEIGHTS = (0.5, 0.7, 0.8, 0.9, 1.0, 1.2)
QUESTION_TYPE_SHARE = 0.7

TOPIC_PATTERNS: Dict[str, Dict[str, List[str]]] = {
    "products": {
        "keywords": ["product", "supportbot", "knowledge hub", "agent assist", "analytics", "enterprise",
                     "bot", "offer", "sell", "service", "solution", "feature", "capability"],
        "phrases": ["what do you offer", "what products", "tell me about", "features of"],
    },
    "pricing": {
        "keywords": ["price", "pricing", "cost", "subscription", "fee", "payment", "plan", "billing",
                     "dollar", "money", "expensive", "cheap", "afford", "$"],
        "phrases": ["how much", "what is the cost", "pricing plan"],
    },
    "delivery": {
        "keywords": ["delivery", "shipping", "ship", "deliver", "sent", "send", "mail", "package",
                     "receive", "download", "access", "implement", "setup", "install"],
        "phrases": ["how do i get", "when will i receive", "how is it delivered"],
    },
    "account": {
        "keywords": ["account", "login", "password", "profile", "settings", "email", "user", "admin",
                     "permission", "role", "authentication", "security"],
        "phrases": ["sign in", "log in", "my account", "reset password"],
    },
    "technical": {
        "keywords": ["issue", "problem", "error", "bug", "broken", "crash", "fix", "help", "support",
                     "troubleshoot", "doesn't work", "not working", "failed"],
        "phrases": ["having trouble", "doesn't work", "how to fix", "need help with"],
    },
}

PRODUCT_NAMES = ["supportbot pro", "knowledge hub", "agent assist", "analytics dashboard", "enterprise suite"]
PRODUCT_NAME_RE = re.compile("|".join(PRODUCT_NAMES), re.I)

QUESTION_TYPES = [
    ("products", re.compile(r"what (is|are|do) you (have|offer|sell|provide)", re.I)),
    ("pricing", re.compile(r"how much|pricing|cost|price", re.I)),
    ("delivery", re.compile(r"how (do|can|will) (i|we) (get|receive|access)", re.I)),
]


@dataclass
class TopicState:
    topic: str = "general"
    weights: Dict[str, float] = field(default_factory=dict)
    question_type: Optional[str] = None
    last_assistant: str = ""
    last_user: str = ""

    @property
    def product_number(self) -> Optional[int]:
        if self.topic.startswith("product_"):
            return int(self.topic.split("_")[1])
        return None


def to_messages(history: Optional[Sequence]) -> List[Message]:
    messages: List[Message] = []
    for msg in history or []:
        if isinstance(msg, Message):
            messages.append(msg)
        elif isinstance(msg, dict):
            role = msg.get("role")
            content = msg.get("content")
            if role and isinstance(content, str):
                messages.append(Message(role=role, content=content))
    return messages


def track_topic(history: Sequence[Message], query: str) -> TopicState:
    state = TopicState()
    if not history:
        return state

    recent = list(history)[-HISTORY_WINDOW:]
    for msg in reversed(recent):
        content = msg.content.lower()
        if msg.role == "assistant" and not state.last_assistant:
            state.last_assistant = content
        if msg.role == "user" and not state.last_user and content != query:
            state.last_user = content
        if state.last_assistant and state.last_user:
            break

    weights = {topic: 0.0 for topic in TOPIC_PATTERNS}
    if state.last_assistant:
        for topic, patterns in TOPIC_PATTERNS.items():
            weights[topic] += 2 * sum(1 for k in patterns["keywords"] if k in state.last_assistant)
            weights[topic] += 3 * sum(1 for p in patterns["phrases"] if p in state.last_assistant)
        if PRODUCT_NAME_RE.search(state.last_assistant):
            weights["products"] += 5

    for msg, weight in zip(recent, MESSAGE_WEIGHTS):
        content = msg.content.lower()
        if "?" in content:
            for question_type, pattern in QUESTION_TYPES:
                if pattern.search(content):
                    state.question_type = question_type
                    break
        for topic, patterns in TOPIC_PATTERNS.items():
            weights[topic] += weight * sum(1 for k in patterns["keywords"] if k in content)
            weights[topic] += 2 * weight * sum(1 for p in patterns["phrases"] if p in content)

    max_weight = 0.0
    for topic, weight in weights.items():
        if weight > max_weight:
            state.topic, max_weight = topic, weight

    if state.question_type and weights[state.question_type] > max_weight * QUESTION_TYPE_SHARE:
        state.topic = state.question_type

    if state.topic == "products" and state.last_assistant:
        for number, name in enumerate(PRODUCT_NAMES, start=1):
            if name in state.last_assistant:
                state.topic = f"product_{number}"
                break

    state.weights = weights
    return state


def topic_chain(history: Sequence[Message]) -> List[str]:
    if len(history) < 2:
        return ["general"]

    chain = ["initial"]
    for msg in list(history)[-10:]:
        if msg.role != "user":
            continue
        content = msg.content.lower()
        if re.search(r"product|supportbot|knowledge hub|agent|analytics|enterprise", content):
            chain.append("products")
        elif re.search(r"price|cost|pricing|fee|subscription|payment", content):
            chain.append("pricing")
        elif re.search(r"delivery|implementation|setup|install", content):
            chain.append("implementation")
        elif re.search(r"account|login|password|security", content):
            chain.append("account")
        elif re.search(r"help|support|issue|problem|error", content):
            chain.append("support")
    return [topic for i, topic in enumerate(chain) if i == 0 or topic != chain[i - 1]]


SUMMARY_TOPICS = [
    ("products", re.compile(r"product|supportbot|knowledge hub|agent assist|analytics|enterprise", re.I)),
    ("pricing", re.compile(r"price|cost|pricing|fee|subscription|payment", re.I)),
    ("implementation", re.compile(r"implementation|setup|install|integrate|delivery|training", re.I)),
    ("account settings", re.compile(r"account|login|password|security|user|setting", re.I)),
]


def conversation_summary(history: Sequence[Message]) -> str:
    if len(history) < 3:
        return "Initial conversation"
    user_messages = [msg.content.lower() for msg in history if msg.role == "user"]
    topics = [name for name, pattern in SUMMARY_TOPICS if any(pattern.search(m) for m in user_messages)]
    if not topics:
        return "General information discussion"
    return f"Conversation about {', '.join(topics)}"


DEFAULT_RECOMMENDATIONS = [
    "What products do you offer?",
    "Tell me about your pricing",
    "How does the implementation process work?",
]

TOPIC_RECOMMENDATIONS: Dict[str, List[str]] = {
    "products": [
        "What makes SupportBot Pro different from competitors?",
        "Can I upgrade or downgrade my plan later?",
        "Do you offer any product bundles or discounts?",
    ],
    "product_1": [
        "What languages does SupportBot Pro support?",
        "How does SupportBot Pro handle complex queries?",
        "Can SupportBot Pro integrate with our existing CRM?",
    ],
    "product_2": [
        "How does Knowledge Hub organize our content?",
        "Can Knowledge Hub import our existing documentation?",
        "How does the AI search in Knowledge Hub work?",
    ],
    "product_3": [
        "How does Agent Assist improve agent efficiency?",
        "What metrics does Agent Assist track?",
        "How does the AI suggest responses in Agent Assist?",
    ],
    "product_4": [
        "What dashboards are included in Analytics?",
        "Can we create custom reports in the Analytics Dashboard?",
        "How does the Analytics Dashboard help identify trends?",
    ],
    "product_5": [
        "What additional features come with the Enterprise Suite?",
        "What kind of dedicated support is included?",
        "Can the Enterprise Suite be customized for our needs?",
    ],
    "pricing": [
        "Do you offer annual billing discounts?",
        "Are there any hidden fees or charges?",
        "Do you have special pricing for startups or non-profits?",
    ],
    "delivery": [
        "What training do you provide during implementation?",
        "How long does the typical implementation take?",
        "Do you offer ongoing support after implementation?",
    ],
    "technical": [
        "What hours is your support team available?",
        "Do you have a knowledge base for common issues?",
        "What's your guaranteed response time for critical issues?",
    ],
    "account": [
        "How do I add team members to my account?",
        "What security features do you offer?",
        "Can we set up single sign-on (SSO) with our system?",
    ],
}


def smart_recommendations(history: Sequence[Message], topic: str) -> List[str]:
    if len(history) < 2:
        return list(DEFAULT_RECOMMENDATIONS)
    return list(TOPIC_RECOMMENDATIONS.get(topic, DEFAULT_RECOMMENDATIONS))


PRODUCT_MENTIONS = {
    "supportbot": "supportbot",
    "knowledge_hub": "knowledge hub",
    "agent_assist": "agent assist",
    "analytics": "analytics",
    "enterprise": "enterprise",
}


def mentioned_products(history: Sequence[Message]) -> Dict[str, bool]:
    found: Dict[str, bool] = {}
    for msg in history:
        content = msg.content.lower()
        for key, needle in PRODUCT_MENTIONS.items():
            if needle in content:
                found[key] = True
    return found
