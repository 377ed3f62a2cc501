"""portal.intents

Keyword-bag intent classification and intent-driven query expansion.

Scoring is a plain count of keyword substrings per intent. The first intent
in declaration order wins ties, and a message with no hits falls back to
``product_info``.
"""

from typing import Dict, List, Tuple

from .types import Classification

INTENT_KEYWORDS: Dict[str, List[str]] = {
    "product_info": [
        "product", "products", "service", "services", "offer", "pricing",
        "feature", "features", "what do you", "what does", "tell me about",
        "how does", "subscription", "plan", "package", "option", "options",
        "catalog", "want to see", "show me", "list", "info about", "information",
        "tell me more", "available", "details", "what are", "learn about", "more about",
    ],
    "billing": [
        "bill", "billing", "invoice", "payment", "charge", "refund", "credit",
        "debit", "transaction", "receipt", "subscription fee", "monthly fee",
        "cancel subscription", "update payment", "payment method", "price", "cost",
        "purchase", "buy", "subscribe", "how much", "discount", "renewal",
    ],
    "technical_issue": [
        "error", "issue", "problem", "bug", "glitch", "crash", "not working",
        "broken", "fix", "trouble", "failed", "can't access", "doesn't work",
        "loading", "connection", "slow", "performance", "login issue", "password reset",
        "troubleshoot", "help with", "support for", "resolve", "solution",
    ],
    "account_settings": [
        "account", "profile", "settings", "preferences", "update", "change",
        "modify", "edit", "personal", "information", "email", "password",
        "username", "login", "sign in", "sign out", "log out", "delete account",
        "manage my", "my account", "user", "details", "contact info",
    ],
    "escalation_needed": [
        "manager", "supervisor", "escalate", "speak to someone", "human",
        "representative", "agent", "unhappy", "unsatisfied", "complaint",
        "dissatisfied", "disappointed", "frustrated", "urgent", "immediately",
        "not helpful", "didn't solve", "need more help", "wrong answer",
        "incorrect", "not working", "talk to person", "real person",
    ],
}

DIRECT_PRODUCT_PATTERNS = [
    "wanna see the products",
    "want to see the products",
    "show me products",
    "show products",
    "list products",
    "what products",
    "your products",
    "what do you offer",
    "what do you sell",
]

PRODUCT_CATALOGUE_ANSWER = (
    "Our products include: SupportBot Pro ($499/month) - AI chatbot with 24/7 support capabilities, "
    "Knowledge Hub ($299/month) - Smart knowledge management system, Agent Assist ($199/month) - "
    "AI-powered tools for support teams, Analytics Dashboard ($149/month) - Real-time metrics and "
    "reporting, and Enterprise Suite ($1499/month) - Complete solution with priority support."
)

INTENT_ANSWERS: Dict[str, str] = {
    "product_info": (
        "I'd be happy to tell you about our products and services. We offer SupportBot Pro ($499/month), "
        "Knowledge Hub ($299/month), Agent Assist ($199/month), Analytics Dashboard ($149/month), and "
        "Enterprise Suite ($1499/month). Each product is designed to enhance your customer support "
        "experience with AI-powered capabilities."
    ),
    "billing": (
        "It seems like you have a question about billing. I can help you with invoices, payment methods, "
        "subscription changes, and other billing-related matters."
    ),
    "technical_issue": (
        "I understand you're experiencing a technical issue. Let me help you troubleshoot this problem to "
        "get everything working smoothly again."
    ),
    "account_settings": (
        "For account-related questions, I can guide you through updating your profile information, "
        "changing settings, or managing your account preferences."
    ),
    "escalation_needed": (
        "I apologize for any inconvenience. It seems this issue requires special attention. I'll help "
        "connect you with a support specialist who can better assist with your specific situation."
    ),
}

# (intent that also scored, reason, path), checked in order
ESCALATION_ROUTES: List[Tuple[str, str, str]] = [
    ("billing", "Billing issue beyond support tier", "Support Agent → Billing Team → Finance Lead"),
    (
        "technical_issue",
        "Complex technical issue requiring specialist intervention",
        "Support Agent → Technical Support → Senior Developer",
    ),
    (
        "account_settings",
        "Account management issue requiring elevated permissions",
        "Support Agent → Account Management Team → Security Lead",
    ),
]
DEFAULT_ESCALATION = (
    "Customer satisfaction issue requiring immediate attention",
    "Support Agent → Customer Success Manager",
)
URGENT_ESCALATION = ("Urgent issue requiring immediate resolution", "Support Agent → Incident Response Team")
URGENT_KEYWORDS = ("urgent", "immediately")

EXPANSION_TERMS: Dict[str, str] = {
    "billing": "payment invoice money cost price financial transaction",
    "technical_issue": "error bug problem issue broken not working failure crash help fix",
    "product_info": "product service feature plan offering package solution tools",
    "account_settings": "account profile settings manage change password email login security",
}
COMMON_EXPANSION = "help support guide how assistance information"


def score_intents(message: str) -> Dict[str, int]:
    scores = {intent: 0 for intent in INTENT_KEYWORDS}
    for intent, keywords in INTENT_KEYWORDS.items():
        for keyword in keywords:
            if keyword in message:
                scores[intent] += 1
    return scores


def pick_intent(scores: Dict[str, int]) -> str:
    best_intent = "product_info"
    best_score = 0
    for intent, score in scores.items():
        if score > best_score:
            best_intent, best_score = intent, score
    return best_intent


def escalation_route(message: str, scores: Dict[str, int]) -> Tuple[str, str]:
    if any(keyword in message for keyword in URGENT_KEYWORDS):
        return URGENT_ESCALATION
    for intent, reason, path in ESCALATION_ROUTES:
        if scores.get(intent, 0) > 0:
            return reason, path
    return DEFAULT_ESCALATION


def classify_intent(message: str) -> Classification:
    normalized = message.lower() if isinstance(message, str) else ""

    for pattern in DIRECT_PRODUCT_PATTERNS:
        if pattern in normalized:
            return Classification(intent="product_info", answer=PRODUCT_CATALOGUE_ANSWER)

    scores = score_intents(normalized)
    intent = pick_intent(scores)
    result = Classification(intent=intent, answer=INTENT_ANSWERS[intent])
    if intent == "escalation_needed":
        result.escalation_needed = True
        result.reason, result.escalation_path = escalation_route(normalized, scores)
    return result


def expand_query(query: str, intent: str) -> str:
    expanded = query
    terms = EXPANSION_TERMS.get(intent)
    if terms:
        expanded += " " + terms
    return f"{expanded} {COMMON_EXPANSION}"


EXAMPLE_SCENARIOS = {"billing": "billing", "technical": "technical_issue", "account": "account_settings"}


def escalation_example(scenario: str) -> Classification:
    """Canned escalation payload for the demo endpoint."""
    routes = {intent: (reason, path) for intent, reason, path in ESCALATION_ROUTES}
    if scenario == "urgent":
        reason, path = URGENT_ESCALATION
    elif scenario in EXAMPLE_SCENARIOS:
        reason, path = routes[EXAMPLE_SCENARIOS[scenario]]
    else:
        reason, path = DEFAULT_ESCALATION
    return Classification(
        intent="escalation_needed",
        answer=INTENT_ANSWERS["escalation_needed"],
        escalation_needed=True,
        reason=reason,
        escalation_path=path,
    )
