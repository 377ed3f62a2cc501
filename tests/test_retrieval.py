from portal.intents import classify_intent, expand_query
from portal.retrieval import KnowledgeScanner, entry_to_match
from portal.types import KnowledgeBase, KnowledgeEntry, SourceType


def _scan(knowledge, query):
    intent = classify_intent(query).intent
    return KnowledgeScanner(knowledge).scan(query, expand_query(query, intent), intent)


def test_business_hours_picks_faq(knowledge):
    result = _scan(knowledge, "what are your business hours?")
    assert result.best.source_id == "faq-2"
    assert result.best.source == "FAQ"
    assert result.best.confidence >= 80


def test_password_reset_picks_faq(knowledge):
    result = _scan(knowledge, "how do i reset my password?")
    assert result.best.source_id == "faq-1"
    assert result.best.confidence >= 80


def test_related_matches_are_capped_and_sorted(knowledge):
    result = _scan(knowledge, "what are your business hours?")
    assert len(result.related) <= 3
    confidences = [m.confidence for m in result.related]
    assert confidences == sorted(confidences, reverse=True)
    assert all(c > 60 for c in confidences)


def test_escalation_answer_carries_path():
    entry = KnowledgeEntry(
        id="esc-9",
        kind=SourceType.ESCALATION,
        title="Billing Dispute",
        body="Sorry about that.",
        source="Escalation Playbook",
        escalation_path="Tier 1 → Billing",
    )
    match = entry_to_match(entry, 70)
    assert match.answer == "Sorry about that.\n\nEscalation Path: Tier 1 → Billing"
    assert match.source == "Escalation"


def test_demoted_best_becomes_secondary():
    def faq(entry_id, title):
        return KnowledgeEntry(id=entry_id, kind=SourceType.FAQ, title=title, body=title, source="test")

    knowledge = KnowledgeBase(
        faqs=[faq("a", "reset password email"), faq("b", "reset password")],
        docs=[],
        rules=[],
        escalations=[],
    )
    result = KnowledgeScanner(knowledge).scan("reset password", "reset password", "product_info")
    assert result.best.source_id == "b"
    assert [m.source_id for m in result.related] == ["a"]


def test_nothing_related_returns_no_best():
    knowledge = KnowledgeBase(
        faqs=[KnowledgeEntry(id="a", kind=SourceType.FAQ, title="Refund Policy", body="Refunds", source="t")],
        docs=[],
        rules=[],
        escalations=[],
    )
    result = KnowledgeScanner(knowledge).scan("business hours", "business hours", "product_info")
    assert result.best is None
    assert result.related == []
