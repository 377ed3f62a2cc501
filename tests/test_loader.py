import json

import pytest

from portal.errors import KnowledgeError
from portal.loader import load_knowledge
from portal.types import SourceType


def _write(directory, name, records):
    with (directory / f"{name}.jsonl").open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record) + "\n")


def _seed(directory, faqs):
    _write(directory, "faqs", faqs)
    _write(directory, "docs", [{"id": "doc-1", "title": "Guide", "question": "How?", "content": "Like this."}])
    _write(directory, "rules", [{"id": "rule-1", "title": "Rule", "question": "Why?", "description": "Because."}])
    _write(
        directory,
        "escalations",
        [{"id": "esc-1", "title": "Outage", "question": "Down?", "response": "Sorry.", "escalationPath": "A → B"}],
    )


def test_bundled_knowledge_loads(knowledge):
    assert [len(c) for c in knowledge.collections()] == [12, 8, 4, 4]
    assert knowledge.faqs[0].title == "How do I reset my password?"
    assert knowledge.escalations[0].kind is SourceType.ESCALATION
    assert "Escalation Path:" in knowledge.escalations[0].answer


def test_custom_directory(tmp_path):
    _seed(tmp_path, [{"id": "faq-1", "question": "Q?", "answer": "A."}])
    loaded = load_knowledge(str(tmp_path))
    assert len(loaded) == 4
    assert loaded.escalations[0].answer == "Sorry.\n\nEscalation Path: A → B"


def test_duplicate_ids_are_rejected(tmp_path):
    _seed(tmp_path, [{"id": "faq-1", "question": "Q?", "answer": "A."}, {"id": "faq-1", "question": "R?", "answer": "B."}])
    with pytest.raises(KnowledgeError, match="Duplicate id"):
        load_knowledge(str(tmp_path))


def test_empty_collection_is_rejected(tmp_path):
    _seed(tmp_path, [])
    with pytest.raises(KnowledgeError, match="empty"):
        load_knowledge(str(tmp_path))


def test_missing_collection(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_knowledge(str(tmp_path))
