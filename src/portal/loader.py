import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .errors import KnowledgeError
from .types import KnowledgeBase, KnowledgeEntry, SourceType

DEFAULT_KNOWLEDGE_DIR = Path(__file__).parent / "data"


def _faq(record: Dict[str, Any]) -> KnowledgeEntry:
    return KnowledgeEntry(
        id=record.get("id", ""),
        kind=SourceType.FAQ,
        title=record.get("question", ""),
        body=record.get("answer", ""),
        source=record.get("source", ""),
    )


def _doc(record: Dict[str, Any]) -> KnowledgeEntry:
    return KnowledgeEntry(
        id=record.get("id", ""),
        kind=SourceType.DOC,
        title=record.get("title", ""),
        question=record.get("question", ""),
        body=record.get("content", ""),
        source=record.get("source", ""),
    )


def _rule(record: Dict[str, Any]) -> KnowledgeEntry:
    return KnowledgeEntry(
        id=record.get("id", ""),
        kind=SourceType.RULE,
        title=record.get("title", ""),
        question=record.get("question", ""),
        body=record.get("description", ""),
        source=record.get("source", ""),
    )


def _escalation(record: Dict[str, Any]) -> KnowledgeEntry:
    return KnowledgeEntry(
        id=record.get("id", ""),
        kind=SourceType.ESCALATION,
        title=record.get("title", ""),
        question=record.get("question", ""),
        body=record.get("response", ""),
        source=record.get("source", ""),
        escalation_path=record.get("escalationPath"),
    )


COLLECTIONS: Dict[str, Callable[[Dict[str, Any]], KnowledgeEntry]] = {
    "faqs": _faq,
    "docs": _doc,
    "rules": _rule,
    "escalations": _escalation,
}


def load_collection(path: Path, build: Callable[[Dict[str, Any]], KnowledgeEntry]) -> List[KnowledgeEntry]:
    if not path.exists():
        raise FileNotFoundError(f"Knowledge collection not found: {path}")

    entries: List[KnowledgeEntry] = []
    seen = set()
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            entry = build(json.loads(line))
            if not entry.id:
                raise KnowledgeError(f"Entry without id in {path.name}")
            if entry.id in seen:
                raise KnowledgeError(f"Duplicate id {entry.id!r} in {path.name}")
            seen.add(entry.id)
            entries.append(entry)

    if not entries:
        raise KnowledgeError(f"Knowledge collection is empty: {path.name}")
    return entries


def load_knowledge(directory: Optional[str] = None) -> KnowledgeBase:
    base = Path(directory) if directory else DEFAULT_KNOWLEDGE_DIR
    loaded = {name: load_collection(base / f"{name}.jsonl", build) for name, build in COLLECTIONS.items()}
    return KnowledgeBase(**loaded)
