import re
from typing import Iterable, List, Set

SPACE_RE = re.compile(r"\s+")
NON_WORD_RE = re.compile(r"\W+")

STOP_WORDS = frozenset(
    {"the", "and", "or", "to", "a", "in", "is", "it", "that", "of", "for", "on", "by", "with", "as"}
)


def normalize_text(text: str) -> str:
    normalized = text.strip().lower()
    normalized = SPACE_RE.sub(" ", normalized)
    return normalized


def extract_keywords(text: str) -> List[str]:
    if not text:
        return []
    words = NON_WORD_RE.split(text.lower())
    return [word for word in words if len(word) > 2 and word not in STOP_WORDS]


def jaccard_similarity(left: Iterable[str], right: Iterable[str]) -> float:
    set_left: Set[str] = set(left)
    set_right: Set[str] = set(right)
    union = set_left | set_right
    if not union:
        return 0.0
    return len(set_left & set_right) / len(union)


def is_related_to_topic(text: str, query: str) -> bool:
    """Loose pre-filter: any query word longer than 3 chars contains, or is
    contained in, some word of ``text``."""
    if not text:
        return False
    lowered = text.lower()
    if "product" in query and "product" in lowered:
        return True
    text_words = lowered.split()
    for word in query.split():
        if len(word) <= 3:
            continue
        if any(text_word in word or word in text_word for text_word in text_words):
            return True
    return False


def contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(needle in text for needle in needles)


def typo_distance(left: str, right: str) -> int:
    shared = min(len(left), len(right))
    differences = sum(1 for i in range(shared) if left[i] != right[i])
    return differences + abs(len(left) - len(right))


def fuzzy_contains(query: str, targets: Iterable[str]) -> bool:
    """Substring match first, then a positional typo check per query word.

    Targets shorter than 5 chars must match exactly; 5-7 chars tolerate one
    differing position and longer targets two.
    """
    targets = list(targets)
    if contains_any(query, targets):
        return True
    words = query.split(" ")
    for target in targets:
        if len(target) < 5 or " " in target:
            continue
        allowed = 1 if len(target) < 8 else 2
        for word in words:
            if abs(len(word) - len(target)) <= allowed and typo_distance(word, target) <= allowed:
                return True
    return False
