from portal.text import (
    extract_keywords,
    fuzzy_contains,
    is_related_to_topic,
    jaccard_similarity,
    normalize_text,
)


def test_normalize_text_trims_lowers_and_collapses():
    assert normalize_text("  What ARE   your\thours?  ") == "what are your hours?"


def test_extract_keywords_drops_short_and_stop_words():
    assert extract_keywords("How do I reset the password?") == ["how", "reset", "password"]


def test_jaccard_of_empty_sets_is_zero():
    assert jaccard_similarity([], []) == 0.0


def test_jaccard_partial_overlap():
    assert jaccard_similarity(["reset", "password"], ["password", "email"]) == 1 / 3


def test_related_to_topic_matches_partial_words():
    assert is_related_to_topic("Password reset guide", "resetting passwords")
    assert not is_related_to_topic("Refund Policy", "hours")


def test_related_to_topic_product_shortcut():
    assert is_related_to_topic("Our product lineup", "any product")


def test_fuzzy_contains_tolerates_small_typos():
    assert fuzzy_contains("when is the delivary", ["delivery"])
    assert fuzzy_contains("where is my packege", ["package"])


def test_fuzzy_contains_short_targets_need_exact_match():
    assert not fuzzy_contains("i want to see", ["sent", "send", "ship"])
    assert fuzzy_contains("can you send it", ["send"])


def test_jaccard_is_symmetric():
    pairs = [
        (["reset", "password"], ["password", "email", "login"]),
        ([], ["hours"]),
        (["a", "b", "b"], ["b"]),
    ]
    for left, right in pairs:
        assert jaccard_similarity(left, right) == jaccard_similarity(right, left)
