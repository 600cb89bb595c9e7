import pytest

from chatbot.catalog import KNOWLEDGE_BASE
from chatbot.knowledge import (
    KnowledgeBase,
    ScoreWeights,
    fallback_knowledge,
    score_entry,
    search_knowledge_base,
    validate_catalog,
)
from chatbot.types import KnowledgeEntry


def _entry(id, tags, category="general", title=None, follow_ups=()):
    return KnowledgeEntry(
        id=id,
        title=title or id.title(),
        category=category,
        tags=tuple(tags),
        answer=f"answer for {id}",
        follow_ups=tuple(follow_ups),
    )


def test_builtin_catalog_is_valid():
    validate_catalog(KNOWLEDGE_BASE)
    assert len(KNOWLEDGE_BASE) == 10


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
def test_empty_query_matches_nothing(query):
    assert search_knowledge_base(query) == []


def test_non_string_query_matches_nothing():
    assert search_knowledge_base(None) == []


def test_paracetamol_query_hits_single_entry(entries_by_id):
    results = search_knowledge_base("tell me about paracetamol for headache")
    assert results == [entries_by_id["med-paracetamol"]]


def test_score_is_weighted_sum(entries_by_id):
    entry = entries_by_id["med-paracetamol"]
    # two tags (paracetamol, headache) plus the title
    assert score_entry(entry, "paracetamol for headache") == pytest.approx(5.5)
    assert score_entry(entry, "medication") == pytest.approx(1.0)
    assert score_entry(entry, "nothing relevant") == 0


def test_two_tag_hits_outrank_category_hit():
    category_only = _entry("cat-only", ["zzz"], category="delivery")
    two_tags = _entry("two-tags", ["alpha", "beta"])
    results = search_knowledge_base("alpha beta delivery", limit=5, entries=[category_only, two_tags])
    assert [e.id for e in results] == ["two-tags", "cat-only"]


def test_ties_keep_catalog_order():
    first = _entry("first", ["apple"])
    second = _entry("second", ["pear"])
    third = _entry("third", ["plum"])
    results = search_knowledge_base("plum pear apple", limit=3, entries=[first, second, third])
    assert [e.id for e in results] == ["first", "second", "third"]


def test_zero_scores_are_dropped_and_limit_applied():
    entries = [_entry("a", ["apple"]), _entry("b", ["pear"]), _entry("c", ["plum"])]
    assert [e.id for e in search_knowledge_base("apple and plum", limit=1, entries=entries)] == ["a"]
    assert search_knowledge_base("apple", limit=0, entries=entries) == []


def test_tags_match_as_substrings():
    entry = _entry("first-aid", ["aid"])
    assert search_knowledge_base("I am afraid", entries=[entry]) == [entry]


def test_query_is_case_insensitive(entries_by_id):
    assert search_knowledge_base("AMOXICILLIN please") == [entries_by_id["med-amoxicillin"]]


def test_custom_weights_change_ranking():
    by_title = _entry("by-title", ["zzz"], title="Cough Syrup")
    by_tag = _entry("by-tag", ["cough"])
    kb = KnowledgeBase([by_tag, by_title], ScoreWeights(tag=1.0, title=5.0, category=0.0))
    assert [e.id for e in kb.search("cough syrup", limit=2)] == ["by-title", "by-tag"]


def test_weights_from_config_fall_back_to_defaults():
    weights = ScoreWeights.from_config({"title": 3})
    assert weights == ScoreWeights(tag=2.0, title=3.0, category=1.0)
    assert ScoreWeights.from_config(None) == ScoreWeights()


def test_fallback_pool_is_whole_catalog():
    assert fallback_knowledge() == list(KNOWLEDGE_BASE)


def test_validate_catalog_rejects_duplicate_ids():
    with pytest.raises(ValueError, match="Duplicate"):
        validate_catalog([_entry("x", ["a"]), _entry("x", ["b"])])


def test_validate_catalog_rejects_missing_tags():
    with pytest.raises(ValueError, match="no tags"):
        validate_catalog([_entry("x", [])])


def test_validate_catalog_rejects_unknown_category():
    with pytest.raises(ValueError, match="Unknown category"):
        validate_catalog([_entry("x", ["a"], category="cosmetics")])


def test_validate_catalog_rejects_upper_case_tag():
    with pytest.raises(ValueError, match="lower case"):
        validate_catalog([_entry("x", ["Panado"])])


def test_validate_catalog_rejects_empty_catalog():
    with pytest.raises(ValueError, match="empty"):
        validate_catalog([])
