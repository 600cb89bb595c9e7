import random

import pytest

from chatbot import ResponseEngine, generate_chatbot_response
from chatbot.answerer import EMPTY_CATALOG_ANSWER, FALLBACK_PREFIX
from chatbot.catalog import KNOWLEDGE_BASE
from chatbot.context import DEFAULT_QUICK_REPLIES, GREETING_TEXT, HOURS_TEXT
from chatbot.types import ChatHistoryMessage, KnowledgeEntry


def _is_fallback_answer(answer):
    return any(answer == f"{FALLBACK_PREFIX}\n\n{entry.answer}" for entry in KNOWLEDGE_BASE)


@pytest.mark.parametrize(
    "history",
    [
        [],
        [ChatHistoryMessage(role="user", text="pain relief")],
        [ChatHistoryMessage(role="bot", text="anything"), {"role": "user", "text": "amoxicillin"}],
    ],
)
def test_greeting_ignores_history(engine, history):
    response = engine.respond("hello there", history)
    assert response.answer.startswith(GREETING_TEXT)
    assert response.quick_replies == list(DEFAULT_QUICK_REPLIES)
    assert len(response.quick_replies) == 4


def test_context_rule_beats_knowledge_match(engine):
    # "paracetamol" alone would score against the catalog
    assert engine.respond("hello, do you sell paracetamol?", []).answer == GREETING_TEXT
    assert engine.respond("paracetamol opening hours", []).answer == HOURS_TEXT


def test_single_match_returns_entry_answer_verbatim(engine, entries_by_id):
    entry = entries_by_id["med-paracetamol"]
    response = engine.respond("tell me about paracetamol for headache", [])
    assert response.answer == entry.answer
    assert [r.to_dict() for r in response.quick_replies] == [
        {"id": "med-paracetamol-follow-0", "text": entry.follow_ups[0], "prompt": entry.follow_ups[0]},
        {"id": "med-paracetamol-follow-1", "text": entry.follow_ups[1], "prompt": entry.follow_ups[1]},
    ]


def test_alternative_follow_up_uses_previous_user_turn(engine):
    history = [ChatHistoryMessage(role="user", text="what about pain relief")]
    response = engine.respond("any alternative?", history)
    assert "Ibuprofen" in response.answer
    assert "Diclofenac" in response.answer
    assert not _is_fallback_answer(response.answer)


def test_alternative_without_pain_topic_falls_through(engine):
    history = [
        ChatHistoryMessage(role="user", text="what delivery options"),
        ChatHistoryMessage(role="bot", text="pain relief ships in 24 hours"),
    ]
    response = engine.respond("any alternative?", history)
    assert "Ibuprofen" not in response.answer


def test_no_match_falls_back_to_a_catalog_entry(engine):
    response = engine.respond("xyzzy plugh quux", [])
    assert response.answer.startswith(FALLBACK_PREFIX)
    assert _is_fallback_answer(response.answer)
    assert response.quick_replies == list(DEFAULT_QUICK_REPLIES)


@pytest.mark.parametrize("message", ["", "   ", "???", "q" * 5000, "\x00\x01", None])
def test_never_silent_and_never_raises(engine, message):
    response = engine.respond(message, [])
    assert response.answer
    assert _is_fallback_answer(response.answer)


def test_fallback_is_reproducible_with_seeded_rng():
    first = ResponseEngine(rng=random.Random(7)).respond("xyzzy", [])
    second = ResponseEngine(rng=random.Random(7)).respond("xyzzy", [])
    assert first.answer == second.answer


def test_two_matches_are_combined_in_rank_order(engine, entries_by_id):
    payment = entries_by_id["payment-methods"]
    amoxicillin = entries_by_id["med-amoxicillin"]
    response = engine.respond("payment by momo and amoxicillin", [])

    assert response.answer == (
        f"1. {payment.title}\n{payment.answer}\n\n2. {amoxicillin.title}\n{amoxicillin.answer}"
    )
    assert [r.text for r in response.quick_replies] == list(payment.follow_ups + amoxicillin.follow_ups)
    assert [r.id for r in response.quick_replies] == [f"multi-follow-{i}" for i in range(4)]


def test_combined_quick_replies_capped_at_four(entries_by_id):
    engine = ResponseEngine({"engine": {"search_limit": 3}}, rng=random.Random(0))
    response = engine.respond("payment amoxicillin vitamin", [])
    assert response.answer.startswith("1. Amoxicillin")
    assert "\n\n2. Payment Methods\n" in response.answer
    assert "\n\n3. Vitamins & Supplements\n" in response.answer
    assert len(response.quick_replies) == 4


def test_single_match_without_follow_ups_uses_defaults():
    entry = KnowledgeEntry(id="bare", title="Bare", category="general", tags=("bare",), answer="Bare answer")
    response = ResponseEngine(entries=[entry]).respond("bare facts", [])
    assert response.answer == "Bare answer"
    assert response.quick_replies == list(DEFAULT_QUICK_REPLIES)


def test_multi_match_without_follow_ups_has_no_quick_replies():
    entries = [
        KnowledgeEntry(id="one", title="One", category="general", tags=("apple",), answer="A"),
        KnowledgeEntry(id="two", title="Two", category="general", tags=("pear",), answer="B"),
    ]
    response = ResponseEngine(entries=entries).respond("apple pear", [])
    assert response.answer == "1. One\nA\n\n2. Two\nB"
    assert response.quick_replies == []


def test_history_window_limits_context():
    history = [
        ChatHistoryMessage(role="user", text="pain relief"),
        ChatHistoryMessage(role="bot", text="Paracetamol"),
    ]
    narrow = ResponseEngine({"engine": {"history_window": 1}}, rng=random.Random(0))
    assert "Ibuprofen" not in narrow.respond("any alternative?", history).answer
    wide = ResponseEngine({"engine": {"history_window": 2}}, rng=random.Random(0))
    assert "Ibuprofen" in wide.respond("any alternative?", history).answer


def test_weights_come_from_config():
    engine = ResponseEngine(
        {"knowledge": {"weights": {"tag": 0, "title": 0, "category": 0}}},
        rng=random.Random(0),
    )
    assert engine.respond("paracetamol", []).answer.startswith(FALLBACK_PREFIX)


def test_null_config_sections_use_defaults(entries_by_id):
    engine = ResponseEngine({"knowledge": None, "engine": None}, rng=random.Random(0))
    response = engine.respond("tell me about paracetamol for headache", [])
    assert response.answer == entries_by_id["med-paracetamol"].answer
    assert engine.search_limit == 2
    assert engine.history_window == 10


def test_non_mapping_config_section_is_rejected():
    with pytest.raises(ValueError, match="engine"):
        ResponseEngine({"engine": ["search_limit", 3]})


def test_custom_fallback_prefix():
    engine = ResponseEngine({"engine": {"fallback_prefix": "Try this:"}}, rng=random.Random(0))
    assert engine.respond("xyzzy", []).answer.startswith("Try this:\n\n")


def test_empty_catalog_still_answers():
    response = ResponseEngine(entries=[]).respond("xyzzy", [])
    assert response.answer == EMPTY_CATALOG_ANSWER


def test_engine_does_not_mutate_history(engine):
    history = [ChatHistoryMessage(role="user", text="pain")]
    engine.respond("any alternative?", history)
    assert history == [ChatHistoryMessage(role="user", text="pain")]


def test_module_level_entry_point():
    response = generate_chatbot_response("tell me about paracetamol for headache", [])
    assert response.answer.startswith("💊 **Paracetamol (Panado)**")
    seeded = generate_chatbot_response("xyzzy", [], rng=random.Random(3))
    assert seeded.answer.startswith(FALLBACK_PREFIX)


def test_response_to_dict(engine):
    payload = engine.respond("hello", []).to_dict()
    assert payload["answer"] == GREETING_TEXT
    assert payload["quickReplies"][0] == {
        "id": "qr-med",
        "text": "Medication info",
        "prompt": "Tell me about pain relief medications.",
    }
