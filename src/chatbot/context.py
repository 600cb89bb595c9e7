"""Hand-written conversational rules that run before knowledge search.

Each rule is a (matches, build) pair over the lower-cased message and the
recent history. Rules are tried in order and the first match answers; a
miss on every rule returns None so the caller falls through to search.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from .text import contains_any, normalize_text
from .types import ChatbotResponse, ChatHistoryMessage, QuickReply

DEFAULT_QUICK_REPLIES: Tuple[QuickReply, ...] = (
    QuickReply("qr-med", "Medication info", "Tell me about pain relief medications."),
    QuickReply("qr-delivery", "Delivery options", "What delivery options do you have?"),
    QuickReply("qr-prescription", "Upload prescription", "How do I upload a prescription?"),
    QuickReply("qr-payment", "Payment methods", "Which payment methods do you accept?"),
)

GREETING_TEXT = (
    "👋 Sawubona! I am the PharmaCare assistant for Eswatini. I can help with medications, "
    "prescriptions, delivery timelines, branch information, and payment options. "
    "What should we explore today?"
)
GRATITUDE_TEXT = (
    "😊 Ngiyabonga! I am happy to help. Let me know if you want updates about your "
    "prescription, deliveries, or medication guidance."
)
BRANCH_TEXT = (
    "🏥 We currently operate in Manzini (main branch) and Mbabane (satellite). Pick-up points "
    "are available at Ezulwini, Nhlangano, and Siteki through partner clinics. "
    "Need directions to a branch?"
)
HOURS_TEXT = (
    "🕒 Operating hours:\n"
    "• Weekdays: 08:00 – 20:00\n"
    "• Saturday: 09:00 – 18:00\n"
    "• Sunday: 10:00 – 16:00\n"
    "Online orders & emergency support run 24/7."
)

# Whole words only: a bare "hi" would otherwise fire on "which" or "shipping".
GREETING_RE = re.compile(r"\b(hello|hi|hey|sawubona|good (morning|afternoon|evening))\b")
GRATITUDE_RE = re.compile(r"(thank|ngiyabonga|appreciate)")
ALTERNATIVE_RE = re.compile(r"(alternative|something else|different|other option|instead)")

WHERE_WORDS = ("where", "located")
PLACE_WORDS = ("branch", "location")
HOURS_WORDS = ("hours", "open")


@dataclass(frozen=True)
class TopicFollowUp:
    keyword: str
    answer: str
    quick_replies: Tuple[QuickReply, ...]


TOPIC_FOLLOW_UPS: Tuple[TopicFollowUp, ...] = (
    TopicFollowUp(
        keyword="pain",
        answer=(
            "Besides Paracetamol, these pain relief options are popular in Eswatini:\n"
            "• Ibuprofen – Anti-inflammatory (E35)\n"
            "• Diclofenac – Strong pain relief (E45, prescription)\n"
            "• Naproxen – Longer relief (E50)\n"
            "Please let me know if you need pharmacist guidance."
        ),
        quick_replies=(
            QuickReply("qr-paracetamol", "Paracetamol dosage", "Paracetamol dosage guidance"),
            QuickReply("qr-ibuprofen", "Ibuprofen info", "Tell me about ibuprofen"),
        ),
    ),
)


@dataclass(frozen=True)
class ContextRule:
    name: str
    matches: Callable[[str, List[ChatHistoryMessage]], bool]
    build: Callable[[str, List[ChatHistoryMessage]], ChatbotResponse]


def default_response(answer: str) -> ChatbotResponse:
    return ChatbotResponse(answer=answer, quick_replies=list(DEFAULT_QUICK_REPLIES))


def coerce_history(history: Optional[Iterable[Any]]) -> List[ChatHistoryMessage]:
    messages: List[ChatHistoryMessage] = []
    for msg in history or []:
        if isinstance(msg, ChatHistoryMessage):
            messages.append(msg)
        elif isinstance(msg, dict):
            role = msg.get("role")
            text = msg.get("text")
            if role and isinstance(text, str):
                messages.append(
                    ChatHistoryMessage(
                        role=role,
                        text=text,
                        created_at=msg.get("createdAt") or msg.get("created_at"),
                        metadata=msg.get("metadata"),
                    )
                )
    return messages


def last_user_message(history: List[ChatHistoryMessage]) -> Optional[ChatHistoryMessage]:
    for msg in reversed(history):
        if msg.role == "user":
            return msg
    return None


def _previous_topic(history: List[ChatHistoryMessage]) -> Optional[TopicFollowUp]:
    previous = last_user_message(history)
    if previous is None:
        return None
    text = normalize_text(previous.text)
    for topic in TOPIC_FOLLOW_UPS:
        if topic.keyword in text:
            return topic
    return None


def _is_topic_continuation(message: str, history: List[ChatHistoryMessage]) -> bool:
    return bool(ALTERNATIVE_RE.search(message)) and _previous_topic(history) is not None


def _build_topic_continuation(message: str, history: List[ChatHistoryMessage]) -> ChatbotResponse:
    topic = _previous_topic(history) or TOPIC_FOLLOW_UPS[0]
    return ChatbotResponse(answer=topic.answer, quick_replies=list(topic.quick_replies))


CONTEXT_RULES: Tuple[ContextRule, ...] = (
    ContextRule(
        name="greeting",
        matches=lambda message, _: bool(GREETING_RE.search(message)),
        build=lambda message, _: default_response(GREETING_TEXT),
    ),
    ContextRule(
        name="gratitude",
        matches=lambda message, _: bool(GRATITUDE_RE.search(message)),
        build=lambda message, _: default_response(GRATITUDE_TEXT),
    ),
    ContextRule(
        name="topic_continuation",
        matches=_is_topic_continuation,
        build=_build_topic_continuation,
    ),
    ContextRule(
        name="branch_location",
        matches=lambda message, _: contains_any(message, WHERE_WORDS) and contains_any(message, PLACE_WORDS),
        build=lambda message, _: ChatbotResponse(
            answer=BRANCH_TEXT,
            quick_replies=[
                QuickReply("qr-manzini", "Manzini directions", "Give me directions to the Manzini branch."),
                QuickReply("qr-mbabane", "Mbabane directions", "Where is the Mbabane branch located?"),
            ],
        ),
    ),
    ContextRule(
        name="opening_hours",
        matches=lambda message, _: contains_any(message, HOURS_WORDS),
        build=lambda message, _: default_response(HOURS_TEXT),
    ),
)


def match_context_rule(
    message: Any,
    recent_history: Optional[Iterable[Any]] = None,
    rules: Tuple[ContextRule, ...] = CONTEXT_RULES,
) -> Optional[Tuple[ContextRule, ChatbotResponse]]:
    lower = normalize_text(message)
    if not lower:
        return None
    history = coerce_history(recent_history)
    for rule in rules:
        if rule.matches(lower, history):
            return rule, rule.build(lower, history)
    return None


def build_context_response(
    message: Any,
    recent_history: Optional[Iterable[Any]] = None,
) -> Optional[ChatbotResponse]:
    matched = match_context_rule(message, recent_history)
    if matched is None:
        return None
    return matched[1]
