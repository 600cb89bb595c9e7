import random
from typing import List, Optional, Sequence

from .context import DEFAULT_QUICK_REPLIES
from .types import ChatbotResponse, KnowledgeEntry, QuickReply

FALLBACK_PREFIX = "I couldn't find an exact match, but here's something helpful:"
EMPTY_CATALOG_ANSWER = "I couldn't find an exact match. Please ask a pharmacist for help."


def build_fallback_answer(
    pool: Sequence[KnowledgeEntry],
    rng: Optional[random.Random] = None,
    prefix: str = FALLBACK_PREFIX,
) -> ChatbotResponse:
    if not pool:
        return ChatbotResponse(answer=EMPTY_CATALOG_ANSWER, quick_replies=list(DEFAULT_QUICK_REPLIES))
    entry = (rng or random).choice(list(pool))
    return ChatbotResponse(
        answer=f"{prefix}\n\n{entry.answer}",
        quick_replies=list(DEFAULT_QUICK_REPLIES),
    )


def build_single_answer(entry: KnowledgeEntry) -> ChatbotResponse:
    if not entry.follow_ups:
        return ChatbotResponse(answer=entry.answer, quick_replies=list(DEFAULT_QUICK_REPLIES))
    replies = [
        QuickReply(id=f"{entry.id}-follow-{idx}", text=item, prompt=item)
        for idx, item in enumerate(entry.follow_ups)
    ]
    return ChatbotResponse(answer=entry.answer, quick_replies=replies)


def build_combined_answer(matches: Sequence[KnowledgeEntry], max_quick_replies: int = 4) -> ChatbotResponse:
    parts = []
    for idx, match in enumerate(matches, start=1):
        parts.append(f"{idx}. {match.title}\n{match.answer}")

    follow_ups: List[str] = [item for match in matches for item in match.follow_ups]
    replies = [
        QuickReply(id=f"multi-follow-{idx}", text=item, prompt=item)
        for idx, item in enumerate(follow_ups[: max(max_quick_replies, 0)])
    ]
    return ChatbotResponse(answer="\n\n".join(parts), quick_replies=replies)


def build_knowledge_response(
    matches: Sequence[KnowledgeEntry],
    pool: Sequence[KnowledgeEntry],
    rng: Optional[random.Random] = None,
    max_quick_replies: int = 4,
    fallback_prefix: str = FALLBACK_PREFIX,
) -> ChatbotResponse:
    if not matches:
        return build_fallback_answer(pool, rng, fallback_prefix)
    if len(matches) == 1:
        return build_single_answer(matches[0])
    return build_combined_answer(matches, max_quick_replies)
