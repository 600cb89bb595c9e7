import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .answerer import FALLBACK_PREFIX, build_knowledge_response
from .config import section
from .context import coerce_history, match_context_rule
from .knowledge import KnowledgeBase, ScoreWeights
from .types import ChatbotResponse, ChatHistoryMessage, KnowledgeEntry

logger = logging.getLogger(__name__)


class ResponseEngine:
    """Answers one user turn from context rules, then the knowledge base.

    The engine holds no per-conversation state. Callers pass the recent
    history (oldest first) on every call and persist the exchange themselves.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        entries: Optional[Sequence[KnowledgeEntry]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or {}
        weights = ScoreWeights.from_config(section(self.config, "knowledge").get("weights"))
        self.knowledge = KnowledgeBase(entries, weights)
        self.rng = rng or random.Random()

        engine_cfg = section(self.config, "engine")
        self.search_limit = int(engine_cfg.get("search_limit", 2))
        self.history_window = int(engine_cfg.get("history_window", 10))
        self.max_quick_replies = int(engine_cfg.get("max_quick_replies", 4))
        self.fallback_prefix = engine_cfg.get("fallback_prefix", FALLBACK_PREFIX)

    def respond(self, message: Any, recent_history: Optional[Iterable[Any]] = None) -> ChatbotResponse:
        history = self._window(coerce_history(recent_history))

        matched = match_context_rule(message, history)
        if matched is not None:
            rule, response = matched
            logger.debug("Context rule %s answered", rule.name)
            return response

        matches = self.knowledge.search(message, self.search_limit)
        if matches:
            logger.debug("Knowledge matches: %s", [entry.id for entry in matches])
        else:
            logger.debug("No knowledge match, using fallback")
        return build_knowledge_response(
            matches,
            self.knowledge.fallback_pool(),
            rng=self.rng,
            max_quick_replies=self.max_quick_replies,
            fallback_prefix=self.fallback_prefix,
        )

    def _window(self, history: List[ChatHistoryMessage]) -> List[ChatHistoryMessage]:
        if self.history_window <= 0:
            return history
        return history[-self.history_window :]


_default_engine: Optional[ResponseEngine] = None


def generate_chatbot_response(
    message: Any,
    recent_history: Optional[Iterable[Any]] = None,
    rng: Optional[random.Random] = None,
) -> ChatbotResponse:
    global _default_engine
    if rng is not None:
        return ResponseEngine(rng=rng).respond(message, recent_history)
    if _default_engine is None:
        _default_engine = ResponseEngine()
    return _default_engine.respond(message, recent_history)
