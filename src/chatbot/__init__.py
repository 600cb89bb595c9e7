from .context import DEFAULT_QUICK_REPLIES, build_context_response
from .engine import ResponseEngine, generate_chatbot_response
from .knowledge import KnowledgeBase, ScoreWeights, fallback_knowledge, search_knowledge_base
from .types import ChatbotResponse, ChatHistoryMessage, KnowledgeEntry, QuickReply

__all__ = [
    "ChatHistoryMessage",
    "ChatbotResponse",
    "DEFAULT_QUICK_REPLIES",
    "KnowledgeBase",
    "KnowledgeEntry",
    "QuickReply",
    "ResponseEngine",
    "ScoreWeights",
    "build_context_response",
    "fallback_knowledge",
    "generate_chatbot_response",
    "search_knowledge_base",
]
