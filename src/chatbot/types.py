from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

CATEGORIES = (
    "medication",
    "delivery",
    "payment",
    "contact",
    "emergency",
    "region",
    "location",
    "service",
    "general",
)

ROLES = ("user", "bot")


@dataclass(frozen=True)
class KnowledgeEntry:
    id: str
    title: str
    category: str
    tags: Tuple[str, ...]
    answer: str
    follow_ups: Tuple[str, ...] = ()


@dataclass
class ChatHistoryMessage:
    role: str
    text: str
    created_at: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class QuickReply:
    id: str
    text: str
    prompt: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "text": self.text, "prompt": self.prompt}


@dataclass
class ChatbotResponse:
    answer: str
    quick_replies: List[QuickReply] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answer": self.answer,
            "quickReplies": [reply.to_dict() for reply in self.quick_replies],
        }
