from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Inbound chat turn. ``message`` is validated by the handler, not pydantic."""
    message: Any = None
    sessionId: Optional[str] = Field(default=None)


class QuickReplyModel(BaseModel):
    id: str
    text: str
    prompt: str


class ChatResponse(BaseModel):
    sessionId: str
    response: str
    quickReplies: List[QuickReplyModel] = Field(default_factory=list)


class HistoryMessage(BaseModel):
    role: str
    text: str
    createdAt: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class HistoryResponse(BaseModel):
    sessionId: str
    history: List[HistoryMessage]
