from __future__ import annotations

import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from chatbot.types import ChatHistoryMessage

logger = logging.getLogger(__name__)


class MessageStore(ABC):
    """Session-keyed chat log used by the HTTP layer."""

    @abstractmethod
    def save_message(self, session_id: str, message: ChatHistoryMessage) -> ChatHistoryMessage:
        ...

    @abstractmethod
    def get_recent_messages(self, session_id: str, limit: int = 10) -> List[ChatHistoryMessage]:
        """Return the newest ``limit`` messages, oldest first."""
        ...


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def message_to_dict(message: ChatHistoryMessage) -> Dict[str, object]:
    return {
        "role": message.role,
        "text": message.text,
        "createdAt": message.created_at,
        "metadata": message.metadata,
    }


class InMemoryMessageStore(MessageStore):
    """Keeps each session's log in memory, optionally mirrored to a JSON file.

    Sessions idle for longer than ``ttl_seconds`` are swept on every save, and
    only the ``max_sessions`` most recently active sessions are kept.
    """

    def __init__(
        self,
        ttl_seconds: Optional[int] = None,
        path: Optional[Path] = None,
        max_sessions: Optional[int] = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._path = Path(path) if path else None
        self._lock = threading.Lock()
        # session_id -> (last activity, messages)
        self._sessions: Dict[str, Tuple[float, List[ChatHistoryMessage]]] = {}
        self._load()

    def save_message(self, session_id: str, message: ChatHistoryMessage) -> ChatHistoryMessage:
        if not session_id:
            raise ValueError("Session ID is required to save chat messages.")
        stored = ChatHistoryMessage(
            role=message.role,
            text=message.text,
            created_at=_now_iso(),
            metadata=message.metadata,
        )
        with self._lock:
            _, messages = self._get_live(session_id) or (0.0, [])
            messages.append(stored)
            self._sessions[session_id] = (time.time(), messages)
            self._prune_sessions()
            self._persist()
        return stored

    def get_recent_messages(self, session_id: str, limit: int = 10) -> List[ChatHistoryMessage]:
        if not session_id:
            return []
        with self._lock:
            item = self._get_live(session_id)
        if not item:
            return []
        messages = item[1]
        if limit <= 0:
            return []
        return list(messages[-limit:])

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _get_live(self, session_id: str) -> Optional[Tuple[float, List[ChatHistoryMessage]]]:
        item = self._sessions.get(session_id)
        if not item:
            return None
        touched_at, _ = item
        if self.ttl_seconds and touched_at + self.ttl_seconds < time.time():
            self._sessions.pop(session_id, None)
            return None
        return item

    def _prune_sessions(self) -> bool:
        """Drop expired sessions, then the least recently active beyond ``max_sessions``."""
        removed: List[str] = []
        if self.ttl_seconds:
            cutoff = time.time() - self.ttl_seconds
            removed.extend(sid for sid, (touched_at, _) in self._sessions.items() if touched_at < cutoff)
            for session_id in removed:
                self._sessions.pop(session_id, None)

        if self.max_sessions and self.max_sessions > 0 and len(self._sessions) > self.max_sessions:
            newest_first = sorted(self._sessions, key=lambda sid: self._sessions[sid][0], reverse=True)
            for session_id in newest_first[self.max_sessions :]:
                self._sessions.pop(session_id, None)
                removed.append(session_id)

        if removed:
            logger.debug("Pruned %d chat sessions", len(removed))
        return bool(removed)

    def _load(self) -> None:
        if not self._path or not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable message store file %s", self._path)
            return
        for session_id, record in data.get("sessions", {}).items():
            messages = [
                ChatHistoryMessage(
                    role=msg.get("role", ""),
                    text=msg.get("text", ""),
                    created_at=msg.get("createdAt"),
                    metadata=msg.get("metadata"),
                )
                for msg in record.get("messages", [])
            ]
            self._sessions[session_id] = (float(record.get("updated_at", time.time())), messages)
        if self._prune_sessions():
            self._persist()

    def _persist(self) -> None:
        if not self._path:
            return
        payload = {
            "sessions": {
                session_id: {
                    "updated_at": touched_at,
                    "messages": [message_to_dict(msg) for msg in messages],
                }
                for session_id, (touched_at, messages) in self._sessions.items()
            }
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
