from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from chatbot import ResponseEngine
from chatbot.config import resolve_config, section
from chatbot.guardrails import validate_message
from chatbot.loader import load_catalog
from chatbot.log import configure_logging
from chatbot.types import ChatHistoryMessage

from .schemas import ChatRequest, ChatResponse, HistoryResponse
from .store import InMemoryMessageStore, MessageStore, message_to_dict

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "The assistant is unavailable right now. Please try again shortly."
HISTORY_ERROR_MESSAGE = "Failed to load chatbot history"


class ChatService:
    """Runs one chat turn: history fetch, persistence and the engine call."""

    def __init__(self, engine: ResponseEngine, store: MessageStore, config: Dict[str, Any]) -> None:
        self.engine = engine
        self.store = store
        server_cfg = section(config, "server")
        self.history_limit = int(server_cfg.get("history_limit", 10))
        self.history_endpoint_limit = int(server_cfg.get("history_endpoint_limit", 20))
        self.max_message_chars = int(server_cfg.get("max_message_chars", 2000))

    def handle_turn(self, message: Any, session_id: Optional[str]) -> Dict[str, Any]:
        error = validate_message(message, self.max_message_chars)
        if error:
            raise HTTPException(status_code=400, detail=error)
        session_id = session_id or str(uuid.uuid4())

        # History is read before this turn is appended, so it only holds prior turns.
        try:
            history = self.store.get_recent_messages(session_id, self.history_limit)
        except Exception:
            logger.warning("History fetch failed for session %s; continuing without it", session_id, exc_info=True)
            history = []

        try:
            self.store.save_message(session_id, ChatHistoryMessage(role="user", text=message))
            result = self.engine.respond(message, history)
            quick_replies = [reply.to_dict() for reply in result.quick_replies]
            self.store.save_message(
                session_id,
                ChatHistoryMessage(role="bot", text=result.answer, metadata={"quickReplies": quick_replies}),
            )
        except Exception as exc:
            logger.exception("Chatbot turn failed for session %s", session_id)
            raise HTTPException(status_code=500, detail=UNAVAILABLE_MESSAGE) from exc

        return {"sessionId": session_id, "response": result.answer, "quickReplies": quick_replies}

    def history(self, session_id: Optional[str]) -> Dict[str, Any]:
        if not session_id:
            raise HTTPException(status_code=400, detail="sessionId is required")
        try:
            messages = self.store.get_recent_messages(session_id, self.history_endpoint_limit)
        except Exception as exc:
            logger.exception("Chatbot history error for session %s", session_id)
            raise HTTPException(status_code=500, detail=HISTORY_ERROR_MESSAGE) from exc
        return {"sessionId": session_id, "history": [message_to_dict(msg) for msg in messages]}


def create_app(
    config_path: Optional[str] = None,
    data_path: Optional[str] = None,
    store: Optional[MessageStore] = None,
    engine: Optional[ResponseEngine] = None,
) -> FastAPI:
    configure_logging()
    app = FastAPI(title="PharmaCare Assistant")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    cfg = resolve_config(config_path)
    if engine is None:
        engine = ResponseEngine(cfg, load_catalog(cfg, data_path))
    if store is None:
        store_cfg = section(cfg, "store")
        store = InMemoryMessageStore(
            ttl_seconds=store_cfg.get("ttl_seconds"),
            path=store_cfg.get("path"),
            max_sessions=store_cfg.get("max_sessions"),
        )
    service = ChatService(engine, store, cfg)
    app.state.service = service
    logger.info("Assistant ready with %d knowledge entries", len(engine.knowledge))

    @app.post("/api/chatbot", response_model=ChatResponse)
    def chat(request: ChatRequest) -> Dict[str, Any]:
        return service.handle_turn(request.message, request.sessionId)

    @app.get("/api/chatbot", response_model=HistoryResponse)
    def chat_history(sessionId: Optional[str] = None) -> Dict[str, Any]:
        return service.history(sessionId)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok", "entries": len(engine.knowledge)}

    @app.websocket("/ws")
    async def ws_chat(websocket: WebSocket) -> None:
        """Text chat over a websocket.

        Each frame is either plain text or JSON ``{"message": ...}``. The
        connection keeps one session id; replies use the POST response shape
        or ``{"error": ...}``.
        """
        await websocket.accept()
        session_id: Optional[str] = None
        try:
            while True:
                raw = await websocket.receive_text()
                message = _frame_message(raw)
                try:
                    reply = await run_in_threadpool(service.handle_turn, message, session_id)
                except HTTPException as exc:
                    await websocket.send_text(json.dumps({"error": exc.detail}, ensure_ascii=False))
                    continue
                session_id = reply["sessionId"]
                await websocket.send_text(json.dumps(reply, ensure_ascii=False))
        except WebSocketDisconnect:
            return

    return app


def _frame_message(raw: str) -> Any:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if isinstance(payload, dict):
        return payload.get("message")
    return raw


if __name__ == "__main__":
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="Run the PharmaCare assistant API.")
    parser.add_argument("--config", default=None, help="Path to config file.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=9000)
    args = parser.parse_args()
    uvicorn.run(create_app(args.config), host=args.host, port=args.port)
