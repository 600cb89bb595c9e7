#!/usr/bin/env python3
"""
Command-line client for the PharmaCare assistant API.

Modes:
- Websocket (/ws): send text frames, print the JSON replies.
- HTTP (/api/chatbot): POST each message, keeping the returned sessionId.
- History: GET /api/chatbot?sessionId=... and print the stored log.

Examples:
  python client.py --url ws://127.0.0.1:9000/ws --query "hello"
  python client.py --url ws://127.0.0.1:9000/ws                 # interactive
  python client.py --url http://127.0.0.1:9000/api/chatbot      # interactive over HTTP
  python client.py --url http://127.0.0.1:9000/api/chatbot --history SESSION_ID
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional

import websockets


def _build_headers(args: argparse.Namespace) -> List[tuple[str, str]]:
    headers: List[tuple[str, str]] = []
    if args.auth:
        headers.append(("Authorization", args.auth))
    return headers


def _print_reply(obj: Dict[str, Any]) -> None:
    if "error" in obj or "detail" in obj:
        print("error>", obj.get("error") or obj.get("detail"))
        return
    print("bot>", obj.get("response", ""))
    for idx, reply in enumerate(obj.get("quickReplies") or [], start=1):
        print(f"  [{idx}] {reply.get('text')}")


async def text_client(uri: str, query: Optional[str], headers: List[tuple[str, str]]) -> None:
    async with websockets.connect(uri, additional_headers=headers) as ws:
        if query is not None:
            await ws.send(query)
            resp = await ws.recv()
            print(resp)
            return
        print("Connected. Type 'exit' to quit.")
        while True:
            try:
                text = input("you> ").strip()
            except (EOFError, KeyboardInterrupt):
                break
            if not text or text.lower() in {"exit", "quit"}:
                break
            await ws.send(text)
            resp = await ws.recv()
            try:
                obj = json.loads(resp)
            except json.JSONDecodeError:
                obj = {"response": resp}
            _print_reply(obj)


def _request_json(req: urllib.request.Request) -> Dict[str, Any]:
    try:
        with urllib.request.urlopen(req) as resp:
            return json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace")
        try:
            return json.loads(body)
        except json.JSONDecodeError:
            return {"error": f"HTTP {e.code}: {body[:200]}"}
    except urllib.error.URLError as e:
        return {"error": f"Request failed: {e.reason}"}


def post_message(url: str, message: str, session_id: Optional[str], headers: List[tuple[str, str]]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"message": message}
    if session_id:
        payload["sessionId"] = session_id
    req = urllib.request.Request(url, data=json.dumps(payload).encode("utf-8"), method="POST")
    req.add_header("Content-Type", "application/json")
    for key, value in headers:
        req.add_header(key, value)
    return _request_json(req)


def fetch_history(url: str, session_id: str, headers: List[tuple[str, str]]) -> Dict[str, Any]:
    query = urllib.parse.urlencode({"sessionId": session_id})
    req = urllib.request.Request(f"{url}?{query}", method="GET")
    for key, value in headers:
        req.add_header(key, value)
    return _request_json(req)


def http_client(url: str, query: Optional[str], session_id: Optional[str], headers: List[tuple[str, str]]) -> None:
    if query is not None:
        _print_reply(post_message(url, query, session_id, headers))
        return
    print("Type 'exit' to quit.")
    while True:
        try:
            text = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not text or text.lower() in {"exit", "quit"}:
            break
        obj = post_message(url, text, session_id, headers)
        session_id = obj.get("sessionId", session_id)
        _print_reply(obj)
    if session_id:
        print(f"session: {session_id}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Client for the PharmaCare assistant API")
    parser.add_argument("--url", required=True, help="URL, e.g. ws://host:9000/ws or http://host:9000/api/chatbot")
    parser.add_argument("--query", default=None, help="One-shot message. Omit to enter interactive mode.")
    parser.add_argument("--session", default=None, help="Existing sessionId to continue (HTTP mode).")
    parser.add_argument("--history", default=None, metavar="SESSION_ID", help="Print the stored history of a session.")
    parser.add_argument("--auth", default=None, help="Authorization header if needed, e.g. 'Bearer xxx'")
    args = parser.parse_args()

    headers = _build_headers(args)
    if args.url.startswith("ws") and args.url.endswith("/ws"):
        asyncio.run(text_client(args.url, args.query, headers))
        return
    if args.url.startswith("http"):
        if args.history:
            print(json.dumps(fetch_history(args.url, args.history, headers), ensure_ascii=False, indent=2))
            return
        http_client(args.url, args.query, args.session, headers)
        return
    print("Unknown endpoint. Use ws(s)://.../ws or http(s)://.../api/chatbot.", file=sys.stderr)
    sys.exit(2)


if __name__ == "__main__":
    main()
