"""Interactive console for the PharmaCare assistant."""

import argparse
import random
from typing import List

from chatbot import ResponseEngine
from chatbot.config import resolve_config
from chatbot.loader import load_catalog
from chatbot.log import configure_logging
from chatbot.types import ChatHistoryMessage


def main() -> None:
    parser = argparse.ArgumentParser(description="Chat with the PharmaCare assistant locally.")
    parser.add_argument("--config", default=None, help="Path to config file.")
    parser.add_argument("--data", default=None, help="Path to a knowledge JSONL file.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the fallback picker.")
    args = parser.parse_args()

    configure_logging()
    config = resolve_config(args.config)
    try:
        entries = load_catalog(config, args.data)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Could not load knowledge base: {exc}")
        return

    rng = random.Random(args.seed) if args.seed is not None else None
    engine = ResponseEngine(config, entries, rng=rng)
    window = engine.history_window

    history: List[ChatHistoryMessage] = []
    print("PharmaCare assistant ready. Type 'exit' to quit.")
    while True:
        try:
            user_input = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not user_input or user_input.lower() in {"exit", "quit"}:
            break
        response = engine.respond(user_input, history)
        print(f"bot> {response.answer}")
        for idx, reply in enumerate(response.quick_replies, start=1):
            print(f"  [{idx}] {reply.text}")
        history.append(ChatHistoryMessage(role="user", text=user_input))
        history.append(ChatHistoryMessage(role="bot", text=response.answer))
        if window > 0:
            history = history[-window:]


if __name__ == "__main__":
    main()
