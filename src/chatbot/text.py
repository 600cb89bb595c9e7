import re
from typing import Any, Iterable

SPACE_RE = re.compile(r"\s+")


def normalize_text(text: Any) -> str:
    if not isinstance(text, str):
        return ""
    normalized = text.strip().lower()
    normalized = SPACE_RE.sub(" ", normalized)
    return normalized


def contains_any(text: str, phrases: Iterable[str]) -> bool:
    return any(phrase in text for phrase in phrases)
