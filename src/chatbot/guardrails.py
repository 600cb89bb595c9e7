from typing import Any, Optional


def validate_message(message: Any, max_chars: int = 2000) -> Optional[str]:
    if not isinstance(message, str) or not message.strip():
        return "Message is required."
    if max_chars > 0 and len(message) > max_chars:
        return f"Message must be at most {max_chars} characters."
    return None
