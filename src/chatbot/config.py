"""Settings for the assistant.

A config file is one mapping with optional ``knowledge``, ``engine``,
``server`` and ``store`` sections. Every key has a default in the code that
reads it, so an empty mapping is a valid config.
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

DEFAULT_CONFIG_PATH = "config/chatbot.json"
CONFIG_ENV_VAR = "CHATBOT_CONFIG"

_PARSERS: Dict[str, Callable[[str], Any]] = {
    ".json": json.loads,
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
}


def load_config(path: str) -> Dict[str, Any]:
    """Parse a JSON or YAML settings file into a dict."""
    config_path = Path(path)
    parser = _PARSERS.get(config_path.suffix.lower())
    if parser is None:
        raise ValueError(f"Unsupported config format: {config_path.suffix or config_path.name}")
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data = parser(config_path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping, got {type(data).__name__}: {config_path}")
    return data


def resolve_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load ``path``, else ``$CHATBOT_CONFIG``, else the bundled default if present."""
    chosen = path or os.getenv(CONFIG_ENV_VAR)
    if chosen:
        return load_config(chosen)
    if Path(DEFAULT_CONFIG_PATH).is_file():
        return load_config(DEFAULT_CONFIG_PATH)
    return {}


def section(config: Optional[Mapping[str, Any]], name: str) -> Mapping[str, Any]:
    """Return ``config[name]``, treating a missing or null section as empty."""
    value = (config or {}).get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return value
