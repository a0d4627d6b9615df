"""
agent_core/messages.py
----------------------
User-facing message texts. Defaults live here; config/messages.yaml
(if present) overrides individual entries.
"""

from functools import lru_cache
from pathlib import Path

import yaml

DEFAULT_MESSAGES = {
    "welcome": (
        "¡Pura Vida! I'm PeepInMe. Ask me where to find things in Costa Rica, "
        "and I'll find the 5 best matches for you!"
    ),
    "empty_query": "Please ask me something, like 'where can I buy sunscreen?'",
    "results": "Based on your request, I found these highly relevant stores:",
    "no_results": (
        "I'm sorry, I couldn't find any stores that specifically match your request. "
        "Could you try rephrasing?"
    ),
    "error": "I'm having a little trouble thinking right now. Please try again.",
}


def load_messages(path: Path | None = None) -> dict[str, str]:
    """Merge YAML overrides (unknown keys ignored) onto the defaults."""
    messages = dict(DEFAULT_MESSAGES)
    if path is not None and Path(path).exists():
        with open(path, "r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"{path} must contain a mapping of message keys to text")
        messages.update({k: str(v) for k, v in overrides.items() if k in DEFAULT_MESSAGES})
    return messages


@lru_cache(maxsize=1)
def get_messages() -> dict[str, str]:
    from agent_core.settings import get_settings
    return load_messages(get_settings().messages_path)
