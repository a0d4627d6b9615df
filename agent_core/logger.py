# agent_core/logger.py
import json, sys, threading
from datetime import datetime
from pathlib import Path

# Set to override the configured directory (settings.log_dir / PEEPINME_LOG_DIR).
LOG_DIR = None

_write_lock = threading.Lock()

def log_dir() -> Path:
    if LOG_DIR is not None:
        return Path(LOG_DIR)
    from agent_core.settings import get_settings
    return Path(get_settings().log_dir)

def _log_path():
    date = datetime.now().strftime("%Y-%m-%d")
    return log_dir() / f"{date}.json"

def log_event(event_type, payload, level="info"):
    """Append an event to today's JSON log. Errors are echoed to stderr."""
    entry = {
        "timestamp": datetime.now().isoformat(),
        "type": event_type,
        "level": level,
        "payload": payload,
    }
    if level == "error":
        print(f"⚠️ [{event_type}] {payload}", file=sys.stderr)

    with _write_lock:
        try:
            path = _log_path()
            path.parent.mkdir(parents=True, exist_ok=True)
            existing = []
            if path.exists():
                with open(path, "r", encoding="utf-8") as f:
                    try:
                        existing = json.load(f)
                    except json.JSONDecodeError:
                        existing = []
            existing.append(entry)
            with open(path, "w", encoding="utf-8") as f:
                json.dump(existing, f, indent=2, default=str)
        except OSError as e:
            print(f"[logger] Logging failed: {e}", file=sys.stderr)
    return entry
