"""Structured lifecycle events for interview sessions.

Each event is written to stdout as one short human line and, when file
logging is enabled, to a rotating JSON-lines file.
"""
from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
import uuid
from typing import Any

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
ENABLE_FILE_LOGS = os.getenv("ENABLE_FILE_LOGS", "0") in ("1", "true", "True")
LOG_FILE = os.getenv("LOG_FILE", "logs/mockmatch.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", "5242880"))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))

_HUMAN_KEYS = ("trigger", "outcome", "answered", "total", "entries", "error")

_events = logging.getLogger("mockmatch.events")
_events.setLevel(LOG_LEVEL)
_events.propagate = False


class _JsonLineFormatter(logging.Formatter):  # One JSON object per record
    def format(self, record: logging.LogRecord) -> str:
        event = getattr(record, "event", None)
        if event is None:
            event = {"ts": record.created, "kind": "message", "message": record.getMessage()}
        return json.dumps(event, default=str)


def _ensure_handlers() -> None:
    if _events.handlers:
        return

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(LOG_LEVEL)
    console.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(name)s :: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    _events.addHandler(console)

    if not ENABLE_FILE_LOGS:
        return

    log_dir = os.path.dirname(LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    rotating.setLevel(LOG_LEVEL)
    rotating.setFormatter(_JsonLineFormatter())
    _events.addHandler(rotating)


def _human_line(event: dict[str, Any]) -> str:
    parts = [f"session={event.get('session_id')}", f"kind={event.get('kind')}"]
    parts.extend(f"{key}={event[key]}" for key in _HUMAN_KEYS if key in event)
    return " ".join(parts)


def log_event(kind: str, session_id: str | None, *, level: int = logging.INFO, **fields: Any) -> None:
    """Record a session lifecycle event such as ``session_saved`` or ``autosave_failed``."""

    _ensure_handlers()
    event: dict[str, Any] = {
        "ts": time.time(),
        "trace": str(uuid.uuid4()),
        "kind": kind,
        "session_id": session_id,
    }
    event.update(fields)
    _events.log(level, "%s", _human_line(event), extra={"event": event})


__all__ = ["log_event"]
