from __future__ import annotations  # Session persistence over a key/value backend

import json
import logging
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from config.settings import settings
from interview_session.errors import DeserializationError, StorageUnavailableError
from interview_session.models import InterviewSession

from .codec import deserialize_session, format_timestamp, serialize_session
from .kv import KeyValueStore

logger = logging.getLogger(__name__)


class StorageKeys:  # Key layout within one storage namespace
    def __init__(self, prefix: str) -> None:
        self.prefix = prefix
        self.current_session = f"{prefix}:current-session"
        self.session_history = f"{prefix}:session-history"

    def session(self, session_id: str) -> str:
        return f"{self.prefix}:session:{session_id}"


class SessionHistoryEntry(BaseModel):  # Lightweight summary of a completed session
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    role_type: str
    experience_level: str
    created_at: str
    completed_at: Optional[str] = None
    overall_score: Optional[float] = None

    @classmethod
    def from_session(cls, session: InterviewSession) -> "SessionHistoryEntry":
        return cls(
            id=session.id,
            role_type=session.parsed_jd.role_type,
            experience_level=session.parsed_jd.experience_level,
            created_at=format_timestamp(session.created_at),
            completed_at=format_timestamp(session.completed_at) if session.completed_at else None,
            overall_score=session.session_feedback.overall_score if session.session_feedback else None,
        )


_HISTORY_ADAPTER = TypeAdapter(List[SessionHistoryEntry])


class SessionStore:
    """Save, load and archive interview sessions.

    ``backend`` may be ``None`` when no durable storage exists (for example
    a headless render). Writes then raise ``StorageUnavailableError`` while
    reads report nothing stored.
    """

    def __init__(self, backend: Optional[KeyValueStore], *, key_prefix: Optional[str] = None) -> None:
        self._backend = backend
        self.keys = StorageKeys(key_prefix or settings.STORAGE_KEY_PREFIX)

    @property
    def available(self) -> bool:
        return self._backend is not None

    def _require_backend(self) -> KeyValueStore:
        if self._backend is None:
            raise StorageUnavailableError("Durable storage is not available in this context")
        return self._backend

    def save(self, session: InterviewSession) -> None:
        """Write the session and point the current-session key at it."""

        backend = self._require_backend()
        backend.set_item(self.keys.session(session.id), serialize_session(session))
        backend.set_item(self.keys.current_session, session.id)

    def load(self, session_id: str) -> Optional[InterviewSession]:
        if self._backend is None:
            return None
        raw = self._backend.get_item(self.keys.session(session_id))
        if not raw:
            return None
        try:
            return deserialize_session(raw)
        except DeserializationError as exc:
            logger.warning("Failed to load session %s: %s", session_id, exc)
            return None

    def current_session_id(self) -> Optional[str]:
        if self._backend is None:
            return None
        return self._backend.get_item(self.keys.current_session) or None

    def load_current(self) -> Optional[InterviewSession]:
        session_id = self.current_session_id()
        if not session_id:
            return None
        return self.load(session_id)

    def clear_current_pointer(self) -> None:
        if self._backend is None:
            return
        self._backend.remove_item(self.keys.current_session)

    def delete(self, session_id: str) -> None:
        if self._backend is None:
            return
        self._backend.remove_item(self.keys.session(session_id))

    def save_to_history(self, session: InterviewSession) -> SessionHistoryEntry:
        """Insert or replace the history entry for ``session`` by id."""

        backend = self._require_backend()
        entry = SessionHistoryEntry.from_session(session)
        history = self.get_history()
        for index, existing in enumerate(history):
            if existing.id == entry.id:
                history[index] = entry
                break
        else:
            history.append(entry)
        payload = json.dumps(_HISTORY_ADAPTER.dump_python(history, by_alias=True, mode="json"))
        backend.set_item(self.keys.session_history, payload)
        return entry

    def get_history(self) -> List[SessionHistoryEntry]:
        if self._backend is None:
            return []
        raw = self._backend.get_item(self.keys.session_history)
        if not raw:
            return []
        try:
            return _HISTORY_ADAPTER.validate_json(raw)
        except (ValidationError, json.JSONDecodeError, RecursionError) as exc:
            logger.warning("Failed to load session history: %s", exc)
            return []

    def clear_all(self) -> None:
        """Delete every archived session, the history list and the current pointer."""

        if self._backend is None:
            return
        for entry in self.get_history():
            self.delete(entry.id)
        self._backend.remove_item(self.keys.session_history)
        self._backend.remove_item(self.keys.current_session)


__all__ = ["SessionHistoryEntry", "SessionStore", "StorageKeys"]
