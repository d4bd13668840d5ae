"""Auto-save, restore and completion coordination for interview sessions."""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Protocol

from config.settings import settings
from interview_session.errors import StorageError
from interview_session.models import InterviewSession
from observability import log_event
from storage.session_store import SessionHistoryEntry, SessionStore

from .autosave import RepeatingTimer

logger = logging.getLogger(__name__)


class Timer(Protocol):  # Cancellable repeating task
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


class SessionPersistence:
    """Keep the active interview session durable while it is in progress.

    Holds the only mutable state of the session core: the active session
    slot and the auto-save timer. Both are guarded by one re-entrant lock
    so a timer tick never interleaves with a caller-driven save.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        interval_s: Optional[float] = None,
        timer_factory: TimerFactory = RepeatingTimer,
    ) -> None:
        self._store = store
        self._interval_s = interval_s if interval_s is not None else settings.AUTO_SAVE_SECONDS
        self._timer_factory = timer_factory
        self._timer: Optional[Timer] = None
        self._active: Optional[InterviewSession] = None
        self._lock = threading.RLock()

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def active_session(self) -> Optional[InterviewSession]:
        with self._lock:
            return self._active

    @property
    def is_auto_saving(self) -> bool:
        with self._lock:
            return self._timer is not None

    def start_auto_save(self, session: InterviewSession) -> None:
        with self._lock:
            self._stop_timer()
            self._active = session
            self._save_quietly(session, trigger="initial")
            timer = self._timer_factory(self._interval_s, self._tick)
            timer.start()
            self._timer = timer

    def stop_auto_save(self) -> None:
        with self._lock:
            self._stop_timer()

    def update_session(self, session: InterviewSession) -> None:
        with self._lock:
            self._active = session

    def save_current_session(self) -> None:
        """Save the active session now; failures propagate to the caller."""

        with self._lock:
            session = self._active
            if session is None:
                return
            try:
                self._store.save(session)
            except StorageError:
                logger.error("Manual save failed for session %s", session.id, exc_info=True)
                raise
            log_event("session_saved", session.id, trigger="manual")

    def restore_session(self, session_id: str) -> Optional[InterviewSession]:
        try:
            session = self._store.load(session_id)
        except StorageError as exc:
            logger.error("Failed to restore session %s: %s", session_id, exc)
            return None
        return self._adopt(session)

    def restore_current_session(self) -> Optional[InterviewSession]:
        try:
            session = self._store.load_current()
        except StorageError as exc:
            logger.error("Failed to restore current session: %s", exc)
            return None
        return self._adopt(session)

    def complete_session(self, session: InterviewSession) -> SessionHistoryEntry:
        """Persist the final state, archive it and release the timer.

        The current pointer is cleared only after the final save and the
        history write succeed, so an interrupted completion still leaves
        the session loadable.
        """

        with self._lock:
            try:
                self._store.save(session)
                entry = self._store.save_to_history(session)
                self._store.clear_current_pointer()
            except StorageError:
                logger.error("Failed to complete session %s", session.id, exc_info=True)
                raise
            self._stop_timer()
            self._active = None
        log_event("session_completed", session.id, outcome="archived")
        return entry

    def get_history(self) -> List[SessionHistoryEntry]:
        return self._store.get_history()

    def load_from_history(self, session_id: str) -> Optional[InterviewSession]:
        return self._store.load(session_id)

    def has_session_in_progress(self) -> bool:
        try:
            session = self._store.load_current()
        except StorageError as exc:
            logger.error("Failed to check for a session in progress: %s", exc)
            return False
        return session is not None and not session.is_complete

    def clear_session(self) -> None:
        """Abandon the active session without archiving it."""

        with self._lock:
            session = self._active
            self._stop_timer()
            self._active = None
            self._store.clear_current_pointer()
        log_event("session_abandoned", session.id if session else None)

    def clear_all(self) -> None:
        """Drop every stored session together with the history ledger."""

        with self._lock:
            entries = len(self._store.get_history())
            self._stop_timer()
            self._active = None
            self._store.clear_all()
        log_event("history_cleared", None, entries=entries)

    def cleanup(self) -> None:
        with self._lock:
            if self._active is not None:
                self._save_quietly(self._active, trigger="cleanup")
            self._stop_timer()

    def __enter__(self) -> "SessionPersistence":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    def _adopt(self, session: Optional[InterviewSession]) -> Optional[InterviewSession]:
        if session is None:
            return None
        self.start_auto_save(session)
        log_event("session_restored", session.id, answered=len(session.answers), total=len(session.questions))
        return session

    def _tick(self) -> None:
        with self._lock:
            session = self._active
            if session is None:
                return
            self._save_quietly(session, trigger="autosave")

    def _save_quietly(self, session: InterviewSession, *, trigger: str) -> bool:
        try:
            self._store.save(session)
        except Exception as exc:  # noqa: BLE001
            logger.error("Session save (%s) failed for %s: %s", trigger, session.id, exc, exc_info=True)
            log_event("autosave_failed", session.id, level=logging.WARNING, trigger=trigger, error=str(exc))
            return False
        log_event("session_saved", session.id, trigger=trigger)
        return True

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["SessionPersistence", "TimerFactory"]
