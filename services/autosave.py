"""Cancellable repeating timer used for periodic session auto-save."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Call ``callback`` every ``interval_s`` seconds on a daemon thread.

    ``cancel`` only stops future firings; a callback that is already
    running finishes normally. Exceptions raised by the callback are
    logged and the timer keeps firing.
    """

    def __init__(self, interval_s: float, callback: Callable[[], None], *, name: str = "autosave") -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.interval_s = interval_s
        self._callback = callback
        self._name = name
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stopped.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("RepeatingTimer can only be started once")
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._stopped.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _run(self) -> None:
        while not self._stopped.wait(self.interval_s):
            try:
                self._callback()
            except Exception:  # noqa: BLE001
                logger.exception("Timer %s callback failed", self._name)


__all__ = ["RepeatingTimer"]
