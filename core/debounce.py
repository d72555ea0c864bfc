"""Debounce gate: coalesce rapid triggers into one delayed call."""

import logging
import threading
from typing import Callable, Optional

from .config import DEBOUNCE_DELAY

logger = logging.getLogger(__name__)


class Debouncer:
    """Runs an action once, `delay` seconds after the last trigger.

    There is a single timer slot: each trigger cancels the pending timer and
    starts a new one. cancel() must be called when the owner is torn down so
    the action never runs against stale state.
    """

    def __init__(self, action: Callable[[], None], delay: float = DEBOUNCE_DELAY):
        self.action = action
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.delay, self._fire)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or threading.current_thread() is not self._timer:
                return
            self._timer = None
        try:
            self.action()
        except Exception:
            logger.exception("Debounced action failed")

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
