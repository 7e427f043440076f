"""
Trailing-edge debouncer for recomputation triggers.
"""

import logging
import threading

from core.config import DEBOUNCE_DELAY_MS

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Coalesce rapid calls into one call after a quiet period.

    Each call cancels the pending one and restarts the delay, so only the last
    call's arguments are used. The wrapped function runs on a timer thread.

    Usage:
        refresh = Debouncer(recompute, delay_ms=250)
        refresh(granularity="week")   # superseded
        refresh(granularity="month")  # runs once, 250ms later
    """

    def __init__(self, func, delay_ms: int = DEBOUNCE_DELAY_MS):
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        self.func = func
        self.delay = delay_ms / 1000
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending_args: tuple | None = None

    def __call__(self, *args, **kwargs) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending_args = (args, kwargs)
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending_args is not None

    def _take_pending(self) -> tuple | None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            pending, self._pending_args = self._pending_args, None
            return pending

    def _fire(self) -> None:
        pending = self._take_pending()
        if pending is None:
            return
        args, kwargs = pending
        try:
            self.func(*args, **kwargs)
        except Exception:
            # Nothing above a timer thread can catch this
            logger.exception("Debounced call to %r failed", self.func)

    def flush(self) -> bool:
        """Run the pending call now, on the caller's thread. Returns whether one ran."""
        pending = self._take_pending()
        if pending is None:
            return False
        args, kwargs = pending
        self.func(*args, **kwargs)
        return True

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        self._take_pending()
