from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Tuple

from landcost.config import settings


class RecomputeDebouncer:
    """
    Delays a recompute until input has been quiet for `delay` seconds.

    Each trigger() restarts the timer with the newest arguments; only the
    last call runs. Recompute functions are pure, so dropping superseded
    calls loses nothing.
    """

    def __init__(self, fn: Callable[..., Any], delay: float = 0.1):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.fn = fn
        self.delay = delay
        self.last_result: Any = None
        self.calls = 0
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Tuple[tuple, dict]] = None
        self._generation = 0

    @classmethod
    def from_settings(cls, fn: Callable[..., Any]) -> "RecomputeDebouncer":
        return cls(fn, delay=settings.recompute_debounce_ms / 1000)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            self._stop_timer()
            self._pending = (args, kwargs)
            self._timer = threading.Timer(self.delay, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> Any:
        """Run the pending call now, if any, and return its result."""
        with self._lock:
            self._stop_timer()
            gen = self._generation
        return self._fire(gen)

    def cancel(self) -> None:
        with self._lock:
            self._stop_timer()
            self._pending = None

    def _stop_timer(self) -> None:
        # a timer that already woke up sees a newer generation and does nothing
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1

    def _fire(self, gen: int) -> Any:
        with self._lock:
            if gen != self._generation:
                return None
            pending, self._pending = self._pending, None
            self._timer = None
        if pending is None:
            with self._lock:
                return self.last_result
        args, kwargs = pending
        result = self.fn(*args, **kwargs)
        with self._lock:
            self.last_result = result
            self.calls += 1
        return result
