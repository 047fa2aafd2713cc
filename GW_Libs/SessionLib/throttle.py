"""
Rate limiting for tool input handlers.

A Throttle runs its function at most once per interval. Calls arriving
inside the interval replace a single pending call, which `flush()` runs
(typically when the pointer is released) so the last position is never
lost.
"""

import time
from typing import Any, Callable, Dict, Optional, Tuple


class Throttle:
    """
    Leading-edge throttle with an explicitly flushed trailing call.

    Example:
        >>> throttled = Throttle(apply_at, interval=0.016)
        >>> throttled(point)      # runs
        >>> throttled(point2)     # within 16 ms: kept as pending
        >>> throttled.flush()     # runs apply_at(point2)
    """

    def __init__(
        self,
        func: Callable[..., Any],
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")
        self.func = func
        self.interval = interval
        self._clock = clock
        self._last_call: Optional[float] = None
        self._pending: Optional[Tuple[Tuple[Any, ...], Dict[str, Any]]] = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        now = self._clock()
        if self._last_call is None or now - self._last_call >= self.interval:
            self._last_call = now
            self._pending = None
            return self.func(*args, **kwargs)

        self._pending = (args, kwargs)
        return None

    def flush(self) -> Any:
        """Run the pending call now, if any."""
        if self._pending is None:
            return None
        args, kwargs = self._pending
        self._pending = None
        self._last_call = self._clock()
        return self.func(*args, **kwargs)

    def cancel(self) -> None:
        """Drop the pending call."""
        self._pending = None
