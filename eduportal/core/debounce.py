"""
Trailing-edge debounce on the running asyncio loop.
Every trigger() restarts the quiet period; only the last value is delivered.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable


class Debouncer:
    """Calls callback(value) once the triggers have paused for `delay` seconds."""

    def __init__(self, delay: float, callback: Callable[[Any], None]):
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._value: Any = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self, value: Any) -> None:
        """Store value and (re)start the timer. Must be called from inside the event loop."""
        self.cancel()
        self._value = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Deliver the pending value now instead of waiting for the timer."""
        if self._handle is None:
            return
        self.cancel()
        self._callback(self._value)

    def _fire(self) -> None:
        self._handle = None
        self._callback(self._value)
