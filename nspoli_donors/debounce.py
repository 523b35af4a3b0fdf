"""Debounce policy for user-driven recomputation.

Search runs on every keystroke in the interactive browser. ``Debouncer``
coalesces rapid updates: each ``push`` replaces the pending value and restarts
the quiet period, and ``poll`` delivers only the last value once ``delay``
seconds have passed without another push.

The clock is injectable so the policy is testable without sleeping; the
terminal UI drives ``poll`` from its event loop.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")

DEFAULT_DELAY = 0.3


class Debouncer(Generic[T]):
    __slots__ = ("_callback", "_delay", "_clock", "_pending", "_has_pending", "_deadline")

    def __init__(
        self,
        callback: Callable[[T], None],
        *,
        delay: float = DEFAULT_DELAY,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self._callback = callback
        self._delay = delay
        self._clock = clock
        self._pending: T | None = None
        self._has_pending = False
        self._deadline = 0.0

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._has_pending

    def push(self, value: T) -> None:
        self._pending = value
        self._has_pending = True
        self._deadline = self._clock() + self._delay

    def poll(self) -> bool:
        """Fire the callback if the quiet period is over. Returns whether it fired."""

        if not self._has_pending or self._clock() < self._deadline:
            return False
        return self.flush()

    def flush(self) -> bool:
        """Fire immediately with the pending value, if any."""

        if not self._has_pending:
            return False
        value = self._pending
        self.cancel()
        self._callback(value)  # type: ignore[arg-type]
        return True

    def cancel(self) -> None:
        self._pending = None
        self._has_pending = False


__all__ = ["DEFAULT_DELAY", "Debouncer"]
