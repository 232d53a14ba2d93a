"""Trailing-edge debounce for rapidly changing values (search box input).

Streamlit re-runs the page script on every interaction, so instead of a
callback timer the debouncer is polled: :meth:`Debounce.set` records the latest
input and restarts the delay, :attr:`Debounce.value` commits it once the delay
has elapsed without another change.
"""
from __future__ import annotations

import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_NOTHING = object()


class Debounce(Generic[T]):
    def __init__(
        self,
        initial: T,
        delay_ms: int,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self.delay_ms = delay_ms
        self._clock = clock
        self._value: T = initial
        self._latest: T = initial
        self._pending: object = _NOTHING
        self._deadline: Optional[float] = None

    def set(self, value: T) -> None:
        """Feed a new input; a changed input restarts the delay."""
        self._flush()
        if value == self._latest:
            return
        self._latest = value
        self._pending = value
        self._deadline = self._clock() + self.delay_ms / 1000.0

    @property
    def pending(self) -> bool:
        self._flush()
        return self._pending is not _NOTHING

    def remaining(self) -> float:
        """Seconds until the pending value is committed (0 when idle)."""
        if self._deadline is None:
            return 0.0
        return max(self._deadline - self._clock(), 0.0)

    def poll_interval(self, minimum: float = 0.05) -> Optional[float]:
        """Seconds until the next useful poll, or ``None`` when nothing is pending."""
        if not self.pending:
            return None
        return max(self.remaining(), minimum)

    @property
    def value(self) -> T:
        self._flush()
        return self._value

    def cancel(self) -> None:
        """Drop any pending value; the committed value stays as it is."""
        self._pending = _NOTHING
        self._deadline = None
        self._latest = self._value

    def _flush(self) -> None:
        if self._pending is _NOTHING or self._deadline is None:
            return
        if self._clock() >= self._deadline:
            self._value = self._pending  # type: ignore[assignment]
            self._pending = _NOTHING
            self._deadline = None


__all__ = ["Debounce"]
