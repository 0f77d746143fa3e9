"""Thread-safe counters and helpers that report them as statistics."""

from __future__ import annotations

import threading
from collections.abc import Callable

StatCallback = Callable[[str, float], None]


class Counter:
    """An unsigned integer counter that wraps at the given bit width."""

    def __init__(self, value: int = 0, bits: int = 64) -> None:
        self._mask = (1 << bits) - 1
        self._value = value & self._mask
        self._lock = threading.Lock()

    def add(self, amount: int = 1) -> int:
        """Add amount and return the new value."""
        with self._lock:
            self._value = (self._value + amount) & self._mask
            return self._value

    def load(self) -> int:
        """Return the current value."""
        with self._lock:
            return self._value

    def take(self) -> int:
        """Return the current value and subtract it from the counter."""
        with self._lock:
            result = self._value
            self._value = 0
            return result

    def reset_if(self, expected: int) -> bool:
        """Set the counter to zero if it still holds expected."""
        with self._lock:
            if self._value != expected:
                return False
            self._value = 0
            return True


def send_value(metric: str, counter: Counter, send: StatCallback) -> None:
    """Report the counter's value."""
    send(metric, float(counter.load()))


def send_and_subtract(metric: str, counter: Counter, send: StatCallback) -> None:
    """Report the counter's value and subtract it from the counter."""
    send(metric, float(counter.take()))


def send_and_zero_if_not_updated(metric: str, counter: Counter, send: StatCallback) -> None:
    """Report the counter's value and zero it unless it changed meanwhile."""
    value = counter.load()
    counter.reset_if(value)
    send(metric, float(value))