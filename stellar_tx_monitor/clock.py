"""Time sources used by the polling loop."""
from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> float:
        ...

    def sleep(self, cancelled: threading.Event, seconds: float) -> bool:
        """Sleep up to ``seconds``; return ``True`` if ``cancelled`` was set."""
        ...


class SystemClock:
    """Monotonic wall clock with an interruptible sleep."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000

    def sleep(self, cancelled: threading.Event, seconds: float) -> bool:
        return cancelled.wait(seconds)


SYSTEM_CLOCK = SystemClock()
