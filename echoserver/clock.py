from __future__ import annotations

import time
from typing import Callable, Optional

from .utils import format_duration


class ProcessClock:
    """Start timestamp captured once, read to compute uptime."""

    def __init__(self, now: Callable[[], int] = time.monotonic_ns, started: Optional[int] = None) -> None:
        self._now = now
        self._started = now() if started is None else started

    @property
    def started(self) -> int:
        return self._started

    def elapsed_ns(self) -> int:
        return max(0, self._now() - self._started)

    def uptime(self) -> str:
        return format_duration(self.elapsed_ns())


process_clock = ProcessClock()
