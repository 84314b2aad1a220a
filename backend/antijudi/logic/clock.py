"""Time source for spin timestamps."""
import time
from typing import Protocol


class Clock(Protocol):
    """Protocol for timestamp sources."""

    def now_ms(self) -> int:
        """Return current time as integer epoch milliseconds."""
        ...


class SystemClock:
    """Wall-clock time in epoch milliseconds."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000
