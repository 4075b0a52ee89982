"""One-shot millisecond timer."""

from __future__ import annotations

import time
from typing import Callable, Optional

_UINT32 = 0xFFFFFFFF


def _default_millis() -> int:
    return int(time.monotonic() * 1000)


class Timer:
    """Timer that expires a fixed timeout after ``start``."""

    def __init__(self, millis: Optional[Callable[[], int]] = None) -> None:
        self._millis = millis or _default_millis
        self.timeout_ms = 0
        self._next_timeout = 0

    def set_timeout(self, timeout_ms: int) -> None:
        self.timeout_ms = int(timeout_ms)

    def trigger_time_in_sec(self) -> int:
        """Seconds until expiry, computed as unsigned 32 bit (wraps once expired)."""
        return ((self._next_timeout - self._millis()) & _UINT32) // 1000

    def is_active(self) -> bool:
        return self._next_timeout != 0

    def reset(self) -> None:
        self._next_timeout = 0

    def check(self) -> bool:
        """True once the current time is past the expiry point."""
        return self._millis() > self._next_timeout

    def start(self) -> None:
        self._next_timeout = self._millis() + self.timeout_ms