# playback/clock.py
from __future__ import annotations

import time
from typing import Callable, Optional


class PlaybackClock:
    """Pacing for one playback pass.

    The first record of a pass anchors it: its timestamp is paired with the
    monotonic instant the pass started, and every later record is due at
    ``start + (timestamp - first_timestamp) / speed``. Each pass calls
    reset(), so looped playback never accumulates drift from earlier passes.
    """

    def __init__(self, speed: float = 1.0, now: Callable[[], float] = time.monotonic):
        self.speed = float(speed)
        self._now = now
        self.first_timestamp: Optional[float] = None
        self.start = self._now()

    def reset(self) -> None:
        self.first_timestamp = None
        self.start = self._now()

    @property
    def anchored(self) -> bool:
        return self.first_timestamp is not None

    def wait_duration(self, timestamp: float) -> float:
        """Seconds to wait before emitting a record stamped ``timestamp``. Never negative."""
        if self.first_timestamp is None:
            self.first_timestamp = float(timestamp)
            return 0.0

        elapsed = (float(timestamp) - self.first_timestamp) / self.speed
        target = self.start + elapsed
        return max(target - self._now(), 0.0)
