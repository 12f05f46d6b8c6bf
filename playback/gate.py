# playback/gate.py
from __future__ import annotations

import threading
from typing import Callable, Optional

PayloadCallback = Callable[[str], None]


class DispatchGate:
    """Holds the consumer callback and keeps playback closed until one exists.

    Once a callback is attached the gate stays open; attaching again only
    swaps the sink used for later deliveries.
    """

    def __init__(self, callback: Optional[PayloadCallback] = None):
        self._lock = threading.Lock()
        self._callback: Optional[PayloadCallback] = None
        self._open = threading.Event()
        if callback is not None:
            self.attach(callback)

    def attach(self, callback: PayloadCallback) -> None:
        if callback is None:
            raise ValueError("callback must not be None")
        with self._lock:
            self._callback = callback
        self._open.set()

    @property
    def is_open(self) -> bool:
        return self._open.is_set()

    @property
    def callback(self) -> Optional[PayloadCallback]:
        with self._lock:
            return self._callback

    def wait(self, stop: threading.Event, poll_s: float = 0.05) -> bool:
        """Block until a callback is attached (True) or ``stop`` is set (False)."""
        while not stop.is_set():
            if self._open.wait(poll_s):
                return True
        return False

    def deliver(self, payload: str) -> None:
        cb = self.callback
        if cb is None:
            raise RuntimeError("no callback attached")
        cb(payload)
