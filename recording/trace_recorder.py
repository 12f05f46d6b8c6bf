# recording/trace_recorder.py
from __future__ import annotations

import json
import logging
import os
import queue
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


@dataclass
class TraceLine:
    t: float
    payload: str

    def format(self) -> str:
        return f"{self.t:.6f}: {self.payload}\n"


class TraceRecorder:
    """
    Thread-safe recorder for trace files.
    Writes one ``<unix-time>: <payload>`` line per record, the format
    TraceSource plays back.
    """

    def __init__(self, out_path: Path, max_queue: int = 10_000):
        self.out_path = Path(out_path)
        self._q: "queue.Queue[Optional[TraceLine]]" = queue.Queue(maxsize=max_queue)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name="trace-recorder", daemon=True)
        self._fh = None
        self.dropped = 0

    @staticmethod
    def make_session_dir(base_dir: str | os.PathLike = "recordings") -> Path:
        ts = time.strftime("%Y%m%d-%H%M%S")
        p = Path(base_dir) / ts
        p.mkdir(parents=True, exist_ok=True)
        return p

    def start(self) -> None:
        self.out_path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self.out_path, "a", buffering=1, encoding="utf-8")  # line-buffered
        self._thread.start()

    def stop(self, timeout_s: float = 2.0) -> None:
        self._stop.set()
        if self._fh is None:
            return
        # The sentinel must get in even when the queue is full
        self._q.put(None)
        self._thread.join(timeout=timeout_s)
        if self._thread.is_alive():
            logger.warning("TraceRecorder thread did not stop within %.1fs; %s may be incomplete.", timeout_s, self.out_path)
            return
        if self._fh:
            try:
                self._fh.flush()
                self._fh.close()
            finally:
                self._fh = None

    def record(self, payload: Union[str, Dict[str, Any]], t: Optional[float] = None) -> None:
        if self._stop.is_set():
            return
        if not isinstance(payload, str):
            payload = json.dumps(payload, separators=(",", ":"))
        # One record per line, whatever the payload contains
        payload = payload.replace("\r", " ").replace("\n", " ")
        ev = TraceLine(t=time.time() if t is None else float(t), payload=payload)
        try:
            self._q.put_nowait(ev)
        except queue.Full:
            # drop if overwhelmed (keeps the producer responsive)
            self.dropped += 1

    def _run(self) -> None:
        assert self._fh is not None
        while True:
            ev = self._q.get()
            if ev is None:
                break
            try:
                self._fh.write(ev.format())
            except OSError as e:
                logger.warning("Trace write failed (%s): %s", self.out_path, e)
