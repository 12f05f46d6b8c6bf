# playback/trace_source.py
from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from pathlib import Path
from typing import IO, Callable, Optional

from .clock import PlaybackClock
from .errors import MalformedRecordError, TraceConfigurationError, TraceOpenError
from .gate import DispatchGate, PayloadCallback
from .opener import open_trace
from .record import parse_line

logger = logging.getLogger(__name__)

# Event.wait() overflows past threading.TIMEOUT_MAX, so long waits go in slices
_WAIT_SLICE_S = 60.0


class PlaybackState(Enum):
    WAITING_FOR_CALLBACK = "waiting_for_callback"
    OPENING = "opening"
    STREAMING = "streaming"
    RESTARTING = "restarting"
    STOPPED = "stopped"


class TraceSource:
    """Plays a pre-recorded trace back to a callback, in a continuous loop.

    The trace is a text file of UNIX timestamps followed by a payload:

        1332794184.319404: {"name":"fuel_consumed_since_restart","value":0.090000}
        1332794184.502802: {"name":"steering_wheel_angle","value":-346.985229}

    Each payload is delivered at roughly the same relative time it was
    recorded. When the trace runs out (or a read fails) it is closed, and
    playback restarts from the top after ``restart_delay_s``.

    Background thread:
      - started from the constructor, one per instance
      - does nothing until a callback is set (constructor or set_callback())
      - exits for good if the trace cannot be opened
      - all waits are interruptible, stop() takes effect within ``poll_s``

    The callback runs on the playback thread, one payload at a time, in file
    order.
    """

    def __init__(
        self,
        uri: str,
        callback: Optional[PayloadCallback] = None,
        *,
        opener: Optional[Callable[[str], IO]] = None,
        resource_dir: Optional[Path] = None,
        restart_delay_s: float | None = None,
        poll_s: float | None = None,
        speed: float | None = None,
        strict_ordering: bool | None = None,
        open_retries: int | None = None,
        on_status: Optional[Callable[[dict], None]] = None,
    ):
        if uri is None or not str(uri).strip():
            raise TraceConfigurationError("No filename specified for the trace source")

        from config import (
            TRACE_OPEN_RETRIES,
            TRACE_POLL_S,
            TRACE_RESTART_DELAY_S,
            TRACE_SPEED,
            TRACE_STRICT_ORDERING,
        )

        self.uri = str(uri)
        self.restart_delay_s = float(TRACE_RESTART_DELAY_S if restart_delay_s is None else restart_delay_s)
        self.poll_s = float(TRACE_POLL_S if poll_s is None else poll_s)
        speed = float(TRACE_SPEED if speed is None else speed)
        self.strict_ordering = bool(TRACE_STRICT_ORDERING if strict_ordering is None else strict_ordering)
        self.open_retries = int(TRACE_OPEN_RETRIES if open_retries is None else open_retries)

        if speed <= 0:
            raise TraceConfigurationError(f"Playback speed must be > 0, got {speed}")
        if self.restart_delay_s < 0:
            raise TraceConfigurationError(f"restart_delay_s must be >= 0, got {self.restart_delay_s}")
        if self.poll_s <= 0:
            raise TraceConfigurationError(f"poll_s must be > 0, got {self.poll_s}")
        if self.open_retries < 0:
            raise TraceConfigurationError(f"open_retries must be >= 0, got {self.open_retries}")

        if opener is None:
            def opener(u: str) -> IO:
                return open_trace(u, resource_dir)
        self._opener = opener

        self.on_status = on_status
        self._last_status: Optional[dict] = None
        self._last_error: Optional[str] = None

        self._gate = DispatchGate(callback)
        self._clock = PlaybackClock(speed=speed)
        self._stop = threading.Event()
        self._state = PlaybackState.WAITING_FOR_CALLBACK
        self._stats = {
            "passes": 0,
            "delivered": 0,
            "malformed": 0,
            "read_errors": 0,
            "callback_errors": 0,
        }

        logger.info("Starting new trace data source with trace file %s", self.uri)
        self._thread = threading.Thread(target=self._run, name="trace-playback", daemon=True)
        self._thread.start()

    def __repr__(self) -> str:
        return f"TraceSource(uri={self.uri!r}, state={self._state.value})"

    # --- public --------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def speed(self) -> float:
        return self._clock.speed

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._stop.is_set()

    def set_callback(self, callback: PayloadCallback) -> None:
        """Attach (or replace) the payload sink. The first call starts playback."""
        self._gate.attach(callback)

    def stop(self, timeout_s: float = 1.0) -> None:
        """Stop playback and the playback thread. Safe to call repeatedly, from any thread."""
        if not self._stop.is_set():
            logger.info("Stopping trace playback of %s", self.uri)
        self._stop.set()
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout=timeout_s)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the playback thread to exit. Returns True if it has."""
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def stats(self) -> dict:
        return dict(self._stats)

    # --- internals -----------------------------------------------------

    def _emit_status(self, status: dict) -> None:
        try:
            if self._last_status == status:
                return
            self._last_status = dict(status)
            if self.on_status:
                self.on_status(status)
        except Exception:
            logger.debug("Status hook failed for %s", self.uri, exc_info=True)

    def _set_state(self, state: PlaybackState) -> None:
        self._state = state
        status = {"state": state.value, "trace": self.uri, "pass": self._stats["passes"]}
        if state is PlaybackState.STOPPED and self._last_error:
            status["error"] = self._last_error
        self._emit_status(status)

    def _run(self) -> None:
        try:
            self._run_loop()
        except Exception:
            logger.exception("Trace playback of %s died unexpectedly", self.uri)
        finally:
            self._set_state(PlaybackState.STOPPED)
            logger.info("Playback of trace %s is finished", self.uri)

    def _run_loop(self) -> None:
        self._set_state(PlaybackState.WAITING_FOR_CALLBACK)
        if not self._gate.wait(self._stop, self.poll_s):
            return
        logger.debug("Starting playback of %s, callback is %r", self.uri, self._gate.callback)

        while not self._stop.is_set():
            self._set_state(PlaybackState.OPENING)
            stream = self._open_stream()
            if stream is None:
                return

            self._stats["passes"] += 1
            self._clock.reset()
            self._set_state(PlaybackState.STREAMING)
            try:
                self._play(stream)
            except (OSError, ValueError) as e:
                self._stats["read_errors"] += 1
                logger.warning("An exception occurred when reading the trace %s: %s", self.uri, e)
            finally:
                self._close_stream(stream)

            if self._stop.is_set():
                return
            self._set_state(PlaybackState.RESTARTING)
            logger.info("Restarting playback of trace %s", self.uri)
            if self._wait(self.restart_delay_s):
                return

    def _open_stream(self) -> Optional[IO]:
        attempt = 0
        while not self._stop.is_set():
            try:
                return self._opener(self.uri)
            except (TraceOpenError, OSError, ValueError) as e:
                self._last_error = str(e)
                if attempt >= self.open_retries:
                    logger.warning("Couldn't open the trace file %s: %s", self.uri, e)
                    return None
                attempt += 1
                logger.warning(
                    "Couldn't open the trace file %s (retry %d/%d): %s",
                    self.uri, attempt, self.open_retries, e,
                )
                if self._wait(self.restart_delay_s):
                    return None
        return None

    def _wait(self, seconds: float) -> bool:
        """Interruptible sleep. Returns True if stop was requested."""
        deadline = time.monotonic() + seconds
        remaining = seconds
        while remaining > 0:
            if self._stop.wait(min(remaining, _WAIT_SLICE_S)):
                return True
            remaining = deadline - time.monotonic()
        return self._stop.is_set()

    def _close_stream(self, stream: IO) -> None:
        try:
            stream.close()
        except Exception as e:
            logger.warning("Couldn't even close the trace file %s: %s", self.uri, e)

    def _play(self, stream: IO) -> None:
        prev_ts: Optional[float] = None
        while not self._stop.is_set():
            line = stream.readline()
            if not line:
                return  # EOF
            if not line.strip():
                continue

            try:
                record = parse_line(line)
            except MalformedRecordError as e:
                self._stats["malformed"] += 1
                logger.warning("A trace line was not in the expected format (%s)", e)
                continue

            if self.strict_ordering and prev_ts is not None and record.timestamp < prev_ts:
                self._stats["malformed"] += 1
                logger.warning(
                    "Dropping out-of-order record %.6f (previous %.6f) in %s",
                    record.timestamp, prev_ts, self.uri,
                )
                continue
            prev_ts = record.timestamp

            anchoring = not self._clock.anchored
            wait_s = self._clock.wait_duration(record.timestamp)
            if anchoring:
                logger.debug("Storing %.6f as the first timestamp of %s", record.timestamp, self.uri)

            if wait_s > 0 and self._wait(wait_s):
                return
            if self._stop.is_set():
                return
            self._dispatch(record.payload)

    def _dispatch(self, payload: str) -> None:
        try:
            self._gate.deliver(payload)
        except Exception:
            # Never let a consumer kill the playback thread
            self._stats["callback_errors"] += 1
            logger.exception("Trace callback failed for payload %r", payload)
        else:
            self._stats["delivered"] += 1
