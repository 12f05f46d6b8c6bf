# playback/errors.py
from __future__ import annotations


class TraceSourceError(Exception):
    """Base class for trace playback errors."""


class TraceConfigurationError(TraceSourceError):
    """Bad constructor arguments (missing trace URI, speed <= 0, ...)."""


class TraceOpenError(TraceSourceError):
    """The trace could not be resolved or opened.

    Raised by the opener. TraceSource treats it as fatal to the whole
    playback lifecycle: a missing trace will not start existing.
    """


class MalformedRecordError(TraceSourceError, ValueError):
    """A trace line that is not ``<timestamp>: <payload>``."""

    def __init__(self, line: str, reason: str):
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason
