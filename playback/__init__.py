"""Timestamped trace playback.

    from playback import TraceSource

    src = TraceSource("file:///tmp/drive.trace", callback=print)
    ...
    src.stop()
"""

from .errors import (  # noqa: F401
    MalformedRecordError,
    TraceConfigurationError,
    TraceOpenError,
    TraceSourceError,
)
from .record import TraceRecord, parse_line  # noqa: F401
from .opener import open_trace  # noqa: F401
from .trace_source import PlaybackState, TraceSource  # noqa: F401

__all__ = [
    "MalformedRecordError",
    "PlaybackState",
    "TraceConfigurationError",
    "TraceOpenError",
    "TraceRecord",
    "TraceSource",
    "TraceSourceError",
    "open_trace",
    "parse_line",
]
