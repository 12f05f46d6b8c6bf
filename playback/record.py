# playback/record.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from .errors import MalformedRecordError


@dataclass(frozen=True)
class TraceRecord:
    timestamp: float  # UNIX seconds, fractional
    payload: str


def parse_line(line: Union[str, bytes]) -> TraceRecord:
    """Split one trace line into a TraceRecord.

    Format is ``<unix-timestamp>: <payload>``. Only the first colon splits;
    any later colons belong to the payload. Raises MalformedRecordError when
    there is no colon, the timestamp is not a finite number, or a raw
    (bytes) line is not valid UTF-8.
    """
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError:
            raise MalformedRecordError(line.decode("utf-8", "replace"), "not valid UTF-8") from None

    left, sep, right = line.partition(":")
    if not sep:
        raise MalformedRecordError(line, "missing ':' delimiter")

    try:
        ts = float(left)
    except ValueError:
        raise MalformedRecordError(line, "timestamp is not a number") from None
    if not math.isfinite(ts):
        raise MalformedRecordError(line, "timestamp is not finite")

    return TraceRecord(timestamp=ts, payload=right.strip())
