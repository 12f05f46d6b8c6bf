"""
Global-ish config for trace playback.

You can import this from anywhere:

    from config import TRACE_URI, TRACE_PUB_ENDPOINT, TRACE_RESTART_DELAY_S

Everything can be overridden through the environment, e.g.

    TRACE_URI=resource://1 TRACE_SPEED=4 python tools/replay_trace.py
"""

import os
from pathlib import Path


def _env_bool(var: str, default: str = "0") -> bool:
    return os.environ.get(var, default).strip().lower() in ("1", "true", "yes")


# Trace to play when none is given on the command line. Either a plain path,
# a file:// URI or resource://<id> (see TRACE_RESOURCE_DIR).
TRACE_URI = os.environ.get("TRACE_URI", "resource://1")

# Bundled traces live here, named by numeric id: data/traces/1.trace
TRACE_RESOURCE_DIR = Path(os.environ.get("TRACE_RESOURCE_DIR", Path(__file__).parent / "data" / "traces"))

# Pause between the end of one pass and the next. Keeps an empty or broken
# trace from spinning.
TRACE_RESTART_DELAY_S = float(os.environ.get("TRACE_RESTART_DELAY_S", "1.0"))

# Upper bound on how long stop() can go unnoticed while waiting for a callback.
TRACE_POLL_S = float(os.environ.get("TRACE_POLL_S", "0.05"))

# 1.0 = real time, 2.0 = twice as fast.
TRACE_SPEED = float(os.environ.get("TRACE_SPEED", "1.0"))

# Open failures are fatal by default (a missing trace won't appear later).
# Set >0 to retry opening that many times, TRACE_RESTART_DELAY_S apart.
TRACE_OPEN_RETRIES = int(os.environ.get("TRACE_OPEN_RETRIES", "0"))

# Drop records whose timestamp goes backwards instead of playing them at once.
TRACE_STRICT_ORDERING = _env_bool("TRACE_STRICT_ORDERING")

# ZMQ endpoint the replay tool publishes payloads on
TRACE_PUB_ENDPOINT = os.environ.get("TRACE_PUB_ENDPOINT", "tcp://127.0.0.1:6002")

# Optional diagnostic logging.
TRACE_DEBUG = _env_bool("TRACE_DEBUG")
