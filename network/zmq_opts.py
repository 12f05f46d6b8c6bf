"""network/zmq_opts.py

Best-effort socket options for the trace PUB link.

Options that the local libzmq/pyzmq build doesn't know are skipped, so older
builds keep working.
"""

from __future__ import annotations

from typing import Optional

import zmq


def _set(sock: zmq.Socket, name: str, val: int) -> bool:
    opt = getattr(zmq, name, None)
    if opt is None:
        return False
    try:
        sock.setsockopt(opt, int(val))
    except zmq.ZMQError:
        return False
    return True


def apply_pub_opts(
    sock: zmq.Socket,
    *,
    linger_ms: int = 0,
    snd_hwm: Optional[int] = 1000,
    reconnect_ivl_ms: int = 250,
    reconnect_ivl_max_ms: int = 2000,
    tcp_keepalive: bool = True,
    tcp_nodelay: Optional[bool] = True,
) -> None:
    """Apply the options a replayed telemetry PUB socket wants."""

    _set(sock, "LINGER", linger_ms)
    if snd_hwm is not None:
        _set(sock, "SNDHWM", snd_hwm)

    # Only matters in connect() mode
    _set(sock, "RECONNECT_IVL", reconnect_ivl_ms)
    _set(sock, "RECONNECT_IVL_MAX", reconnect_ivl_max_ms)

    if tcp_keepalive:
        _set(sock, "TCP_KEEPALIVE", 1)

    # Trace payloads are tiny; don't let Nagle batch them
    if tcp_nodelay is not None:
        _set(sock, "TCP_NODELAY", 1 if tcp_nodelay else 0)
