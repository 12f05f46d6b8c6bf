# telemetry/trace_publisher.py
from __future__ import annotations

import logging
import threading
from typing import Optional

import zmq

from network.zmq_opts import apply_pub_opts

logger = logging.getLogger(__name__)


class TracePublisher:
    """Callback sink that forwards trace payloads on a ZMQ PUB socket.

    Pass an instance as the TraceSource callback:

        pub = TracePublisher("tcp://*:6002", bind=True)
        src = TraceSource(uri, callback=pub)

    Note: ZMQ sockets are *thread-affine*. The socket is created lazily by the
    first delivery, i.e. inside the playback thread that keeps using it.
    Sends never block playback: a payload that can't be queued is dropped.
    """

    def __init__(self, endpoint: str, bind: bool = False, context: Optional[zmq.Context] = None):
        self.endpoint = endpoint
        self.bind = bool(bind)
        self._ctx = context or zmq.Context.instance()
        self._sock: Optional[zmq.Socket] = None
        self._lock = threading.Lock()
        self._closed = False
        self.sent = 0
        self.dropped = 0

    def __call__(self, payload: str) -> None:
        self.publish(payload)

    def _make_sock(self) -> zmq.Socket:
        sock = self._ctx.socket(zmq.PUB)
        apply_pub_opts(sock, linger_ms=0, snd_hwm=1000)
        if self.bind:
            sock.bind(self.endpoint)
        else:
            sock.connect(self.endpoint)
        logger.info("Trace publisher %s %s", "bound to" if self.bind else "connected to", self.endpoint)
        return sock

    def publish(self, payload: str) -> bool:
        """Send one payload. Returns False if it was dropped."""
        with self._lock:
            if self._closed:
                return False
            if self._sock is None:
                self._sock = self._make_sock()
            try:
                self._sock.send_string(payload, flags=zmq.NOBLOCK)
            except zmq.Again:
                # Keep playback real-time: drop instead of blocking.
                self.dropped += 1
                return False
        self.sent += 1
        return True

    def close(self) -> None:
        with self._lock:
            self._closed = True
            s = self._sock
            self._sock = None
        if s is not None:
            try:
                s.close(0)
            except zmq.ZMQError as e:
                logger.warning("Failed to close trace publisher socket (%s): %s", self.endpoint, e)
