import threading
import time

import pytest

from playback.gate import DispatchGate


def test_wait_returns_false_when_stopped():
    gate = DispatchGate()
    stop = threading.Event()
    stop.set()
    assert gate.wait(stop, poll_s=0.01) is False
    assert not gate.is_open


def test_attach_from_another_thread_opens_gate():
    gate = DispatchGate()
    stop = threading.Event()
    got = []

    threading.Timer(0.05, gate.attach, args=(got.append,)).start()
    t0 = time.monotonic()
    assert gate.wait(stop, poll_s=0.01) is True
    assert time.monotonic() - t0 < 1.0

    gate.deliver("a")
    assert got == ["a"]


def test_reattach_replaces_sink_and_stays_open():
    gate = DispatchGate()
    first, second = [], []
    gate.attach(first.append)
    gate.deliver("x")
    gate.attach(second.append)
    gate.deliver("y")
    assert first == ["x"]
    assert second == ["y"]
    assert gate.is_open


def test_none_callback_rejected():
    gate = DispatchGate()
    with pytest.raises(ValueError):
        gate.attach(None)
    with pytest.raises(RuntimeError):
        gate.deliver("nobody listening")
