#!/usr/bin/env python3
"""Replay a vehicle trace in a loop, to stdout or onto a ZMQ PUB endpoint.

Examples:
  python tools/replay_trace.py data/traces/1.trace
  python tools/replay_trace.py resource://1 --endpoint tcp://*:6002 --bind
  python tools/replay_trace.py file:///tmp/drive.trace --speed 4 --duration 30

Plays back with the original timing and starts over at the end of the file
(after --restart-delay). Ctrl-C stops.
"""
from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

# Ensure repo root is on sys.path when run as `python3 tools/...`
_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from config import (  # noqa: E402
    TRACE_DEBUG,
    TRACE_OPEN_RETRIES,
    TRACE_PUB_ENDPOINT,
    TRACE_RESTART_DELAY_S,
    TRACE_SPEED,
    TRACE_URI,
)
from playback import PlaybackState, TraceSource, TraceSourceError  # noqa: E402
from schema.vehicle_message import VehicleMessage  # noqa: E402


def _print_payload(payload: str) -> None:
    try:
        msg = VehicleMessage.from_json(payload)
    except ValueError:
        print(payload, flush=True)
        return
    line = f"{msg.name:<32} {msg.value}"
    if msg.event is not None:
        line += f"  ({msg.event})"
    print(line, flush=True)


def _print_status(status: dict) -> None:
    err = status.get("error")
    extra = f" error={err}" if err else ""
    print(f"[trace] {status['state']} pass={status['pass']}{extra}", file=sys.stderr, flush=True)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Loop a recorded vehicle trace with its original timing")
    ap.add_argument("trace", nargs="?", default=TRACE_URI, help="Trace path, file:// URI or resource://<id>")
    ap.add_argument("--endpoint", default=None, help=f"Publish payloads on this ZMQ endpoint (e.g. {TRACE_PUB_ENDPOINT})")
    ap.add_argument("--bind", action="store_true", help="bind() the PUB socket instead of connect()")
    ap.add_argument("--speed", type=float, default=TRACE_SPEED, help="Playback speed (1.0 = real time)")
    ap.add_argument("--restart-delay", type=float, default=TRACE_RESTART_DELAY_S, help="Pause between passes (s)")
    ap.add_argument("--open-retries", type=int, default=TRACE_OPEN_RETRIES, help="Retry a failed open N times")
    ap.add_argument("--strict", action="store_true", help="Drop records whose timestamp goes backwards")
    ap.add_argument("--duration", type=float, default=0.0, help="Stop after N seconds (0 = run until Ctrl-C)")
    ap.add_argument("--debug", action="store_true", default=TRACE_DEBUG, help="Enable debug logs")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    publisher = None
    if args.endpoint:
        from telemetry.trace_publisher import TracePublisher
        publisher = TracePublisher(args.endpoint, bind=args.bind)
        sink = publisher
    else:
        sink = _print_payload

    try:
        src = TraceSource(
            args.trace,
            callback=sink,
            speed=args.speed,
            restart_delay_s=args.restart_delay,
            open_retries=args.open_retries,
            strict_ordering=args.strict,
            on_status=_print_status if args.debug else None,
        )
    except TraceSourceError as e:
        print(f"[trace] {e}", file=sys.stderr)
        return 2

    print(f"[trace] playing {src.uri} at {src.speed:g}x", file=sys.stderr, flush=True)

    t0 = time.monotonic()
    try:
        # Keep main alive without pegging CPU
        while src.state is not PlaybackState.STOPPED:
            if args.duration > 0 and (time.monotonic() - t0) >= args.duration:
                break
            time.sleep(0.25)
    except KeyboardInterrupt:
        print("[trace] stopping…", file=sys.stderr)
    finally:
        src.stop()
        if publisher is not None:
            publisher.close()

    stats = src.stats()
    print(
        f"[trace] passes={stats['passes']} delivered={stats['delivered']} "
        f"malformed={stats['malformed']} read_errors={stats['read_errors']}",
        file=sys.stderr,
    )
    # A trace that never opened is an error for the CLI
    return 1 if stats["passes"] == 0 else 0


if __name__ == "__main__":
    sys.exit(main())
