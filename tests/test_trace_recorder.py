from pathlib import Path

from playback import parse_line
from recording.trace_recorder import TraceRecorder


def test_trace_recorder_writes_trace_lines(tmp_path: Path):
    out = tmp_path / "drive.trace"
    rec = TraceRecorder(out)
    rec.start()
    rec.record({"name": "vehicle_speed", "value": 42.0}, t=1332794184.319404)
    rec.record('{"name":"engine_speed","value":772.0}', t=1332794184.5)
    rec.stop()

    lines = out.read_text().splitlines()
    assert len(lines) == 2
    first = parse_line(lines[0])
    assert abs(first.timestamp - 1332794184.319404) < 1e-6
    assert first.payload == '{"name":"vehicle_speed","value":42.0}'
    assert parse_line(lines[1]).payload == '{"name":"engine_speed","value":772.0}'


def test_multiline_payload_stays_on_one_line(tmp_path: Path):
    out = tmp_path / "drive.trace"
    rec = TraceRecorder(out)
    rec.start()
    rec.record("line one\nline two", t=1.0)
    rec.stop()
    assert out.read_text() == "1.000000: line one line two\n"


def test_record_after_stop_is_ignored(tmp_path: Path):
    out = tmp_path / "drive.trace"
    rec = TraceRecorder(out)
    rec.start()
    rec.stop()
    rec.record("late", t=2.0)
    assert out.read_text() == ""


def test_stop_without_start(tmp_path: Path):
    rec = TraceRecorder(tmp_path / "never.trace")
    rec.stop()
    assert not (tmp_path / "never.trace").exists()


def test_make_session_dir(tmp_path: Path):
    p = TraceRecorder.make_session_dir(tmp_path / "recordings")
    assert p.is_dir()
    assert p.parent == tmp_path / "recordings"
