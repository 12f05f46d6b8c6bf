from pathlib import Path

from tools.replay_trace import main


def test_replay_prints_decoded_messages(tmp_path: Path, capsys):
    trace = tmp_path / "drive.trace"
    trace.write_text('1.0: {"name":"engine_speed","value":772.0}\n1.01: raw payload\n')

    rc = main([str(trace), "--duration", "0.3", "--restart-delay", "10"])

    out = capsys.readouterr().out
    assert rc == 0
    assert "engine_speed" in out
    assert "772.0" in out
    assert "raw payload" in out


def test_replay_missing_trace_fails(tmp_path: Path):
    rc = main([str(tmp_path / "nope.trace"), "--duration", "1.0"])
    assert rc == 1
