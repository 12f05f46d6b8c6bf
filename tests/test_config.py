import os
import importlib
from pathlib import Path


def test_config_defaults():
    for var in ("TRACE_URI", "TRACE_RESTART_DELAY_S", "TRACE_OPEN_RETRIES", "TRACE_STRICT_ORDERING", "TRACE_RESOURCE_DIR"):
        os.environ.pop(var, None)
    cfg = importlib.reload(__import__("config"))
    assert cfg.TRACE_URI.startswith("resource://")
    assert cfg.TRACE_RESTART_DELAY_S == 1.0
    assert cfg.TRACE_OPEN_RETRIES == 0
    assert cfg.TRACE_STRICT_ORDERING is False
    assert cfg.TRACE_PUB_ENDPOINT.startswith("tcp://")
    assert Path(cfg.TRACE_RESOURCE_DIR).name == "traces"


def test_config_env_overrides(monkeypatch):
    monkeypatch.setenv("TRACE_SPEED", "2.5")
    monkeypatch.setenv("TRACE_STRICT_ORDERING", "yes")
    cfg = importlib.reload(__import__("config"))
    try:
        assert cfg.TRACE_SPEED == 2.5
        assert cfg.TRACE_STRICT_ORDERING is True
    finally:
        monkeypatch.undo()
        importlib.reload(cfg)
