# schema/vehicle_message.py
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

Value = Union[float, bool, str]


@dataclass
class VehicleMessage:
    """One OpenXC-style measurement: ``{"name": ..., "value": ..., "event": ...}``.

    TraceSource does not look inside payloads; consumers that expect this
    shape decode them with from_json().
    """

    name: str
    value: Value
    event: Optional[Value] = None

    def to_dict(self) -> dict:
        d: dict = {"name": self.name, "value": self.value}
        if self.event is not None:
            d["event"] = self.event
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, d: dict) -> "VehicleMessage":
        if not isinstance(d, dict):
            raise ValueError(f"expected a JSON object, got {type(d).__name__}")
        name = d.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("message has no 'name'")
        if "value" not in d:
            raise ValueError(f"message '{name}' has no 'value'")
        value: Any = d["value"]
        if isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        event = d.get("event")
        if isinstance(event, int) and not isinstance(event, bool):
            event = float(event)
        return cls(name=name, value=value, event=event)

    @classmethod
    def from_json(cls, raw: str) -> "VehicleMessage":
        try:
            d = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"payload is not JSON: {e}") from e
        return cls.from_dict(d)
