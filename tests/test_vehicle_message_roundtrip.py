import pytest

from schema.vehicle_message import VehicleMessage


def test_vehicle_message_roundtrip():
    m = VehicleMessage(name="door_status", value="driver", event=False)
    m2 = VehicleMessage.from_json(m.to_json())
    assert m2 == m
    assert m2.event is False


def test_ints_become_floats():
    m = VehicleMessage.from_json('{"name":"odometer","value":2}')
    assert m.value == 2.0
    assert isinstance(m.value, float)
    assert m.event is None
    assert "event" not in m.to_dict()


def test_bool_values_survive():
    m = VehicleMessage.from_json('{"name":"parking_brake_status","value":false}')
    assert m.value is False


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", '{"value": 1}', '{"name": "x"}'])
def test_rejects_other_payloads(raw):
    with pytest.raises(ValueError):
        VehicleMessage.from_json(raw)
