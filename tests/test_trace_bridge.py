from gui.trace_bridge import TraceSignalBridge


def test_bridge_emits_payload_and_message():
    bridge = TraceSignalBridge()
    payloads, messages = [], []
    bridge.payload_sig.connect(payloads.append)
    bridge.message_sig.connect(messages.append)

    bridge('{"name":"engine_speed","value":772.0}')

    assert payloads == ['{"name":"engine_speed","value":772.0}']
    assert messages == [{"name": "engine_speed", "value": 772.0}]


def test_bridge_counts_undecodable_payloads():
    bridge = TraceSignalBridge()
    messages = []
    bridge.message_sig.connect(messages.append)

    bridge.deliver("CAN 0x7e8 41 0c 1a f8")

    assert messages == []
    assert bridge.undecodable == 1
