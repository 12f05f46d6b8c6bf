# gui/trace_bridge.py
from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from schema.vehicle_message import VehicleMessage

logger = logging.getLogger(__name__)


class TraceSignalBridge(QObject):
    """TraceSource callback -> Qt signals.

    Payloads arrive on the playback thread; connect the signals to widgets and
    Qt queues them onto the UI thread.
    """

    payload_sig = pyqtSignal(str)
    message_sig = pyqtSignal(dict)

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self.undecodable = 0

    def __call__(self, payload: str) -> None:
        self.deliver(payload)

    def deliver(self, payload: str) -> None:
        self.payload_sig.emit(payload)
        try:
            msg = VehicleMessage.from_json(payload)
        except ValueError as e:
            self.undecodable += 1
            logger.warning("Ignoring trace payload the UI can't decode (%s): %r", e, payload)
            return
        self.message_sig.emit(msg.to_dict())
