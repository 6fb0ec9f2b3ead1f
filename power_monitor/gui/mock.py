"""Mock data sources so the dashboard can run without the device backend."""

from __future__ import annotations

import itertools
import json
import math
import random
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from power_monitor.history.fetcher import DatasetResponse, ResponseCallback


def _reading(counter: int) -> Dict[str, float]:
    voltage = 230.0 + 4.0 * math.sin(counter / 6.0)
    current = 1800.0 + 600.0 * math.sin(counter / 3.0 + 0.5)
    power = voltage * current / 1000.0
    return {"current": round(current, 1), "voltage": round(voltage, 1), "power": round(power, 1)}


def generate_mock_sample(counter: int = 0, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Create one live message in the device's wire format."""
    stamp = now or datetime.now(timezone.utc)
    payload: Dict[str, Any] = {"time": stamp.isoformat()}
    payload.update(_reading(counter))
    return payload


def generate_mock_dataset(today: Optional[date] = None) -> Dict[str, Any]:
    """Create a ``{success, data}`` dataset response body for demonstration purposes."""
    today = today or date.today()
    hourly: List[Dict[str, Any]] = []
    for hour in range(24):
        entry: Dict[str, Any] = {"hour": hour}
        entry.update(_reading(hour * 3))
        hourly.append(entry)

    def daily(days: int) -> List[Dict[str, Any]]:
        entries = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            entry: Dict[str, Any] = {"date": day.isoformat()}
            entry.update(_reading(day.toordinal()))
            entries.append(entry)
        return entries

    return {"success": True, "data": {"today": hourly, "week": daily(7), "month": daily(30)}}


class MockTelemetrySocket(QObject):
    """Stands in for ``QWebSocket``: emits a JSON sample on every timer tick once opened."""

    connected = Signal()
    disconnected = Signal()
    textMessageReceived = Signal(str)
    binaryMessageReceived = Signal(bytes)
    errorOccurred = Signal(object)

    def __init__(self, interval_ms: int = 1000, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._counter = itertools.count()
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._emit_sample)
        self.open_calls = 0
        self.close_calls = 0
        self._closed = False

    def open(self, url) -> None:
        self.open_calls += 1
        self._closed = False
        QTimer.singleShot(0, self._on_open)

    def close(self) -> None:
        self.close_calls += 1
        self._closed = True
        if self._timer.isActive():
            self._timer.stop()
            self.disconnected.emit()

    def errorString(self) -> str:
        return ""

    def _on_open(self) -> None:
        if self._closed:
            return
        self._timer.start()
        self.connected.emit()

    def _emit_sample(self) -> None:
        self.textMessageReceived.emit(json.dumps(generate_mock_sample(next(self._counter))))


class MockDatasetTransport(QObject):
    """Answers dataset requests with generated data after a short, jittered delay."""

    def __init__(self, delay_ms: int = 400, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.delay_ms = delay_ms

    def get(self, url: str, callback: ResponseCallback) -> None:
        body = json.dumps(generate_mock_dataset()).encode("utf-8")
        delay = self.delay_ms + random.randint(0, self.delay_ms // 2 + 1)
        QTimer.singleShot(delay, lambda: callback(DatasetResponse(status=200, body=body)))
