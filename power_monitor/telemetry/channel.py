"""Live telemetry channel backed by a Qt WebSocket."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional, Union

from PySide6.QtCore import QObject, QTimer, QUrl, Signal, Slot
from PySide6.QtWebSockets import QWebSocket

from power_monitor.io.settings import ReconnectSettings
from power_monitor.telemetry.cell import LatestValueCell
from power_monitor.telemetry.sample import TelemetryDecodeError, TelemetrySample, decode_sample

logger = logging.getLogger(__name__)

DEFAULT_HIGHLIGHT_MS = 150


class ConnectionState(Enum):
    """Lifecycle of the live connection."""

    CONNECTING = auto()
    OPEN = auto()
    CLOSED = auto()
    ERRORED = auto()


@dataclass(frozen=True)
class LiveReadingState:
    """Current-reading state owned by the live channel."""

    sample: Optional[TelemetrySample] = None
    highlighted: bool = False
    connection: ConnectionState = ConnectionState.CLOSED


@dataclass(frozen=True)
class ReconnectPolicy:
    """Capped exponential backoff between reconnect attempts."""

    enabled: bool = True
    initial_delay_ms: int = 1000
    max_delay_ms: int = 30000
    multiplier: float = 2.0

    @classmethod
    def from_settings(cls, settings: ReconnectSettings) -> "ReconnectPolicy":
        return cls(
            enabled=settings.enabled,
            initial_delay_ms=settings.initial_delay_ms,
            max_delay_ms=settings.max_delay_ms,
            multiplier=settings.multiplier,
        )

    def delay_for(self, attempt: int) -> int:
        delay = self.initial_delay_ms * (self.multiplier ** max(attempt, 0))
        return int(min(delay, self.max_delay_ms))


class LiveTelemetryChannel(QObject):
    """Owns one WebSocket connection and publishes the latest decoded sample.

    Socket callbacks only decode and drop samples into a single-slot cell; a
    posted ingestion step applies the newest one. ``close`` releases the socket
    exactly once, whichever path triggers it.
    """

    reading_changed = Signal(object)
    highlight_changed = Signal(bool)
    connection_changed = Signal(object)

    def __init__(
        self,
        url: str,
        socket: Optional[QObject] = None,
        highlight_ms: int = DEFAULT_HIGHLIGHT_MS,
        reconnect: Optional[ReconnectPolicy] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self.url = url
        self.reconnect = reconnect or ReconnectPolicy()
        if socket is None:
            socket = QWebSocket()
            socket.setParent(self)
        self._socket = socket
        self._state = LiveReadingState()
        self._cell: LatestValueCell[TelemetrySample] = LatestValueCell()
        self._drain_scheduled = False
        self._opened = False
        self._closed = False
        self._connected = False
        self._attempt = 0

        self._highlight_timer = QTimer(self)
        self._highlight_timer.setSingleShot(True)
        self._highlight_timer.setInterval(highlight_ms)
        self._highlight_timer.timeout.connect(self._on_highlight_expired)

        self._reconnect_timer = QTimer(self)
        self._reconnect_timer.setSingleShot(True)
        self._reconnect_timer.timeout.connect(self._reconnect_now)

        self._socket.connected.connect(self._on_connected)
        self._socket.disconnected.connect(self._on_disconnected)
        self._socket.textMessageReceived.connect(self._on_text_message)
        self._socket.binaryMessageReceived.connect(self._on_binary_message)
        self._socket.errorOccurred.connect(self._on_error)

    # ------------------------------------------------------------------
    @property
    def state(self) -> LiveReadingState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def dropped_samples(self) -> int:
        """Samples superseded in the cell before the ingestion step ran."""
        return self._cell.overwritten

    def open(self) -> None:
        if self._opened or self._closed:
            return
        self._opened = True
        self._connect()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._reconnect_timer.stop()
        self._highlight_timer.stop()
        logger.info("Closing telemetry connection to %s", self.url)
        self._socket.close()
        self._update(connection=ConnectionState.CLOSED, highlighted=False)

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    def _update(self, **changes) -> None:
        """Single entry point for every change to the current-reading state."""
        previous = self._state
        current = replace(previous, **changes)
        if current == previous:
            return
        self._state = current
        if current.connection != previous.connection:
            self.connection_changed.emit(current.connection)
        if current.sample is not previous.sample:
            self.reading_changed.emit(current)
        if current.highlighted != previous.highlighted:
            self.highlight_changed.emit(current.highlighted)

    def _connect(self) -> None:
        logger.info("Connecting to telemetry source %s", self.url)
        self._update(connection=ConnectionState.CONNECTING)
        self._socket.open(QUrl(self.url))

    def _schedule_reconnect(self) -> None:
        if self._closed or not self.reconnect.enabled or self._reconnect_timer.isActive():
            return
        delay = self.reconnect.delay_for(self._attempt)
        self._attempt += 1
        logger.info("Reconnecting to %s in %d ms (attempt %d)", self.url, delay, self._attempt)
        self._reconnect_timer.start(delay)

    def _accept(self, payload: Union[str, bytes]) -> None:
        if self._closed:
            return
        try:
            sample = decode_sample(payload)
        except TelemetryDecodeError as exc:
            logger.warning("Dropping malformed telemetry message %r: %s", payload, exc)
            return
        self._cell.put(sample)
        if not self._drain_scheduled:
            self._drain_scheduled = True
            QTimer.singleShot(0, self._drain)

    def _drain(self) -> None:
        self._drain_scheduled = False
        if self._closed:
            return
        sample = self._cell.take()
        if sample is None:
            return
        self._update(sample=sample, highlighted=True)
        self._highlight_timer.start()

    # ------------------------------------------------------------------
    @Slot()
    def _on_connected(self) -> None:
        self._connected = True
        self._attempt = 0
        logger.info("WebSocket connected")
        self._update(connection=ConnectionState.OPEN)

    @Slot()
    def _on_disconnected(self) -> None:
        self._connected = False
        if self._closed:
            return
        logger.warning("WebSocket closed")
        if self._state.connection != ConnectionState.ERRORED:
            self._update(connection=ConnectionState.CLOSED)
        self._schedule_reconnect()

    def _on_error(self, error) -> None:
        if self._closed:
            return
        logger.warning("WebSocket error (%s): %s", error, self._socket.errorString())
        self._update(connection=ConnectionState.ERRORED)
        if not self._connected:
            self._schedule_reconnect()

    @Slot(str)
    def _on_text_message(self, message: str) -> None:
        self._accept(message)

    def _on_binary_message(self, message) -> None:
        # QWebSocket delivers a QByteArray.
        payload = message.data() if hasattr(message, "data") else bytes(message)
        self._accept(payload)

    def _on_highlight_expired(self) -> None:
        self._update(highlighted=False)

    def _reconnect_now(self) -> None:
        if self._closed:
            return
        self._connect()
