"""Live telemetry decoding and the WebSocket channel."""

from .cell import LatestValueCell
from .channel import (
    DEFAULT_HIGHLIGHT_MS,
    ConnectionState,
    LiveReadingState,
    LiveTelemetryChannel,
    ReconnectPolicy,
)
from .sample import TelemetryDecodeError, TelemetrySample, decode_sample, format_reading_time

__all__ = [
    "DEFAULT_HIGHLIGHT_MS",
    "ConnectionState",
    "LatestValueCell",
    "LiveReadingState",
    "LiveTelemetryChannel",
    "ReconnectPolicy",
    "TelemetryDecodeError",
    "TelemetrySample",
    "decode_sample",
    "format_reading_time",
]
