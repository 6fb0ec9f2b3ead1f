"""Live telemetry sample model and wire decoding."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Union

NUMERIC_FIELDS = ("current", "voltage", "power")


class TelemetryDecodeError(ValueError):
    """Raised when an inbound live message is not a valid telemetry sample."""


@dataclass(frozen=True)
class TelemetrySample:
    """Single reading pushed by the metering device.

    ``current`` is in mA, ``voltage`` in V and ``power`` in W.
    """

    time: datetime
    current: float
    voltage: float
    power: float


def _parse_time(value: Any) -> datetime:
    if isinstance(value, bool):
        raise TelemetryDecodeError(f"Invalid time value: {value!r}")
    if isinstance(value, (int, float)):
        # Epoch milliseconds, as produced by JavaScript Date.now().
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise TelemetryDecodeError(f"Time out of range: {value!r}") from exc
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise TelemetryDecodeError(f"Invalid time value: {value!r}") from exc
    raise TelemetryDecodeError(f"Invalid time value: {value!r}")


def _parse_number(record: Mapping[str, Any], key: str) -> float:
    value = record[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TelemetryDecodeError(f"Field '{key}' must be a number, got {value!r}")
    return float(value)


def decode_sample(payload: Union[str, bytes]) -> TelemetrySample:
    """Decode one inbound channel message into a :class:`TelemetrySample`."""
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TelemetryDecodeError(f"Message is not valid UTF-8: {exc}") from exc

    try:
        record = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise TelemetryDecodeError(f"Malformed JSON message: {exc}") from exc

    if not isinstance(record, dict):
        raise TelemetryDecodeError(f"Expected a JSON object, got {type(record).__name__}")

    for key in ("time",) + NUMERIC_FIELDS:
        if key not in record:
            raise TelemetryDecodeError(f"Missing field '{key}'")

    return TelemetrySample(
        time=_parse_time(record["time"]),
        current=_parse_number(record, "current"),
        voltage=_parse_number(record, "voltage"),
        power=_parse_number(record, "power"),
    )


def format_reading_time(sample: TelemetrySample) -> str:
    """Render the sample time as a local ``HH:MM:SS`` string."""
    stamp = sample.time
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone()
    return stamp.strftime("%H:%M:%S")
