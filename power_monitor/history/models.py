"""Historical aggregate dataset models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Mapping, Sequence, Tuple, Union

WINDOW_NAMES = ("today", "week", "month")
BucketKey = Union[int, date]


class DatasetDecodeError(ValueError):
    """Raised when a dataset payload does not have the expected shape."""


@dataclass(frozen=True)
class Bucket:
    """One aggregated data point keyed by hour-of-day or calendar date."""

    key: BucketKey
    power: float
    current: float
    voltage: float


@dataclass(frozen=True)
class HistoricalDataset:
    """Three-window aggregate returned by a single fetch."""

    today: Tuple[Bucket, ...] = field(default_factory=tuple)
    week: Tuple[Bucket, ...] = field(default_factory=tuple)
    month: Tuple[Bucket, ...] = field(default_factory=tuple)

    def window(self, name: str) -> Tuple[Bucket, ...]:
        if name not in WINDOW_NAMES:
            raise KeyError(f"Unknown dataset window '{name}'")
        return getattr(self, name)


def _number(entry: Mapping[str, Any], key: str, context: str) -> float:
    if key not in entry:
        raise DatasetDecodeError(f"Missing field '{key}' in {context}")
    value = entry[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DatasetDecodeError(f"Field '{key}' in {context} must be a number, got {value!r}")
    return float(value)


def _hour_key(entry: Mapping[str, Any], context: str) -> int:
    if "hour" not in entry:
        raise DatasetDecodeError(f"Missing field 'hour' in {context}")
    value = entry["hour"]
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 23:
        raise DatasetDecodeError(f"Field 'hour' in {context} must be an integer 0-23, got {value!r}")
    return value


def _date_key(entry: Mapping[str, Any], context: str) -> date:
    if "date" not in entry:
        raise DatasetDecodeError(f"Missing field 'date' in {context}")
    value = entry["date"]
    if not isinstance(value, str):
        raise DatasetDecodeError(f"Field 'date' in {context} must be a string, got {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text).date()
    except ValueError as exc:
        raise DatasetDecodeError(f"Invalid date {value!r} in {context}") from exc


def _parse_window(name: str, raw: Any) -> Tuple[Bucket, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, Sequence) or isinstance(raw, (str, bytes)):
        raise DatasetDecodeError(f"Window '{name}' must be a list of buckets")

    buckets: List[Bucket] = []
    for index, entry in enumerate(raw):
        context = f"{name}[{index}]"
        if not isinstance(entry, Mapping):
            raise DatasetDecodeError(f"Bucket {context} must be an object")
        key = _hour_key(entry, context) if name == "today" else _date_key(entry, context)
        if buckets and key < buckets[-1].key:
            raise DatasetDecodeError(f"Buckets in '{name}' are not in ascending order at index {index}")
        buckets.append(
            Bucket(
                key=key,
                power=_number(entry, "power", context),
                current=_number(entry, "current", context),
                voltage=_number(entry, "voltage", context),
            )
        )
    return tuple(buckets)


def parse_dataset(data: Any) -> HistoricalDataset:
    """Build a :class:`HistoricalDataset` from the ``data`` member of a response.

    Windows absent from the payload are treated as empty.
    """
    if not isinstance(data, Mapping):
        raise DatasetDecodeError("Dataset payload must be an object")
    return HistoricalDataset(**{name: _parse_window(name, data.get(name)) for name in WINDOW_NAMES})
