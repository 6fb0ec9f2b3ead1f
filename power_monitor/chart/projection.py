"""Window selection and projection of the dataset onto a bucket sequence."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional, Tuple

from PySide6.QtCore import QObject, Signal

from power_monitor.history.fetcher import FetchStatus
from power_monitor.history.models import Bucket, BucketKey, HistoricalDataset


class Window(Enum):
    """User-selectable retention windows, valued by their selector key."""

    TODAY = "today"
    WEEK = "7d"
    MONTH = "30d"

    @property
    def dataset_field(self) -> str:
        return _DATASET_FIELDS[self]

    @property
    def title(self) -> str:
        return _TITLES[self]


_DATASET_FIELDS = {Window.TODAY: "today", Window.WEEK: "week", Window.MONTH: "month"}
_TITLES = {Window.TODAY: "Today", Window.WEEK: "Last 7 days", Window.MONTH: "Last 30 days"}

DEFAULT_WINDOW = Window.WEEK


def resolve_window(key: object) -> Window:
    """Map a selector key to a window; anything unrecognised falls back to the week."""
    if isinstance(key, Window):
        return key
    try:
        return Window(key)
    except ValueError:
        return DEFAULT_WINDOW


def project(window_key: object, dataset: Optional[HistoricalDataset]) -> Tuple[Bucket, ...]:
    """Return the bucket sequence to render for ``window_key``."""
    if dataset is None:
        return ()
    return dataset.window(resolve_window(window_key).dataset_field)


def x_key(window_key: object) -> str:
    return "hour" if resolve_window(window_key) is Window.TODAY else "date"


def format_bucket_label(window_key: object, key: BucketKey) -> str:
    """Label used for both axis ticks and the tooltip header."""
    if resolve_window(window_key) is Window.TODAY:
        return f"{key}:00"
    if not isinstance(key, date):
        raise TypeError(f"Expected a calendar date for window {window_key!r}, got {key!r}")
    return f"{key:%b} {key.day}"


class WindowSelector(QObject):
    """Holds the selected window and re-projects whenever it or the dataset changes."""

    selection_changed = Signal(object)
    projection_changed = Signal(object)

    def __init__(self, initial: object = Window.TODAY, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._window = resolve_window(initial)
        self._status = FetchStatus()
        self._buckets: Tuple[Bucket, ...] = ()

    @property
    def window(self) -> Window:
        return self._window

    @property
    def status(self) -> FetchStatus:
        return self._status

    @property
    def buckets(self) -> Tuple[Bucket, ...]:
        return self._buckets

    def select(self, key: object) -> None:
        window = resolve_window(key)
        if window is self._window:
            return
        self._window = window
        self.selection_changed.emit(window)
        self._reproject()

    def set_status(self, status: FetchStatus) -> None:
        self._status = status
        self._reproject()

    def _reproject(self) -> None:
        dataset = None if self._status.error else self._status.dataset
        self._buckets = project(self._window, dataset)
        self.projection_changed.emit(self._buckets)
