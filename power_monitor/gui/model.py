"""Presentation snapshots shared between the GUI and the data subsystems."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from power_monitor.chart.projection import Window, format_bucket_label, project
from power_monitor.history.fetcher import FetchStatus
from power_monitor.history.models import Bucket
from power_monitor.telemetry.channel import ConnectionState, LiveReadingState
from power_monitor.telemetry.sample import format_reading_time


class ChartPhase(Enum):
    """Which page the chart pane shows."""

    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


@dataclass(slots=True)
class ReadingView:
    """Current-reading card values; ``None`` means no sample has arrived yet."""

    time_text: Optional[str] = None
    current_ma: Optional[float] = None
    voltage_v: Optional[float] = None
    power_w: Optional[float] = None
    highlighted: bool = False
    connection: ConnectionState = ConnectionState.CLOSED

    @property
    def has_data(self) -> bool:
        return self.time_text is not None


@dataclass(slots=True)
class ChartView:
    """Everything the chart pane needs for one render."""

    window: Window
    phase: ChartPhase
    refreshing: bool = False
    error: Optional[str] = None
    buckets: Tuple[Bucket, ...] = field(default_factory=tuple)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(format_bucket_label(self.window, bucket.key) for bucket in self.buckets)


def build_reading_view(state: LiveReadingState) -> ReadingView:
    sample = state.sample
    if sample is None:
        return ReadingView(highlighted=state.highlighted, connection=state.connection)
    return ReadingView(
        time_text=format_reading_time(sample),
        current_ma=sample.current,
        voltage_v=sample.voltage,
        power_w=sample.power,
        highlighted=state.highlighted,
        connection=state.connection,
    )


def build_chart_view(window: Window, status: FetchStatus, buckets: Optional[Tuple[Bucket, ...]] = None) -> ChartView:
    """Derive the chart pane view; an error hides any previously loaded buckets."""
    if status.error:
        return ChartView(window=window, phase=ChartPhase.ERROR, error=status.error)
    if status.loading:
        return ChartView(window=window, phase=ChartPhase.LOADING)
    return ChartView(
        window=window,
        phase=ChartPhase.READY,
        refreshing=status.refreshing,
        buckets=project(window, status.dataset) if buckets is None else tuple(buckets),
    )
