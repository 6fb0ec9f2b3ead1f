"""Historical power/current/voltage area chart embedded in Qt."""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from matplotlib import dates as mdates
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.colors import to_rgb
from matplotlib.figure import Figure
from matplotlib.patches import Polygon
from matplotlib.ticker import FuncFormatter
from PySide6.QtWidgets import QSizePolicy, QVBoxLayout, QWidget

from power_monitor.chart.projection import Window, format_bucket_label, x_key
from power_monitor.chart.style import (
    LEFT_AXIS,
    RIGHT_AXIS,
    SERIES,
    axis_domain,
    format_left_tick,
    format_right_tick,
    gradient_alpha,
)
from power_monitor.history.models import Bucket

GRADIENT_ROWS = 64
MAX_X_TICKS = 12


def bucket_positions(window: Window, buckets: Sequence[Bucket]) -> List[float]:
    """X coordinates: hour-of-day for today, matplotlib date numbers otherwise."""
    if x_key(window) == "hour":
        return [float(bucket.key) for bucket in buckets]
    return [float(mdates.date2num(bucket.key)) for bucket in buckets]


def gradient_image(color: str, rows: int = GRADIENT_ROWS) -> np.ndarray:
    """RGBA column whose opacity fades from the data line towards the baseline."""
    image = np.empty((rows, 1, 4), dtype=float)
    image[:, :, :3] = to_rgb(color)
    # imshow(origin="lower") draws row 0 at the bottom.
    image[:, 0, 3] = list(reversed(gradient_alpha(rows)))
    return image


def tick_positions(positions: Sequence[float], max_ticks: int = MAX_X_TICKS) -> List[float]:
    """One tick per bucket, thinned to an even stride when there are too many."""
    stride = max(1, math.ceil(len(positions) / max_ticks))
    return list(positions[::stride])


def to_host_scale(values: Sequence[float], axis: str) -> List[float]:
    """Map values from ``axis`` onto the left axis so every fill shares one axes."""
    low, high = axis_domain(axis)
    host_low, host_high = axis_domain(LEFT_AXIS)
    scale = (host_high - host_low) / (high - low)
    return [host_low + (value - low) * scale for value in values]


class HistoryChart(QWidget):
    """Embeds a Matplotlib plot with power/current on the left axis and voltage on the right."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._window = Window.TODAY
        self._buckets: Sequence[Bucket] = ()
        self._positions: List[float] = []

        self._figure = Figure(figsize=(8, 3))
        self._canvas = FigureCanvas(self._figure)
        self._canvas.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

        layout = QVBoxLayout()
        layout.addWidget(self._canvas)
        self.setLayout(layout)

        self._ax_left = self._figure.add_subplot(111)
        self._ax_right = self._ax_left.twinx()
        self._tooltip = None

        self._canvas.mpl_connect("motion_notify_event", self._on_hover)
        self._draw()

    @property
    def figure(self) -> Figure:
        return self._figure

    @property
    def axes(self) -> Tuple:
        """``(left, right)`` axes; the right one is a twin sharing the x axis."""
        return self._ax_left, self._ax_right

    def set_projection(self, window: Window, buckets: Sequence[Bucket]) -> None:
        self._window = window
        self._buckets = tuple(buckets)
        self._positions = bucket_positions(window, self._buckets)
        self._draw()

    # ------------------------------------------------------------------
    def _axis_for(self, axis: str):
        return self._ax_left if axis == LEFT_AXIS else self._ax_right

    def _draw(self) -> None:
        self._ax_left.clear()
        self._ax_right.clear()
        self._ax_right.patch.set_visible(False)
        self._ax_right.xaxis.set_visible(False)
        self._ax_right.yaxis.tick_right()
        self._ax_right.yaxis.set_label_position("right")
        self._tooltip = None

        self._ax_left.grid(True, axis="y", linestyle="--", linewidth=0.3)
        for spine in ("top", "left", "right"):
            self._ax_left.spines[spine].set_visible(False)
            self._ax_right.spines[spine].set_visible(False)

        handles = []
        for style in SERIES:
            values = [getattr(bucket, style.key) for bucket in self._buckets]
            (line,) = self._axis_for(style.axis).plot(
                self._positions, values, color=style.color, linewidth=1.5, label=style.label
            )
            handles.append(line)
            # Fills live on the host axes, below every line.
            self._fill_gradient(to_host_scale(values, style.axis), style.color)

        self._ax_left.set_ylim(*axis_domain(LEFT_AXIS))
        self._ax_right.set_ylim(*axis_domain(RIGHT_AXIS))
        self._ax_left.yaxis.set_major_formatter(FuncFormatter(lambda value, _pos: format_left_tick(value)))
        self._ax_right.yaxis.set_major_formatter(FuncFormatter(lambda value, _pos: format_right_tick(value)))
        self._ax_left.set_xticks(tick_positions(self._positions))
        self._ax_left.xaxis.set_major_formatter(FuncFormatter(self._format_x))
        self._ax_left.tick_params(axis="both", length=0, pad=8)
        self._ax_right.tick_params(axis="both", length=0, pad=8)

        if self._positions:
            x_min, x_max = min(self._positions), max(self._positions)
            if x_min == x_max:
                x_max = x_min + 1.0
            self._ax_left.set_xlim(x_min, x_max)

        self._ax_left.legend(handles=handles, loc="lower center", bbox_to_anchor=(0.5, -0.35), ncol=len(handles), frameon=False)
        self._figure.tight_layout()
        self._canvas.draw_idle()

    def _fill_gradient(self, values: Sequence[float], color: str) -> None:
        if len(self._positions) < 2:
            return
        baseline = axis_domain(LEFT_AXIS)[0]
        x_min, x_max = min(self._positions), max(self._positions)
        y_max = max(max(values), baseline)
        image = self._ax_left.imshow(
            gradient_image(color),
            aspect="auto",
            origin="lower",
            extent=(x_min, x_max, baseline, y_max),
            zorder=1,
        )
        outline = np.vstack([[x_min, baseline], np.column_stack([self._positions, values]), [x_max, baseline]])
        clip = Polygon(outline, closed=True, facecolor="none", edgecolor="none")
        self._ax_left.add_patch(clip)
        image.set_clip_path(clip)

    def _format_x(self, value: float, _pos=None) -> str:
        if x_key(self._window) == "hour":
            return format_bucket_label(self._window, int(round(value)))
        return format_bucket_label(self._window, mdates.num2date(value).date())

    def _nearest_index(self, x: float) -> Optional[int]:
        if not self._positions:
            return None
        return min(range(len(self._positions)), key=lambda idx: abs(self._positions[idx] - x))

    def _on_hover(self, event) -> None:
        if event.inaxes not in (self._ax_left, self._ax_right) or event.xdata is None:
            if self._tooltip is not None and self._tooltip.get_visible():
                self._tooltip.set_visible(False)
                self._canvas.draw_idle()
            return
        index = self._nearest_index(event.xdata)
        if index is None:
            return
        bucket = self._buckets[index]
        lines = [format_bucket_label(self._window, bucket.key)]
        lines.extend(f"{style.label}: {getattr(bucket, style.key):g}" for style in SERIES)
        text = "\n".join(lines)
        anchor = (self._positions[index], bucket.power)
        if self._tooltip is None:
            self._tooltip = self._ax_left.annotate(
                text,
                xy=anchor,
                xytext=(12, 12),
                textcoords="offset points",
                bbox={"boxstyle": "round", "facecolor": "white", "alpha": 0.9},
                fontsize=8,
            )
        else:
            self._tooltip.set_text(text)
            self._tooltip.xy = anchor
        self._tooltip.set_visible(True)
        self._canvas.draw_idle()
