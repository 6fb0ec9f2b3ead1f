"""Graphical user interface components for the power dashboard."""

from __future__ import annotations

from .model import (
    ChartPhase,
    ChartView,
    ReadingView,
    build_chart_view,
    build_reading_view,
)

__all__ = [
    "ChartPhase",
    "ChartView",
    "ReadingView",
    "build_chart_view",
    "build_reading_view",
]
