"""Custom Qt widgets used by the dashboard."""

from .history_chart import HistoryChart
from .reading_panel import ReadingPanel

__all__ = ["HistoryChart", "ReadingPanel"]
