"""Qt-based main window for the power consumption dashboard."""

from __future__ import annotations

import html
import logging
from typing import Optional

from PySide6.QtCore import Qt, Signal, Slot
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from power_monitor.chart.projection import Window, WindowSelector
from power_monitor.gui.model import ChartPhase, ChartView, ReadingView, build_chart_view, build_reading_view
from power_monitor.gui.widgets import HistoryChart, ReadingPanel
from power_monitor.history.fetcher import HistoricalDatasetFetcher
from power_monitor.io.settings import DashboardSettings
from power_monitor.telemetry.channel import ConnectionState, LiveTelemetryChannel, ReconnectPolicy

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Layout constants
WINDOW_DEFAULT_SIZE = (1200, 760)
CHART_MIN_HEIGHT = 250

CHART_TITLE = "Power Consumption Line Chart"
CHART_DESCRIPTION_READY = "Visualizing power consumption over time"
CHART_DESCRIPTION_LOADING = "Loading power consumption data..."
CHART_DESCRIPTION_ERROR = "Error loading data"

PAGE_LOADING = 0
PAGE_ERROR = 1
PAGE_CHART = 2


class ChartPane(QGroupBox):
    """Window selector, refresh button and the loading / error / chart pages."""

    window_selected = Signal(object)
    refresh_requested = Signal()

    def __init__(self) -> None:
        super().__init__(CHART_TITLE)
        self.description_label = QLabel(CHART_DESCRIPTION_LOADING)

        self.window_combo = QComboBox()
        for window in Window:
            self.window_combo.addItem(window.title, window)
        self.window_combo.currentIndexChanged.connect(self._on_window_changed)

        self.refresh_btn = QPushButton("Refresh")
        self.refresh_btn.clicked.connect(self.refresh_requested.emit)

        header = QHBoxLayout()
        header.addWidget(self.description_label)
        header.addStretch()
        header.addWidget(self.window_combo)
        header.addWidget(self.refresh_btn)

        self.loading_label = QLabel("Loading data...")
        self.loading_label.setAlignment(Qt.AlignCenter)
        self.error_label = QLabel()
        self.error_label.setAlignment(Qt.AlignCenter)
        self.error_label.setWordWrap(True)
        self.chart = HistoryChart()

        self.pages = QStackedWidget()
        self.pages.addWidget(self.loading_label)
        self.pages.addWidget(self.error_label)
        self.pages.addWidget(self.chart)
        self.pages.setMinimumHeight(CHART_MIN_HEIGHT)

        layout = QVBoxLayout()
        layout.addLayout(header)
        layout.addWidget(self.pages)
        self.setLayout(layout)

    def set_window(self, window: Window) -> None:
        index = self.window_combo.findData(window)
        if index < 0:
            return
        self.window_combo.blockSignals(True)
        self.window_combo.setCurrentIndex(index)
        self.window_combo.blockSignals(False)

    def update_view(self, view: ChartView) -> None:
        self.set_window(view.window)
        if view.phase is ChartPhase.LOADING:
            self.description_label.setText(CHART_DESCRIPTION_LOADING)
            self.pages.setCurrentIndex(PAGE_LOADING)
        elif view.phase is ChartPhase.ERROR:
            self.description_label.setText(CHART_DESCRIPTION_ERROR)
            detail = html.escape(view.error or "")
            self.error_label.setText(f"<p style='color:#ef4444'>Failed to load data</p><p style='color:#6b7280'>{detail}</p>")
            self.pages.setCurrentIndex(PAGE_ERROR)
        else:
            self.description_label.setText(CHART_DESCRIPTION_READY)
            self.chart.set_projection(view.window, view.buckets)
            self.pages.setCurrentIndex(PAGE_CHART)

        busy = view.phase is ChartPhase.LOADING or view.refreshing
        self.refresh_btn.setEnabled(not busy)
        self.refresh_btn.setText("Refreshing..." if view.refreshing else "Refresh")

    def _on_window_changed(self, index: int) -> None:
        self.window_selected.emit(self.window_combo.itemData(index))


class MainWindow(QMainWindow):
    """Main UI window: live reading cards above the historical chart."""

    window_selected = Signal(object)
    refresh_requested = Signal()
    closing = Signal()

    def __init__(self, title: str = "Power Consumption Monitoring Dashboard") -> None:
        super().__init__()
        self.setWindowTitle(title)
        self.resize(*WINDOW_DEFAULT_SIZE)

        heading = QLabel(title)
        heading.setStyleSheet("font-size: 22px; font-weight: bold;")
        self.reading_panel = ReadingPanel()
        self.chart_pane = ChartPane()

        central = QWidget()
        layout = QVBoxLayout()
        layout.addWidget(heading)
        layout.addWidget(self.reading_panel)
        layout.addWidget(self.chart_pane, stretch=1)
        central.setLayout(layout)
        self.setCentralWidget(central)

        self.chart_pane.window_selected.connect(self.window_selected)
        self.chart_pane.refresh_requested.connect(self.refresh_requested)
        self.set_connection_state(ConnectionState.CLOSED)

    @Slot(object)
    def update_reading(self, view: ReadingView) -> None:
        self.reading_panel.update_reading(view)

    @Slot(bool)
    def set_highlighted(self, highlighted: bool) -> None:
        self.reading_panel.set_highlighted(highlighted)

    @Slot(object)
    def update_chart(self, view: ChartView) -> None:
        self.chart_pane.update_view(view)

    @Slot(object)
    def set_connection_state(self, state: ConnectionState) -> None:
        self.statusBar().showMessage(f"Live telemetry: {state.name.lower()}")

    def closeEvent(self, event) -> None:
        self.closing.emit()
        super().closeEvent(event)


def run_dashboard(settings: DashboardSettings, demo: bool = False) -> None:
    """Wire the live channel, dataset fetcher and window selector to the UI and run the event loop."""
    app = QApplication.instance() or QApplication([])
    window = MainWindow(title=settings.window_title)

    socket = None
    transport = None
    if demo:
        from power_monitor.gui.mock import MockDatasetTransport, MockTelemetrySocket

        socket = MockTelemetrySocket()
        transport = MockDatasetTransport()
        logger.info("Running with mock data sources")

    channel = LiveTelemetryChannel(
        settings.telemetry.url,
        socket=socket,
        highlight_ms=settings.telemetry.highlight_ms,
        reconnect=ReconnectPolicy.from_settings(settings.telemetry.reconnect),
    )
    fetcher = HistoricalDatasetFetcher(settings.history.url, transport=transport)
    selector = WindowSelector(settings.history.default_window)

    def render_chart(*_args) -> None:
        window.update_chart(build_chart_view(selector.window, selector.status, selector.buckets))

    channel.reading_changed.connect(lambda state: window.update_reading(build_reading_view(state)))
    channel.highlight_changed.connect(window.set_highlighted)
    channel.connection_changed.connect(window.set_connection_state)
    fetcher.status_changed.connect(selector.set_status)
    selector.projection_changed.connect(render_chart)
    window.window_selected.connect(selector.select)
    window.refresh_requested.connect(fetcher.refresh)
    window.closing.connect(channel.close)
    app.aboutToQuit.connect(channel.close)

    window.show()
    with channel:
        fetcher.load()
        app.exec()
