from datetime import date, datetime

from power_monitor.chart import Window
from power_monitor.gui.model import ChartPhase, build_chart_view, build_reading_view
from power_monitor.history import Bucket, FetchStatus, HistoricalDataset
from power_monitor.telemetry import ConnectionState, LiveReadingState, TelemetrySample

DATASET = HistoricalDataset(
    today=(Bucket(key=13, power=1.0, current=2.0, voltage=230.0),),
    week=(Bucket(key=date(2024, 5, 1), power=1.0, current=2.0, voltage=230.0),),
)


def test_reading_view_waits_for_first_sample():
    view = build_reading_view(LiveReadingState(connection=ConnectionState.CONNECTING))
    assert not view.has_data
    assert view.connection is ConnectionState.CONNECTING


def test_reading_view_from_sample():
    sample = TelemetrySample(time=datetime(2024, 5, 1, 9, 15, 0), current=1500.0, voltage=231.0, power=346.5)
    view = build_reading_view(LiveReadingState(sample=sample, highlighted=True, connection=ConnectionState.OPEN))
    assert view.has_data
    assert view.time_text == "09:15:00"
    assert (view.current_ma, view.voltage_v, view.power_w) == (1500.0, 231.0, 346.5)
    assert view.highlighted


def test_chart_view_phases():
    assert build_chart_view(Window.TODAY, FetchStatus(loading=True)).phase is ChartPhase.LOADING

    error = build_chart_view(Window.TODAY, FetchStatus(error="boom"))
    assert error.phase is ChartPhase.ERROR
    assert error.error == "boom"
    assert error.buckets == ()

    ready = build_chart_view(Window.TODAY, FetchStatus(dataset=DATASET, refreshing=True))
    assert ready.phase is ChartPhase.READY
    assert ready.refreshing
    assert ready.labels == ("13:00",)


def test_chart_view_labels_for_dates():
    view = build_chart_view(Window.WEEK, FetchStatus(dataset=DATASET))
    assert view.labels == ("May 1",)


def test_chart_view_uses_given_projection():
    view = build_chart_view(Window.WEEK, FetchStatus(dataset=DATASET), buckets=())
    assert view.buckets == ()
