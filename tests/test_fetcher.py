import json

import pytest
from PySide6.QtCore import QByteArray
from PySide6.QtNetwork import QNetworkReply, QNetworkRequest

from power_monitor.history import (
    DatasetFetchError,
    DatasetResponse,
    FetchStatus,
    HistoricalDatasetFetcher,
    decode_response,
    response_from_reply,
)


class DummyTransport:
    def __init__(self):
        self.requests = []

    def get(self, url, callback) -> None:
        self.requests.append((url, callback))

    def respond(self, index, status=200, payload=None, error=None) -> None:
        body = json.dumps(payload).encode("utf-8") if payload is not None else b""
        _url, callback = self.requests[index]
        callback(DatasetResponse(status=status, body=body, error=error))


def _payload(today_hours=(0, 1, 2), power=100.0):
    today = [{"hour": h, "power": power, "current": 400.0, "voltage": 230.0} for h in today_hours]
    return {"success": True, "data": {"today": today, "week": [], "month": []}}


def _fetcher():
    transport = DummyTransport()
    fetcher = HistoricalDatasetFetcher("https://example.invalid/main-chart/data", transport=transport)
    statuses = []
    fetcher.status_changed.connect(statuses.append)
    return fetcher, transport, statuses


def test_load_toggles_loading_and_stores_dataset():
    fetcher, transport, statuses = _fetcher()
    assert fetcher.status == FetchStatus()

    fetcher.load()
    assert transport.requests[0][0] == "https://example.invalid/main-chart/data"
    assert fetcher.status.loading and not fetcher.status.refreshing
    assert fetcher.in_flight

    transport.respond(0, payload=_payload())
    status = fetcher.status
    assert not status.loading and not status.refreshing
    assert status.error is None
    assert [b.key for b in status.dataset.today] == [0, 1, 2]
    assert not fetcher.in_flight
    assert len(statuses) == 2


def test_refresh_toggles_refreshing_only():
    fetcher, transport, _ = _fetcher()
    fetcher.load()
    transport.respond(0, payload=_payload())

    fetcher.refresh()
    assert fetcher.status.refreshing and not fetcher.status.loading
    assert fetcher.status.dataset is not None

    transport.respond(1, payload=_payload(today_hours=(3,)))
    assert not fetcher.status.refreshing
    assert [b.key for b in fetcher.status.dataset.today] == [3]


def test_failure_discards_previous_dataset():
    fetcher, transport, _ = _fetcher()
    fetcher.load()
    transport.respond(0, payload=_payload())
    assert fetcher.status.dataset is not None

    fetcher.refresh()
    transport.respond(1, status=500, payload={"success": False})
    status = fetcher.status
    assert status.error == "HTTP error! status: 500"
    assert status.dataset is None
    assert not status.refreshing


def test_protocol_failure_and_recovery():
    fetcher, transport, _ = _fetcher()
    fetcher.load()
    transport.respond(0, payload={"success": False})
    assert fetcher.status.error == "Failed to fetch data"

    fetcher.refresh()
    assert fetcher.status.error is None
    transport.respond(1, payload=_payload())
    assert fetcher.status.error is None
    assert fetcher.status.dataset is not None


def test_transport_failure_reports_cause():
    fetcher, transport, _ = _fetcher()
    fetcher.load()
    transport.respond(0, status=None, error="Connection refused")
    assert fetcher.status.error == "Connection refused"
    assert not fetcher.status.loading


def test_stale_response_is_dropped():
    fetcher, transport, _ = _fetcher()
    first = fetcher.refresh()
    second = fetcher.refresh()
    assert second == first + 1

    transport.respond(1, payload=_payload(today_hours=(9,)))
    transport.respond(0, payload=_payload(today_hours=(1,)))

    assert [b.key for b in fetcher.status.dataset.today] == [9]
    assert fetcher.status.generation == second
    assert not fetcher.in_flight


def test_stale_failure_does_not_clear_newer_dataset():
    fetcher, transport, _ = _fetcher()
    fetcher.load()
    fetcher.refresh()
    transport.respond(1, payload=_payload())
    transport.respond(0, status=502)
    assert fetcher.status.error is None
    assert fetcher.status.dataset is not None


class StubReply:
    def __init__(self, status=None, body=b"", error=QNetworkReply.NetworkError.NoError, error_string=""):
        self._status = status
        self._body = body
        self._error = error
        self._error_string = error_string

    def attribute(self, attribute):
        assert attribute == QNetworkRequest.Attribute.HttpStatusCodeAttribute
        return self._status

    def readAll(self):
        return QByteArray(self._body)

    def error(self):
        return self._error

    def errorString(self):
        return self._error_string


def test_reply_without_status_is_transport_failure():
    reply = StubReply(error=QNetworkReply.NetworkError.HostNotFoundError, error_string="Host four07 not found")
    response = response_from_reply(reply)
    assert response == DatasetResponse(status=None, error="Host four07 not found")


def test_reply_with_error_status_keeps_status_and_body():
    reply = StubReply(
        status=404,
        body=b'{"success": false}',
        error=QNetworkReply.NetworkError.ContentNotFoundError,
        error_string="Not Found",
    )
    response = response_from_reply(reply)
    assert response.status == 404
    assert response.body == b'{"success": false}'
    assert response.error is None

    with pytest.raises(DatasetFetchError, match="HTTP error! status: 404"):
        decode_response(response)


def test_reply_success_round_trips_into_dataset():
    response = response_from_reply(StubReply(status=200, body=json.dumps(_payload()).encode("utf-8")))
    assert [b.key for b in decode_response(response).today] == [0, 1, 2]
