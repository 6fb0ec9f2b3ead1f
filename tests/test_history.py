import json
from datetime import date

import pytest

from power_monitor.history import (
    Bucket,
    DatasetDecodeError,
    DatasetFetchError,
    DatasetResponse,
    decode_response,
    parse_dataset,
)


def _hour(hour, power=100.0):
    return {"hour": hour, "power": power, "current": 450.0, "voltage": 231.0}


def _day(day, power=2400.0):
    return {"date": day, "power": power, "current": 10400.0, "voltage": 229.5}


def test_parse_dataset_keeps_order_and_keys():
    dataset = parse_dataset(
        {
            "today": [_hour(0), _hour(1, 120.0), _hour(5, 90.0)],
            "week": [_day("2024-04-29"), _day("2024-04-30T00:00:00.000Z")],
            "month": [],
        }
    )
    assert [b.key for b in dataset.today] == [0, 1, 5]
    assert dataset.today[1] == Bucket(key=1, power=120.0, current=450.0, voltage=231.0)
    assert [b.key for b in dataset.week] == [date(2024, 4, 29), date(2024, 4, 30)]
    assert dataset.month == ()


def test_parse_dataset_missing_windows_are_empty():
    dataset = parse_dataset({"today": [_hour(3)]})
    assert dataset.week == ()
    assert dataset.month == ()
    assert dataset.window("today")[0].key == 3


@pytest.mark.parametrize(
    "data",
    [
        None,
        {"today": "nope"},
        {"today": [_hour(24)]},
        {"today": [_hour(2), _hour(1)]},
        {"today": [{"hour": 1, "power": 1.0, "current": 1.0}]},
        {"week": [_day("not-a-date")]},
        {"week": [_day("2024-05-02"), _day("2024-05-01")]},
        {"month": [_day("2024-05-01", power="high")]},
    ],
)
def test_parse_dataset_rejects_bad_shapes(data):
    with pytest.raises(DatasetDecodeError):
        parse_dataset(data)


def _body(payload) -> bytes:
    return json.dumps(payload).encode("utf-8")


def test_decode_response_success():
    response = DatasetResponse(status=200, body=_body({"success": True, "data": {"today": [_hour(0)]}}))
    dataset = decode_response(response)
    assert len(dataset.today) == 1


@pytest.mark.parametrize(
    "response, message",
    [
        (DatasetResponse(status=None, error="Host four07 not found"), "Host four07 not found"),
        (DatasetResponse(status=None), "Network request failed"),
        (DatasetResponse(status=503, body=_body({"success": True, "data": {}})), "HTTP error! status: 503"),
        (DatasetResponse(status=200, body=_body({"success": False})), "Failed to fetch data"),
        (DatasetResponse(status=200, body=_body({"data": {}})), "Failed to fetch data"),
        (DatasetResponse(status=200, body=_body({"success": "yes", "data": {}})), "Failed to fetch data"),
    ],
)
def test_decode_response_failures(response, message):
    with pytest.raises(DatasetFetchError) as excinfo:
        decode_response(response)
    assert str(excinfo.value) == message


def test_decode_response_invalid_body():
    with pytest.raises(DatasetFetchError, match="Invalid response body"):
        decode_response(DatasetResponse(status=200, body=b"<html>"))


def test_decode_response_shape_error_is_fetch_error():
    response = DatasetResponse(status=200, body=_body({"success": True, "data": {"today": [_hour(30)]}}))
    with pytest.raises(DatasetFetchError, match="hour"):
        decode_response(response)
