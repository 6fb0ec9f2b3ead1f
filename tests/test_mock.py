import json
from datetime import date

from power_monitor.gui.mock import generate_mock_dataset, generate_mock_sample
from power_monitor.history import DatasetResponse, decode_response
from power_monitor.telemetry import decode_sample


def test_mock_dataset_decodes():
    payload = generate_mock_dataset(today=date(2024, 5, 31))
    dataset = decode_response(DatasetResponse(status=200, body=json.dumps(payload).encode("utf-8")))
    assert len(dataset.today) == 24
    assert len(dataset.week) == 7
    assert len(dataset.month) == 30
    assert dataset.week[-1].key == date(2024, 5, 31)
    assert dataset.month[0].key == date(2024, 5, 2)


def test_mock_sample_decodes():
    sample = decode_sample(json.dumps(generate_mock_sample(3)))
    assert 200.0 <= sample.voltage <= 260.0
    assert sample.current > 0
