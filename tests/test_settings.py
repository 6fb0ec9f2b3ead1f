from pathlib import Path

import pytest
import yaml

from power_monitor.io import (
    DashboardSettings,
    SettingsError,
    load_dashboard_settings,
    load_settings,
    parse_dashboard_settings,
)


def test_default_settings_structure():
    data = load_settings()
    assert "telemetry" in data and "url" in data["telemetry"]
    assert "history" in data and "url" in data["history"]
    assert data["telemetry"]["highlight_ms"] == 150


def test_default_dashboard_settings():
    settings = load_dashboard_settings()
    assert settings.telemetry.url.startswith("wss://")
    assert settings.history.url.startswith("https://")
    assert settings.telemetry.reconnect.enabled
    assert settings.log_level == "INFO"


def test_empty_mapping_uses_defaults():
    assert parse_dashboard_settings({}) == DashboardSettings()


def test_load_custom_settings(tmp_path: Path):
    path = tmp_path / "settings.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "telemetry": {"url": "ws://localhost:8080", "reconnect": {"enabled": False, "initial_delay_ms": 250}},
                "history": {"url": "http://localhost:8080/main-chart/data", "default_window": "30d"},
                "logging": {"level": "debug"},
            }
        )
    )
    settings = load_dashboard_settings(path)
    assert settings.telemetry.url == "ws://localhost:8080"
    assert settings.telemetry.highlight_ms == 150
    assert not settings.telemetry.reconnect.enabled
    assert settings.telemetry.reconnect.initial_delay_ms == 250
    assert settings.history.default_window == "30d"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "data",
    [
        {"telemetry": "wss://x"},
        {"telemetry": {"url": ""}},
        {"telemetry": {"highlight_ms": 0}},
        {"telemetry": {"reconnect": {"enabled": "false"}}},
        {"telemetry": {"reconnect": {"enabled": 0}}},
        {"telemetry": {"reconnect": {"multiplier": 0.5}}},
        {"telemetry": {"reconnect": {"initial_delay_ms": 5000, "max_delay_ms": 100}}},
        {"logging": {"level": "chatty"}},
    ],
)
def test_invalid_settings_raise(data):
    with pytest.raises(SettingsError):
        parse_dashboard_settings(data)


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(SettingsError):
        load_dashboard_settings(tmp_path / "missing.yml")


def test_non_mapping_file_raises(tmp_path: Path):
    path = tmp_path / "settings.yml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(SettingsError):
        load_dashboard_settings(path)
