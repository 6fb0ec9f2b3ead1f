"""I/O utilities (configuration loading)."""

from .settings import (
    DEFAULT_SETTINGS_PATH,
    DashboardSettings,
    HistorySettings,
    ReconnectSettings,
    SettingsError,
    TelemetrySettings,
    find_project_root,
    load_dashboard_settings,
    load_settings,
    parse_dashboard_settings,
)

__all__ = [
    "DEFAULT_SETTINGS_PATH",
    "DashboardSettings",
    "HistorySettings",
    "ReconnectSettings",
    "SettingsError",
    "TelemetrySettings",
    "find_project_root",
    "load_settings",
    "load_dashboard_settings",
    "parse_dashboard_settings",
]
