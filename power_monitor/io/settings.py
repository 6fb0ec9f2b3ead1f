import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml

PROJECT_MARKERS: Iterable[str] = (".git", "pyproject.toml", "config")
DEFAULT_SETTINGS_PATH = Path("config/settings.yml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

PathLike = Union[str, os.PathLike]


class SettingsError(RuntimeError):
    """Raised when the settings file is missing or holds invalid values."""


@dataclass
class ReconnectSettings:
    enabled: bool = True
    initial_delay_ms: int = 1000
    max_delay_ms: int = 30000
    multiplier: float = 2.0


@dataclass
class TelemetrySettings:
    url: str = "wss://four07-backend.onrender.com"
    highlight_ms: int = 150
    reconnect: ReconnectSettings = field(default_factory=ReconnectSettings)


@dataclass
class HistorySettings:
    url: str = "https://four07-backend.onrender.com/main-chart/data"
    default_window: str = "today"


@dataclass
class DashboardSettings:
    """Typed view of ``config/settings.yml``."""

    telemetry: TelemetrySettings = field(default_factory=TelemetrySettings)
    history: HistorySettings = field(default_factory=HistorySettings)
    window_title: str = "Power Consumption Monitoring Dashboard"
    log_level: str = "INFO"


def find_project_root(markers: Iterable[str] = PROJECT_MARKERS) -> Path:
    """Attempt to locate the repository root by walking up until a marker file/dir appears."""
    start = Path(__file__).resolve().parent
    for candidate in [start] + list(start.parents):
        for marker in markers:
            if (candidate / marker).exists():
                return candidate
    return start


def _resolve(path: PathLike, project_root: Path) -> Path:
    target = Path(path)
    if not target.is_absolute():
        target = project_root / target
    return target


def _load_yaml(target: Path) -> Dict[str, Any]:
    if not target.exists():
        raise FileNotFoundError(f"settings file not found: {target}")
    with open(target, "r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"Invalid YAML in settings file {target}: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {target} must contain a mapping")
    return data


def load_settings(path: Optional[PathLike] = None) -> Dict[str, Any]:
    """Load the YAML settings file, defaulting to ``config/settings.yml`` under the project root."""
    project_root = find_project_root()
    target = _resolve(path or DEFAULT_SETTINGS_PATH, project_root)
    return _load_yaml(target)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise SettingsError(f"'{key}' must be a mapping")
    return value


def _positive_int(section: Dict[str, Any], key: str, default: int, context: str) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise SettingsError(f"{context}.{key} must be a positive number, got {value!r}")
    return int(value)


def _url(section: Dict[str, Any], default: str, context: str) -> str:
    value = section.get("url", default)
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(f"{context}.url must be a non-empty string")
    return value.strip()


def _parse_reconnect(data: Dict[str, Any]) -> ReconnectSettings:
    defaults = ReconnectSettings()
    enabled = data.get("enabled", defaults.enabled)
    if not isinstance(enabled, bool):
        raise SettingsError(f"telemetry.reconnect.enabled must be true or false, got {enabled!r}")
    multiplier = data.get("multiplier", defaults.multiplier)
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float)) or multiplier < 1.0:
        raise SettingsError(f"telemetry.reconnect.multiplier must be >= 1.0, got {multiplier!r}")
    initial = _positive_int(data, "initial_delay_ms", defaults.initial_delay_ms, "telemetry.reconnect")
    maximum = _positive_int(data, "max_delay_ms", defaults.max_delay_ms, "telemetry.reconnect")
    if maximum < initial:
        raise SettingsError("telemetry.reconnect.max_delay_ms must not be below initial_delay_ms")
    return ReconnectSettings(
        enabled=enabled,
        initial_delay_ms=initial,
        max_delay_ms=maximum,
        multiplier=float(multiplier),
    )


def parse_dashboard_settings(data: Dict[str, Any]) -> DashboardSettings:
    """Build :class:`DashboardSettings` from a raw mapping, filling in defaults."""
    defaults = DashboardSettings()

    telemetry = _section(data, "telemetry")
    history = _section(data, "history")
    ui = _section(data, "ui")
    logging_cfg = _section(data, "logging")

    level = str(logging_cfg.get("level", defaults.log_level)).upper()
    if level not in LOG_LEVELS:
        raise SettingsError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")

    return DashboardSettings(
        telemetry=TelemetrySettings(
            url=_url(telemetry, defaults.telemetry.url, "telemetry"),
            highlight_ms=_positive_int(telemetry, "highlight_ms", defaults.telemetry.highlight_ms, "telemetry"),
            reconnect=_parse_reconnect(_section(telemetry, "reconnect")),
        ),
        history=HistorySettings(
            url=_url(history, defaults.history.url, "history"),
            default_window=str(history.get("default_window", defaults.history.default_window)),
        ),
        window_title=str(ui.get("window_title", defaults.window_title)),
        log_level=level,
    )


def load_dashboard_settings(path: Optional[PathLike] = None) -> DashboardSettings:
    """Load ``settings.yml`` and return the typed dashboard settings."""
    try:
        data = load_settings(path)
    except FileNotFoundError as exc:
        raise SettingsError(str(exc)) from exc
    return parse_dashboard_settings(data)
