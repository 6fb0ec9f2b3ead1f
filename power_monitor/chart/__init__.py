"""Window selection, projection and chart styling."""

from .projection import (
    DEFAULT_WINDOW,
    Window,
    WindowSelector,
    format_bucket_label,
    project,
    resolve_window,
    x_key,
)
from .style import (
    GRADIENT_STOPS,
    LEFT_DOMAIN,
    RIGHT_DOMAIN,
    SERIES,
    SERIES_BY_KEY,
    SeriesStyle,
    axis_domain,
    gradient_alpha,
)

__all__ = [
    "DEFAULT_WINDOW",
    "GRADIENT_STOPS",
    "LEFT_DOMAIN",
    "RIGHT_DOMAIN",
    "SERIES",
    "SERIES_BY_KEY",
    "SeriesStyle",
    "Window",
    "WindowSelector",
    "axis_domain",
    "format_bucket_label",
    "gradient_alpha",
    "project",
    "resolve_window",
    "x_key",
]
