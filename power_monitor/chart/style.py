"""Fixed series styling and axis domains for the history chart."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

LEFT_AXIS = "left"
RIGHT_AXIS = "right"

# Shared by current and power so magnitudes stay comparable across windows.
LEFT_DOMAIN: Tuple[float, float] = (0.0, 5000.0)
# Mains voltage band.
RIGHT_DOMAIN: Tuple[float, float] = (200.0, 260.0)

# (offset from the top of the fill, opacity)
GRADIENT_STOPS: Tuple[Tuple[float, float], ...] = ((0.05, 0.8), (0.95, 0.1))


@dataclass(frozen=True)
class SeriesStyle:
    key: str
    label: str
    color: str
    axis: str


SERIES: Tuple[SeriesStyle, ...] = (
    SeriesStyle(key="power", label="Power (W)", color="#e6194B", axis=LEFT_AXIS),
    SeriesStyle(key="current", label="Current (mA)", color="#3cb44b", axis=LEFT_AXIS),
    SeriesStyle(key="voltage", label="Voltage (V)", color="#4363d8", axis=RIGHT_AXIS),
)

SERIES_BY_KEY: Dict[str, SeriesStyle] = {style.key: style for style in SERIES}


def axis_domain(axis: str) -> Tuple[float, float]:
    if axis == LEFT_AXIS:
        return LEFT_DOMAIN
    if axis == RIGHT_AXIS:
        return RIGHT_DOMAIN
    raise ValueError(f"Unknown axis: {axis}")


def format_left_tick(value: float) -> str:
    return f"{value:g}"


def format_right_tick(value: float) -> str:
    return f"{value:g}V"


def gradient_alpha(steps: int) -> List[float]:
    """Opacity per row from the top of the fill (index 0) to the baseline.

    Rows above the first stop and below the last one take the stop's opacity.
    """
    if steps < 1:
        raise ValueError("steps must be positive")
    (top_offset, top_alpha), (bottom_offset, bottom_alpha) = GRADIENT_STOPS[0], GRADIENT_STOPS[-1]
    alphas = []
    for row in range(steps):
        offset = row / (steps - 1) if steps > 1 else 0.0
        if offset <= top_offset:
            alphas.append(top_alpha)
        elif offset >= bottom_offset:
            alphas.append(bottom_alpha)
        else:
            t = (offset - top_offset) / (bottom_offset - top_offset)
            alphas.append(top_alpha + t * (bottom_alpha - top_alpha))
    return alphas
