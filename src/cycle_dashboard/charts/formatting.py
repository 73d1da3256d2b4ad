from __future__ import annotations

import math
from typing import Any, Callable, Sequence


def safe_number(value: Any, fallback: float = 0.0) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def safe_to_fixed(value: Any, decimals: int = 2) -> str:
    return f"{safe_number(value):.{decimals}f}"


def format_duration(hours: float) -> str:
    hours = safe_number(hours)
    if hours < 1:
        return f"{round(hours * 60)} min"
    return f"{hours:.1f} hrs"


def format_svg_number(value: float) -> str:
    if not math.isfinite(value):
        return "0"
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def tick_formatter(ticks: Sequence[float]) -> Callable[[float], str]:
    """Pick a fixed precision matching the spacing of ``ticks``."""
    if len(ticks) < 2:
        step = abs(ticks[0]) if ticks else 1.0
    else:
        step = abs(ticks[1] - ticks[0])
    if step == 0 or not math.isfinite(step):
        decimals = 0
    else:
        decimals = max(0, -math.floor(math.log10(step) + 1e-9))

    def _format(value: float) -> str:
        if value == 0:
            value = 0.0
        return f"{value:.{decimals}f}"

    return _format
