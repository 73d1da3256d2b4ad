from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Sequence

import pandas as pd

from cycle_dashboard.models import TEMPERATURE_MAP_FIELDS, CycleRecord

logger = logging.getLogger(__name__)

_RANGE_KEY = re.compile(r"^\s*(-?\d+(?:\.\d+)?)\s*-\s*(-?\d+(?:\.\d+)?)\s*$")

TEMPERATURE_COLORS = (
    (10.0, "#3b82f6"),
    (20.0, "#10b981"),
    (30.0, "#f59e0b"),
    (40.0, "#f97316"),
)
HOT_COLOR = "#ef4444"


@dataclass(frozen=True)
class TemperatureBin:
    range: str
    range_start: float
    range_end: float
    minutes: float


def parse_range_key(key: Any) -> tuple[float, float] | None:
    """Parse ``"<start>-<end>"`` into numeric bounds; ``None`` when malformed."""
    match = _RANGE_KEY.match(str(key))
    if match is None:
        return None
    start, end = float(match.group(1)), float(match.group(2))
    if end < start:
        return None
    return start, end


def _parse_minutes(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        minutes = float(value)
    except (TypeError, ValueError):
        return None
    return minutes if math.isfinite(minutes) else None


def bins_from_map(distribution: Mapping[str, Any]) -> list[TemperatureBin]:
    bins: list[TemperatureBin] = []
    for key, value in distribution.items():
        bounds = parse_range_key(key)
        minutes = _parse_minutes(value)
        if bounds is None or minutes is None:
            logger.debug("Skipping malformed temperature bin %r=%r", key, value)
            continue
        bins.append(
            TemperatureBin(range=str(key), range_start=bounds[0], range_end=bounds[1], minutes=minutes)
        )
    return sorted(bins, key=lambda item: (item.range_start, item.range_end))


def temperature_bins(record: CycleRecord | None, bin_width: int) -> list[TemperatureBin]:
    """Histogram bins for ``record`` at one of the precomputed bin widths.

    Every call re-derives the bins from the selected map; nothing is cached
    between widths.
    """
    if int(bin_width) not in TEMPERATURE_MAP_FIELDS:
        raise ValueError(
            f"Unsupported temperature bin width: {bin_width}. "
            f"Expected one of {sorted(TEMPERATURE_MAP_FIELDS)}."
        )
    if record is None:
        return []
    return bins_from_map(record.temperature_map(bin_width))


def bins_frame(bins: Sequence[TemperatureBin]) -> pd.DataFrame:
    columns = ["range", "range_start", "range_end", "minutes"]
    if not bins:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame([asdict(item) for item in bins], columns=columns)


def temperature_color(range_start: float) -> str:
    for upper, color in TEMPERATURE_COLORS:
        if range_start < upper:
            return color
    return HOT_COLOR
