from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from cycle_dashboard.models import CycleRecord

SYNTHETIC_SERIES_NOTE = (
    "Curves are reconstructed from cycle aggregates for illustration; "
    "they are not raw sensor readings."
)

HEALTH_PROGRESS = (0.0, 0.25, 0.5, 0.75, 1.0)
PERFORMANCE_POINTS = 20


@dataclass(frozen=True)
class HealthPoint:
    progress: float
    soc: float
    soh: float


@dataclass(frozen=True)
class PerformancePoint:
    progress: float
    time: float
    distance: float
    speed: float


def health_progression(record: CycleRecord) -> list[HealthPoint]:
    soc_min, soc_avg, soc_max = record.min_soc, record.average_soc, record.max_soc
    soh_min, soh_avg, soh_max = record.min_soh, record.average_soh, record.max_soh
    drop = record.soh_drop
    soc = (soc_min, (soc_min + soc_avg) / 2, soc_avg, (soc_avg + soc_max) / 2, soc_max)
    soh = (soh_max, soh_max - drop * 0.25, soh_avg, soh_avg - drop * 0.25, soh_min)
    return [
        HealthPoint(progress=progress, soc=soc_value, soh=soh_value)
        for progress, soc_value, soh_value in zip(HEALTH_PROGRESS, soc, soh)
    ]


def _sigmoid(values: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-values))


def distance_profile(progress: np.ndarray) -> np.ndarray:
    """Logistic share of the total distance, rescaled to hit 0 and 1 exactly."""
    raw = _sigmoid(10.0 * (progress - 0.5))
    low, high = _sigmoid(np.array([-5.0, 5.0]))
    return (raw - low) / (high - low)


def performance_progression(
    record: CycleRecord, points: int = PERFORMANCE_POINTS
) -> list[PerformancePoint]:
    if points < 1:
        raise ValueError("points must be at least 1")
    progress = np.linspace(0.0, 1.0, points + 1)
    time = record.cycle_duration_hours * progress
    distance = record.total_distance * distance_profile(progress)
    boost = (record.max_speed - record.average_speed) * np.sin(progress * math.pi) * 0.7
    speed = np.maximum(0.0, record.average_speed + boost)
    return [
        PerformancePoint(
            progress=float(p),
            time=float(t),
            distance=float(d),
            speed=float(s),
        )
        for p, t, d, s in zip(progress, time, distance, speed)
    ]
