from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import numpy as np

from cycle_dashboard.models import CycleRecord

MOCK_BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)
MOCK_BASE_TEMPERATURE = 15
MOCK_TEMPERATURE_SPAN = 50
MOCK_TEMPERATURE_PEAK = 27.0


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _between(rng: np.random.Generator, low: float, width: float) -> float:
    return float(low + rng.random() * width)


def mock_temperature_distribution(bin_width: int, rng: np.random.Generator) -> dict[str, float]:
    """Bell-shaped minutes per range peaking around 27 degrees."""
    distribution: dict[str, float] = {}
    for index in range(MOCK_TEMPERATURE_SPAN // bin_width):
        start = MOCK_BASE_TEMPERATURE + index * bin_width
        end = start + bin_width
        distance = abs((start + end) / 2 - MOCK_TEMPERATURE_PEAK)
        minutes = max(0.0, 60 - distance * 3) * (0.5 + rng.random())
        if minutes > 0.5:
            distribution[f"{start}-{end}"] = round(minutes, 1)
    return distribution


def mock_snapshot(imei: str, cycle_number: int, rng: np.random.Generator) -> dict[str, Any]:
    start = MOCK_BASE_DATE + timedelta(days=cycle_number - 1)
    duration = _between(rng, 3, 2)
    end = start + timedelta(hours=duration)
    has_warning = rng.random() > 0.8
    has_protection = rng.random() > 0.9
    return {
        "imei": imei,
        "cycle_number": cycle_number,
        "cycle_start_time": _iso(start),
        "cycle_end_time": _iso(end),
        "cycle_duration_hours": duration,
        "data_points_count": int(500 + rng.random() * 1000),
        "soh_drop": _between(rng, 0.1, 0.3),
        "average_soc": _between(rng, 45, 40),
        "min_soc": _between(rng, 15, 10),
        "max_soc": _between(rng, 85, 10),
        "average_soh": _between(rng, 95, 5),
        "min_soh": _between(rng, 94, 3),
        "max_soh": _between(rng, 98, 2),
        "average_temperature": _between(rng, 25, 15),
        "temperature_dist_5deg": mock_temperature_distribution(5, rng),
        "temperature_dist_10deg": mock_temperature_distribution(10, rng),
        "temperature_dist_15deg": mock_temperature_distribution(15, rng),
        "temperature_dist_20deg": mock_temperature_distribution(20, rng),
        "total_distance": _between(rng, 25, 50),
        "average_speed": _between(rng, 20, 30),
        "max_speed": _between(rng, 45, 35),
        "charging_instances_count": int(1 + rng.random() * 3),
        "average_charge_start_soc": _between(rng, 15, 20),
        "voltage_avg": _between(rng, 48, 6),
        "voltage_min": _between(rng, 44, 2),
        "voltage_max": _between(rng, 52, 2),
        "current_avg": _between(rng, 8, 6),
        "alert_details": {
            "warnings": ["High Temperature Warning"] if has_warning else [],
            "protections": ["Overcurrent Protection"] if has_protection else [],
        },
        "warning_count": int(has_warning),
        "protection_count": int(has_protection),
        "created_at": _iso(end),
    }


def generate_mock_snapshots(imei: str, count: int = 45, seed: int = 42) -> list[dict[str, Any]]:
    if count < 1:
        raise ValueError("count must be at least 1")
    rng = np.random.default_rng(seed)
    return [mock_snapshot(imei, cycle_number, rng) for cycle_number in range(1, count + 1)]


def generate_mock_cycles(imei: str, count: int = 45, seed: int = 42) -> list[CycleRecord]:
    return [CycleRecord.from_mapping(item) for item in generate_mock_snapshots(imei, count, seed)]
