from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable

import pytest

from cycle_dashboard.models import CycleRecord

IMEI = "865044073967657"


def _base_record(**overrides: Any) -> CycleRecord:
    record = CycleRecord(
        imei=IMEI,
        cycle_number=12,
        cycle_start_time="2024-01-12T00:00:00.000Z",
        cycle_end_time="2024-01-12T04:00:00.000Z",
        cycle_duration_hours=4.0,
        data_points_count=800,
        soh_drop=2.0,
        average_soc=70.0,
        min_soc=20.0,
        max_soc=95.0,
        average_soh=95.0,
        min_soh=90.0,
        max_soh=100.0,
        average_temperature=28.5,
        temperature_dist_5deg={"25-30": 30.0, "15-20": 10.0, "20-25": 20.0},
        temperature_dist_10deg={"20-30": 50.0, "10-20": 10.0},
        temperature_dist_15deg={"15-30": 60.0},
        temperature_dist_20deg={"10-30": 60.0},
        total_distance=50.0,
        average_speed=30.0,
        max_speed=60.0,
        charging_instances_count=2,
        average_charge_start_soc=25.0,
    )
    return replace(record, **overrides)


@pytest.fixture
def make_record() -> Callable[..., CycleRecord]:
    return _base_record


@pytest.fixture
def record() -> CycleRecord:
    return _base_record()


@pytest.fixture
def cycles() -> list[CycleRecord]:
    # Fifty cycles delivered newest first, SOH falling from 99.5 to 94.6.
    return [
        _base_record(cycle_number=number, average_soh=99.6 - number * 0.1, soh_drop=0.1)
        for number in range(50, 0, -1)
    ]
