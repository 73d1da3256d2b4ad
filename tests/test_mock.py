from __future__ import annotations

import numpy as np
import pytest

from cycle_dashboard.charts.binning import parse_range_key
from cycle_dashboard.io.mock import (
    generate_mock_cycles,
    generate_mock_snapshots,
    mock_temperature_distribution,
)

IMEI = "865044073967657"


def test_mock_snapshots_are_deterministic_for_a_seed() -> None:
    first = generate_mock_snapshots(IMEI, count=5, seed=7)
    second = generate_mock_snapshots(IMEI, count=5, seed=7)
    other = generate_mock_snapshots(IMEI, count=5, seed=8)

    assert first == second
    assert first != other


def test_mock_snapshot_values_stay_in_range() -> None:
    snapshots = generate_mock_snapshots(IMEI, count=45)

    assert len(snapshots) == 45
    assert [item["cycle_number"] for item in snapshots] == list(range(1, 46))
    for item in snapshots:
        assert 3 <= item["cycle_duration_hours"] <= 5
        assert 95 <= item["average_soh"] <= 100
        assert 0.1 <= item["soh_drop"] <= 0.4
        assert 1 <= item["charging_instances_count"] <= 3
        assert item["warning_count"] == len(item["alert_details"]["warnings"])
        assert item["cycle_start_time"].endswith("Z")
        assert item["created_at"] == item["cycle_end_time"]


def test_mock_temperature_distribution_keys_parse() -> None:
    rng = np.random.default_rng(1)

    for width in (5, 10, 15, 20):
        distribution = mock_temperature_distribution(width, rng)
        assert distribution
        for key, minutes in distribution.items():
            start, end = parse_range_key(key)
            assert end - start == width
            assert minutes > 0.5


def test_generate_mock_cycles_builds_records() -> None:
    records = generate_mock_cycles(IMEI, count=3)

    assert [record.cycle_number for record in records] == [1, 2, 3]
    assert records[0].temperature_map(5)


def test_generate_mock_snapshots_requires_a_cycle() -> None:
    with pytest.raises(ValueError, match="at least 1"):
        generate_mock_snapshots(IMEI, count=0)
