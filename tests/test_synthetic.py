from __future__ import annotations

import pytest

from cycle_dashboard.charts.synthetic import (
    SYNTHETIC_SERIES_NOTE,
    health_progression,
    performance_progression,
)


def test_soc_progression_runs_from_min_through_average_to_max(make_record) -> None:
    points = health_progression(make_record(average_soc=70, min_soc=20, max_soc=95))

    assert [point.progress for point in points] == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert points[0].soc == 20
    assert points[2].soc == 70
    assert points[-1].soc == 95
    assert [point.soc for point in points] == [20, 45, 70, 82.5, 95]


def test_soh_progression_falls_from_max_to_min(record) -> None:
    points = health_progression(record)

    assert [point.soh for point in points] == [100.0, 99.5, 95.0, 94.5, 90.0]
    assert health_progression(record) == points


def test_performance_progression_has_21_points(record) -> None:
    points = performance_progression(record)

    assert len(points) == 21
    assert points[0].time == 0.0
    assert points[-1].time == pytest.approx(record.cycle_duration_hours)
    assert points[10].progress == pytest.approx(0.5)


def test_distance_hits_both_endpoints_and_never_decreases(record) -> None:
    points = performance_progression(record)
    distances = [point.distance for point in points]

    assert distances[0] == pytest.approx(0.0, abs=1e-9)
    assert distances[-1] == pytest.approx(record.total_distance, abs=1e-9)
    assert distances == sorted(distances)
    assert distances[10] == pytest.approx(record.total_distance / 2)


def test_speed_is_clamped_at_zero(make_record) -> None:
    points = performance_progression(make_record(average_speed=-1.0, max_speed=0.0))

    assert all(point.speed >= 0 for point in points)
    assert points[0].speed == 0.0


def test_speed_peaks_mid_cycle(record) -> None:
    points = performance_progression(record)

    assert points[0].speed == pytest.approx(record.average_speed)
    assert max(points, key=lambda point: point.speed).progress == pytest.approx(0.5)
    assert points[10].speed == pytest.approx(30 + 30 * 0.7)


def test_performance_progression_requires_points(record) -> None:
    with pytest.raises(ValueError):
        performance_progression(record, points=0)
    assert "not raw sensor readings" in SYNTHETIC_SERIES_NOTE
