from __future__ import annotations

import math

import pytest

from cycle_dashboard.charts.paths import (
    PathData,
    area_path,
    defined_runs,
    line_path,
    monotone_tangents,
)


def test_linear_path_commands() -> None:
    assert line_path([(0, 0), (10, 10), (20, 5)]).to_d() == "M0,0L10,10L20,5"


def test_missing_values_split_the_path_instead_of_bridging_it() -> None:
    points = [(0, 1.0), (1, 2.0), (2, None), (3, math.nan), (4, 3.0), (5, 4.0)]

    path = line_path(points)

    assert defined_runs(points) == [[(0.0, 1.0), (1.0, 2.0)], [(4.0, 3.0), (5.0, 4.0)]]
    assert path.subpath_count == 2
    assert path.to_d() == "M0,1L1,2M4,3L5,4"
    assert "nan" not in path.to_d().lower()


def test_monotone_curve_uses_cubic_segments() -> None:
    path = line_path([(0, 0), (1, 1), (2, 4), (3, 9)], curve="monotone")

    commands = [command for command, _ in path.commands]
    assert commands == ["M", "C", "C", "C"]
    assert path.commands[-1][1][-2:] == (3, 9)


def test_monotone_tangents_flatten_at_local_extrema() -> None:
    assert monotone_tangents([(0, 0), (1, 1), (2, 2)]) == pytest.approx([1, 1, 1])
    tangents = monotone_tangents([(0, 0), (1, 1), (2, 1)])
    assert tangents[1] == 0


def test_monotone_curve_does_not_overshoot_plateau() -> None:
    path = line_path([(0, 0), (1, 10), (2, 10), (3, 0)], curve="monotone")

    control_ys = [args[1] for command, args in path.commands if command == "C"]
    control_ys += [args[3] for command, args in path.commands if command == "C"]
    assert max(control_ys) <= 10 + 1e-9


def test_area_path_closes_each_run_to_the_baseline() -> None:
    path = area_path([(0, 10), (10, 5), (20, None), (30, 2), (40, 1)], baseline=100)

    d = path.to_d()
    assert d == "M0,10L10,5L10,100L0,100ZM30,2L40,1L40,100L30,100Z"


def test_path_length_of_straight_segments() -> None:
    path = PathData()
    path.move_to(0, 0)
    path.line_to(3, 4)
    path.line_to(3, 10)

    assert path.length() == pytest.approx(11.0)
    assert line_path([(0, 0), (10, 0), (20, 0)], curve="monotone").length() == pytest.approx(20.0)


def test_single_point_run_is_a_bare_move() -> None:
    path = line_path([(5, 5)])

    assert path.to_d() == "M5,5"
    assert path.length() == 0.0
