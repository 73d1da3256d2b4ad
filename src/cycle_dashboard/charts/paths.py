from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Sequence

from cycle_dashboard.charts.formatting import format_svg_number

Curve = Literal["linear", "monotone"]
Point = tuple[float | None, float | None]

_BEZIER_SAMPLES = 16


def _defined(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def defined_runs(points: Sequence[Point]) -> list[list[tuple[float, float]]]:
    """Split ``points`` into runs of consecutive defined coordinates.

    ``None`` and NaN values end the current run, so a gap in the data becomes
    a gap in the drawn path instead of a segment to a bogus coordinate.
    """
    runs: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    for x, y in points:
        if _defined(x) and _defined(y):
            current.append((float(x), float(y)))  # type: ignore[arg-type]
            continue
        if current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)
    return runs


def _sign(value: float) -> float:
    return -1.0 if value < 0 else 1.0


def monotone_tangents(run: Sequence[tuple[float, float]]) -> list[float]:
    """Tangents that keep a cubic interpolation monotone between samples in x."""
    count = len(run)
    if count < 2:
        return [0.0] * count
    widths = [run[i + 1][0] - run[i][0] for i in range(count - 1)]
    slopes = [
        (run[i + 1][1] - run[i][1]) / widths[i] if widths[i] else 0.0 for i in range(count - 1)
    ]
    tangents = [0.0] * count
    for i in range(1, count - 1):
        h0, h1 = widths[i - 1], widths[i]
        s0, s1 = slopes[i - 1], slopes[i]
        total = h0 + h1
        p = (s0 * h1 + s1 * h0) / total if total else 0.0
        tangents[i] = (_sign(s0) + _sign(s1)) * min(abs(s0), abs(s1), 0.5 * abs(p))
    if count == 2:
        tangents[0] = tangents[1] = slopes[0]
    else:
        tangents[0] = (3 * slopes[0] - tangents[1]) / 2 if widths[0] else tangents[1]
        tangents[-1] = (3 * slopes[-1] - tangents[-2]) / 2 if widths[-1] else tangents[-2]
    return tangents


@dataclass
class PathData:
    commands: list[tuple[str, tuple[float, ...]]] = field(default_factory=list)

    def move_to(self, x: float, y: float) -> None:
        self.commands.append(("M", (x, y)))

    def line_to(self, x: float, y: float) -> None:
        self.commands.append(("L", (x, y)))

    def curve_to(
        self, x1: float, y1: float, x2: float, y2: float, x: float, y: float
    ) -> None:
        self.commands.append(("C", (x1, y1, x2, y2, x, y)))

    def close(self) -> None:
        self.commands.append(("Z", ()))

    @property
    def subpath_count(self) -> int:
        return sum(1 for command, _ in self.commands if command == "M")

    def to_d(self) -> str:
        parts = []
        for command, args in self.commands:
            coords = ",".join(format_svg_number(value) for value in args)
            parts.append(f"{command}{coords}")
        return "".join(parts)

    def length(self) -> float:
        """Approximate drawn length; cubic segments are flattened."""
        total = 0.0
        cursor: tuple[float, float] | None = None
        start: tuple[float, float] | None = None
        for command, args in self.commands:
            if command == "M":
                cursor = start = (args[0], args[1])
            elif command == "L" and cursor is not None:
                total += math.dist(cursor, (args[0], args[1]))
                cursor = (args[0], args[1])
            elif command == "C" and cursor is not None:
                x0, y0 = cursor
                x1, y1, x2, y2, x3, y3 = args
                previous = cursor
                for step in range(1, _BEZIER_SAMPLES + 1):
                    t = step / _BEZIER_SAMPLES
                    u = 1 - t
                    point = (
                        u**3 * x0 + 3 * u * u * t * x1 + 3 * u * t * t * x2 + t**3 * x3,
                        u**3 * y0 + 3 * u * u * t * y1 + 3 * u * t * t * y2 + t**3 * y3,
                    )
                    total += math.dist(previous, point)
                    previous = point
                cursor = (x3, y3)
            elif command == "Z" and cursor is not None and start is not None:
                total += math.dist(cursor, start)
                cursor = start
        return total


def _trace_run(path: PathData, run: Sequence[tuple[float, float]], curve: Curve) -> None:
    path.move_to(*run[0])
    if curve == "linear" or len(run) < 3:
        for x, y in run[1:]:
            path.line_to(x, y)
        return
    tangents = monotone_tangents(run)
    for i in range(len(run) - 1):
        (xa, ya), (xb, yb) = run[i], run[i + 1]
        dx = (xb - xa) / 3
        path.curve_to(xa + dx, ya + dx * tangents[i], xb - dx, yb - dx * tangents[i + 1], xb, yb)


def line_path(points: Sequence[Point], curve: Curve = "linear") -> PathData:
    path = PathData()
    for run in defined_runs(points):
        _trace_run(path, run, curve)
    return path


def area_path(points: Sequence[Point], baseline: float, curve: Curve = "linear") -> PathData:
    """Closed area between the series and a horizontal ``baseline``."""
    path = PathData()
    for run in defined_runs(points):
        _trace_run(path, run, curve)
        path.line_to(run[-1][0], baseline)
        path.line_to(run[0][0], baseline)
        path.close()
    return path
