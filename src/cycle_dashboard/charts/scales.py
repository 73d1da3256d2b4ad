from __future__ import annotations

import math
from typing import Hashable, Iterable, Sequence

import numpy as np

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def tick_step(lo: float, hi: float, count: int) -> float:
    """Return a 1/2/5 x 10^n step giving roughly ``count`` ticks over ``[lo, hi]``."""
    span = abs(hi - lo)
    if count <= 0 or span == 0 or not math.isfinite(span):
        return 0.0
    raw = span / count
    power = math.floor(math.log10(raw))
    step = 10.0**power
    error = raw / step
    if error >= _E10:
        step *= 10
    elif error >= _E5:
        step *= 5
    elif error >= _E2:
        step *= 2
    return step


def linear_ticks(lo: float, hi: float, count: int = 10) -> list[float]:
    if not (math.isfinite(lo) and math.isfinite(hi)):
        return []
    if lo == hi:
        return [float(lo)]
    reverse = hi < lo
    if reverse:
        lo, hi = hi, lo
    step = tick_step(lo, hi, count)
    if step == 0:
        return [float(lo)]
    first = math.ceil(lo / step - 1e-9)
    last = math.floor(hi / step + 1e-9)
    multiples = np.arange(first, last + 1, dtype=float)
    decimals = max(0, -math.floor(math.log10(step)) + 1)
    values = np.round(multiples * step, decimals)
    values = values[(values >= lo) & (values <= hi)]
    ticks = sorted({float(value) + 0.0 for value in values})
    return ticks[::-1] if reverse else ticks


class LinearScale:
    """Continuous linear mapping from a numeric domain onto a pixel range.

    A zero-width domain cannot be normalised; such a scale maps every value
    to the middle of the range and inverts every pixel to the single domain
    value instead of dividing by zero.
    """

    def __init__(
        self,
        domain: Sequence[float] = (0.0, 1.0),
        range_: Sequence[float] = (0.0, 1.0),
    ) -> None:
        lo, hi = (float(value) for value in domain)
        r0, r1 = (float(value) for value in range_)
        self.domain: tuple[float, float] = (lo, hi)
        self.range: tuple[float, float] = (r0, r1)

    @property
    def is_degenerate(self) -> bool:
        lo, hi = self.domain
        return lo == hi or not math.isfinite(hi - lo)

    def __call__(self, value: float) -> float:
        lo, hi = self.domain
        r0, r1 = self.range
        if self.is_degenerate:
            return (r0 + r1) / 2
        return r0 + (float(value) - lo) / (hi - lo) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        lo, hi = self.domain
        r0, r1 = self.range
        if self.is_degenerate or r0 == r1:
            return lo
        return lo + (float(pixel) - r0) / (r1 - r0) * (hi - lo)

    def ticks(self, count: int = 10) -> list[float]:
        return linear_ticks(self.domain[0], self.domain[1], count)

    def nice(self, count: int = 10) -> LinearScale:
        """Return a copy whose domain is extended outward to round tick steps."""
        lo, hi = self.domain
        if self.is_degenerate:
            return self.copy()
        reverse = hi < lo
        if reverse:
            lo, hi = hi, lo
        previous = None
        for _ in range(10):
            step = tick_step(lo, hi, count)
            if step == 0 or step == previous:
                break
            lo = math.floor(lo / step) * step
            hi = math.ceil(hi / step) * step
            previous = step
        domain = (hi, lo) if reverse else (lo, hi)
        return LinearScale(domain, self.range)

    def with_domain(self, domain: Sequence[float]) -> LinearScale:
        return LinearScale(domain, self.range)

    def with_range(self, range_: Sequence[float]) -> LinearScale:
        return LinearScale(self.domain, range_)

    def copy(self) -> LinearScale:
        return LinearScale(self.domain, self.range)

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"


class BandScale:
    """Evenly spaced bands for categorical values.

    ``padding`` sets both the inner gap between bands and the outer gap at
    each end as a fraction of the step. A single category fills the whole
    range.
    """

    def __init__(
        self,
        domain: Iterable[Hashable] = (),
        range_: Sequence[float] = (0.0, 1.0),
        padding: float = 0.0,
    ) -> None:
        if not 0.0 <= padding < 1.0:
            raise ValueError("padding must be in [0, 1)")
        self.domain: list[Hashable] = list(dict.fromkeys(domain))
        r0, r1 = (float(value) for value in range_)
        self.range: tuple[float, float] = (r0, r1)
        self.padding = float(padding)
        self._index = {value: index for index, value in enumerate(self.domain)}
        self._layout()

    def _layout(self) -> None:
        r0, r1 = self.range
        reverse = r1 < r0
        start, stop = (r1, r0) if reverse else (r0, r1)
        count = len(self.domain)
        if count <= 1:
            self.step = stop - start
            self.bandwidth = stop - start
            self._start = start
        else:
            self.step = (stop - start) / (count - self.padding + self.padding * 2)
            self.bandwidth = self.step * (1 - self.padding)
            self._start = start + (stop - start - self.step * (count - self.padding)) * 0.5
        self._positions = [self._start + self.step * index for index in range(count)]
        if reverse:
            self._positions.reverse()

    def __call__(self, value: Hashable) -> float | None:
        index = self._index.get(value)
        if index is None:
            return None
        return self._positions[index]

    def center(self, value: Hashable) -> float | None:
        position = self(value)
        if position is None:
            return None
        return position + self.bandwidth / 2

    def ticks(self, count: int = 10) -> list[Hashable]:
        return list(self.domain)

    def __repr__(self) -> str:
        return (
            f"BandScale(domain={self.domain!r}, range={self.range}, padding={self.padding})"
        )


def extent(values: Iterable[float | None]) -> tuple[float, float] | None:
    finite = [float(value) for value in values if value is not None and math.isfinite(value)]
    if not finite:
        return None
    return min(finite), max(finite)
