from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable

from cycle_dashboard.charts.scene import Element

logger = logging.getLogger(__name__)

Easing = Callable[[float], float]


def ease_linear(t: float) -> float:
    return t


def ease_cubic_in_out(t: float) -> float:
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate(start: Any, end: Any, t: float) -> Any:
    if isinstance(start, (int, float)) and isinstance(end, (int, float)):
        return start + (end - start) * t
    return end if t >= 1 else start


@dataclass
class Transition:
    element: Element
    target: str
    name: str
    start: Any
    end: Any
    begin_ms: float
    duration_ms: float
    easing: Easing = ease_cubic_in_out
    on_end: Callable[[Element], None] | None = None
    done: bool = False
    dropped: bool = False

    @property
    def end_ms(self) -> float:
        return self.begin_ms + self.duration_ms

    def _write(self, value: Any) -> None:
        if self.target == "style":
            self.element.set_style(self.name, value)
        else:
            self.element.attr(self.name, value)

    def step(self, now: float) -> None:
        if self.done:
            return
        if not self.element.attached:
            self.done = True
            self.dropped = True
            return
        if now < self.begin_ms:
            return
        if self.duration_ms <= 0 or now >= self.end_ms:
            self._write(self.end)
            self.done = True
            if self.on_end is not None:
                self.on_end(self.element)
            return
        progress = (now - self.begin_ms) / self.duration_ms
        self._write(interpolate(self.start, self.end, self.easing(progress)))


@dataclass
class Timeline:
    now: float = 0.0
    transitions: list[Transition] = field(default_factory=list)

    def animate(
        self,
        element: Element,
        name: str,
        start: Any,
        end: Any,
        *,
        duration_ms: float,
        delay_ms: float = 0.0,
        easing: Easing = ease_cubic_in_out,
        style: bool = False,
        on_end: Callable[[Element], None] | None = None,
    ) -> Transition:
        """Set ``name`` to ``start`` now and move it to ``end`` over time."""
        transition = Transition(
            element=element,
            target="style" if style else "attr",
            name=name,
            start=start,
            end=end,
            begin_ms=self.now + max(0.0, float(delay_ms)),
            duration_ms=max(0.0, float(duration_ms)),
            easing=easing,
            on_end=on_end,
        )
        transition._write(start)
        self.transitions.append(transition)
        return transition

    @property
    def pending(self) -> list[Transition]:
        return [transition for transition in self.transitions if not transition.done]

    @property
    def idle(self) -> bool:
        return not self.pending

    def advance(self, ms: float) -> None:
        self.now += max(0.0, float(ms))
        for transition in list(self.transitions):
            transition.step(self.now)
        dropped = sum(1 for transition in self.transitions if transition.dropped)
        if dropped:
            logger.debug("Dropped %d transitions on detached elements", dropped)
        self.transitions = [transition for transition in self.transitions if not transition.done]

    def flush(self) -> None:
        """Run every scheduled transition to completion."""
        pending = self.pending
        if not pending:
            return
        horizon = max(transition.end_ms for transition in pending)
        self.advance(max(0.0, horizon - self.now))

    def cancel(self) -> None:
        self.transitions.clear()

    def finishes_at(self) -> float:
        pending = self.pending
        if not pending:
            return self.now
        return max(transition.end_ms for transition in pending)


def stagger_delay(index: int, *, base_ms: float, step_ms: float) -> float:
    """Fixed delay budget for the ``index``-th marker of a series."""
    if index < 0 or not math.isfinite(step_ms):
        return base_ms
    return base_ms + index * step_ms
