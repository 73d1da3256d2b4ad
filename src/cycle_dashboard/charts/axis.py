from __future__ import annotations

from typing import Any, Callable, Literal, Sequence

from cycle_dashboard.charts.formatting import tick_formatter
from cycle_dashboard.charts.scales import BandScale, LinearScale
from cycle_dashboard.charts.scene import Element

Orient = Literal["top", "right", "bottom", "left"]
Scale = LinearScale | BandScale


class Axis:
    """Ticks, tick labels and domain line for one scale.

    A negative ``tick_size`` spanning the plot with an empty ``tick_format``
    draws grid lines instead of an axis.
    """

    def __init__(
        self,
        scale: Scale,
        orient: Orient,
        *,
        tick_count: int = 10,
        tick_values: Sequence[Any] | None = None,
        tick_format: Callable[[Any], str] | None = None,
        tick_size: float = 6.0,
        tick_padding: float = 3.0,
        show_domain: bool = True,
    ) -> None:
        self.scale = scale
        self.orient = orient
        self.tick_count = tick_count
        self.tick_values = tick_values
        self.tick_format = tick_format
        self.tick_size = tick_size
        self.tick_padding = tick_padding
        self.show_domain = show_domain

    def values(self) -> list[Any]:
        if self.tick_values is not None:
            return list(self.tick_values)
        return list(self.scale.ticks(self.tick_count))

    def position(self, value: Any) -> float | None:
        if isinstance(self.scale, BandScale):
            return self.scale.center(value)
        return self.scale(value)

    def labels(self) -> list[str]:
        values = self.values()
        return [self._formatter(values)(value) for value in values]

    def _formatter(self, values: Sequence[Any]) -> Callable[[Any], str]:
        if self.tick_format is not None:
            return self.tick_format
        if isinstance(self.scale, BandScale):
            return str
        return tick_formatter([float(value) for value in values])

    def draw(self, parent: Element, *, class_name: str = "axis", transform: str | None = None) -> Element:
        group = parent.append("g", class_name=class_name, transform=transform)
        horizontal = self.orient in ("top", "bottom")
        outward = -1.0 if self.orient in ("top", "left") else 1.0
        size = self.tick_size * outward
        r0, r1 = self.scale.range

        if self.show_domain:
            if horizontal:
                d = f"M{r0:g},{size:g}V0H{r1:g}V{size:g}"
            else:
                d = f"M{size:g},{r0:g}H0V{r1:g}H{size:g}"
            group.append("path", class_name="domain", d=d, fill="none", stroke="currentColor")

        values = self.values()
        formatter = self._formatter(values)
        label_offset = (max(self.tick_size, 0.0) + self.tick_padding) * outward
        for value in values:
            position = self.position(value)
            if position is None:
                continue
            if horizontal:
                tick = group.append("g", class_name="tick", transform=f"translate({position:g},0)")
                tick.append("line", y2=size, stroke="currentColor")
                label = tick.append(
                    "text",
                    y=label_offset,
                    dy="0.71em" if self.orient == "bottom" else "0em",
                    text_anchor="middle",
                    fill="currentColor",
                )
            else:
                tick = group.append("g", class_name="tick", transform=f"translate(0,{position:g})")
                tick.append("line", x2=size, stroke="currentColor")
                label = tick.append(
                    "text",
                    x=label_offset,
                    dy="0.32em",
                    text_anchor="end" if self.orient == "left" else "start",
                    fill="currentColor",
                )
            tick.bind(value)
            label.set_text(formatter(value))
        return group


def grid_lines(scale: LinearScale, parent: Element, *, length: float, tick_count: int = 10) -> Element:
    """Horizontal grid lines at the ticks of a vertical ``scale``."""
    grid = Axis(
        scale,
        "left",
        tick_count=tick_count,
        tick_size=-length,
        tick_format=lambda _value: "",
        show_domain=False,
    )
    group = grid.draw(parent, class_name="grid")
    group.attr("opacity", 0.1)
    return group
