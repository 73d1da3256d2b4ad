from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from cycle_dashboard.charts.animation import Timeline, ease_linear, stagger_delay
from cycle_dashboard.charts.axis import Axis, grid_lines
from cycle_dashboard.charts.binning import TemperatureBin, temperature_color
from cycle_dashboard.charts.interaction import HoverController, TrendInteraction
from cycle_dashboard.charts.paths import PathData, area_path, line_path
from cycle_dashboard.charts.scales import BandScale, LinearScale, extent
from cycle_dashboard.charts.scene import Element, Surface
from cycle_dashboard.charts.stats import TrendPoint, trend_points
from cycle_dashboard.charts.synthetic import health_progression, performance_progression
from cycle_dashboard.config import AnimationConfig
from cycle_dashboard.models import CycleRecord

logger = logging.getLogger(__name__)

LABEL_FILL = "#374151"
TICK_FILL = "#4b5563"
SOC_COLOR = "#10b981"
SOH_COLOR = "#f59e0b"
DISTANCE_COLOR = "#8b5cf6"
SPEED_COLOR = "#3b82f6"
OVERVIEW_COLOR = "#6366f1"
HEALTH_TICKS = (0.0, 0.25, 0.5, 0.75, 1.0)


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float


Scales = dict[str, Any]


def _style_axis_text(group: Element, fill: str = TICK_FILL) -> None:
    for label in group.select_all(tag="text"):
        label.set_style("font-size", "12px").set_style("fill", fill)


def axis_title(
    parent: Element, text: str, *, x: float, y: float, rotate: bool = False, fill: str = LABEL_FILL
) -> Element:
    title = parent.append(
        "text",
        class_name="axis-title",
        x=x,
        y=y,
        text_anchor="middle",
        transform="rotate(-90)" if rotate else None,
    )
    title.set_style("font-size", "14px").set_style("font-weight", "600").set_style("fill", fill)
    return title.set_text(text)


class ChartRenderer:
    """Base class: owns the timeline and draws one chart into a surface."""

    name = "chart"
    default_width = 700
    default_height = 400
    margin = Margin(top=20, right=30, bottom=60, left=60)
    placeholder_text = "No data available."

    def __init__(
        self,
        *,
        width: int | None = None,
        height: int | None = None,
        animation: AnimationConfig | None = None,
    ) -> None:
        self.width = width or self.default_width
        self.height = height or self.default_height
        self.animation = animation or AnimationConfig()
        self.timeline = Timeline()
        self.hover: HoverController | None = None

    @property
    def inner_width(self) -> float:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> float:
        return self.height - self.margin.top - self.margin.bottom

    @property
    def outer_height(self) -> float:
        return self.height

    def has_data(self, data: Any) -> bool:
        return data is not None

    def render(self, surface: Surface, data: Any) -> None:
        self.hover = None
        surface.clear()
        surface.attr("width", self.width).attr("height", self.outer_height)
        surface.add_class(self.name)
        if not self.has_data(data):
            self.draw_placeholder(surface)
            return

        plot = surface.append(
            "g", class_name="plot", transform=f"translate({self.margin.left:g},{self.margin.top:g})"
        )
        scales = self.compute_scales(data)
        self.draw_grid(plot, scales)
        self.draw_primary(surface, plot, data, scales)
        self.draw_secondary(surface, plot, data, scales)
        self.draw_markers(plot, data, scales)
        self.draw_axes(plot, scales)
        self.draw_legend(plot)
        logger.debug("Rendered %s with %d nodes", self.name, sum(1 for _ in surface.iter()))

    def draw_placeholder(self, surface: Surface) -> Element:
        text = surface.append(
            "text",
            class_name="placeholder",
            x=self.width / 2,
            y=self.outer_height / 2,
            text_anchor="middle",
        )
        text.set_style("fill", "#4b5563")
        return text.set_text(self.placeholder_text)

    def compute_scales(self, data: Any) -> Scales:
        raise NotImplementedError

    def draw_grid(self, plot: Element, scales: Scales) -> None:
        return None

    def draw_primary(self, surface: Surface, plot: Element, data: Any, scales: Scales) -> None:
        raise NotImplementedError

    def draw_secondary(self, surface: Surface, plot: Element, data: Any, scales: Scales) -> None:
        return None

    def draw_markers(self, plot: Element, data: Any, scales: Scales) -> None:
        return None

    def draw_axes(self, plot: Element, scales: Scales) -> None:
        return None

    def draw_legend(self, plot: Element) -> None:
        return None

    # -- animation helpers ----------------------------------------------------
    def reveal_line(self, element: Element, path: PathData, duration_ms: float) -> None:
        """Draw ``element`` progressively; the dash pattern is dropped once revealed."""
        length = path.length()
        element.attr("stroke-dasharray", f"{length:g} {length:g}")
        self.timeline.animate(
            element,
            "stroke-dashoffset",
            length,
            0.0,
            duration_ms=duration_ms,
            easing=ease_linear,
            on_end=clear_dash,
        )

    def fade_in(self, element: Element, duration_ms: float, *, style: bool = False) -> None:
        self.timeline.animate(element, "opacity", 0.0, 1.0, duration_ms=duration_ms, style=style)

    def grow_marker(self, marker: Element, radius: float, delay_ms: float) -> None:
        """Grow ``marker`` from nothing; it takes hover events once fully grown."""
        marker.interactive = False
        self.timeline.animate(
            marker,
            "r",
            0.0,
            radius,
            delay_ms=delay_ms,
            duration_ms=self.animation.marker_grow_ms,
            on_end=_enable_hover,
        )


def clear_dash(element: Element) -> None:
    element.attr("stroke-dasharray", None).attr("stroke-dashoffset", None)


def _enable_hover(marker: Element) -> None:
    marker.interactive = True


class TemperatureHistogramChart(ChartRenderer):
    name = "temperature-histogram"
    margin = Margin(top=20, right=30, bottom=60, left=60)
    placeholder_text = "Select a cycle to view temperature distribution."

    def has_data(self, data: Sequence[TemperatureBin] | None) -> bool:
        return bool(data)

    def compute_scales(self, data: Sequence[TemperatureBin]) -> Scales:
        x = BandScale([item.range for item in data], (0, self.inner_width), padding=0.2)
        top = max(item.minutes for item in data)
        y = LinearScale((0, max(top, 0.0)), (self.inner_height, 0)).nice()
        return {"x": x, "y": y}

    def draw_primary(
        self, surface: Surface, plot: Element, data: Sequence[TemperatureBin], scales: Scales
    ) -> None:
        x, y = scales["x"], scales["y"]
        bars = plot.append("g", class_name="bars")
        for item in data:
            left = x(item.range) or 0.0
            bar = bars.append(
                "rect",
                class_name="bar",
                x=left,
                width=x.bandwidth,
                fill=temperature_color(item.range_start),
                rx=4,
            ).bind(item)
            bar.set_style("cursor", "pointer")
            bar.on("mouseenter", lambda element, **_: element.attr("opacity", 0.8))
            bar.on("mouseleave", lambda element, **_: element.attr("opacity", 1))
            self.timeline.animate(
                bar, "y", self.inner_height, y(item.minutes), duration_ms=self.animation.bar_grow_ms
            )
            self.timeline.animate(
                bar,
                "height",
                0.0,
                self.inner_height - y(item.minutes),
                duration_ms=self.animation.bar_grow_ms,
            )

    def draw_markers(self, plot: Element, data: Sequence[TemperatureBin], scales: Scales) -> None:
        x, y = scales["x"], scales["y"]
        labels = plot.append("g", class_name="labels")
        for item in data:
            label = labels.append(
                "text",
                class_name="label",
                x=(x(item.range) or 0.0) + x.bandwidth / 2,
                y=y(item.minutes) - 5,
                text_anchor="middle",
            ).bind(item)
            label.set_style("font-size", "11px").set_style("font-weight", "600")
            label.set_style("fill", "#1f2937")
            label.set_text(f"{item.minutes:.1f}")
            self.fade_in(label, self.animation.bar_grow_ms, style=True)

    def draw_axes(self, plot: Element, scales: Scales) -> None:
        x_axis = Axis(scales["x"], "bottom").draw(
            plot, class_name="x-axis", transform=f"translate(0,{self.inner_height:g})"
        )
        _style_axis_text(x_axis)
        for label in x_axis.select_all(tag="text"):
            label.attr("transform", "rotate(-45)").attr("text-anchor", "end")
            label.attr("dx", "-.8em").attr("dy", ".15em")
        y_axis = Axis(scales["y"], "left", tick_count=6).draw(plot, class_name="y-axis")
        _style_axis_text(y_axis)
        axis_title(plot, "Temperature Range (°C)", x=self.inner_width / 2, y=self.inner_height + 55)
        axis_title(plot, "Time (minutes)", x=-self.inner_height / 2, y=-45, rotate=True)


class HealthChart(ChartRenderer):
    name = "health"
    margin = Margin(top=30, right=80, bottom=60, left=60)
    placeholder_text = "Select a cycle to view battery health metrics."
    progress_labels = ("Start", "25%", "50%", "75%", "End")

    def compute_scales(self, data: CycleRecord) -> Scales:
        return {
            "x": LinearScale((0, 1), (0, self.inner_width)),
            "y": LinearScale((0, 100), (self.inner_height, 0)),
            "points": health_progression(data),
        }

    def draw_grid(self, plot: Element, scales: Scales) -> None:
        grid_lines(scales["y"], plot, length=self.inner_width, tick_count=10)

    def _series(self, plot: Element, scales: Scales, field: str, color: str) -> Element:
        x, y = scales["x"], scales["y"]
        path = line_path(
            [(x(point.progress), y(getattr(point, field))) for point in scales["points"]], "monotone"
        )
        element = plot.append(
            "path",
            class_name=f"line {field}-line",
            d=path.to_d(),
            fill="none",
            stroke=color,
            stroke_width=3,
        )
        self.reveal_line(element, path, self.animation.line_reveal_ms)
        return element

    def draw_primary(self, surface: Surface, plot: Element, data: CycleRecord, scales: Scales) -> None:
        self._series(plot, scales, "soc", SOC_COLOR)

    def draw_secondary(
        self, surface: Surface, plot: Element, data: CycleRecord, scales: Scales
    ) -> None:
        self._series(plot, scales, "soh", SOH_COLOR)

    def draw_markers(self, plot: Element, data: CycleRecord, scales: Scales) -> None:
        x, y = scales["x"], scales["y"]
        self.hover = HoverController(
            plot, radius=5, hover_radius=7, formatter=lambda value: f"{value:.1f}%"
        )
        for field, color in (("soc", SOC_COLOR), ("soh", SOH_COLOR)):
            for index, point in enumerate(scales["points"]):
                value = getattr(point, field)
                marker = plot.append(
                    "circle",
                    class_name=f"dot {field}-dot",
                    cx=x(point.progress),
                    cy=y(value),
                    r=0,
                    fill=color,
                    stroke="white",
                    stroke_width=2,
                ).bind(value)
                marker.set_style("cursor", "pointer")
                self.hover.attach(marker)
                delay = stagger_delay(
                    index,
                    base_ms=self.animation.line_reveal_ms,
                    step_ms=self.animation.health_marker_stagger_ms,
                )
                self.grow_marker(marker, 5, delay)

    def draw_axes(self, plot: Element, scales: Scales) -> None:
        labels = dict(zip(HEALTH_TICKS, self.progress_labels))
        x_axis = Axis(
            scales["x"], "bottom", tick_values=HEALTH_TICKS, tick_format=lambda value: labels[value]
        ).draw(plot, class_name="x-axis", transform=f"translate(0,{self.inner_height:g})")
        _style_axis_text(x_axis)
        y_axis = Axis(scales["y"], "left", tick_count=10).draw(plot, class_name="y-axis")
        _style_axis_text(y_axis)
        axis_title(plot, "Percentage (%)", x=-self.inner_height / 2, y=-45, rotate=True)
        axis_title(plot, "Cycle Progress", x=self.inner_width / 2, y=self.inner_height + 45)

    def draw_legend(self, plot: Element) -> None:
        legend = plot.append(
            "g", class_name="legend", transform=f"translate({self.inner_width - 120:g},0)"
        )
        for row, (label, color) in enumerate((("SOC", SOC_COLOR), ("SOH", SOH_COLOR))):
            offset = row * 20
            legend.append("line", x1=0, y1=offset, x2=30, y2=offset, stroke=color, stroke_width=3)
            text = legend.append("text", x=35, y=offset + 5)
            text.set_style("font-size", "12px").set_style("fill", LABEL_FILL)
            text.set_text(label)


class PerformanceChart(ChartRenderer):
    name = "performance"
    margin = Margin(top=20, right=80, bottom=60, left=60)
    placeholder_text = "Select a cycle to view performance data."
    marker_every = 4

    def compute_scales(self, data: CycleRecord) -> Scales:
        points = performance_progression(data)
        max_time = max(point.time for point in points)
        max_distance = max(point.distance for point in points)
        max_speed = max(point.speed for point in points)
        return {
            "x": LinearScale((0, max_time), (0, self.inner_width)),
            "distance": LinearScale((0, max_distance * 1.1), (self.inner_height, 0)),
            "speed": LinearScale((0, max_speed * 1.1), (self.inner_height, 0)),
            "points": points,
        }

    def draw_grid(self, plot: Element, scales: Scales) -> None:
        grid_lines(scales["distance"], plot, length=self.inner_width, tick_count=6)

    def draw_primary(self, surface: Surface, plot: Element, data: CycleRecord, scales: Scales) -> None:
        x, y = scales["x"], scales["distance"]
        gradient = surface.defs().append(
            "linearGradient", id="distance-gradient", x1="0%", y1="0%", x2="0%", y2="100%"
        )
        gradient.append("stop", offset="0%", stop_color=DISTANCE_COLOR, stop_opacity=0.6)
        gradient.append("stop", offset="100%", stop_color=DISTANCE_COLOR, stop_opacity=0.1)
        path = area_path(
            [(x(point.time), y(point.distance)) for point in scales["points"]],
            baseline=self.inner_height,
            curve="monotone",
        )
        area = plot.append(
            "path", class_name="area distance-area", d=path.to_d(), fill="url(#distance-gradient)"
        )
        self.fade_in(area, self.animation.area_fade_ms)

    def draw_secondary(
        self, surface: Surface, plot: Element, data: CycleRecord, scales: Scales
    ) -> None:
        x, y = scales["x"], scales["speed"]
        path = line_path([(x(point.time), y(point.speed)) for point in scales["points"]], "monotone")
        line = plot.append(
            "path",
            class_name="line speed-line",
            d=path.to_d(),
            fill="none",
            stroke=SPEED_COLOR,
            stroke_width=3,
        )
        self.reveal_line(line, path, self.animation.line_reveal_ms)

    def draw_markers(self, plot: Element, data: CycleRecord, scales: Scales) -> None:
        x, y = scales["x"], scales["speed"]
        self.hover = HoverController(
            plot, radius=4, hover_radius=6, formatter=lambda value: f"{value:.1f} km/h"
        )
        sampled = scales["points"][:: self.marker_every]
        for index, point in enumerate(sampled):
            marker = plot.append(
                "circle",
                class_name="speed-dot",
                cx=x(point.time),
                cy=y(point.speed),
                r=0,
                fill=SPEED_COLOR,
                stroke="white",
                stroke_width=2,
            ).bind(point.speed)
            marker.set_style("cursor", "pointer")
            self.hover.attach(marker)
            delay = stagger_delay(
                index,
                base_ms=self.animation.line_reveal_ms,
                step_ms=self.animation.performance_marker_stagger_ms,
            )
            self.grow_marker(marker, 4, delay)

    def draw_axes(self, plot: Element, scales: Scales) -> None:
        x_axis = Axis(scales["x"], "bottom", tick_count=10).draw(
            plot, class_name="x-axis", transform=f"translate(0,{self.inner_height:g})"
        )
        _style_axis_text(x_axis)
        distance_axis = Axis(scales["distance"], "left", tick_count=6).draw(
            plot, class_name="y-axis-distance"
        )
        _style_axis_text(distance_axis, DISTANCE_COLOR)
        speed_axis = Axis(scales["speed"], "right", tick_count=6).draw(
            plot, class_name="y-axis-speed", transform=f"translate({self.inner_width:g},0)"
        )
        _style_axis_text(speed_axis, SPEED_COLOR)
        axis_title(
            plot, "Distance (km)", x=-self.inner_height / 2, y=-45, rotate=True, fill=DISTANCE_COLOR
        )
        axis_title(
            plot,
            "Speed (km/h)",
            x=-self.inner_height / 2,
            y=self.inner_width + 70,
            rotate=True,
            fill=SPEED_COLOR,
        )
        axis_title(plot, "Time (hours)", x=self.inner_width / 2, y=self.inner_height + 50)

    def draw_legend(self, plot: Element) -> None:
        legend = plot.append("g", class_name="legend", transform="translate(10,10)")
        legend.append("rect", x=0, y=0, width=20, height=12, fill="url(#distance-gradient)")
        distance = legend.append("text", x=25, y=10).set_text("Distance")
        legend.append("line", x1=0, y1=26, x2=20, y2=26, stroke=SPEED_COLOR, stroke_width=3)
        speed = legend.append("text", x=25, y=30).set_text("Speed")
        for text in (distance, speed):
            text.set_style("font-size", "12px").set_style("fill", LABEL_FILL)


def soh_color(soh: float) -> str:
    if soh >= 95:
        return "#10b981"
    if soh >= 90:
        return "#f59e0b"
    return "#ef4444"


class TrendChart(ChartRenderer):
    """SOH across every cycle of a device, with a zoomable detail view.

    The overview strip below the detail view carries a brush; brushing sets
    the detail zoom. After each zoom or brush step the line, dots and x axis
    are redrawn from a freshly rescaled x scale.
    """

    name = "trend"
    default_width = 900
    default_height = 500
    margin = Margin(top=30, right=30, bottom=100, left=60)
    placeholder_text = "No cycle data available for long-term analysis."

    def __init__(
        self,
        *,
        width: int | None = None,
        height: int | None = None,
        overview_height: int = 50,
        scale_extent: tuple[float, float] = (1.0, 10.0),
        animation: AnimationConfig | None = None,
    ) -> None:
        super().__init__(width=width, height=height, animation=animation)
        self.overview_height = overview_height
        self.scale_extent = scale_extent
        self.interaction: TrendInteraction | None = None
        self._points: list[TrendPoint] = []
        self._y: LinearScale | None = None
        self._detail_line: Element | None = None
        self._dots: list[Element] = []
        self._x_axis: Element | None = None
        self._plot: Element | None = None
        self._brush_layer: Element | None = None

    @property
    def outer_height(self) -> float:
        return self.height + self.overview_height

    def has_data(self, data: Sequence[CycleRecord] | None) -> bool:
        return bool(data)

    def render(self, surface: Surface, data: Sequence[CycleRecord] | None) -> None:
        self.interaction = None
        self._points = []
        self._dots = []
        self._detail_line = self._x_axis = self._plot = self._brush_layer = None
        super().render(surface, data)

    def compute_scales(self, data: Sequence[CycleRecord]) -> Scales:
        self._points = trend_points(data)
        soh_extent = extent(point.soh for point in self._points) or (0.0, 0.0)
        last_cycle = max(point.cycle_number for point in self._points)
        x = LinearScale((0, last_cycle), (0, self.inner_width))
        y = LinearScale((soh_extent[0] - 1, soh_extent[1] + 1), (self.inner_height, 0))
        self._y = y
        return {
            "x": x,
            "y": y,
            "overview_y": y.with_range((self.overview_height, 0)),
        }

    def draw_grid(self, plot: Element, scales: Scales) -> None:
        clip = plot.append("defs").append("clipPath", id="clip")
        clip.append("rect", width=self.inner_width, height=self.inner_height)
        grid_lines(scales["y"], plot, length=self.inner_width, tick_count=10)

    def _detail_path(self, x: LinearScale, y: LinearScale) -> PathData:
        return line_path(
            [(x(point.cycle_number), y(point.soh)) for point in self._points], "monotone"
        )

    def draw_primary(
        self, surface: Surface, plot: Element, data: Sequence[CycleRecord], scales: Scales
    ) -> None:
        gradient = surface.defs().append(
            "linearGradient", id="soh-gradient", x1="0%", y1="0%", x2="100%", y2="0%"
        )
        for offset, color in (("0%", "#10b981"), ("50%", "#f59e0b"), ("100%", "#ef4444")):
            gradient.append("stop", offset=offset, stop_color=color)
        path = self._detail_path(scales["x"], scales["y"])
        self._detail_line = plot.append(
            "path",
            class_name="line soh-line",
            d=path.to_d(),
            clip_path="url(#clip)",
            fill="none",
            stroke="url(#soh-gradient)",
            stroke_width=3,
        )
        self.reveal_line(self._detail_line, path, self.animation.trend_reveal_ms)

    def draw_secondary(
        self, surface: Surface, plot: Element, data: Sequence[CycleRecord], scales: Scales
    ) -> None:
        x, y = scales["x"], scales["overview_y"]
        top = self.inner_height + self.margin.top + 60
        overview = surface.append(
            "g", class_name="overview", transform=f"translate({self.margin.left:g},{top:g})"
        )
        overview.append(
            "rect", width=self.inner_width, height=self.overview_height, fill="#f3f4f6", rx=4
        )
        path = line_path(
            [(x(point.cycle_number), y(point.soh)) for point in self._points], "monotone"
        )
        overview.append(
            "path",
            class_name="overview-line",
            d=path.to_d(),
            fill="none",
            stroke=OVERVIEW_COLOR,
            stroke_width=2,
        )
        brush = overview.append("g", class_name="brush")
        brush.append(
            "rect",
            class_name="overlay",
            width=self.inner_width,
            height=self.overview_height,
            fill="none",
        )
        self.interaction = TrendInteraction(x, self.scale_extent, on_change=self.redraw_detail)
        interaction = self.interaction
        brush.on("brush", lambda element, selection=None, **_: interaction.brush.move(selection))
        plot.on("wheel", lambda element, delta_y=0.0, x=0.0, **_: interaction.wheel(delta_y, x))
        plot.on("drag", lambda element, dx=0.0, **_: interaction.pan(dx))
        self._brush_layer = brush
        interaction.brush.on_brush(self._draw_selection)

    def _draw_selection(self, selection: tuple[float, float] | None) -> None:
        if self._brush_layer is None:
            return
        for stale in self._brush_layer.select_all("selection"):
            stale.remove()
        if selection is None:
            return
        x0, x1 = selection
        self._brush_layer.append(
            "rect",
            class_name="selection",
            x=x0,
            width=x1 - x0,
            height=self.overview_height,
            fill="#777",
            fill_opacity=0.3,
        )

    def draw_markers(
        self, plot: Element, data: Sequence[CycleRecord], scales: Scales
    ) -> None:
        x, y = scales["x"], scales["y"]
        layer = plot.append("g", class_name="dots", clip_path="url(#clip)")
        self.hover = HoverController(
            plot,
            radius=3,
            hover_radius=6,
            formatter=lambda point: f"Cycle {point.cycle_number}: {point.soh:.2f}%",
        )
        for index, point in enumerate(self._points):
            marker = layer.append(
                "circle",
                class_name="dot",
                cx=x(point.cycle_number),
                cy=y(point.soh),
                r=0,
                fill=soh_color(point.soh),
                stroke="white",
                stroke_width=2,
            ).bind(point)
            marker.set_style("cursor", "pointer")
            self.hover.attach(marker)
            delay = stagger_delay(
                index,
                base_ms=self.animation.trend_reveal_ms,
                step_ms=self.animation.trend_marker_stagger_ms,
            )
            self.grow_marker(marker, 3, delay)
            self._dots.append(marker)

    def _draw_x_axis(self, plot: Element, x: LinearScale) -> Element:
        group = Axis(x, "bottom").draw(
            plot, class_name="x-axis", transform=f"translate(0,{self.inner_height:g})"
        )
        _style_axis_text(group)
        return group

    def draw_axes(self, plot: Element, scales: Scales) -> None:
        self._plot = plot
        self._x_axis = self._draw_x_axis(plot, scales["x"])
        y_axis = Axis(scales["y"], "left", tick_count=10).draw(plot, class_name="y-axis")
        _style_axis_text(y_axis)
        axis_title(plot, "Cycle Number", x=self.inner_width / 2, y=self.inner_height + 50)
        axis_title(plot, "State of Health (%)", x=-self.inner_height / 2, y=-45, rotate=True)

    def redraw_detail(self, x: LinearScale) -> None:
        """Redraw the detail line, dots and x axis for a new visible domain."""
        if self._detail_line is None or self._y is None:
            return
        if self._plot is None or not self._plot.attached:
            return
        # The reveal dash pattern was sized for the unzoomed path.
        clear_dash(self._detail_line)
        self._detail_line.attr("d", self._detail_path(x, self._y).to_d())
        for marker in self._dots:
            marker.attr("cx", x(marker.datum.cycle_number))
        if self.hover is not None:
            self.hover.follow_active((0.0, self.inner_width))
        if self._x_axis is not None:
            self._x_axis.remove()
        self._x_axis = self._draw_x_axis(self._plot, x)
