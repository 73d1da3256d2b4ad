from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Callable, Literal

from cycle_dashboard.charts.scales import LinearScale
from cycle_dashboard.charts.scene import Element

logger = logging.getLogger(__name__)

# Pixel delta to zoom exponent for one wheel tick (line-free pixel mode).
WHEEL_DELTA_FACTOR = 0.002

InteractionState = Literal["idle", "zoomed", "brushed"]


@dataclass(frozen=True)
class ZoomTransform:
    k: float = 1.0
    x: float = 0.0

    def apply_x(self, value: float) -> float:
        return value * self.k + self.x

    def invert_x(self, pixel: float) -> float:
        return (pixel - self.x) / self.k

    def scale(self, factor: float) -> ZoomTransform:
        return replace(self, k=self.k * factor)

    def translate(self, dx: float) -> ZoomTransform:
        return replace(self, x=self.x + self.k * dx)

    def rescale_x(self, scale: LinearScale) -> LinearScale:
        """Copy of ``scale`` whose domain is the window this transform shows."""
        r0, r1 = scale.range
        return scale.with_domain(
            (scale.invert(self.invert_x(r0)), scale.invert(self.invert_x(r1)))
        )

    @property
    def is_identity(self) -> bool:
        return self.k == 1.0 and self.x == 0.0


IDENTITY = ZoomTransform()

ZoomListener = Callable[[ZoomTransform, str], None]


class ZoomBehavior:
    """Horizontal zoom and pan bounded by a scale extent and the plot width."""

    def __init__(self, width: float, scale_extent: tuple[float, float] = (1.0, 10.0)) -> None:
        low, high = scale_extent
        if not (0 < low < high):
            raise ValueError("scale_extent must satisfy 0 < min < max")
        self.width = float(width)
        self.scale_extent = (float(low), float(high))
        self.transform = IDENTITY
        self._listeners: list[ZoomListener] = []

    def on_zoom(self, listener: ZoomListener) -> None:
        self._listeners.append(listener)

    def clamp_scale(self, k: float) -> float:
        low, high = self.scale_extent
        if not math.isfinite(k):
            return high if k > 0 else low
        return min(high, max(low, k))

    def constrain(self, transform: ZoomTransform) -> ZoomTransform:
        """Shift ``transform`` so the visible window stays inside ``[0, width]``."""
        dx0 = transform.invert_x(0.0)
        dx1 = transform.invert_x(self.width) - self.width
        if dx1 > dx0:
            return transform.translate((dx0 + dx1) / 2)
        shift = min(0.0, dx0) or max(0.0, dx1)
        return transform.translate(shift)

    def transform_to(self, transform: ZoomTransform, source: str = "api") -> ZoomTransform:
        k = self.clamp_scale(transform.k)
        if k != transform.k:
            logger.debug("Clamped zoom scale %.3f to %.3f", transform.k, k)
            transform = ZoomTransform(k=k, x=transform.x)
        self.transform = self.constrain(transform)
        for listener in list(self._listeners):
            listener(self.transform, source)
        return self.transform

    def scale_at(self, k: float, anchor_x: float, source: str = "api") -> ZoomTransform:
        """Zoom to ``k`` keeping the domain point under ``anchor_x`` in place."""
        k = self.clamp_scale(k)
        fixed = self.transform.invert_x(anchor_x)
        return self.transform_to(ZoomTransform(k=k, x=anchor_x - fixed * k), source)

    def wheel(self, delta_y: float, anchor_x: float) -> ZoomTransform:
        k = self.transform.k * math.pow(2.0, -delta_y * WHEEL_DELTA_FACTOR)
        return self.scale_at(k, anchor_x, source="wheel")

    def pan(self, dx: float) -> ZoomTransform:
        moved = ZoomTransform(k=self.transform.k, x=self.transform.x + dx)
        return self.transform_to(moved, source="pan")

    def reset(self) -> ZoomTransform:
        return self.transform_to(IDENTITY, source="reset")


BrushListener = Callable[[tuple[float, float] | None], None]


class Brush:
    """One-dimensional selection over the overview strip, in pixels."""

    def __init__(self, width: float) -> None:
        self.width = float(width)
        self.selection: tuple[float, float] | None = None
        self._listeners: list[BrushListener] = []

    def on_brush(self, listener: BrushListener) -> None:
        self._listeners.append(listener)

    def move(self, selection: tuple[float, float] | None) -> tuple[float, float] | None:
        if selection is not None:
            x0, x1 = sorted(min(self.width, max(0.0, float(value))) for value in selection)
            selection = None if x1 - x0 <= 0 else (x0, x1)
        self.selection = selection
        for listener in list(self._listeners):
            listener(selection)
        return selection

    def clear(self) -> None:
        self.move(None)


class TrendInteraction:
    """Keeps the detail view of a long-range chart in step with zoom and brush."""

    def __init__(
        self,
        overview_scale: LinearScale,
        scale_extent: tuple[float, float] = (1.0, 10.0),
        on_change: Callable[[LinearScale], None] | None = None,
    ) -> None:
        r0, r1 = overview_scale.range
        self.overview_scale = overview_scale.copy()
        self.width = abs(r1 - r0)
        self.zoom = ZoomBehavior(self.width, scale_extent)
        self.brush = Brush(self.width)
        self.on_change = on_change
        self.brush.on_brush(self._brushed)
        self.zoom.on_zoom(self._zoomed)
        self.detail_scale = self.overview_scale.copy()

    @property
    def transform(self) -> ZoomTransform:
        return self.zoom.transform

    @property
    def state(self) -> InteractionState:
        if self.brush.selection is not None:
            return "brushed"
        if self.zoom.transform.is_identity:
            return "idle"
        return "zoomed"

    def visible_domain(self) -> tuple[float, float]:
        return self.detail_scale.domain

    def _zoomed(self, transform: ZoomTransform, source: str) -> None:
        self.detail_scale = transform.rescale_x(self.overview_scale)
        if self.on_change is not None:
            self.on_change(self.detail_scale)

    def _brushed(self, selection: tuple[float, float] | None) -> None:
        if selection is None:
            return
        x0, x1 = selection
        k = self.width / (x1 - x0)
        if k > self.zoom.scale_extent[1]:
            # Too narrow to fill the view: keep the selection centred instead.
            k = self.zoom.scale_extent[1]
            centre = (x0 + x1) / 2
            transform = ZoomTransform(k=k, x=self.width / 2 - centre * k)
        else:
            transform = IDENTITY.scale(k).translate(-x0)
        self.zoom.transform_to(transform, source="brush")

    def apply_brush(self, start: float, end: float) -> tuple[float, float]:
        """Brush the overview between two cycle numbers and return the new window."""
        lo, hi = sorted((float(start), float(end)))
        self.brush_pixels(self.overview_scale(lo), self.overview_scale(hi))
        return self.visible_domain()

    def brush_pixels(self, x0: float, x1: float) -> tuple[float, float] | None:
        return self.brush.move((x0, x1))

    def clear_brush(self) -> None:
        self.brush.clear()

    def wheel(self, delta_y: float, anchor_x: float) -> ZoomTransform:
        return self.zoom.wheel(delta_y, anchor_x)

    def pan(self, dx: float) -> ZoomTransform:
        return self.zoom.pan(dx)

    def reset(self) -> None:
        self.brush.clear()
        self.zoom.reset()


class HoverController:
    """Single-tooltip hover handling for the markers of one chart.

    Entering a marker removes any tooltip still showing for another marker
    before drawing its own, so at most one tooltip exists at a time.
    """

    def __init__(
        self,
        layer: Element,
        *,
        radius: float,
        hover_radius: float,
        offset: float = 15.0,
        formatter: Callable[[Any], str] = str,
    ) -> None:
        self.layer = layer
        self.radius = radius
        self.hover_radius = hover_radius
        self.offset = offset
        self.formatter = formatter
        self.active: Element | None = None
        self.tooltip: Element | None = None

    def attach(self, marker: Element) -> Element:
        marker.on("mouseenter", lambda element, **_: self.enter(element))
        marker.on("mouseleave", lambda element, **_: self.leave(element))
        return marker

    def _drop_tooltip(self) -> None:
        if self.tooltip is not None:
            self.tooltip.remove()
            self.tooltip = None
        for stale in self.layer.select_all("tooltip"):
            stale.remove()

    def enter(self, marker: Element) -> bool:
        if not marker.interactive:
            return False
        if self.active is not None and self.active is not marker:
            self.active.attr("r", self.radius)
        self._drop_tooltip()
        marker.attr("r", self.hover_radius)
        self.tooltip = self.layer.append(
            "text",
            class_name="tooltip",
            x=marker.get("cx"),
            y=float(marker.get("cy", 0.0)) - self.offset,
            text_anchor="middle",
        )
        self.tooltip.set_style("font-size", "11px").set_style("font-weight", "600")
        self.tooltip.set_style("fill", "#1f2937")
        self.tooltip.set_text(self.formatter(marker.datum))
        self.active = marker
        return True

    def leave(self, marker: Element) -> bool:
        if not marker.interactive:
            return False
        marker.attr("r", self.radius)
        if self.active is marker:
            self._drop_tooltip()
            self.active = None
        return True

    def follow_active(self, x_extent: tuple[float, float] | None = None) -> None:
        """Move the tooltip with its marker; drop it when the marker leaves ``x_extent``."""
        if self.active is None or self.tooltip is None:
            return
        cx = float(self.active.get("cx", 0.0))
        if x_extent is not None and not x_extent[0] <= cx <= x_extent[1]:
            self.active.attr("r", self.radius)
            self._drop_tooltip()
            self.active = None
            return
        self.tooltip.attr("x", cx)
        self.tooltip.attr("y", float(self.active.get("cy", 0.0)) - self.offset)

    @property
    def tooltip_count(self) -> int:
        return len(self.layer.select_all("tooltip"))
