from __future__ import annotations

import pytest

from cycle_dashboard.charts.interaction import (
    Brush,
    HoverController,
    TrendInteraction,
    ZoomBehavior,
    ZoomTransform,
)
from cycle_dashboard.charts.scales import LinearScale
from cycle_dashboard.charts.scene import Surface

WIDTH = 810.0


def _interaction() -> TrendInteraction:
    return TrendInteraction(LinearScale((0, 50), (0, WIDTH)), (1.0, 10.0))


def test_brushing_cycles_10_to_20_shows_exactly_that_window() -> None:
    interaction = _interaction()

    window = interaction.apply_brush(10, 20)

    assert window == pytest.approx((10.0, 20.0))
    assert interaction.transform.k == pytest.approx(5.0)
    assert interaction.state == "brushed"


def test_detail_scale_maps_the_brushed_window_to_full_width() -> None:
    interaction = _interaction()
    changes: list[LinearScale] = []
    interaction.on_change = changes.append

    interaction.apply_brush(20, 10)

    assert len(changes) == 1
    detail = changes[0]
    assert detail(10) == pytest.approx(0.0)
    assert detail(20) == pytest.approx(WIDTH)
    assert detail.domain == interaction.transform.rescale_x(interaction.overview_scale).domain


def test_brush_that_implies_more_than_max_zoom_is_clamped() -> None:
    interaction = _interaction()

    window = interaction.apply_brush(10, 11)

    assert interaction.transform.k == 10.0
    assert window[1] - window[0] == pytest.approx(5.0)
    assert (window[0] + window[1]) / 2 == pytest.approx(10.5)


def test_wheel_zoom_is_clamped_to_scale_extent() -> None:
    interaction = _interaction()

    interaction.wheel(-1000, anchor_x=WIDTH / 2)
    assert interaction.transform.k == pytest.approx(4.0)
    assert interaction.state == "zoomed"

    interaction.wheel(-100000, anchor_x=WIDTH / 2)
    assert interaction.transform.k == 10.0

    interaction.wheel(100000, anchor_x=WIDTH / 2)
    assert interaction.transform.k == 1.0
    assert interaction.visible_domain() == pytest.approx((0.0, 50.0))


def test_wheel_keeps_the_anchor_point_fixed() -> None:
    interaction = _interaction()
    anchor = WIDTH / 2

    interaction.wheel(-500, anchor_x=anchor)

    assert interaction.detail_scale.invert(anchor) == pytest.approx(25.0)


def test_panning_never_leaves_the_data_extent() -> None:
    interaction = _interaction()
    interaction.wheel(-500, anchor_x=0)

    interaction.pan(10000)
    assert interaction.visible_domain()[0] == pytest.approx(0.0)

    interaction.pan(-10000)
    assert interaction.visible_domain()[1] == pytest.approx(50.0)
    lo, hi = interaction.visible_domain()
    assert 0.0 <= lo < hi <= 50.0


def test_pointer_zoom_does_not_move_the_brush() -> None:
    interaction = _interaction()
    interaction.apply_brush(10, 20)
    selection = interaction.brush.selection

    interaction.wheel(300, anchor_x=100)

    assert interaction.brush.selection == selection
    assert interaction.visible_domain() != pytest.approx((10.0, 20.0))


def test_clearing_the_brush_keeps_the_zoom_it_produced() -> None:
    interaction = _interaction()
    interaction.apply_brush(10, 20)

    interaction.clear_brush()

    assert interaction.brush.selection is None
    assert interaction.state == "zoomed"
    assert interaction.visible_domain() == pytest.approx((10.0, 20.0))

    interaction.reset()
    assert interaction.state == "idle"


def test_empty_brush_selection_is_cleared() -> None:
    brush = Brush(100)
    seen: list[object] = []
    brush.on_brush(seen.append)

    assert brush.move((40, 40)) is None
    assert brush.move((120, -5)) == (0.0, 100.0)
    assert seen == [None, (0.0, 100.0)]


def test_zoom_behavior_constrains_programmatic_transforms() -> None:
    zoom = ZoomBehavior(100)

    transform = zoom.transform_to(ZoomTransform(k=2, x=50))
    assert transform == ZoomTransform(k=2, x=0)

    transform = zoom.transform_to(ZoomTransform(k=20, x=-5000))
    assert transform.k == 10
    assert transform.invert_x(100) == pytest.approx(100)

    with pytest.raises(ValueError):
        ZoomBehavior(100, scale_extent=(5, 1))


def _markers(surface: Surface):
    layer = surface.append("g", class_name="plot")
    hover = HoverController(layer, radius=5, hover_radius=7, formatter=lambda value: f"{value:.1f}%")
    markers = []
    for index, value in enumerate((20.0, 45.0, 70.0)):
        marker = layer.append("circle", cx=index * 100.0, cy=200.0 - value, r=5).bind(value)
        hover.attach(marker)
        markers.append(marker)
    return hover, markers


def test_hover_shows_one_tooltip_above_the_marker() -> None:
    surface = Surface()
    hover, (first, _, _) = _markers(surface)

    first.dispatch("mouseenter")

    tooltip = surface.select("tooltip")
    assert tooltip is not None
    assert tooltip.text == "20.0%"
    assert tooltip.get("y") == pytest.approx(180.0 - 15)
    assert first.get("r") == 7

    first.dispatch("mouseleave")
    assert hover.tooltip_count == 0
    assert first.get("r") == 5


def test_entering_another_marker_replaces_the_tooltip() -> None:
    surface = Surface()
    hover, (first, second, _) = _markers(surface)

    first.dispatch("mouseenter")
    second.dispatch("mouseenter")

    tooltips = surface.select_all("tooltip")
    assert [tooltip.text for tooltip in tooltips] == ["45.0%"]
    assert first.get("r") == 5
    assert second.get("r") == 7

    # A late leave from the first marker must not hide the second tooltip.
    first.dispatch("mouseleave")
    assert [tooltip.text for tooltip in surface.select_all("tooltip")] == ["45.0%"]


def test_hover_is_ignored_until_the_marker_is_interactive() -> None:
    surface = Surface()
    hover, (first, _, _) = _markers(surface)
    first.interactive = False

    assert hover.enter(first) is False
    assert hover.tooltip_count == 0


def test_tooltip_follows_its_marker_when_it_moves() -> None:
    surface = Surface()
    hover, (_, second, _) = _markers(surface)
    second.dispatch("mouseenter")

    second.attr("cx", 250.0).attr("cy", 120.0)
    hover.follow_active((0.0, 300.0))

    tooltip = surface.select("tooltip")
    assert tooltip.get("x") == pytest.approx(250.0)
    assert tooltip.get("y") == pytest.approx(105.0)
    assert hover.active is second


def test_tooltip_is_dropped_when_its_marker_leaves_the_extent() -> None:
    surface = Surface()
    hover, (_, second, _) = _markers(surface)
    second.dispatch("mouseenter")

    second.attr("cx", 450.0)
    hover.follow_active((0.0, 300.0))

    assert hover.tooltip_count == 0
    assert hover.active is None
    assert second.get("r") == 5
    hover.follow_active((0.0, 300.0))
