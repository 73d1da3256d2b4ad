from __future__ import annotations

from cycle_dashboard.charts.scene import Element, Surface


def test_attribute_names_are_hyphenated_and_serialised() -> None:
    surface = Surface(width=200, height=100)
    surface.append("path", class_name="line soc-line", stroke_width=3, d="M0,0L1,1")
    label = surface.append("text", text_anchor="middle").set_text("a < b")

    svg = surface.to_svg()

    assert 'xmlns="http://www.w3.org/2000/svg"' in svg
    assert 'class="line soc-line"' in svg
    assert 'stroke-width="3"' in svg
    assert "a &lt; b" in svg
    assert label.get("text_anchor") == "middle"


def test_remove_detaches_subtree_and_drops_handlers() -> None:
    surface = Surface()
    group = surface.append("g")
    dot = group.append("circle", class_name="dot")
    calls: list[str] = []
    dot.on("mouseenter", lambda element, **_: calls.append("enter"))

    assert dot.dispatch("mouseenter") is True
    group.remove()

    assert dot.attached is False
    assert dot.handlers("mouseenter") == []
    assert dot.dispatch("mouseenter") is False
    assert calls == ["enter"]
    assert surface.select_all("dot") == []


def test_surface_clear_resets_content_and_attributes() -> None:
    surface = Surface(width=10)
    surface.set_style("cursor", "grab")
    old = surface.append("g", class_name="plot")

    surface.clear()

    assert surface.children == []
    assert surface.attrs == {"xmlns": "http://www.w3.org/2000/svg"}
    assert surface.style == {}
    assert old.attached is False


def test_unmounted_surface_detaches_everything() -> None:
    surface = Surface()
    dot = surface.append("circle")
    assert dot.attached

    surface.unmount()

    assert surface.mounted is False
    assert dot.attached is False


def test_loose_elements_are_never_attached() -> None:
    loose = Element("g")
    child = loose.append("circle")
    child.on("mouseenter", lambda element, **_: None)

    assert child.dispatch("mouseenter") is False


def test_select_and_find_by_id() -> None:
    surface = Surface()
    gradient = surface.defs().append("linearGradient", id="soh-gradient")
    surface.append("g").append("circle", class_name="dot")

    assert surface.defs() is surface.children[0]
    assert surface.find_by_id("soh-gradient") is gradient
    assert surface.select("dot", tag="circle") is not None
    assert surface.select("dot", tag="rect") is None
