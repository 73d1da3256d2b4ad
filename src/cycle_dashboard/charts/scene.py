from __future__ import annotations

import logging
from html import escape
from typing import Any, Callable, Iterator

from cycle_dashboard.charts.formatting import format_svg_number

logger = logging.getLogger(__name__)

EventHandler = Callable[..., None]

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def _attr_name(name: str) -> str:
    return name.rstrip("_").replace("_", "-")


def _attr_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_svg_number(value)
    return str(value)


class Element:
    def __init__(self, tag: str, **attrs: Any) -> None:
        self.tag = tag
        self.attrs: dict[str, Any] = {}
        self.style: dict[str, Any] = {}
        self.classes: list[str] = []
        self.text: str | None = None
        self.children: list[Element] = []
        self.parent: Element | None = None
        self.datum: Any = None
        self.interactive = True
        self._handlers: dict[str, list[EventHandler]] = {}
        self._removed = False
        class_name = attrs.pop("class_name", None)
        if class_name:
            for name in str(class_name).split():
                self.add_class(name)
        for name, value in attrs.items():
            self.attrs[_attr_name(name)] = value

    def __repr__(self) -> str:
        classes = f" .{'.'.join(self.classes)}" if self.classes else ""
        return f"<{self.tag}{classes} children={len(self.children)}>"

    # -- tree -----------------------------------------------------------------
    def append(self, tag: str, **attrs: Any) -> Element:
        child = Element(tag, **attrs)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self) -> None:
        if self.parent is not None and self in self.parent.children:
            self.parent.children.remove(self)
        self.parent = None
        self._dispose()

    def _dispose(self) -> None:
        self._removed = True
        self._handlers.clear()
        for child in self.children:
            child._dispose()

    def clear(self) -> None:
        for child in list(self.children):
            child.remove()

    @property
    def root(self) -> Element:
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def attached(self) -> bool:
        """True while the element is still part of a live surface."""
        if self._removed:
            return False
        root = self.root
        return isinstance(root, Surface) and root.mounted

    def iter(self) -> Iterator[Element]:
        for child in self.children:
            yield child
            yield from child.iter()

    def select_all(self, class_name: str | None = None, tag: str | None = None) -> list[Element]:
        return [
            node
            for node in self.iter()
            if (class_name is None or class_name in node.classes)
            and (tag is None or node.tag == tag)
        ]

    def select(self, class_name: str | None = None, tag: str | None = None) -> Element | None:
        for node in self.iter():
            if (class_name is None or class_name in node.classes) and (
                tag is None or node.tag == tag
            ):
                return node
        return None

    # -- attributes -----------------------------------------------------------
    def attr(self, name: str, value: Any) -> Element:
        self.attrs[_attr_name(name)] = value
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(_attr_name(name), default)

    def set_style(self, name: str, value: Any) -> Element:
        self.style[_attr_name(name)] = value
        return self

    def set_text(self, text: str) -> Element:
        self.text = text
        return self

    def add_class(self, name: str) -> Element:
        if name not in self.classes:
            self.classes.append(name)
        return self

    def bind(self, datum: Any) -> Element:
        self.datum = datum
        return self

    # -- events ---------------------------------------------------------------
    def on(self, event: str, handler: EventHandler) -> Element:
        self._handlers.setdefault(event, []).append(handler)
        return self

    def handlers(self, event: str) -> list[EventHandler]:
        return list(self._handlers.get(event, []))

    def dispatch(self, event: str, **payload: Any) -> bool:
        """Deliver ``event`` to this element's handlers.

        Returns ``False`` without calling anything when the element has been
        torn down or has no handler for the event.
        """
        if not self.attached:
            logger.debug("Dropped %s on detached %r", event, self)
            return False
        handlers = self._handlers.get(event)
        if not handlers:
            return False
        for handler in list(handlers):
            handler(self, **payload)
        return True

    # -- serialisation --------------------------------------------------------
    def _attr_text(self) -> str:
        parts = []
        if self.classes:
            parts.append(f'class="{escape(" ".join(self.classes))}"')
        for name, value in self.attrs.items():
            if value is None:
                continue
            parts.append(f'{name}="{escape(_attr_value(value))}"')
        if self.style:
            style = "; ".join(f"{key}: {_attr_value(val)}" for key, val in self.style.items())
            parts.append(f'style="{escape(style)}"')
        return (" " + " ".join(parts)) if parts else ""

    def to_svg(self, indent: int = 0) -> str:
        pad = "  " * indent
        attrs = self._attr_text()
        if not self.children and self.text is None:
            return f"{pad}<{self.tag}{attrs}/>"
        if not self.children:
            return f"{pad}<{self.tag}{attrs}>{escape(self.text or '')}</{self.tag}>"
        lines = [f"{pad}<{self.tag}{attrs}>"]
        if self.text is not None:
            lines.append(f"{pad}  {escape(self.text)}")
        lines.extend(child.to_svg(indent + 1) for child in self.children)
        lines.append(f"{pad}</{self.tag}>")
        return "\n".join(lines)


class Surface(Element):
    """Root ``<svg>`` element owned by exactly one chart instance."""

    def __init__(self, **attrs: Any) -> None:
        super().__init__("svg", xmlns=SVG_NAMESPACE, **attrs)
        self.mounted = True

    def clear(self) -> None:
        super().clear()
        self._handlers.clear()
        self.attrs = {"xmlns": SVG_NAMESPACE}
        self.style.clear()

    def unmount(self) -> None:
        self.clear()
        self.mounted = False

    def defs(self) -> Element:
        existing = next((child for child in self.children if child.tag == "defs"), None)
        return existing if existing is not None else self.append("defs")

    def find_by_id(self, element_id: str) -> Element | None:
        for node in self.iter():
            if node.attrs.get("id") == element_id:
                return node
        return None
