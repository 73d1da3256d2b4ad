from __future__ import annotations

import logging
from typing import Any, Callable

from cycle_dashboard.charts.render import ChartRenderer
from cycle_dashboard.charts.scene import Surface

logger = logging.getLogger(__name__)

_UNSET: tuple[Any, ...] = ()


def _same(left: Any, right: Any) -> bool:
    if left is right:
        return True
    try:
        return bool(left == right)
    except (TypeError, ValueError):
        # Array-likes without a single truth value compare by identity only.
        return False


def dependencies_equal(previous: tuple[Any, ...], current: tuple[Any, ...]) -> bool:
    if len(previous) != len(current):
        return False
    return all(_same(left, right) for left, right in zip(previous, current))


class ChartHost:
    """Owns one surface and renderer; renders only when the dependencies change."""

    def __init__(
        self,
        renderer: ChartRenderer,
        prepare: Callable[..., Any] | None = None,
        summarize: Callable[..., Any] | None = None,
    ) -> None:
        self.renderer = renderer
        self.prepare = prepare
        self.summarize = summarize
        self.surface: Surface | None = None
        self.render_count = 0
        self.stats: Any = None
        self._dependencies: tuple[Any, ...] = _UNSET
        self._rendered = False

    @property
    def mounted(self) -> bool:
        return self.surface is not None and self.surface.mounted

    def mount(self, surface: Surface | None = None) -> Surface:
        self.surface = surface if surface is not None else Surface()
        self.surface.mounted = True
        self._rendered = False
        self._dependencies = _UNSET
        return self.surface

    def update(self, *dependencies: Any) -> bool:
        """Render if ``dependencies`` changed since the last render.

        Returns ``True`` when a render happened.
        """
        if not self.mounted or self.surface is None:
            raise RuntimeError(f"{type(self.renderer).__name__} host is not mounted")
        if self._rendered and dependencies_equal(self._dependencies, dependencies):
            return False

        if self.prepare is not None:
            data = self.prepare(*dependencies)
        else:
            data = dependencies[0] if dependencies else None
        self.renderer.render(self.surface, data)
        self.stats = self.summarize(*dependencies) if self.summarize is not None else None
        self._dependencies = dependencies
        self._rendered = True
        self.render_count += 1
        logger.debug("%s rendered (%d)", self.renderer.name, self.render_count)
        return True

    def unmount(self) -> None:
        if self.surface is not None:
            self.surface.unmount()
        self.renderer.timeline.cancel()
        self._dependencies = _UNSET
        self._rendered = False

    def to_svg(self) -> str:
        if self.surface is None:
            return ""
        return self.surface.to_svg()
