from __future__ import annotations

import bisect
from contextlib import contextmanager
import dataclasses
import itertools
import logging
import math
from typing import Callable, Iterator
import weakref

import numpy as np

from .commands import DrawCommand, LineCommand, RectCommand, TextCommand
from .config import DEFAULT_CONFIG, ChartConfig
from .errors import CapabilityError, ChartObjectError
from .events import ChartInputEvent, MouseButton
from .geometry import RealPoint, ScreenPoint
from .labels import format_grid_value
from .objects import ChartObject, PointLike, as_point
from .raster import rasterize, text_size
from .transform import ViewTransform, check_scale, fit_rect

LOGGER = logging.getLogger(__name__)

SelectionListener = Callable[["Chart", "ChartObject | None", "ChartObject | None"], None]

_ARROW_PX = 4
_LABEL_GAP_PX = 5


class Chart:
    """Chart surface: owns objects, view state, selection and pointer interaction.

    The host forwards pointer and resize events and repaints whenever the
    `repaint` callback fires; `paint()` returns the draw commands for the
    current state. All calls are expected on one thread.
    """

    def __init__(
        self,
        width: int = 0,
        height: int = 0,
        *,
        config: ChartConfig | None = None,
        repaint: Callable[[], None] | None = None,
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError("width and height must be >= 0")
        self._config = config or DEFAULT_CONFIG
        self._repaint = repaint or (lambda: None)
        self._width = int(width)
        self._height = int(height)
        self._view = ViewTransform.for_viewport(self._width, self._height)
        self._items: list[ChartObject] = []
        self._sequence: dict[int, int] = {}
        self._next_seq = itertools.count()
        self._selected: ChartObject | None = None
        self._pinned: ChartObject | None = None
        self._selection_listeners: list[SelectionListener] = []
        self._pressed: set[MouseButton] = set()
        self._pan_anchor: ScreenPoint | None = None
        self._suspended = False
        self._batch_depth = 0
        self._pending_repaint = False
        self._display_grid = self._config.display_grid
        self.min_x = -10.0
        self.max_x = 10.0
        self.min_y = -10.0
        self.max_y = 10.0

    # repaint gating

    @property
    def suspended(self) -> bool:
        return self._suspended

    @suspended.setter
    def suspended(self, value: bool) -> None:
        self._suspended = bool(value)
        self.redraw()

    @property
    def frozen(self) -> bool:
        return self._suspended or self._batch_depth > 0

    def redraw(self) -> None:
        if self.frozen:
            self._pending_repaint = True
            return
        self._pending_repaint = False
        self._repaint()

    @contextmanager
    def batch(self) -> Iterator["Chart"]:
        """Hold repaints until the outermost batch closes, then repaint once if needed."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending_repaint:
                self.redraw()

    # view state

    @property
    def config(self) -> ChartConfig:
        return self._config

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def transform(self) -> ViewTransform:
        return self._view

    @property
    def center(self) -> RealPoint:
        return self._view.center

    @center.setter
    def center(self, value: PointLike) -> None:
        point = as_point(value)
        if point == self._view.center:
            return
        self._view = dataclasses.replace(self._view, center=point)
        self.redraw()

    @property
    def scale(self) -> float:
        return self._view.scale

    @scale.setter
    def scale(self, value: float) -> None:
        scale = min(check_scale(value), self._config.max_scale)
        if scale == self._view.scale:
            return
        self._view = dataclasses.replace(self._view, scale=scale)
        self.redraw()

    @property
    def display_grid(self) -> bool:
        return self._display_grid

    @display_grid.setter
    def display_grid(self, value: bool) -> None:
        if bool(value) != self._display_grid:
            self._display_grid = bool(value)
            self.redraw()

    def resize(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("width and height must be >= 0")
        self._width = int(width)
        self._height = int(height)
        self._view = dataclasses.replace(self._view, screen_cx=self._width / 2.0, screen_cy=self._height / 2.0)
        self.redraw()

    def to_screen(self, real: PointLike) -> ScreenPoint:
        return self._view.to_screen(as_point(real))

    def to_real(self, screen: ScreenPoint) -> RealPoint:
        return self._view.to_real(screen)

    def set_visible_rect(self, left: float, top: float, right: float, bottom: float) -> None:
        """Fit the real rectangle into the viewport, keeping the aspect ratio."""
        center, scale = fit_rect(left, top, right, bottom, width=self._width, height=self._height)
        with self.batch():
            self.center = center
            self.scale = scale

    def set_grid_bounds(self, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
        if min_x >= max_x or min_y >= max_y:
            raise ValueError("grid bounds require min < max on both axes")
        self.min_x = float(min_x)
        self.max_x = float(max_x)
        self.min_y = float(min_y)
        self.max_y = float(max_y)
        self.redraw()

    def set_defaults(self) -> None:
        with self.batch():
            self.display_grid = True
            self.set_grid_bounds(-10, 10, -10, 10)
            if self._width > 0 and self._height > 0:
                self.set_visible_rect(-11, 11, 11, -11)

    # object collection

    @property
    def objects(self) -> tuple[ChartObject, ...]:
        """Objects in draw order (Z-index ascending, then insertion order)."""
        return tuple(self._items)

    def __contains__(self, obj: object) -> bool:
        # Members are held by _items, so their ids stay unique while registered.
        return id(obj) in self._sequence

    def add_object(self, obj: ChartObject, *, z_index: int | None = None) -> None:
        if not isinstance(obj, ChartObject):
            raise ChartObjectError(f"expected a ChartObject, got {type(obj).__name__}")
        owner = obj.chart
        if owner is not None and owner is not self:
            raise ChartObjectError(f"{obj!r} already belongs to another chart")
        if obj in self:
            if z_index is not None:
                self.set_z_index(obj, z_index)
            return
        if z_index is not None:
            obj._z_index = int(z_index)
        obj._chart_ref = weakref.ref(self)
        self._sequence[id(obj)] = next(self._next_seq)
        bisect.insort(self._items, obj, key=self._order_key)
        LOGGER.debug("added %r (%d objects)", obj, len(self._items))
        self.redraw()

    def remove_object(self, obj: ChartObject) -> bool:
        if obj not in self:
            return False
        with self.batch():
            self._items = [item for item in self._items if item is not obj]
            self._sequence.pop(id(obj), None)
            obj._chart_ref = None
            if self._selected is obj:
                self.selected = None
            if self._pinned is obj:
                self.unpin()
            LOGGER.debug("removed %r (%d objects)", obj, len(self._items))
            self.redraw()
        return True

    def remove_all_objects(self) -> None:
        if not self._items:
            return
        with self.batch():
            self.selected = None
            self.unpin()
            for obj in self._items:
                obj._chart_ref = None
            LOGGER.debug("removed all %d objects", len(self._items))
            self._items = []
            self._sequence.clear()
            self.redraw()

    def set_z_index(self, obj: ChartObject, z_index: int) -> None:
        """Move `obj` to another Z band; ties keep their insertion order."""
        if obj not in self:
            raise ChartObjectError(f"{obj!r} is not on this chart")
        value = int(z_index)
        if value == obj._z_index:
            return
        obj._z_index = value
        self._sort_items()
        self.redraw()

    def _order_key(self, item: ChartObject) -> tuple[int, int]:
        return (item._z_index, self._sequence[id(item)])

    def _sort_items(self) -> None:
        self._items.sort(key=self._order_key)

    # selection

    @property
    def selected(self) -> ChartObject | None:
        return self._selected

    @selected.setter
    def selected(self, value: ChartObject | None) -> None:
        if value is not None and value not in self:
            raise ChartObjectError(f"{value!r} is not on this chart")
        if value is self._selected:
            return
        old = self._selected
        self._selected = value
        LOGGER.debug("selection changed: %r -> %r", old, value)
        for listener in list(self._selection_listeners):
            listener(self, old, value)
        self.redraw()

    def add_selection_listener(self, listener: SelectionListener) -> None:
        self._selection_listeners.append(listener)

    def remove_selection_listener(self, listener: SelectionListener) -> None:
        self._selection_listeners.remove(listener)

    def hit_test(self, screen_point: ScreenPoint) -> ChartObject | None:
        """Topmost visible selectable object under the screen point."""
        real = self._view.to_real(screen_point)
        for obj in reversed(self._items):
            if not obj.visible or not obj.selectable:
                continue
            if obj.real_bounds(self._view).contains(real):
                return obj
        return None

    def try_select_object(self, screen_point: ScreenPoint) -> ChartObject | None:
        hit = self.hit_test(screen_point)
        if hit is not None:
            self.selected = hit
        return hit

    # pinning

    @property
    def pinned(self) -> ChartObject | None:
        return self._pinned

    def pin_movable_object_and_add(self, obj: ChartObject) -> None:
        """Bind a mouse-movable object to the cursor, adding it first if needed."""
        if not isinstance(obj, ChartObject) or not obj.movable:
            raise CapabilityError(f"{obj!r} is not mouse movable")
        with self.batch():
            if obj not in self:
                self.add_object(obj)
            self._pinned = obj
            LOGGER.debug("pinned %r", obj)
            self.redraw()

    def unpin(self) -> None:
        if self._pinned is None:
            return
        LOGGER.debug("unpinned %r", self._pinned)
        self._pinned = None
        self.redraw()

    # pointer interaction

    @property
    def pressed_buttons(self) -> frozenset[MouseButton]:
        return frozenset(self._pressed)

    def mouse_down(self, button: MouseButton, x: float, y: float) -> None:
        cfg = self._config
        self._pressed.add(button)
        with self.batch():
            if button == cfg.move_button:
                self._pan_anchor = (x, y)
            if button == cfg.unpin_button and self._pinned is not None:
                self.unpin()
            elif button == cfg.select_button and cfg.selection_enabled:
                self.try_select_object((x, y))

    def mouse_up(self, button: MouseButton, x: float = 0.0, y: float = 0.0) -> None:
        self._pressed.discard(button)
        if button == self._config.move_button:
            self._pan_anchor = None

    def mouse_move(self, x: float, y: float) -> None:
        cfg = self._config
        with self.batch():
            if self._pinned is not None:
                real = self._view.to_real((x, y))
                self._pinned.move_to(RealPoint(_snap(real.x, cfg.snap_step), _snap(real.y, cfg.snap_step)))
            if cfg.move_button in self._pressed and cfg.panning_enabled:
                ax, ay = self._pan_anchor if self._pan_anchor is not None else (x, y)
                self._pan_anchor = (x, y)
                rdx = (x - ax) / self.scale
                rdy = (y - ay) / self.scale
                if rdx or rdy:
                    self.center = RealPoint(self.center.x - rdx, self.center.y + rdy)

    def mouse_wheel(self, delta: float, x: float = 0.0, y: float = 0.0) -> None:
        cfg = self._config
        if not cfg.zoom_by_mouse_enabled or delta == 0:
            return
        scale = self.scale
        step = cfg.zoom_step if scale <= cfg.zoom_proportional_above else scale / cfg.zoom_proportional_divisor
        if delta < 0:
            step = -step
        target = scale + step
        if target <= cfg.min_scale:
            LOGGER.debug("zoom rejected: scale %.4g would fall to the floor %.4g", target, cfg.min_scale)
            return
        self.scale = min(target, cfg.max_scale)

    def double_click(self, button: MouseButton, x: float, y: float) -> None:
        cfg = self._config
        if button == cfg.center_button and cfg.panning_enabled:
            self.center = self._view.to_real((x, y))

    def handle_event(self, event: ChartInputEvent) -> None:
        kind = event.event_type
        if kind == "mouse_down":
            self.mouse_down(event.button, event.x, event.y)
        elif kind == "mouse_up":
            self.mouse_up(event.button, event.x, event.y)
        elif kind == "mouse_move":
            self.mouse_move(event.x, event.y)
        elif kind == "wheel":
            self.mouse_wheel(event.delta, event.x, event.y)
        elif kind == "double_click":
            self.double_click(event.button, event.x, event.y)
        elif kind == "resize":
            self.resize(event.width, event.height)

    # painting

    def paint(self) -> list[DrawCommand]:
        """Draw commands for the current state; empty while suspended."""
        if self._suspended:
            return []
        cfg = self._config
        commands: list[DrawCommand] = [
            RectCommand(x=0.0, y=0.0, width=float(self._width), height=float(self._height), color=cfg.background_color)
        ]
        if self._display_grid:
            commands.extend(self._grid_commands())
        for obj in self._items:
            if obj.visible:
                commands.extend(obj.draw(self._view))
        if self._selected is not None and self._selected.visible:
            commands.extend(self._selection_commands(self._selected))
        return commands

    def render(self) -> np.ndarray:
        """Rasterize `paint()` onto a fresh RGBA canvas."""
        return rasterize(self.paint(), self._width, self._height)

    def _grid_commands(self) -> list[DrawCommand]:
        color = self._config.grid_color
        out: list[DrawCommand] = []

        x0 = self.to_screen((self.min_x, 0.0))
        x1 = self.to_screen((self.max_x, 0.0))
        out.append(LineCommand(x0, x1, color))
        out.append(LineCommand(x1, (x1[0] - _ARROW_PX, x1[1] - _ARROW_PX), color))
        out.append(LineCommand(x1, (x1[0] - _ARROW_PX, x1[1] + _ARROW_PX), color))
        out.append(self._grid_label(self.min_x, x0, on_the_right=False))
        out.append(self._grid_label(self.max_x, x1, on_the_right=False))

        y0 = self.to_screen((0.0, self.min_y))
        y1 = self.to_screen((0.0, self.max_y))
        out.append(LineCommand(y0, y1, color))
        out.append(LineCommand(y1, (y1[0] - _ARROW_PX, y1[1] + _ARROW_PX), color))
        out.append(LineCommand(y1, (y1[0] + _ARROW_PX, y1[1] + _ARROW_PX), color))
        out.append(self._grid_label(self.min_y, y0, on_the_right=True))
        out.append(self._grid_label(self.max_y, y1, on_the_right=True))
        return out

    def _grid_label(self, value: float, where: ScreenPoint, *, on_the_right: bool) -> TextCommand:
        cfg = self._config
        text = format_grid_value(value)
        w, h = text_size(text, font_family=cfg.grid_font_family, font_size_px=cfg.grid_font_size_px)
        x, y = where
        if on_the_right:
            x += _LABEL_GAP_PX
            y -= h / 2.0
        else:
            y += _LABEL_GAP_PX
            x -= w / 2.0
        return TextCommand(
            text=text,
            position=(x, y),
            color=cfg.grid_color,
            font_family=cfg.grid_font_family,
            font_size_px=cfg.grid_font_size_px,
        )

    def _selection_commands(self, obj: ChartObject) -> list[DrawCommand]:
        if not obj.selectable:
            return []
        size = float(self._config.selection_handle_px)
        color = self._config.selection_color
        bounds = obj.real_bounds(self._view)
        bl, br, tr, tl = (self._view.to_screen(p) for p in bounds.corners())
        handles = (
            (bl[0] - size, bl[1]),
            (br[0], br[1]),
            (tr[0], tr[1] - size),
            (tl[0] - size, tl[1] - size),
        )
        return [RectCommand(x=hx, y=hy, width=size, height=size, color=color) for hx, hy in handles]


def _snap(value: float, step: float) -> float:
    return math.ceil(value / step) * step
