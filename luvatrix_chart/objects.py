from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Sequence
import weakref

from .commands import RGBA, DrawCommand, EllipseCommand, LineCommand, PolygonCommand, RectCommand
from .config import parse_color
from .errors import CapabilityError, ChartObjectError
from .geometry import RealPoint, RealRect, RealSize
from .sampler import DEFAULT_RATIO_THRESHOLD, SampledCurve, sample_function
from .transform import ViewTransform

if TYPE_CHECKING:
    from .chart import Chart


PointLike = RealPoint | tuple[float, float]


class ChartObjectFlags(enum.Flag):
    NONE = 0
    INVISIBLE = enum.auto()
    SELECTABLE = enum.auto()
    MOUSE_MOVABLE = enum.auto()


_SHAPE_FLAGS = ChartObjectFlags.INVISIBLE | ChartObjectFlags.SELECTABLE | ChartObjectFlags.MOUSE_MOVABLE


class ChartObject:
    """Base of every object drawn on a chart.

    Each subclass declares the flags it can honor in `supported_flags`; asking
    an object for a capability it does not support raises `CapabilityError`.
    The owning chart is held through a weak reference and only the chart sets
    it.
    """

    supported_flags: ClassVar[ChartObjectFlags] = ChartObjectFlags.INVISIBLE
    default_flags: ClassVar[ChartObjectFlags] = ChartObjectFlags.NONE

    def __init__(
        self,
        *,
        color: Any = (255, 0, 0, 255),
        flags: ChartObjectFlags | None = None,
        name: str | None = None,
    ) -> None:
        self._flags = self._check_flags(self.default_flags if flags is None else flags)
        self._color = parse_color(color)
        self._z_index = 0
        self._chart_ref: weakref.ReferenceType[Chart] | None = None
        self.name = name

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<{type(self).__name__}{label} z={self._z_index} flags={self._flags}>"

    # flags

    @classmethod
    def supports(cls, flag: ChartObjectFlags) -> bool:
        return (cls.supported_flags & flag) == flag

    @property
    def flags(self) -> ChartObjectFlags:
        return self._flags

    @flags.setter
    def flags(self, value: ChartObjectFlags) -> None:
        self._flags = self._check_flags(value)

    def has_flag(self, flag: ChartObjectFlags) -> bool:
        return (self._flags & flag) == flag

    @property
    def visible(self) -> bool:
        return not self.has_flag(ChartObjectFlags.INVISIBLE)

    @visible.setter
    def visible(self, value: bool) -> None:
        if value:
            self._flags &= ~ChartObjectFlags.INVISIBLE
        else:
            self._flags |= ChartObjectFlags.INVISIBLE
        self._changed()

    @property
    def selectable(self) -> bool:
        return self.has_flag(ChartObjectFlags.SELECTABLE)

    @property
    def movable(self) -> bool:
        return self.has_flag(ChartObjectFlags.MOUSE_MOVABLE)

    def _check_flags(self, flags: ChartObjectFlags) -> ChartObjectFlags:
        if not isinstance(flags, ChartObjectFlags):
            raise ChartObjectError("flags must be ChartObjectFlags")
        unsupported = flags & ~self.supported_flags
        if unsupported:
            raise CapabilityError(f"{type(self).__name__} does not support {unsupported}")
        return flags

    # ownership and ordering

    @property
    def chart(self) -> "Chart | None":
        if self._chart_ref is None:
            return None
        return self._chart_ref()

    @property
    def z_index(self) -> int:
        return self._z_index

    @property
    def color(self) -> RGBA:
        return self._color

    @color.setter
    def color(self, value: Any) -> None:
        self._color = parse_color(value)

    @property
    def is_selected(self) -> bool:
        chart = self.chart
        return chart is not None and chart.selected is self

    # drawing and geometry

    def draw(self, transform: ViewTransform) -> list[DrawCommand]:
        raise NotImplementedError

    def real_bounds(self, transform: ViewTransform) -> RealRect:
        if not self.supports(ChartObjectFlags.SELECTABLE):
            raise CapabilityError(f"{type(self).__name__} has no real bounds")
        return self._bounds(transform)

    def move_to(self, point: PointLike) -> None:
        if not self.movable:
            raise CapabilityError(f"{self!r} is not mouse movable")
        self._move_center(as_point(point))
        self._changed()

    def _bounds(self, transform: ViewTransform) -> RealRect:
        raise NotImplementedError

    def _move_center(self, point: RealPoint) -> None:
        raise NotImplementedError

    def _changed(self) -> None:
        chart = self.chart
        if chart is not None:
            chart.redraw()


class ChartPoint(ChartObject):
    """Marker square centered on a real point.

    `size` is in screen pixels by default, so the marker keeps its on-screen
    size at any zoom; with `size_in_pixels=False` it is in real units.
    """

    supported_flags = _SHAPE_FLAGS
    default_flags = ChartObjectFlags.SELECTABLE

    def __init__(
        self,
        center: PointLike = RealPoint(0.0, 0.0),
        *,
        size: tuple[float, float] = (8.0, 8.0),
        size_in_pixels: bool = True,
        color: Any = (255, 0, 0, 255),
        flags: ChartObjectFlags | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(color=color, flags=flags, name=name)
        self._center = as_point(center)
        self._size = _check_size(size)
        self.size_in_pixels = bool(size_in_pixels)

    @property
    def center(self) -> RealPoint:
        return self._center

    @center.setter
    def center(self, value: PointLike) -> None:
        self._center = as_point(value)
        self._changed()

    @property
    def size(self) -> tuple[float, float]:
        return self._size

    @size.setter
    def size(self, value: tuple[float, float]) -> None:
        self._size = _check_size(value)
        self._changed()

    def screen_size(self, transform: ViewTransform) -> tuple[float, float]:
        if self.size_in_pixels:
            return self._size
        return transform.to_screen_size(RealSize(*self._size))

    def draw(self, transform: ViewTransform) -> list[DrawCommand]:
        sx, sy = transform.to_screen(self._center)
        w, h = self.screen_size(transform)
        return [RectCommand(x=sx - w / 2.0, y=sy - h / 2.0, width=w, height=h, color=self._color, fill=True)]

    def _bounds(self, transform: ViewTransform) -> RealRect:
        if self.size_in_pixels:
            size = transform.to_real_size(self._size)
        else:
            size = RealSize(*self._size)
        return RealRect.from_center(self._center, size)

    def _move_center(self, point: RealPoint) -> None:
        self._center = point


class _BoxObject(ChartObject):
    """Shape laid out by its left-bottom corner and a real size."""

    supported_flags = _SHAPE_FLAGS
    default_flags = ChartObjectFlags.SELECTABLE

    def __init__(
        self,
        location: PointLike,
        size: RealSize | tuple[float, float],
        *,
        fill: bool = True,
        line_width: int = 1,
        color: Any = (0, 0, 255, 255),
        flags: ChartObjectFlags | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(color=color, flags=flags, name=name)
        self._location = as_point(location)
        self._size = RealSize(*_check_size(size))
        self.fill = bool(fill)
        self.line_width = _check_line_width(line_width)

    @property
    def location(self) -> RealPoint:
        return self._location

    @location.setter
    def location(self, value: PointLike) -> None:
        self._location = as_point(value)
        self._changed()

    @property
    def size(self) -> RealSize:
        return self._size

    @size.setter
    def size(self, value: RealSize | tuple[float, float]) -> None:
        self._size = RealSize(*_check_size(value))
        self._changed()

    @property
    def rect(self) -> RealRect:
        return RealRect(self._location.x, self._location.y, self._size.width, self._size.height)

    @property
    def center(self) -> RealPoint:
        return self.rect.center

    def _screen_box(self, transform: ViewTransform) -> tuple[float, float, float, float]:
        left, top = transform.to_screen(RealPoint(self._location.x, self._location.y + self._size.height))
        w, h = transform.to_screen_size(self._size)
        return (left, top, w, h)

    def _bounds(self, transform: ViewTransform) -> RealRect:
        return self.rect

    def _move_center(self, point: RealPoint) -> None:
        self._location = RealPoint(point.x - self._size.width / 2.0, point.y - self._size.height / 2.0)


class ChartRectangle(_BoxObject):
    def draw(self, transform: ViewTransform) -> list[DrawCommand]:
        x, y, w, h = self._screen_box(transform)
        return [RectCommand(x=x, y=y, width=w, height=h, color=self._color, fill=self.fill, line_width=self.line_width)]


class ChartEllipse(_BoxObject):
    def draw(self, transform: ViewTransform) -> list[DrawCommand]:
        x, y, w, h = self._screen_box(transform)
        return [EllipseCommand(x=x, y=y, width=w, height=h, color=self._color, fill=self.fill, line_width=self.line_width)]


class ChartLine(ChartObject):
    supported_flags = _SHAPE_FLAGS
    default_flags = ChartObjectFlags.SELECTABLE

    def __init__(
        self,
        begin: PointLike,
        end: PointLike,
        *,
        width: int = 1,
        color: Any = (0, 0, 0, 255),
        flags: ChartObjectFlags | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(color=color, flags=flags, name=name)
        self._begin = as_point(begin)
        self._end = as_point(end)
        self.width = _check_line_width(width)

    @property
    def begin(self) -> RealPoint:
        return self._begin

    @begin.setter
    def begin(self, value: PointLike) -> None:
        self._begin = as_point(value)
        self._changed()

    @property
    def end(self) -> RealPoint:
        return self._end

    @end.setter
    def end(self, value: PointLike) -> None:
        self._end = as_point(value)
        self._changed()

    @property
    def center(self) -> RealPoint:
        return RealPoint((self._begin.x + self._end.x) / 2.0, (self._begin.y + self._end.y) / 2.0)

    def draw(self, transform: ViewTransform) -> list[DrawCommand]:
        return [
            LineCommand(
                start=transform.to_screen(self._begin),
                end=transform.to_screen(self._end),
                color=self._color,
                width=self.width,
            )
        ]

    def _bounds(self, transform: ViewTransform) -> RealRect:
        return RealRect.from_points((self._begin, self._end))

    def _move_center(self, point: RealPoint) -> None:
        old = self.center
        dx = point.x - old.x
        dy = point.y - old.y
        self._begin = self._begin.offset(dx, dy)
        self._end = self._end.offset(dx, dy)


class ChartPolygon(ChartObject):
    supported_flags = _SHAPE_FLAGS
    default_flags = ChartObjectFlags.SELECTABLE

    def __init__(
        self,
        points: Sequence[PointLike],
        *,
        fill: bool = True,
        line_width: int = 1,
        color: Any = (0, 128, 0, 255),
        flags: ChartObjectFlags | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(color=color, flags=flags, name=name)
        self._points = _check_vertices(points)
        self.fill = bool(fill)
        self.line_width = _check_line_width(line_width)

    @property
    def points(self) -> tuple[RealPoint, ...]:
        return self._points

    @points.setter
    def points(self, value: Sequence[PointLike]) -> None:
        self._points = _check_vertices(value)
        self._changed()

    @property
    def center(self) -> RealPoint:
        """Vertex centroid."""
        n = float(len(self._points))
        return RealPoint(sum(p.x for p in self._points) / n, sum(p.y for p in self._points) / n)

    def draw(self, transform: ViewTransform) -> list[DrawCommand]:
        screen = tuple(transform.to_screen(p) for p in self._points)
        return [PolygonCommand(points=screen, color=self._color, fill=self.fill, line_width=self.line_width)]

    def _bounds(self, transform: ViewTransform) -> RealRect:
        return RealRect.from_points(self._points)

    def _move_center(self, point: RealPoint) -> None:
        old = self.center
        dx = point.x - old.x
        dy = point.y - old.y
        self._points = tuple(p.offset(dx, dy) for p in self._points)


class ChartFunction(ChartObject):
    """Plot of y = func(x) across the visible horizontal span.

    Visible-only: it never has bounds and can never be selected or moved.
    """

    def __init__(
        self,
        func: Callable[[float], float],
        *,
        extend_on_extremum: bool = False,
        ratio_threshold: float = DEFAULT_RATIO_THRESHOLD,
        line_width: int = 1,
        color: Any = (0, 0, 0, 255),
        flags: ChartObjectFlags | None = None,
        name: str | None = None,
    ) -> None:
        if not callable(func):
            raise ChartObjectError("func must be callable")
        if ratio_threshold <= 0:
            raise ChartObjectError("ratio_threshold must be > 0")
        super().__init__(color=color, flags=flags, name=name)
        self.func = func
        self.extend_on_extremum = bool(extend_on_extremum)
        self.ratio_threshold = float(ratio_threshold)
        self.line_width = _check_line_width(line_width)

    def sample(self, transform: ViewTransform) -> SampledCurve:
        w, h = transform.viewport_size
        return sample_function(
            self.func,
            transform,
            int(round(w)),
            int(round(h)),
            extend_on_extremum=self.extend_on_extremum,
            ratio_threshold=self.ratio_threshold,
        )

    def draw(self, transform: ViewTransform) -> list[DrawCommand]:
        curve = self.sample(transform)
        return [
            LineCommand(start=a, end=b, color=self._color, width=self.line_width)
            for a, b in curve.all_segments()
        ]


def as_point(value: PointLike) -> RealPoint:
    if isinstance(value, RealPoint):
        return value
    if value is None:
        raise ChartObjectError("point must not be None")
    try:
        x, y = value
        return RealPoint(float(x), float(y))
    except (TypeError, ValueError) as exc:
        raise ChartObjectError(f"expected a RealPoint or (x, y) pair, got {value!r}") from exc


def _check_size(size: RealSize | tuple[float, float]) -> tuple[float, float]:
    if isinstance(size, RealSize):
        size = (size.width, size.height)
    try:
        w, h = (float(v) for v in size)
    except (TypeError, ValueError) as exc:
        raise ChartObjectError(f"expected a (width, height) pair, got {size!r}") from exc
    if w < 0 or h < 0:
        raise ChartObjectError("size must be >= 0")
    return (w, h)


def _check_line_width(width: int) -> int:
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise ChartObjectError("line width must be a positive integer")
    return width


def _check_vertices(points: Sequence[PointLike] | None) -> tuple[RealPoint, ...]:
    if points is None:
        raise ChartObjectError("polygon points must not be None")
    out = tuple(as_point(p) for p in points)
    if not out:
        raise ChartObjectError("polygon requires at least one vertex")
    return out
