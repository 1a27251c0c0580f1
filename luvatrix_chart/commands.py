from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .geometry import ScreenPoint


RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class LineCommand:
    start: ScreenPoint
    end: ScreenPoint
    color: RGBA
    width: int = 1


@dataclass(frozen=True)
class RectCommand:
    """Screen rectangle; (x, y) is the top-left pixel corner."""

    x: float
    y: float
    width: float
    height: float
    color: RGBA
    fill: bool = True
    line_width: int = 1


@dataclass(frozen=True)
class EllipseCommand:
    """Ellipse inscribed in the screen rectangle (x, y, width, height)."""

    x: float
    y: float
    width: float
    height: float
    color: RGBA
    fill: bool = True
    line_width: int = 1


@dataclass(frozen=True)
class PolygonCommand:
    points: tuple[ScreenPoint, ...]
    color: RGBA
    fill: bool = True
    line_width: int = 1


@dataclass(frozen=True)
class TextCommand:
    text: str
    position: ScreenPoint
    color: RGBA
    font_family: str
    font_size_px: float


DrawCommand = Union[LineCommand, RectCommand, EllipseCommand, PolygonCommand, TextCommand]
