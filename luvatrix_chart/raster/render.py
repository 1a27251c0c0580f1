from __future__ import annotations

from typing import Iterable

import numpy as np

from luvatrix_chart.commands import DrawCommand, EllipseCommand, LineCommand, PolygonCommand, RectCommand, TextCommand
from luvatrix_chart.raster.canvas import new_canvas
from luvatrix_chart.raster.draw_lines import draw_polyline, draw_segment
from luvatrix_chart.raster.draw_shapes import fill_ellipse, fill_polygon, fill_rect, stroke_ellipse, stroke_rect
from luvatrix_chart.raster.draw_text import draw_text


def rasterize(commands: Iterable[DrawCommand], width: int, height: int, *, background: tuple[int, int, int, int] = (0, 0, 0, 0)) -> np.ndarray:
    """Execute draw commands in order onto a new H x W x 4 uint8 canvas."""
    canvas = new_canvas(width, height, background)
    for command in commands:
        execute(canvas, command)
    return canvas


def execute(canvas: np.ndarray, command: DrawCommand) -> None:
    if isinstance(command, LineCommand):
        draw_segment(canvas, command.start, command.end, command.color, command.width)
    elif isinstance(command, RectCommand):
        if command.fill:
            fill_rect(canvas, command.x, command.y, command.width, command.height, command.color)
        else:
            stroke_rect(canvas, command.x, command.y, command.width, command.height, command.color, command.line_width)
    elif isinstance(command, EllipseCommand):
        if command.fill:
            fill_ellipse(canvas, command.x, command.y, command.width, command.height, command.color)
        else:
            stroke_ellipse(canvas, command.x, command.y, command.width, command.height, command.color, command.line_width)
    elif isinstance(command, PolygonCommand):
        points = list(command.points)
        if command.fill:
            fill_polygon(canvas, points, command.color)
        else:
            draw_polyline(canvas, points, command.color, command.line_width, closed=True)
    elif isinstance(command, TextCommand):
        x, y = command.position
        draw_text(canvas, x, y, command.text, command.color, font_family=command.font_family, font_size_px=command.font_size_px)
    else:
        raise TypeError(f"unsupported draw command: {type(command).__name__}")
