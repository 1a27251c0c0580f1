from __future__ import annotations

import numpy as np

from luvatrix_chart.commands import RGBA
from luvatrix_chart.raster.canvas import blend_mask, pixel_grid
from luvatrix_chart.raster.draw_lines import draw_polyline


def fill_rect(dst: np.ndarray, x: float, y: float, width: float, height: float, color: RGBA) -> None:
    h, w = dst.shape[:2]
    left = max(0, int(round(x)))
    top = max(0, int(round(y)))
    right = min(w, int(round(x + width)))
    bottom = min(h, int(round(y + height)))
    if right <= left or bottom <= top:
        return
    mask = np.zeros((h, w), dtype=bool)
    mask[top:bottom, left:right] = True
    blend_mask(dst, mask, color)


def stroke_rect(dst: np.ndarray, x: float, y: float, width: float, height: float, color: RGBA, line_width: int = 1) -> None:
    corners = [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
    draw_polyline(dst, corners, color, line_width, closed=True)


def fill_ellipse(dst: np.ndarray, x: float, y: float, width: float, height: float, color: RGBA) -> None:
    if width <= 0 or height <= 0:
        return
    px, py = pixel_grid(dst)
    rx = width / 2.0
    ry = height / 2.0
    nx = (px - (x + rx)) / rx
    ny = (py - (y + ry)) / ry
    blend_mask(dst, (nx * nx + ny * ny) <= 1.0, color)


def stroke_ellipse(dst: np.ndarray, x: float, y: float, width: float, height: float, color: RGBA, line_width: int = 1) -> None:
    if width <= 0 or height <= 0:
        return
    rx = width / 2.0
    ry = height / 2.0
    steps = max(16, int(np.ceil(np.pi * (rx + ry))))
    t = np.linspace(0.0, 2.0 * np.pi, steps, endpoint=False)
    points = list(zip((x + rx + rx * np.cos(t)).tolist(), (y + ry + ry * np.sin(t)).tolist()))
    draw_polyline(dst, points, color, line_width, closed=True)


def fill_polygon(dst: np.ndarray, points: list[tuple[float, float]], color: RGBA) -> None:
    """Even-odd fill evaluated at pixel centers."""
    if len(points) < 3:
        draw_polyline(dst, points, color)
        return
    px, py = pixel_grid(dst)
    inside = np.zeros(px.shape, dtype=bool)
    j = len(points) - 1
    for i in range(len(points)):
        xi, yi = points[i]
        xj, yj = points[j]
        if yi != yj:
            crosses = (yi > py) != (yj > py)
            x_at = (xj - xi) * (py - yi) / (yj - yi) + xi
            inside ^= crosses & (px < x_at)
        j = i
    blend_mask(dst, inside, color)
