from __future__ import annotations

import math

import numpy as np

from luvatrix_chart.commands import RGBA
from luvatrix_chart.raster.canvas import draw_pixel

# Endpoints further than this outside the canvas are clipped first so that
# near-vertical function segments do not walk millions of pixels.
_CLIP_MARGIN = 4.0


def draw_segment(
    dst: np.ndarray,
    start: tuple[float, float],
    end: tuple[float, float],
    color: RGBA,
    width: int = 1,
) -> None:
    clipped = clip_segment(start, end, dst.shape[1], dst.shape[0])
    if clipped is None:
        return
    (x0, y0), (x1, y1) = clipped
    _bresenham(dst, int(round(x0)), int(round(y0)), int(round(x1)), int(round(y1)), color=color, width=width)


def draw_polyline(dst: np.ndarray, points: list[tuple[float, float]], color: RGBA, width: int = 1, *, closed: bool = False) -> None:
    if len(points) < 2:
        if points:
            draw_segment(dst, points[0], points[0], color, width)
        return
    pairs = list(zip(points[:-1], points[1:]))
    if closed:
        pairs.append((points[-1], points[0]))
    for a, b in pairs:
        draw_segment(dst, a, b, color, width)


def clip_segment(
    start: tuple[float, float],
    end: tuple[float, float],
    width: int,
    height: int,
) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Liang-Barsky clip against the canvas grown by a small margin."""
    x0, y0 = start
    x1, y1 = end
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1)):
        return None
    xmin, ymin = -_CLIP_MARGIN, -_CLIP_MARGIN
    xmax, ymax = width + _CLIP_MARGIN, height + _CLIP_MARGIN
    dx = x1 - x0
    dy = y1 - y0
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - xmin), (dx, xmax - x0), (-dy, y0 - ymin), (dy, ymax - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)
    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


def _bresenham(dst: np.ndarray, x0: int, y0: int, x1: int, y1: int, color: RGBA, width: int) -> None:
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    radius = max(0, width // 2)

    while True:
        for yy in range(y0 - radius, y0 + radius + 1):
            for xx in range(x0 - radius, x0 + radius + 1):
                draw_pixel(dst, xx, yy, color)
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
