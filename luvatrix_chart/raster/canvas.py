from __future__ import annotations

import numpy as np

from luvatrix_chart.commands import RGBA


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width < 0 or height < 0:
        raise ValueError("canvas width/height must be >= 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def blend_mask(dst: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    """Blend `color` over every pixel where the boolean `mask` is set."""
    if mask.shape != dst.shape[:2]:
        raise ValueError("mask shape must match canvas height/width")
    if not np.any(mask):
        return
    a = color[3] / 255.0
    src = np.asarray(color[0:3], dtype=np.float32) * a
    current = dst[mask, :3].astype(np.float32)
    dst[mask, :3] = (src + current * (1.0 - a)).astype(np.uint8)
    dst[mask, 3] = 255


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    a = color[3] / 255.0
    current = dst[y, x, :3].astype(np.float32)
    dst[y, x, 0:3] = (np.asarray(color[0:3], dtype=np.float32) * a + current * (1.0 - a)).astype(np.uint8)
    dst[y, x, 3] = 255


def pixel_grid(dst: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Pixel-center coordinates for every canvas pixel."""
    h, w = dst.shape[:2]
    ys, xs = np.mgrid[0:h, 0:w]
    return xs.astype(np.float64) + 0.5, ys.astype(np.float64) + 0.5
