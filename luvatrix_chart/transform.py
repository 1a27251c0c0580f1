from __future__ import annotations

from dataclasses import dataclass
import math

from .errors import ScaleError
from .geometry import RealPoint, RealRect, RealSize, ScreenPoint, ScreenSize


@dataclass(frozen=True)
class ViewTransform:
    """Maps real (Y-up) coordinates onto screen pixels (Y-down) and back.

    `center` is the real point shown at the screen center, `scale` is pixels per
    real unit on both axes, and `screen_cx`/`screen_cy` are half the viewport
    size in pixels.
    """

    center: RealPoint = RealPoint(0.0, 0.0)
    scale: float = 1.0
    screen_cx: float = 0.0
    screen_cy: float = 0.0

    def __post_init__(self) -> None:
        check_scale(self.scale)

    @classmethod
    def for_viewport(cls, width: int, height: int, *, center: RealPoint | None = None, scale: float = 1.0) -> "ViewTransform":
        if width < 0 or height < 0:
            raise ValueError("viewport width/height must be >= 0")
        return cls(
            center=center if center is not None else RealPoint(0.0, 0.0),
            scale=scale,
            screen_cx=width / 2.0,
            screen_cy=height / 2.0,
        )

    @property
    def viewport_size(self) -> tuple[float, float]:
        return (self.screen_cx * 2.0, self.screen_cy * 2.0)

    def to_screen(self, real: RealPoint) -> ScreenPoint:
        sx = self.screen_cx - (self.center.x - real.x) * self.scale
        sy = self.screen_cy + (self.center.y - real.y) * self.scale
        return (sx, sy)

    def to_real(self, screen: ScreenPoint) -> RealPoint:
        sx, sy = screen
        rx = (sx - self.screen_cx) / self.scale + self.center.x
        ry = self.center.y - (sy - self.screen_cy) / self.scale
        return RealPoint(rx, ry)

    def to_screen_size(self, size: RealSize) -> ScreenSize:
        return (size.width * self.scale, size.height * self.scale)

    def to_real_size(self, size: ScreenSize) -> RealSize:
        w, h = size
        return RealSize(w / self.scale, h / self.scale)

    def screen_step(self) -> float:
        """Real-coordinate width of one horizontal pixel."""
        return self.to_real((1.0, 0.0)).x - self.to_real((0.0, 0.0)).x

    def visible_real_rect(self) -> RealRect:
        w, h = self.viewport_size
        bottom_left = self.to_real((0.0, h))
        size = self.to_real_size((w, h))
        return RealRect(bottom_left.x, bottom_left.y, size.width, size.height)


def check_scale(scale: float) -> float:
    value = float(scale)
    if not math.isfinite(value) or value <= 0.0:
        raise ScaleError(f"scale must be a finite number > 0, got {scale!r}")
    return value


def fit_rect(
    left: float,
    top: float,
    right: float,
    bottom: float,
    *,
    width: float,
    height: float,
) -> tuple[RealPoint, float]:
    """Center and scale that show the given real rectangle inside a viewport.

    The tighter axis wins so the aspect ratio is preserved.
    """

    span_x = float(right) - float(left)
    span_y = float(top) - float(bottom)
    if span_x <= 0 or span_y <= 0:
        raise ValueError("visible rect must have right > left and top > bottom")
    if width <= 0 or height <= 0:
        raise ValueError("viewport width/height must be > 0")
    center = RealPoint((left + right) / 2.0, (top + bottom) / 2.0)
    scale = min(width / span_x, height / span_y)
    return center, check_scale(scale)
