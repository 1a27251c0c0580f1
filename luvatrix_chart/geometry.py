from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


ScreenPoint = tuple[float, float]
ScreenSize = tuple[float, float]


@dataclass(frozen=True)
class RealPoint:
    """Point in real (logical, Y-up) coordinates."""

    x: float
    y: float

    def offset(self, dx: float, dy: float) -> "RealPoint":
        return RealPoint(self.x + dx, self.y + dy)

    def in_rect(self, rect: "RealRect") -> bool:
        return rect.contains(self)

    def __str__(self) -> str:
        return f"<RealPoint {self.x}:{self.y}>"


@dataclass(frozen=True)
class RealSize:
    width: float
    height: float

    def __str__(self) -> str:
        return f"<RealSize {self.width}:{self.height}>"


@dataclass(frozen=True)
class RealRect:
    """Axis-aligned rectangle; (x, y) is the left-bottom corner."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_center(cls, center: RealPoint, size: RealSize) -> "RealRect":
        return cls(center.x - size.width / 2.0, center.y - size.height / 2.0, size.width, size.height)

    @classmethod
    def from_points(cls, points: Iterable[RealPoint]) -> "RealRect":
        pts = list(points)
        if not pts:
            raise ValueError("at least one point is required")
        xs = [p.x for p in pts]
        ys = [p.y for p in pts]
        left = min(xs)
        bottom = min(ys)
        return cls(left, bottom, max(xs) - left, max(ys) - bottom)

    @property
    def left(self) -> float:
        return self.x

    @property
    def bottom(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> RealPoint:
        return RealPoint(self.x + self.width / 2.0, self.y + self.height / 2.0)

    @property
    def size(self) -> RealSize:
        return RealSize(self.width, self.height)

    def contains(self, point: RealPoint) -> bool:
        # Inclusive on both bounds.
        return self.left <= point.x <= self.right and self.bottom <= point.y <= self.top

    def corners(self) -> tuple[RealPoint, RealPoint, RealPoint, RealPoint]:
        return (
            RealPoint(self.left, self.bottom),
            RealPoint(self.right, self.bottom),
            RealPoint(self.right, self.top),
            RealPoint(self.left, self.top),
        )

    def union(self, other: "RealRect") -> "RealRect":
        return RealRect.from_points(self.corners() + other.corners())

    def __str__(self) -> str:
        return f"<RealRect {self.x}:{self.y} {self.width}x{self.height}>"
