from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Callable, Literal

from .geometry import RealPoint, ScreenPoint
from .transform import ViewTransform


DEFAULT_RATIO_THRESHOLD = 500.0

StepKind = Literal["start", "smooth", "extremum", "asymptote", "gap"]
TurnDirection = Literal["max", "min"]
Segment = tuple[ScreenPoint, ScreenPoint]


@dataclass(frozen=True)
class Extremum:
    """First column of a run of derivative sign flips."""

    column: int
    x: float
    kind: Literal["extremum", "asymptote"]
    direction: TurnDirection
    ratio: float


@dataclass
class SampledCurve:
    width: int
    height: int
    points: list[ScreenPoint | None] = field(default_factory=list)
    steps: list[StepKind] = field(default_factory=list)
    segments: list[Segment] = field(default_factory=list)
    edge_segments: list[Segment] = field(default_factory=list)
    extrema: list[Extremum] = field(default_factory=list)

    @property
    def sample_count(self) -> int:
        return sum(1 for p in self.points if p is not None)

    def all_segments(self) -> list[Segment]:
        return self.segments + self.edge_segments


def classify_turn(prev_deriv: float, deriv: float, *, ratio_threshold: float = DEFAULT_RATIO_THRESHOLD) -> tuple[Literal["extremum", "asymptote"], float]:
    """Tell a smooth turning point from a pole using the derivative ratio."""
    lo = min(abs(prev_deriv), abs(deriv))
    hi = max(abs(prev_deriv), abs(deriv))
    ratio = hi / lo if lo > 0 else math.inf
    return ("extremum" if ratio < ratio_threshold else "asymptote"), ratio


def sample_function(
    func: Callable[[float], float],
    transform: ViewTransform,
    width: int,
    height: int,
    *,
    extend_on_extremum: bool = False,
    ratio_threshold: float = DEFAULT_RATIO_THRESHOLD,
) -> SampledCurve:
    """Sample `func` once per pixel column and decide which segments to draw.

    A sign flip of the discrete derivative against the last non-zero slope
    flags the step. The first flagged step of a run does not connect to the
    previous point; with `extend_on_extremum` both points are extended to the
    viewport edges instead (the previous point towards the edge it was heading
    to, the current point towards the opposite edge). Samples that are not
    finite, or whose evaluation fails with a domain error, break the curve.
    """

    if width < 0 or height < 0:
        raise ValueError("width and height must be >= 0")
    if ratio_threshold <= 0:
        raise ValueError("ratio_threshold must be > 0")

    curve = SampledCurve(width=width, height=height)
    dx = transform.screen_step()
    top = 0.0
    bottom = float(height)

    prev_pt: ScreenPoint | None = None
    prev_y: float | None = None
    turn_deriv: float | None = None
    flag_run = 0

    for col in range(width):
        x = transform.to_real((float(col), 0.0)).x
        y = _evaluate(func, x)
        if y is None:
            curve.points.append(None)
            curve.steps.append("gap")
            prev_pt = None
            prev_y = None
            turn_deriv = None
            flag_run = 0
            continue

        pt = transform.to_screen(RealPoint(x, y))
        curve.points.append(pt)
        if prev_pt is None or prev_y is None:
            curve.steps.append("start")
            prev_pt = pt
            prev_y = y
            continue

        deriv = (y - prev_y) / dx
        # Flat steps keep the previous slope so a plateau peak still flips.
        if turn_deriv is None or turn_deriv * deriv >= 0:
            flag_run = 0
            curve.steps.append("smooth")
            curve.segments.append((prev_pt, pt))
        else:
            kind, ratio = classify_turn(turn_deriv, deriv, ratio_threshold=ratio_threshold)
            curve.steps.append(kind)
            flag_run += 1
            if flag_run == 1:
                direction: TurnDirection = "max" if turn_deriv > 0 else "min"
                curve.extrema.append(Extremum(column=col, x=x, kind=kind, direction=direction, ratio=ratio))
                if extend_on_extremum:
                    if direction == "max":
                        curve.edge_segments.append((pt, (pt[0], bottom)))
                        curve.edge_segments.append(((prev_pt[0], top), prev_pt))
                    else:
                        curve.edge_segments.append((pt, (pt[0], top)))
                        curve.edge_segments.append(((prev_pt[0], bottom), prev_pt))
            else:
                curve.segments.append((prev_pt, pt))

        prev_pt = pt
        prev_y = y
        if deriv != 0:
            turn_deriv = deriv

    return curve


def _evaluate(func: Callable[[float], float], x: float) -> float | None:
    try:
        y = float(func(x))
    except (ArithmeticError, ValueError):
        return None
    if not math.isfinite(y):
        return None
    return y
