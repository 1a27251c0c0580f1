from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Literal, Mapping


class MouseButton(enum.IntEnum):
    LEFT = 0
    RIGHT = 1
    MIDDLE = 2


ChartEventType = Literal[
    "mouse_down",
    "mouse_up",
    "mouse_move",
    "wheel",
    "double_click",
    "resize",
]

_EVENT_TYPES = {"mouse_down", "mouse_up", "mouse_move", "wheel", "double_click", "resize"}


@dataclass(frozen=True)
class ChartInputEvent:
    """Host input event addressed to one chart surface.

    Pointer positions are viewport pixels with a top-left origin. `resize`
    events carry the new viewport size in `width`/`height`.
    """

    event_type: ChartEventType
    x: float = 0.0
    y: float = 0.0
    button: MouseButton | None = None
    delta: float = 0.0
    width: int = 0
    height: int = 0

    def __post_init__(self) -> None:
        if self.event_type not in _EVENT_TYPES:
            raise ValueError(f"unsupported chart event type: {self.event_type}")
        if self.event_type in {"mouse_down", "mouse_up", "double_click"} and self.button is None:
            raise ValueError(f"`{self.event_type}` events require a button")

    @property
    def location(self) -> tuple[float, float]:
        return (self.x, self.y)


def parse_hdi_pointer_event(event_type: str, payload: object) -> ChartInputEvent | None:
    """Translate a normalized luvatrix HDI pointer payload into a chart event.

    Understands `click` (down/up with `click_count`), `pointer_move`/`mouse_move`
    and `scroll`. Anything else yields None.
    """

    if not isinstance(payload, Mapping):
        return None
    try:
        x = float(payload.get("x", 0.0))
        y = float(payload.get("y", 0.0))
    except (TypeError, ValueError):
        return None
    if event_type == "click":
        button = _coerce_button(payload.get("button"))
        if button is None:
            return None
        phase = payload.get("phase")
        if phase == "down":
            if int(payload.get("click_count", 1) or 1) == 2:
                return ChartInputEvent("double_click", x=x, y=y, button=button)
            return ChartInputEvent("mouse_down", x=x, y=y, button=button)
        if phase == "up":
            return ChartInputEvent("mouse_up", x=x, y=y, button=button)
        return None
    if event_type in ("pointer_move", "mouse_move", "trackpad_move"):
        return ChartInputEvent("mouse_move", x=x, y=y)
    if event_type == "scroll":
        try:
            delta = float(payload.get("delta_y", 0.0))
        except (TypeError, ValueError):
            return None
        if delta == 0.0:
            return None
        return ChartInputEvent("wheel", x=x, y=y, delta=delta)
    return None


def _coerce_button(raw: object) -> MouseButton | None:
    try:
        return MouseButton(int(raw))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
