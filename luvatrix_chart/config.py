from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
import math
import re
import tomllib
from typing import Any, Mapping

from .commands import RGBA
from .events import MouseButton

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

_BUTTON_KEYS = ("move_button", "select_button", "unpin_button", "center_button")
_COLOR_KEYS = ("background_color", "grid_color", "selection_color")
_FLAG_KEYS = ("selection_enabled", "panning_enabled", "zoom_by_mouse_enabled", "display_grid")


@dataclass(frozen=True)
class ChartConfig:
    """Interaction policy and look of one chart surface."""

    move_button: MouseButton = MouseButton.RIGHT
    select_button: MouseButton = MouseButton.LEFT
    unpin_button: MouseButton = MouseButton.LEFT
    center_button: MouseButton = MouseButton.RIGHT
    selection_enabled: bool = True
    panning_enabled: bool = True
    zoom_by_mouse_enabled: bool = True
    snap_step: float = 1.0
    zoom_step: float = 2.0
    zoom_proportional_above: float = 50.0
    zoom_proportional_divisor: float = 10.0
    min_scale: float = 2.5
    max_scale: float = 700000.0
    display_grid: bool = True
    background_color: RGBA = (255, 255, 255, 255)
    grid_color: RGBA = (128, 128, 128, 255)
    selection_color: RGBA = (0, 0, 0, 255)
    grid_font_family: str = "Tahoma"
    grid_font_size_px: float = 10.0
    selection_handle_px: int = 4


DEFAULT_CONFIG = ChartConfig()


def validate_chart_config(overrides: Mapping[str, Any] | None = None) -> ChartConfig:
    """Merge overrides onto the defaults, rejecting unknown keys and bad values."""

    raw: dict[str, Any] = {f.name: getattr(DEFAULT_CONFIG, f.name) for f in fields(ChartConfig)}
    if overrides:
        for key, value in overrides.items():
            if key not in raw:
                raise ValueError(f"Unknown chart config key: {key}")
            raw[key] = value

    for key in _BUTTON_KEYS:
        raw[key] = _coerce_button(key, raw[key])
    for key in _COLOR_KEYS:
        raw[key] = parse_color(raw[key], key=key)
    for key in _FLAG_KEYS:
        if not isinstance(raw[key], bool):
            raise ValueError(f"`{key}` must be a boolean")

    for key in ("snap_step", "zoom_step", "zoom_proportional_divisor", "min_scale", "max_scale", "grid_font_size_px"):
        raw[key] = _positive_float(key, raw[key])
    raw["zoom_proportional_above"] = _positive_float("zoom_proportional_above", raw["zoom_proportional_above"])
    if raw["min_scale"] >= raw["max_scale"]:
        raise ValueError("`min_scale` must be < `max_scale`")

    if not isinstance(raw["grid_font_family"], str) or not raw["grid_font_family"].strip():
        raise ValueError("`grid_font_family` must be a non-empty string")
    handle = raw["selection_handle_px"]
    if isinstance(handle, bool) or not isinstance(handle, int) or handle <= 0:
        raise ValueError("`selection_handle_px` must be a positive integer")

    return ChartConfig(**raw)


def load_chart_config(path: str | Path) -> ChartConfig:
    """Read a `chart.toml` file (top-level keys or a `[chart]` table)."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    table = raw.get("chart", raw)
    if not isinstance(table, dict):
        raise ValueError("`chart` must be a table")
    return validate_chart_config(table)


def config_to_dict(config: ChartConfig) -> dict[str, Any]:
    out = asdict(config)
    for key in _BUTTON_KEYS:
        out[key] = getattr(config, key).name.lower()
    return out


def parse_color(value: Any, *, key: str = "color") -> RGBA:
    """Accept `#RRGGBB`, `#RRGGBBAA` or an RGB/RGBA sequence of 0-255 ints."""

    if isinstance(value, str):
        if not _HEX_COLOR.match(value):
            raise ValueError(f"`{key}` must be a hex color (#RRGGBB or #RRGGBBAA)")
        r = int(value[1:3], 16)
        g = int(value[3:5], 16)
        b = int(value[5:7], 16)
        a = int(value[7:9], 16) if len(value) == 9 else 255
        return (r, g, b, a)
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        channels = [int(c) for c in value]
        if any(c < 0 or c > 255 for c in channels):
            raise ValueError(f"`{key}` channels must be within 0..255")
        if len(channels) == 3:
            channels.append(255)
        return (channels[0], channels[1], channels[2], channels[3])
    raise ValueError(f"`{key}` must be a hex string or an RGB/RGBA sequence")


def _coerce_button(key: str, value: Any) -> MouseButton:
    if isinstance(value, MouseButton):
        return value
    if isinstance(value, str):
        try:
            return MouseButton[value.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"`{key}` must be one of left/right/middle") from exc
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return MouseButton(value)
        except ValueError as exc:
            raise ValueError(f"`{key}` must be one of 0/1/2") from exc
    raise ValueError(f"`{key}` must be a mouse button name or index")


def _positive_float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"`{key}` must be a positive number")
    out = float(value)
    if not math.isfinite(out) or out <= 0:
        raise ValueError(f"`{key}` must be a positive number")
    return out
