from __future__ import annotations

import argparse
import json
import logging
import math
from pathlib import Path

from PIL import Image

from luvatrix_chart import (
    Chart,
    ChartConfig,
    ChartFunction,
    load_chart_config,
    parse_hdi_pointer_event,
)
from luvatrix_chart.config import DEFAULT_CONFIG, config_to_dict

LOGGER = logging.getLogger("luvatrix_chart.cli")

FUNCTIONS = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "exp": math.exp,
    "log": math.log,
    "sqrt": math.sqrt,
    "square": lambda x: x * x,
    "inverse": lambda x: 1.0 / x,
}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="luvatrix-chart")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"], default="warning")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a chart snapshot to a PNG file.")
    render.add_argument("out", type=Path)
    render.add_argument("--width", type=int, default=640)
    render.add_argument("--height", type=int, default=360)
    render.add_argument("--config", type=Path, default=None, help="chart.toml with a [chart] table.")
    render.add_argument(
        "--function",
        action="append",
        choices=sorted(FUNCTIONS),
        default=[],
        help="Plot a named function; may be repeated.",
    )
    render.add_argument(
        "--rect",
        type=float,
        nargs=4,
        metavar=("LEFT", "TOP", "RIGHT", "BOTTOM"),
        default=None,
        help="Visible real rectangle. Default: the standard -11..11 view.",
    )
    render.add_argument("--extend-on-extremum", action="store_true")
    render.add_argument("--no-grid", action="store_true")
    render.add_argument(
        "--hdi-events",
        type=Path,
        default=None,
        help="JSONL file of {event_type, payload} pointer events replayed before rendering.",
    )

    show = sub.add_parser("show-config", help="Print the effective chart config as JSON.")
    show.add_argument("--config", type=Path, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper()))

    if args.command == "render":
        _require_positive_size(args.width, args.height)
        config = _load_config(args.config)
        chart = Chart(args.width, args.height, config=config)
        with chart.batch():
            chart.set_defaults()
            if args.rect is not None:
                chart.set_visible_rect(*args.rect)
            if args.no_grid:
                chart.display_grid = False
            for name in args.function:
                chart.add_object(ChartFunction(FUNCTIONS[name], extend_on_extremum=args.extend_on_extremum, name=name))
        if args.hdi_events is not None:
            replayed = _replay_hdi_events(chart, args.hdi_events)
            LOGGER.info("replayed %d pointer events from %s", replayed, args.hdi_events)
        frame = chart.render()
        args.out.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(frame, mode="RGBA").save(args.out)
        print(f"wrote {args.out} center=({chart.center.x:g}, {chart.center.y:g}) scale={chart.scale:g}")
        return

    if args.command == "show-config":
        config = _load_config(args.config)
        print(json.dumps(config_to_dict(config), indent=2, sort_keys=True))
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _load_config(path: Path | None) -> ChartConfig:
    if path is None:
        return DEFAULT_CONFIG
    return load_chart_config(path)


def _replay_hdi_events(chart: Chart, path: Path) -> int:
    count = 0
    for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}:{lineno}: invalid JSON") from exc
        if not isinstance(record, dict):
            raise ValueError(f"{path}:{lineno}: expected an object")
        event = parse_hdi_pointer_event(str(record.get("event_type", "")), record.get("payload"))
        if event is None:
            LOGGER.debug("%s:%d: ignored %s", path, lineno, record.get("event_type"))
            continue
        chart.handle_event(event)
        count += 1
    return count


def _require_positive_size(width: int, height: int) -> None:
    if width <= 0:
        raise ValueError("width must be > 0")
    if height <= 0:
        raise ValueError("height must be > 0")


if __name__ == "__main__":
    main()
