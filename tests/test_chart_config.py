from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from luvatrix_chart import ChartConfig, MouseButton, load_chart_config, parse_hdi_pointer_event, validate_chart_config
from luvatrix_chart.config import config_to_dict, parse_color
from luvatrix_chart.labels import format_grid_value


class ChartConfigTests(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = validate_chart_config()
        self.assertEqual(cfg, ChartConfig())
        self.assertEqual(cfg.move_button, MouseButton.RIGHT)
        self.assertEqual(cfg.select_button, MouseButton.LEFT)
        self.assertEqual((cfg.min_scale, cfg.max_scale), (2.5, 700000.0))

    def test_overrides_are_coerced(self) -> None:
        cfg = validate_chart_config(
            {
                "move_button": "middle",
                "center_button": 0,
                "grid_color": "#102030",
                "selection_color": [1, 2, 3],
                "snap_step": 2,
                "panning_enabled": False,
            }
        )
        self.assertEqual(cfg.move_button, MouseButton.MIDDLE)
        self.assertEqual(cfg.center_button, MouseButton.LEFT)
        self.assertEqual(cfg.grid_color, (16, 32, 48, 255))
        self.assertEqual(cfg.selection_color, (1, 2, 3, 255))
        self.assertEqual(cfg.snap_step, 2.0)
        self.assertFalse(cfg.panning_enabled)

    def test_rejects_unknown_key(self) -> None:
        with self.assertRaisesRegex(ValueError, "Unknown chart config key"):
            validate_chart_config({"zoom": 3})

    def test_rejects_bad_values(self) -> None:
        bad = [
            {"move_button": "thumb"},
            {"select_button": 7},
            {"selection_enabled": "yes"},
            {"snap_step": 0},
            {"zoom_step": True},
            {"min_scale": 10.0, "max_scale": 5.0},
            {"grid_font_family": "  "},
            {"selection_handle_px": 0},
            {"background_color": "white"},
        ]
        for overrides in bad:
            with self.subTest(overrides=overrides):
                with self.assertRaises(ValueError):
                    validate_chart_config(overrides)

    def test_parse_color(self) -> None:
        self.assertEqual(parse_color("#FFFFFF80"), (255, 255, 255, 128))
        self.assertEqual(parse_color((0, 0, 0, 0)), (0, 0, 0, 0))
        with self.assertRaises(ValueError):
            parse_color((0, 0, 256))
        with self.assertRaises(ValueError):
            parse_color(None)

    def test_load_from_toml_table(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "chart.toml"
            path.write_text(
                '[chart]\nmove_button = "left"\nselect_button = "right"\ndisplay_grid = false\nmax_scale = 1000.0\n',
                encoding="utf-8",
            )
            cfg = load_chart_config(path)
        self.assertEqual(cfg.move_button, MouseButton.LEFT)
        self.assertEqual(cfg.select_button, MouseButton.RIGHT)
        self.assertFalse(cfg.display_grid)
        self.assertEqual(cfg.max_scale, 1000.0)

    def test_load_from_top_level_keys(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "chart.toml"
            path.write_text('zoom_step = 4.0\nbackground_color = "#000000"\n', encoding="utf-8")
            cfg = load_chart_config(path)
        self.assertEqual(cfg.zoom_step, 4.0)
        self.assertEqual(cfg.background_color, (0, 0, 0, 255))

    def test_missing_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with self.assertRaises(FileNotFoundError):
                load_chart_config(Path(td) / "nope.toml")

    def test_config_to_dict_round_trips(self) -> None:
        raw = config_to_dict(ChartConfig(move_button=MouseButton.MIDDLE))
        self.assertEqual(raw["move_button"], "middle")
        self.assertEqual(validate_chart_config(raw).move_button, MouseButton.MIDDLE)


class HdiPointerEventTests(unittest.TestCase):
    def test_click_phases(self) -> None:
        down = parse_hdi_pointer_event("click", {"x": 3, "y": 4, "button": 1, "phase": "down", "click_count": 1})
        assert down is not None
        self.assertEqual((down.event_type, down.button, down.location), ("mouse_down", MouseButton.RIGHT, (3.0, 4.0)))
        up = parse_hdi_pointer_event("click", {"x": 3, "y": 4, "button": 0, "phase": "up"})
        assert up is not None
        self.assertEqual((up.event_type, up.button), ("mouse_up", MouseButton.LEFT))

    def test_double_click(self) -> None:
        event = parse_hdi_pointer_event("click", {"x": 1, "y": 2, "button": 1, "phase": "down", "click_count": 2})
        assert event is not None
        self.assertEqual(event.event_type, "double_click")

    def test_move_and_scroll(self) -> None:
        move = parse_hdi_pointer_event("pointer_move", {"x": 10.5, "y": 2})
        assert move is not None
        self.assertEqual((move.event_type, move.x, move.y), ("mouse_move", 10.5, 2.0))
        wheel = parse_hdi_pointer_event("scroll", {"delta_x": 0.0, "delta_y": -3.0})
        assert wheel is not None
        self.assertEqual((wheel.event_type, wheel.delta), ("wheel", -3.0))

    def test_ignored_payloads(self) -> None:
        self.assertIsNone(parse_hdi_pointer_event("scroll", {"delta_x": 2.0, "delta_y": 0.0}))
        self.assertIsNone(parse_hdi_pointer_event("click", {"x": 0, "y": 0, "button": 9, "phase": "down"}))
        self.assertIsNone(parse_hdi_pointer_event("click", {"x": 0, "y": 0, "button": 0, "phase": "cancel"}))
        self.assertIsNone(parse_hdi_pointer_event("key_down", {"key": "a"}))
        self.assertIsNone(parse_hdi_pointer_event("click", None))


class GridLabelTests(unittest.TestCase):
    def test_format_grid_value(self) -> None:
        self.assertEqual(format_grid_value(10.0), "10")
        self.assertEqual(format_grid_value(-2.5), "-2.5")
        self.assertEqual(format_grid_value(-0.0), "0")
        self.assertEqual(format_grid_value(12500000.0), "1.2500e+07")


if __name__ == "__main__":
    unittest.main()
