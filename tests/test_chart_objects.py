from __future__ import annotations

import math
import unittest

from luvatrix_chart.commands import EllipseCommand, LineCommand, PolygonCommand, RectCommand
from luvatrix_chart.errors import CapabilityError, ChartObjectError
from luvatrix_chart.geometry import RealPoint, RealRect, RealSize
from luvatrix_chart.objects import (
    ChartEllipse,
    ChartFunction,
    ChartLine,
    ChartObjectFlags,
    ChartPoint,
    ChartPolygon,
    ChartRectangle,
)
from luvatrix_chart.transform import ViewTransform

_MOVABLE = ChartObjectFlags.SELECTABLE | ChartObjectFlags.MOUSE_MOVABLE


def _view(scale: float = 10.0) -> ViewTransform:
    return ViewTransform.for_viewport(220, 220, scale=scale)


class ChartPointTests(unittest.TestCase):
    def test_pixel_sized_point_bounds_shrink_with_zoom(self) -> None:
        point = ChartPoint(RealPoint(0.0, 0.0), size=(8.0, 8.0))
        bounds = point.real_bounds(_view(10.0))
        self.assertAlmostEqual(bounds.left, -0.4)
        self.assertAlmostEqual(bounds.bottom, -0.4)
        self.assertAlmostEqual(bounds.right, 0.4)
        self.assertAlmostEqual(bounds.top, 0.4)
        zoomed = point.real_bounds(_view(20.0))
        self.assertAlmostEqual(zoomed.width, 0.4)

    def test_real_sized_point_ignores_scale(self) -> None:
        point = ChartPoint((1.0, 1.0), size=(2.0, 4.0), size_in_pixels=False)
        self.assertEqual(point.real_bounds(_view(10.0)), RealRect(0.0, -1.0, 2.0, 4.0))
        self.assertEqual(point.real_bounds(_view(99.0)), RealRect(0.0, -1.0, 2.0, 4.0))

    def test_draw_emits_centered_square(self) -> None:
        point = ChartPoint(RealPoint(1.0, 1.0), color="#00FF00")
        (cmd,) = point.draw(_view(10.0))
        self.assertIsInstance(cmd, RectCommand)
        self.assertEqual((cmd.x, cmd.y, cmd.width, cmd.height), (116.0, 96.0, 8.0, 8.0))
        self.assertEqual(cmd.color, (0, 255, 0, 255))

    def test_move_to_places_center(self) -> None:
        point = ChartPoint(RealPoint(0.0, 0.0), flags=_MOVABLE)
        point.move_to((3.0, -2.0))
        self.assertEqual(point.center, RealPoint(3.0, -2.0))

    def test_negative_size_rejected(self) -> None:
        with self.assertRaises(ChartObjectError):
            ChartPoint(size=(-1.0, 2.0))


class BoxObjectTests(unittest.TestCase):
    def test_rectangle_move_to_recomputes_left_bottom(self) -> None:
        rect = ChartRectangle(RealPoint(0.0, 0.0), RealSize(4.0, 2.0), flags=_MOVABLE)
        rect.move_to(RealPoint(10.0, 10.0))
        self.assertEqual(rect.location, RealPoint(8.0, 9.0))
        self.assertEqual(rect.center, RealPoint(10.0, 10.0))
        self.assertEqual(rect.real_bounds(_view()), RealRect(8.0, 9.0, 4.0, 2.0))

    def test_ellipse_draw_uses_top_left_screen_corner(self) -> None:
        ellipse = ChartEllipse((0.0, 0.0), (2.0, 1.0), fill=False, line_width=2)
        (cmd,) = ellipse.draw(_view(10.0))
        self.assertIsInstance(cmd, EllipseCommand)
        self.assertEqual((cmd.x, cmd.y, cmd.width, cmd.height), (110.0, 100.0, 20.0, 10.0))
        self.assertFalse(cmd.fill)
        self.assertEqual(cmd.line_width, 2)

    def test_rectangle_accepts_tuple_size(self) -> None:
        rect = ChartRectangle((1.0, 1.0), (2.0, 3.0))
        self.assertEqual(rect.size, RealSize(2.0, 3.0))


class ChartLineTests(unittest.TestCase):
    def test_bounds_and_move(self) -> None:
        line = ChartLine((0.0, 0.0), (4.0, -2.0), flags=_MOVABLE)
        self.assertEqual(line.real_bounds(_view()), RealRect(0.0, -2.0, 4.0, 2.0))
        line.move_to((0.0, 0.0))
        self.assertEqual(line.begin, RealPoint(-2.0, 1.0))
        self.assertEqual(line.end, RealPoint(2.0, -1.0))

    def test_draw_emits_line_in_screen_space(self) -> None:
        line = ChartLine((0.0, 0.0), (1.0, 1.0), width=3)
        (cmd,) = line.draw(_view(10.0))
        self.assertIsInstance(cmd, LineCommand)
        self.assertEqual(cmd.start, (110.0, 110.0))
        self.assertEqual(cmd.end, (120.0, 100.0))
        self.assertEqual(cmd.width, 3)

    def test_line_width_must_be_positive(self) -> None:
        with self.assertRaises(ChartObjectError):
            ChartLine((0.0, 0.0), (1.0, 1.0), width=0)


class ChartPolygonTests(unittest.TestCase):
    def test_empty_or_missing_vertices_rejected(self) -> None:
        with self.assertRaises(ChartObjectError):
            ChartPolygon([])
        with self.assertRaises(ChartObjectError):
            ChartPolygon(None)  # type: ignore[arg-type]
        with self.assertRaises(ChartObjectError):
            ChartPolygon([(0.0, 0.0), None])  # type: ignore[list-item]

    def test_bounds_are_vertex_extrema(self) -> None:
        poly = ChartPolygon([(0.0, 0.0), (4.0, 1.0), (2.0, 3.0), (-1.0, 2.0)])
        self.assertEqual(poly.real_bounds(_view()), RealRect(-1.0, 0.0, 5.0, 3.0))

    def test_move_to_translates_by_centroid_delta(self) -> None:
        poly = ChartPolygon([(0.0, 0.0), (2.0, 0.0), (2.0, 2.0), (0.0, 2.0)], flags=_MOVABLE)
        self.assertEqual(poly.center, RealPoint(1.0, 1.0))
        poly.move_to((5.0, 5.0))
        self.assertEqual(poly.points, (RealPoint(4.0, 4.0), RealPoint(6.0, 4.0), RealPoint(6.0, 6.0), RealPoint(4.0, 6.0)))

    def test_draw_maps_every_vertex(self) -> None:
        poly = ChartPolygon([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)])
        (cmd,) = poly.draw(_view(10.0))
        self.assertIsInstance(cmd, PolygonCommand)
        self.assertEqual(cmd.points, ((110.0, 110.0), (120.0, 110.0), (110.0, 100.0)))


class CapabilityTests(unittest.TestCase):
    def test_shapes_default_to_selectable_only(self) -> None:
        for obj in (
            ChartPoint(),
            ChartRectangle((0.0, 0.0), (1.0, 1.0)),
            ChartEllipse((0.0, 0.0), (1.0, 1.0)),
            ChartLine((0.0, 0.0), (1.0, 1.0)),
            ChartPolygon([(0.0, 0.0)]),
        ):
            self.assertTrue(obj.selectable)
            self.assertFalse(obj.movable)
            self.assertTrue(obj.visible)

    def test_move_to_requires_mouse_movable_flag(self) -> None:
        rect = ChartRectangle((0.0, 0.0), (2.0, 2.0))
        with self.assertRaises(CapabilityError):
            rect.move_to((10.0, 10.0))
        self.assertEqual(rect.location, RealPoint(0.0, 0.0))
        rect.flags = _MOVABLE
        rect.move_to((10.0, 10.0))
        self.assertEqual(rect.location, RealPoint(9.0, 9.0))
        rect.flags = ChartObjectFlags.SELECTABLE
        with self.assertRaises(CapabilityError):
            rect.move_to((0.0, 0.0))

    def test_function_is_visible_only(self) -> None:
        fn = ChartFunction(math.sin)
        self.assertFalse(fn.selectable)
        self.assertFalse(fn.movable)
        with self.assertRaises(CapabilityError):
            fn.real_bounds(_view())
        with self.assertRaises(CapabilityError):
            fn.move_to((0.0, 0.0))
        with self.assertRaises(CapabilityError):
            ChartFunction(math.sin, flags=ChartObjectFlags.SELECTABLE)
        with self.assertRaises(CapabilityError):
            fn.flags = ChartObjectFlags.MOUSE_MOVABLE
        fn.visible = False
        self.assertEqual(fn.flags, ChartObjectFlags.INVISIBLE)

    def test_flags_can_enable_mouse_moving(self) -> None:
        point = ChartPoint(flags=ChartObjectFlags.SELECTABLE | ChartObjectFlags.MOUSE_MOVABLE)
        self.assertTrue(point.movable)
        point.visible = False
        self.assertFalse(point.visible)
        self.assertTrue(point.has_flag(ChartObjectFlags.INVISIBLE | ChartObjectFlags.MOUSE_MOVABLE))
        point.visible = True
        self.assertTrue(point.visible)

    def test_function_requires_callable(self) -> None:
        with self.assertRaises(ChartObjectError):
            ChartFunction(42)  # type: ignore[arg-type]

    def test_function_draw_emits_one_line_per_segment(self) -> None:
        fn = ChartFunction(lambda x: 2.0 * x + 1.0, color=(10, 20, 30))
        view = ViewTransform.for_viewport(50, 40, scale=5.0)
        commands = fn.draw(view)
        self.assertEqual(len(commands), 49)
        self.assertTrue(all(isinstance(c, LineCommand) for c in commands))
        self.assertEqual(commands[0].color, (10, 20, 30, 255))
        self.assertEqual(commands[0].start, view.to_screen(RealPoint(-5.0, -9.0)))


if __name__ == "__main__":
    unittest.main()
