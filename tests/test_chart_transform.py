from __future__ import annotations

import math
import unittest

from luvatrix_chart.errors import ScaleError
from luvatrix_chart.geometry import RealPoint, RealRect, RealSize
from luvatrix_chart.transform import ViewTransform, fit_rect


class GeometryTests(unittest.TestCase):
    def test_rect_contains_is_inclusive_on_both_bounds(self) -> None:
        rect = RealRect(-1.0, -2.0, 2.0, 4.0)
        self.assertTrue(rect.contains(RealPoint(-1.0, -2.0)))
        self.assertTrue(rect.contains(RealPoint(1.0, 2.0)))
        self.assertTrue(RealPoint(0.0, 0.0).in_rect(rect))
        self.assertFalse(rect.contains(RealPoint(1.0000001, 0.0)))
        self.assertFalse(rect.contains(RealPoint(0.0, -2.0000001)))

    def test_rect_from_points_spans_extrema(self) -> None:
        rect = RealRect.from_points([RealPoint(3.0, -1.0), RealPoint(-2.0, 4.0), RealPoint(0.0, 0.0)])
        self.assertEqual(rect, RealRect(-2.0, -1.0, 5.0, 5.0))
        self.assertEqual(rect.center, RealPoint(0.5, 1.5))
        with self.assertRaises(ValueError):
            RealRect.from_points([])

    def test_rect_from_center_and_union(self) -> None:
        a = RealRect.from_center(RealPoint(0.0, 0.0), RealSize(2.0, 2.0))
        b = RealRect(2.0, 2.0, 1.0, 1.0)
        self.assertEqual(a, RealRect(-1.0, -1.0, 2.0, 2.0))
        self.assertEqual(a.union(b), RealRect(-1.0, -1.0, 4.0, 4.0))


class ViewTransformTests(unittest.TestCase):
    def test_center_maps_to_screen_center(self) -> None:
        view = ViewTransform.for_viewport(220, 100, center=RealPoint(3.0, -4.0), scale=7.5)
        self.assertEqual(view.to_screen(RealPoint(3.0, -4.0)), (110.0, 50.0))

    def test_y_axis_is_inverted(self) -> None:
        view = ViewTransform.for_viewport(200, 200, scale=10.0)
        self.assertEqual(view.to_screen(RealPoint(1.0, 1.0)), (110.0, 90.0))
        self.assertEqual(view.to_real((100.0, 0.0)), RealPoint(0.0, 10.0))

    def test_round_trip_for_many_scales(self) -> None:
        points = [RealPoint(0.0, 0.0), RealPoint(-12.5, 3.25), RealPoint(1e3, -7e2), RealPoint(0.001, 0.002)]
        for scale in (1e-3, 0.5, 2.5, 10.0, 333.3, 700000.0):
            view = ViewTransform.for_viewport(640, 480, center=RealPoint(1.5, -2.5), scale=scale)
            for p in points:
                back = view.to_real(view.to_screen(p))
                self.assertTrue(math.isclose(back.x, p.x, rel_tol=1e-9, abs_tol=1e-9), (scale, p, back))
                self.assertTrue(math.isclose(back.y, p.y, rel_tol=1e-9, abs_tol=1e-9), (scale, p, back))

    def test_sizes_scale_without_translation(self) -> None:
        view = ViewTransform.for_viewport(100, 100, center=RealPoint(50.0, 50.0), scale=4.0)
        self.assertEqual(view.to_screen_size(RealSize(2.0, 0.5)), (8.0, 2.0))
        self.assertEqual(view.to_real_size((8.0, 2.0)), RealSize(2.0, 0.5))

    def test_screen_step_is_one_pixel_in_real_units(self) -> None:
        view = ViewTransform.for_viewport(100, 100, scale=20.0)
        self.assertAlmostEqual(view.screen_step(), 0.05, places=12)

    def test_visible_real_rect(self) -> None:
        view = ViewTransform.for_viewport(200, 100, center=RealPoint(1.0, 1.0), scale=10.0)
        self.assertEqual(view.visible_real_rect(), RealRect(-9.0, -4.0, 20.0, 10.0))

    def test_non_positive_scale_rejected(self) -> None:
        for bad in (0.0, -1.0, float("nan"), float("inf")):
            with self.assertRaises(ScaleError):
                ViewTransform(scale=bad)

    def test_fit_rect_uses_tighter_axis(self) -> None:
        center, scale = fit_rect(-11, 11, 11, -11, width=220, height=220)
        self.assertEqual(center, RealPoint(0.0, 0.0))
        self.assertEqual(scale, 10.0)
        center, scale = fit_rect(0, 10, 40, 0, width=400, height=200)
        self.assertEqual(center, RealPoint(20.0, 5.0))
        self.assertEqual(scale, 10.0)

    def test_fit_rect_rejects_degenerate_rect(self) -> None:
        with self.assertRaises(ValueError):
            fit_rect(1, 1, 1, -1, width=100, height=100)
        with self.assertRaises(ValueError):
            fit_rect(-1, -1, 1, 1, width=100, height=100)


if __name__ == "__main__":
    unittest.main()
