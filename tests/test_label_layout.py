import math
import unittest

from label_overlay.label_types import LabelConfig
from label_overlay.layout import hit_test, layout_label, resolve_label_layout
from label_overlay.utils import measure_label_footprint


def _label(**overrides: object) -> LabelConfig:
    values: dict[str, object] = dict(
        text="before", x=10.0, y=10.0, font_size=20.0, padding=4.0
    )
    values.update(overrides)
    return LabelConfig(**values)  # type: ignore[arg-type]


class LayoutPlacementTests(unittest.TestCase):
    def test_label_that_fits_keeps_its_position(self) -> None:
        label = _label()
        footprint = measure_label_footprint("before", 20, label.font_face)
        bounds = layout_label(label, 100, 100, 1.0)
        self.assertAlmostEqual(bounds.left, 6.0)
        self.assertAlmostEqual(bounds.top, 6.0)
        self.assertAlmostEqual(bounds.right, 10.0 + footprint.width + 4.0)
        self.assertAlmostEqual(bounds.bottom, 10.0 + footprint.height + 4.0)

    def test_text_origin_sits_inside_padding(self) -> None:
        result = resolve_label_layout(_label(x=30, y=40), 200, 200, 1.0)
        self.assertAlmostEqual(result.text_left, 30.0)
        self.assertAlmostEqual(result.text_top, 40.0)
        self.assertAlmostEqual(result.baseline, 40.0 + result.ascent)
        self.assertFalse(result.degenerate)

    def test_bounds_stay_inside_surface(self) -> None:
        for x in (-50.0, 0.0, 10.0, 60.0, 99.0, 500.0):
            for y in (-50.0, 0.0, 45.0, 99.0, 500.0):
                with self.subTest(x=x, y=y):
                    bounds = layout_label(_label(x=x, y=y), 100, 100, 1.0)
                    self.assertGreaterEqual(bounds.left, 0.0)
                    self.assertGreaterEqual(bounds.top, 0.0)
                    self.assertLessEqual(bounds.right, 100.0 + 1e-9)
                    self.assertLessEqual(bounds.bottom, 100.0 + 1e-9)

    def test_empty_text_is_padding_only(self) -> None:
        bounds = layout_label(_label(text="", x=20, y=20), 100, 100, 1.0)
        self.assertAlmostEqual(bounds.width, 8.0)
        self.assertAlmostEqual(bounds.height, 8.0)

    def test_rejects_non_positive_scale(self) -> None:
        with self.assertRaises(ValueError):
            layout_label(_label(), 100, 100, 0)


class LayoutOverflowTests(unittest.TestCase):
    def test_oversized_label_pins_to_origin(self) -> None:
        result = resolve_label_layout(_label(x=95, y=95, font_size=60), 100, 100, 1.0)
        bounds = result.bounds
        self.assertTrue(result.degenerate)
        self.assertEqual(bounds.left, 0.0)
        self.assertGreaterEqual(bounds.top, 0.0)
        for value in (bounds.left, bounds.top, bounds.right, bounds.bottom):
            self.assertTrue(math.isfinite(value))
        self.assertGreater(bounds.right, 100.0)

    def test_oversized_in_both_axes(self) -> None:
        bounds = layout_label(_label(x=95, y=95, font_size=150), 100, 100, 1.0)
        self.assertEqual((bounds.left, bounds.top), (0.0, 0.0))
        self.assertGreater(bounds.bottom, 100.0)


class LayoutScaleConsistencyTests(unittest.TestCase):
    def test_preview_bounds_are_scaled_full_bounds(self) -> None:
        label = _label(x=700, y=500, font_size=90, padding=8)
        full = layout_label(label, 1000, 800, 1.0)
        for scale in (1.0, 0.5, 0.25, 0.1):
            with self.subTest(scale=scale):
                preview = layout_label(label, 1000 * scale, 800 * scale, scale)
                self.assertAlmostEqual(preview.left, full.left * scale, places=6)
                self.assertAlmostEqual(preview.top, full.top * scale, places=6)
                self.assertAlmostEqual(preview.right, full.right * scale, places=6)
                self.assertAlmostEqual(preview.bottom, full.bottom * scale, places=6)

    def test_clamped_bounds_scale_too(self) -> None:
        label = _label(x=990, y=790, font_size=90, padding=8)
        full = layout_label(label, 1000, 800, 1.0)
        preview = layout_label(label, 500, 400, 0.5)
        self.assertAlmostEqual(preview.right, full.right * 0.5, places=6)
        self.assertAlmostEqual(preview.bottom, full.bottom * 0.5, places=6)


class HitTestTests(unittest.TestCase):
    def test_center_hits_and_outside_misses(self) -> None:
        bounds = layout_label(_label(x=30, y=30), 200, 200, 1.0)
        cx, cy = bounds.center
        self.assertTrue(hit_test(cx, cy, bounds))
        self.assertFalse(hit_test(bounds.left - 1, cy, bounds))
        self.assertFalse(hit_test(bounds.right + 1, cy, bounds))
        self.assertFalse(hit_test(cx, bounds.top - 1, bounds))
        self.assertFalse(hit_test(cx, bounds.bottom + 1, bounds))

    def test_edges_are_inclusive(self) -> None:
        bounds = layout_label(_label(x=30, y=30), 200, 200, 1.0)
        self.assertTrue(hit_test(bounds.left, bounds.top, bounds))
        self.assertTrue(hit_test(bounds.right, bounds.bottom, bounds))


if __name__ == "__main__":
    unittest.main()
