import unittest
from unittest.mock import Mock, patch

from PIL import Image

from label_overlay.compositor import composite_frame, encode_png, render_preview
from label_overlay.errors import InvalidLabelConfig
from label_overlay.label_types import ImageAsset, LabelConfig
from label_overlay.layout import layout_label


def _asset(size: tuple[int, int] = (100, 100), color: str = "white") -> ImageAsset:
    image = Image.new("RGBA", size, color)
    return ImageAsset(width=size[0], height=size[1], image=image)


def _label(**overrides: object) -> LabelConfig:
    values: dict[str, object] = dict(
        text="before",
        x=10.0,
        y=10.0,
        font_size=20.0,
        padding=4.0,
        color="#ffffff",
        background_color="#000000",
        background_opacity=1.0,
    )
    values.update(overrides)
    return LabelConfig(**values)  # type: ignore[arg-type]


class CompositeFrameTests(unittest.TestCase):
    def test_frame_matches_background_size(self) -> None:
        frame = composite_frame(_asset(), _label())
        self.assertEqual(frame.size, (100, 100))
        self.assertEqual(len(frame.pixels), 100 * 100 * 4)

    def test_identical_inputs_give_identical_pixels(self) -> None:
        background = _asset()
        label = _label()
        first = composite_frame(background, label)
        second = composite_frame(background, label)
        self.assertEqual(first.pixels, second.pixels)

    def test_background_rectangle_is_filled(self) -> None:
        label = _label()
        bounds = layout_label(label, 100, 100)
        _, cy = bounds.center
        # inside the left padding band, left of any glyph
        r, g, b, _ = composite_frame(_asset(), label).pixel(int(bounds.left) + 1, int(cy))
        self.assertLess(max(r, g, b), 60)

    def test_transparent_background_leaves_image_visible(self) -> None:
        label = _label(background_opacity=0.0)
        bounds = layout_label(label, 100, 100)
        _, cy = bounds.center
        r, g, b, _ = composite_frame(_asset(), label).pixel(int(bounds.left) + 1, int(cy))
        self.assertGreater(min(r, g, b), 200)

    def test_pixels_outside_label_keep_background(self) -> None:
        frame = composite_frame(_asset(color="#0000ff"), _label())
        r, g, b, a = frame.pixel(90, 90)
        self.assertLess(r, 30)
        self.assertLess(g, 30)
        self.assertGreater(b, 220)
        self.assertEqual(a, 255)

    def test_text_is_drawn_in_label_color(self) -> None:
        label = _label(color="#ff0000", background_opacity=0.0)
        frame = composite_frame(_asset(), label)
        bounds = layout_label(label, 100, 100)
        red_pixels = 0
        for y in range(int(bounds.top), int(bounds.bottom)):
            for x in range(int(bounds.left), int(bounds.right)):
                r, g, b, _ = frame.pixel(x, y)
                if r > 200 and g < 80 and b < 80:
                    red_pixels += 1
        self.assertGreater(red_pixels, 20)

    def test_background_asset_is_not_mutated(self) -> None:
        background = _asset()
        before = background.image.tobytes()
        composite_frame(background, _label())
        self.assertEqual(background.image.tobytes(), before)

    @patch("label_overlay.compositor._render")
    def test_invalid_label_is_rejected_before_rendering(self, mock_render: Mock) -> None:
        with self.assertRaises(InvalidLabelConfig):
            composite_frame(_asset(), _label(font_size=-5))
        mock_render.assert_not_called()


class PreviewTests(unittest.TestCase):
    def test_preview_fits_box(self) -> None:
        frame = render_preview(_asset((1120, 840)), _label(font_size=90), 560, 420)
        self.assertEqual(frame.size, (560, 420))

    def test_small_images_are_not_upscaled(self) -> None:
        frame = render_preview(_asset((100, 80)), _label())
        self.assertEqual(frame.size, (100, 80))

    def test_encode_png(self) -> None:
        data = encode_png(composite_frame(_asset(), _label()))
        self.assertTrue(data.startswith(b"\x89PNG"))


if __name__ == "__main__":
    unittest.main()
