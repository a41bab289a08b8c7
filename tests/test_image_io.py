import tempfile
import unittest
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from image_io import (
    GifEncoder,
    decode_image,
    decode_image_async,
    decode_image_file,
    decode_pair_async,
)


def _png(size: tuple[int, int], mode: str = "RGB", color: object = "white") -> bytes:
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")  # type: ignore[arg-type]
    return buffer.getvalue()


class DecodeTests(unittest.TestCase):
    def test_decodes_to_rgba_asset(self) -> None:
        asset = decode_image(_png((40, 30)))
        self.assertEqual(asset.size, (40, 30))
        self.assertEqual(asset.image.mode, "RGBA")

    def test_palette_images_are_converted(self) -> None:
        asset = decode_image(_png((8, 8), mode="P", color=3))
        self.assertEqual(asset.image.mode, "RGBA")

    def test_decodes_from_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "frame.png"
            path.write_bytes(_png((16, 9)))
            asset = decode_image_file(path)
        self.assertEqual(asset.size, (16, 9))

    def test_garbage_raises_decoder_error(self) -> None:
        with self.assertRaises(UnidentifiedImageError):
            decode_image(b"not an image")


class AsyncDecodeTests(unittest.IsolatedAsyncioTestCase):
    async def test_async_decode_resolves_loaded_asset(self) -> None:
        asset = await decode_image_async(_png((12, 10)))
        self.assertEqual(asset.size, (12, 10))
        self.assertEqual(asset.image.getpixel((0, 0)), (255, 255, 255, 255))

    async def test_pair_keeps_argument_order(self) -> None:
        first, second = await decode_pair_async(_png((10, 10)), _png((20, 5)))
        self.assertEqual(first.size, (10, 10))
        self.assertEqual(second.size, (20, 5))

    async def test_async_decode_propagates_failure(self) -> None:
        with self.assertRaises(UnidentifiedImageError):
            await decode_image_async(b"broken")


class GifEncoderTests(unittest.TestCase):
    def _frame(self, color: tuple[int, int, int, int]) -> bytes:
        return Image.new("RGBA", (4, 3), color).tobytes()

    def test_encodes_frames_with_timing(self) -> None:
        encoder = GifEncoder()
        encoder.start(4, 3)
        encoder.set_delay(700)
        encoder.set_repeat(0)
        encoder.add_frame(self._frame((255, 0, 0, 255)))
        encoder.add_frame(self._frame((0, 255, 0, 255)))
        data = encoder.finish()

        with Image.open(BytesIO(data)) as gif:
            self.assertEqual(gif.n_frames, 2)
            self.assertEqual(gif.info.get("duration"), 700)
            self.assertEqual(gif.info.get("loop"), 0)

    def test_add_frame_requires_start(self) -> None:
        with self.assertRaises(RuntimeError):
            GifEncoder().add_frame(self._frame((0, 0, 0, 255)))

    def test_rejects_wrong_buffer_length(self) -> None:
        encoder = GifEncoder()
        encoder.start(4, 3)
        with self.assertRaises(ValueError):
            encoder.add_frame(b"\x00" * 10)

    def test_finish_without_frames(self) -> None:
        encoder = GifEncoder()
        encoder.start(4, 3)
        with self.assertRaises(RuntimeError):
            encoder.finish()


if __name__ == "__main__":
    unittest.main()
