"""Image decoding and animated GIF encoding adapters."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps

from label_overlay.label_types import ImageAsset

DEFAULT_DELAY_MS = 500
DEFAULT_LOOP_COUNT = 0


def decode_image(data: bytes) -> ImageAsset:
    """Decode an uploaded buffer into a fully loaded RGBA asset.

    Decoder errors (``PIL.UnidentifiedImageError``, ``OSError``) propagate.
    """

    with Image.open(BytesIO(data)) as opened:
        opened.load()
        oriented = ImageOps.exif_transpose(opened)
        image = oriented.convert("RGBA")
    return ImageAsset(width=image.width, height=image.height, image=image)


def decode_image_file(path: str | Path) -> ImageAsset:
    return decode_image(Path(path).read_bytes())


async def decode_image_async(data: bytes) -> ImageAsset:
    """Decode in a worker thread; resolves only once the pixels are loaded."""

    return await asyncio.to_thread(decode_image, data)


async def decode_pair_async(first: bytes, second: bytes) -> tuple[ImageAsset, ImageAsset]:
    image1, image2 = await asyncio.gather(
        decode_image_async(first),
        decode_image_async(second),
    )
    return image1, image2


class FrameEncoder(ABC):
    """Session-style interface for animated image encoders."""

    @abstractmethod
    def start(self, width: int, height: int) -> None:
        """Begin a new animation of the given size, discarding earlier frames."""

    @abstractmethod
    def set_delay(self, delay_ms: int) -> None:
        """Set the per-frame delay in milliseconds."""

    @abstractmethod
    def set_repeat(self, loop_count: int) -> None:
        """Set the loop count; 0 loops forever."""

    @abstractmethod
    def add_frame(self, pixels: bytes) -> None:
        """Append one RGBA frame of the started size."""

    @abstractmethod
    def finish(self) -> bytes:
        """Return the encoded animation."""


class GifEncoder(FrameEncoder):
    """Animated GIF writer backed by Pillow."""

    def __init__(self) -> None:
        self._size: tuple[int, int] | None = None
        self._frames: list[Image.Image] = []
        self._delay_ms = DEFAULT_DELAY_MS
        self._loop_count = DEFAULT_LOOP_COUNT

    def start(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Frame size must be positive, got {width}x{height}")
        self._size = (width, height)
        self._frames = []

    def set_delay(self, delay_ms: int) -> None:
        self._delay_ms = delay_ms

    def set_repeat(self, loop_count: int) -> None:
        self._loop_count = loop_count

    def add_frame(self, pixels: bytes) -> None:
        if self._size is None:
            raise RuntimeError("start() must be called before add_frame().")
        width, height = self._size
        expected = width * height * 4
        if len(pixels) != expected:
            raise ValueError(
                f"Frame buffer has {len(pixels)} bytes, expected {expected} for {width}x{height} RGBA"
            )
        frame = Image.frombytes("RGBA", self._size, pixels).convert("RGB")
        self._frames.append(frame)

    def finish(self) -> bytes:
        if not self._frames:
            raise RuntimeError("No frames were added to the GIF.")
        first, *rest = self._frames
        buffer = BytesIO()
        first.save(
            buffer,
            format="GIF",
            save_all=True,
            append_images=rest,
            duration=self._delay_ms,
            loop=self._loop_count,
        )
        self._frames = []
        return buffer.getvalue()


__all__ = [
    "DEFAULT_DELAY_MS",
    "DEFAULT_LOOP_COUNT",
    "FrameEncoder",
    "GifEncoder",
    "decode_image",
    "decode_image_async",
    "decode_image_file",
    "decode_pair_async",
]
