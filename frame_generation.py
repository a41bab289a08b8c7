"""Two-frame comparison GIF generation."""

from __future__ import annotations

import logging
from typing import Callable

from image_io import (
    DEFAULT_DELAY_MS,
    DEFAULT_LOOP_COUNT,
    FrameEncoder,
    GifEncoder,
    decode_image,
)
from label_overlay.compositor import composite_frame
from label_overlay.errors import DimensionMismatch, InvalidTiming
from label_overlay.label_types import FramePair, ImageAsset, LabelConfig

logger = logging.getLogger(__name__)


def validate_timing(delay_ms: int, loop_count: int) -> None:
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, int) or delay_ms <= 0:
        raise InvalidTiming(f"Frame delay must be a positive number of milliseconds, got {delay_ms!r}")
    if isinstance(loop_count, bool) or not isinstance(loop_count, int) or loop_count < 0:
        raise InvalidTiming(f"Loop count must be zero or positive, got {loop_count!r}")


def build_frame_pair(
    image1: ImageAsset,
    image2: ImageAsset,
    label1: LabelConfig,
    label2: LabelConfig,
    delay_ms: int = DEFAULT_DELAY_MS,
    loop_count: int = DEFAULT_LOOP_COUNT,
) -> FramePair:
    """Validate the inputs and composite both frames in playback order."""

    if image1.size != image2.size:
        raise DimensionMismatch(image1.size, image2.size)
    label1.validate()
    label2.validate()
    validate_timing(delay_ms, loop_count)

    return FramePair(
        first=composite_frame(image1, label1),
        second=composite_frame(image2, label2),
        delay_ms=delay_ms,
        loop_count=loop_count,
    )


def encode_frame_pair(frames: FramePair, encoder: FrameEncoder) -> bytes:
    width, height = frames.size
    encoder.start(width, height)
    encoder.set_delay(frames.delay_ms)
    encoder.set_repeat(frames.loop_count)
    encoder.add_frame(frames.first.pixels)
    encoder.add_frame(frames.second.pixels)
    return encoder.finish()


def generate_comparison(
    image1: ImageAsset,
    image2: ImageAsset,
    label1: LabelConfig,
    label2: LabelConfig,
    delay_ms: int = DEFAULT_DELAY_MS,
    loop_count: int = DEFAULT_LOOP_COUNT,
    encoder: FrameEncoder | None = None,
) -> bytes:
    """Return an animated GIF alternating between the two labelled images."""

    logger.info(
        "Generating %dx%d comparison (delay=%dms, loop=%d)",
        image1.width,
        image1.height,
        delay_ms,
        loop_count,
    )
    frames = build_frame_pair(image1, image2, label1, label2, delay_ms, loop_count)
    data = encode_frame_pair(frames, encoder if encoder is not None else GifEncoder())
    logger.info("Encoded comparison GIF (%d bytes)", len(data))
    return data


def generate_comparison_from_bytes(
    data1: bytes,
    data2: bytes,
    label1: LabelConfig,
    label2: LabelConfig,
    delay_ms: int = DEFAULT_DELAY_MS,
    loop_count: int = DEFAULT_LOOP_COUNT,
    *,
    decoder: Callable[[bytes], ImageAsset] = decode_image,
    encoder: FrameEncoder | None = None,
) -> bytes:
    image1 = decoder(data1)
    image2 = decoder(data2)
    return generate_comparison(
        image1,
        image2,
        label1,
        label2,
        delay_ms,
        loop_count,
        encoder=encoder,
    )


__all__ = [
    "build_frame_pair",
    "encode_frame_pair",
    "generate_comparison",
    "generate_comparison_from_bytes",
    "validate_timing",
]
