"""Shared geometry helpers for label layout and previews."""

from __future__ import annotations

from reportlab.pdfbase.pdfmetrics import getAscentDescent, stringWidth

from .fonts import resolve_font_name
from .label_types import LabelFootprint

PREVIEW_MAX_WIDTH = 560
PREVIEW_MAX_HEIGHT = 420

MIN_FONT_SIZE = 8
MAX_FONT_SIZE = 200
MIN_DELAY_MS = 100


def compute_fit_scale(
    native_width: float,
    native_height: float,
    max_width: float = PREVIEW_MAX_WIDTH,
    max_height: float = PREVIEW_MAX_HEIGHT,
) -> float:
    """Return the factor that fits the native size in the box, never above 1."""

    if native_width <= 0 or native_height <= 0:
        raise ValueError(
            f"Image dimensions must be positive, got {native_width}x{native_height}"
        )
    if max_width <= 0 or max_height <= 0:
        raise ValueError(
            f"Preview bounds must be positive, got {max_width}x{max_height}"
        )
    return min(max_width / native_width, max_height / native_height, 1.0)


def scaled_dimensions(width: int, height: int, scale: float) -> tuple[int, int]:
    """Return the rounded pixel size of a surface drawn at ``scale``."""

    return max(1, round(width * scale)), max(1, round(height * scale))


def measure_label_footprint(
    text: str,
    font_size: float,
    font_face: str,
) -> LabelFootprint:
    """Measure ``text`` with the font metrics used for drawing.

    Width and vertical extents are linear in ``font_size`` so a preview
    measured at ``font_size * scale`` is an exact scaled copy of the full
    resolution measurement.
    """

    if not text or font_size <= 0:
        return LabelFootprint(width=0.0, ascent=0.0, descent=0.0)

    font_name = resolve_font_name(font_face)
    ascent, descent = getAscentDescent(font_name, font_size)
    return LabelFootprint(
        width=stringWidth(text, font_name, font_size),
        ascent=ascent,
        descent=abs(descent),
    )


def clamp(value: float, low: float, high: float) -> float:
    """Clamp ``value`` into ``[low, high]``; an inverted range yields ``low``."""

    if high < low:
        return low
    return max(low, min(value, high))


def clamp_font_size(size: float) -> float:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, size))


def clamp_delay(delay_ms: int) -> int:
    return max(MIN_DELAY_MS, delay_ms)
