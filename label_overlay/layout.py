"""Label placement on a render surface.

Every caller that needs to know where a label sits (preview drawing,
hit-testing, final compositing) goes through :func:`resolve_label_layout`
so the preview and the generated frames agree. Positions are stored in
full-resolution pixels; ``scale`` maps them onto the target surface.
"""

from __future__ import annotations

import logging

from .label_types import LabelBounds, LabelConfig, LabelLayout
from .utils import clamp, measure_label_footprint

logger = logging.getLogger(__name__)


def resolve_label_layout(
    label: LabelConfig,
    surface_width: float,
    surface_height: float,
    scale: float = 1.0,
) -> LabelLayout:
    """Return the clamped geometry of ``label`` on a surface drawn at ``scale``.

    The padded background rectangle is kept inside the surface. When the
    rectangle is larger than the surface in an axis it is pinned to 0 on
    that axis and overflows the far edge.
    """

    if scale <= 0:
        raise ValueError(f"Scale must be positive, got {scale}")

    font_size = label.font_size * scale
    footprint = measure_label_footprint(label.text, font_size, label.font_face)
    text_width = footprint.width
    text_height = footprint.height
    pad = label.padding * scale

    max_left = surface_width - text_width - 2 * pad
    max_top = surface_height - text_height - 2 * pad
    rect_left = clamp(label.x * scale - pad, 0.0, max_left)
    rect_top = clamp(label.y * scale - pad, 0.0, max_top)

    degenerate = max_left < 0 or max_top < 0
    if degenerate:
        logger.debug(
            "Label %r (%.1fx%.1f) does not fit a %sx%s surface; pinned to origin",
            label.text,
            text_width + 2 * pad,
            text_height + 2 * pad,
            surface_width,
            surface_height,
        )

    text_left = rect_left + pad
    text_top = rect_top + pad
    bounds = LabelBounds(
        left=rect_left,
        top=rect_top,
        right=text_left + text_width + pad,
        bottom=text_top + text_height + pad,
    )
    return LabelLayout(
        bounds=bounds,
        text_left=text_left,
        text_top=text_top,
        ascent=footprint.ascent,
        font_size=font_size,
        padding=pad,
        degenerate=degenerate,
    )


def layout_label(
    label: LabelConfig,
    surface_width: float,
    surface_height: float,
    scale: float = 1.0,
) -> LabelBounds:
    """Return the on-surface rectangle ``label`` occupies."""

    return resolve_label_layout(label, surface_width, surface_height, scale).bounds


def hit_test(x: float, y: float, bounds: LabelBounds) -> bool:
    return bounds.contains(x, y)


__all__ = ["hit_test", "layout_label", "resolve_label_layout"]
