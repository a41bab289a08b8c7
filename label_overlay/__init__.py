"""Label layout and frame compositing for before/after comparison GIFs."""

from __future__ import annotations

from .compositor import composite_frame, encode_png, render_preview
from .errors import (
    CompositeError,
    DimensionMismatch,
    InvalidLabelConfig,
    InvalidTiming,
    UnknownFontFace,
)
from .label_types import (
    FramePair,
    ImageAsset,
    LabelBounds,
    LabelConfig,
    LabelFootprint,
    LabelLayout,
    RenderedFrame,
)
from .layout import hit_test, layout_label, resolve_label_layout
from .utils import compute_fit_scale, measure_label_footprint

__all__ = [
    "CompositeError",
    "DimensionMismatch",
    "FramePair",
    "ImageAsset",
    "InvalidLabelConfig",
    "InvalidTiming",
    "LabelBounds",
    "LabelConfig",
    "LabelFootprint",
    "LabelLayout",
    "RenderedFrame",
    "UnknownFontFace",
    "composite_frame",
    "compute_fit_scale",
    "encode_png",
    "hit_test",
    "layout_label",
    "measure_label_footprint",
    "render_preview",
    "resolve_label_layout",
]
