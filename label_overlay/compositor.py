# pyright: reportMissingTypeStubs=false

"""Frame rendering: background image, label rectangle and label text.

Frames are drawn on a ReportLab canvas whose page is the image size in
points and rasterized with PyMuPDF at 72 dpi, so one point maps to one
output pixel. PDF space grows upwards; layout space grows downwards.
"""

from __future__ import annotations

from io import BytesIO

import fitz
from PIL import Image
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .fonts import resolve_font_name
from .label_types import ImageAsset, LabelConfig, LabelLayout, RenderedFrame
from .layout import resolve_label_layout
from .utils import (
    PREVIEW_MAX_HEIGHT,
    PREVIEW_MAX_WIDTH,
    compute_fit_scale,
    scaled_dimensions,
)

RASTER_DPI = 72


def composite_frame(background: ImageAsset, label: LabelConfig) -> RenderedFrame:
    """Render ``label`` over ``background`` at full resolution."""

    label.validate()
    return _render(background, label, background.width, background.height, 1.0)


def render_preview(
    background: ImageAsset,
    label: LabelConfig,
    max_width: float = PREVIEW_MAX_WIDTH,
    max_height: float = PREVIEW_MAX_HEIGHT,
) -> RenderedFrame:
    """Render the same composition shrunk to fit the preview box."""

    label.validate()
    scale = compute_fit_scale(background.width, background.height, max_width, max_height)
    width, height = scaled_dimensions(background.width, background.height, scale)
    return _render(background, label, width, height, scale)


def encode_png(frame: RenderedFrame) -> bytes:
    buffer = BytesIO()
    frame.to_image().save(buffer, format="PNG")
    return buffer.getvalue()


def _render(
    background: ImageAsset,
    label: LabelConfig,
    width: int,
    height: int,
    scale: float,
) -> RenderedFrame:
    layout = resolve_label_layout(label, width, height, scale)

    buffer = BytesIO()
    canvas_obj = canvas.Canvas(buffer, pagesize=(width, height), invariant=1)
    canvas_obj.drawImage(
        ImageReader(background.image),
        0,
        0,
        width=width,
        height=height,
        mask="auto",
    )
    _draw_label(canvas_obj, label, layout, height)
    canvas_obj.showPage()
    canvas_obj.save()

    return _rasterize(buffer.getvalue(), width, height)


def _draw_label(
    canvas_obj: canvas.Canvas,
    label: LabelConfig,
    layout: LabelLayout,
    page_height: float,
) -> None:
    bounds = layout.bounds

    canvas_obj.saveState()
    if label.background_opacity > 0:
        canvas_obj.setFillColor(
            colors.toColor(label.background_color),
            alpha=label.background_opacity,
        )
        canvas_obj.rect(
            bounds.left,
            page_height - bounds.bottom,
            bounds.width,
            bounds.height,
            stroke=0,
            fill=1,
        )

    if label.text:
        canvas_obj.setFillColor(colors.toColor(label.color), alpha=1)
        canvas_obj.setFont(resolve_font_name(label.font_face), layout.font_size)
        canvas_obj.drawString(layout.text_left, page_height - layout.baseline, label.text)
    canvas_obj.restoreState()


def _rasterize(pdf_bytes: bytes, width: int, height: int) -> RenderedFrame:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        page = doc.load_page(0)
        pix = page.get_pixmap(dpi=RASTER_DPI, alpha=False)
        if (pix.width, pix.height) != (width, height):
            raise RuntimeError(
                f"Rasterized frame is {pix.width}x{pix.height}, expected {width}x{height}"
            )
        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    return RenderedFrame(width=width, height=height, pixels=image.convert("RGBA").tobytes())


__all__ = ["composite_frame", "encode_png", "render_preview"]
