from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping

from PIL import Image
from reportlab.lib import colors

from .errors import InvalidLabelConfig
from .fonts import DEFAULT_FONT_FACE, resolve_font_name

# client field name -> dataclass field name
_JSON_FIELDS = {
    "text": "text",
    "x": "x",
    "y": "y",
    "fontSize": "font_size",
    "color": "color",
    "backgroundColor": "background_color",
    "backgroundOpacity": "background_opacity",
    "padding": "padding",
    "fontFace": "font_face",
}

_NUMERIC_FIELDS = {"x", "y", "font_size", "background_opacity", "padding"}


@dataclass(frozen=True)
class LabelConfig:
    """Appearance and logical (full-resolution) placement of one label."""

    text: str = ""
    x: float = 10.0
    y: float = 10.0
    font_size: float = 90.0
    color: str = "#ffffff"
    background_color: str = "#000000"
    background_opacity: float = 0.0
    padding: float = 8.0
    font_face: str = DEFAULT_FONT_FACE

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "LabelConfig":
        """Build a label from the client's JSON shape, then validate it."""

        if not isinstance(payload, Mapping):
            raise InvalidLabelConfig("payload", "expected a JSON object")

        values: dict[str, Any] = {}
        for json_name, field_name in _JSON_FIELDS.items():
            if json_name not in payload or payload[json_name] is None:
                continue
            raw = payload[json_name]
            if field_name in _NUMERIC_FIELDS:
                if isinstance(raw, bool):
                    raise InvalidLabelConfig(json_name, f"expected a number, got {raw!r}")
                try:
                    values[field_name] = float(raw)
                except (TypeError, ValueError) as exc:
                    raise InvalidLabelConfig(
                        json_name, f"expected a number, got {raw!r}"
                    ) from exc
            else:
                values[field_name] = str(raw)

        label = cls(**values)
        label.validate()
        return label

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        return {json_name: data[field_name] for json_name, field_name in _JSON_FIELDS.items()}

    def moved_to(self, x: float, y: float) -> "LabelConfig":
        return replace(self, x=x, y=y)

    def validate(self) -> None:
        """Raise ``InvalidLabelConfig`` for the first field that is unusable."""

        if "\n" in self.text or "\r" in self.text:
            raise InvalidLabelConfig("text", "must be a single line")
        for name in ("x", "y"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidLabelConfig(name, "must be a finite number")
        if not math.isfinite(self.font_size) or self.font_size <= 0:
            raise InvalidLabelConfig("fontSize", f"must be positive, got {self.font_size}")
        if not math.isfinite(self.padding) or self.padding < 0:
            raise InvalidLabelConfig("padding", f"must not be negative, got {self.padding}")
        if not 0.0 <= self.background_opacity <= 1.0:
            raise InvalidLabelConfig(
                "backgroundOpacity",
                f"must be within [0, 1], got {self.background_opacity}",
            )
        for name, value in (("color", self.color), ("backgroundColor", self.background_color)):
            try:
                colors.toColor(value)
            except ValueError as exc:
                raise InvalidLabelConfig(name, f"cannot parse color {value!r}") from exc
        resolve_font_name(self.font_face)


@dataclass(frozen=True)
class LabelFootprint:
    """Measured text box; ascent and descent are both non-negative."""

    width: float
    ascent: float
    descent: float

    @property
    def height(self) -> float:
        return self.ascent + self.descent


@dataclass(frozen=True)
class LabelBounds:
    """Label rectangle in the pixel space of the surface that produced it."""

    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return max(self.right - self.left, 0.0)

    @property
    def height(self) -> float:
        return max(self.bottom - self.top, 0.0)

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class LabelLayout:
    bounds: LabelBounds
    text_left: float
    text_top: float
    ascent: float
    font_size: float
    padding: float
    degenerate: bool = False

    @property
    def baseline(self) -> float:
        return self.text_top + self.ascent


@dataclass(frozen=True)
class ImageAsset:
    """Decoded, fully loaded RGBA raster. Treated as read-only."""

    width: int
    height: int
    image: Image.Image

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


@dataclass(frozen=True)
class RenderedFrame:
    """RGBA pixels, row-major, four bytes per pixel."""

    width: int
    height: int
    pixels: bytes

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", self.size, self.pixels)

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        offset = (y * self.width + x) * 4
        r, g, b, a = self.pixels[offset:offset + 4]
        return r, g, b, a


@dataclass(frozen=True)
class FramePair:
    first: RenderedFrame
    second: RenderedFrame
    delay_ms: int
    loop_count: int

    @property
    def size(self) -> tuple[int, int]:
        return self.first.size


__all__ = [
    "FramePair",
    "ImageAsset",
    "LabelBounds",
    "LabelConfig",
    "LabelFootprint",
    "LabelLayout",
    "RenderedFrame",
]
