# pyright: reportMissingTypeStubs=false

"""Font face resolution for label measurement and drawing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase._fontdata import standardFonts
from reportlab.pdfbase.ttfonts import TTFont as ReportLabTTFont

from .errors import UnknownFontFace

logger = logging.getLogger(__name__)

DEFAULT_FONT_FACE = "Helvetica-Bold"

FONTS_DIR = Path(
    os.getenv(
        "COMPARE_GIF_FONTS_DIR",
        str(Path(__file__).resolve().parent.parent / "fonts"),
    )
)


def _font_key(name: str) -> str:
    return " ".join(name.strip().lower().split())


@dataclass(frozen=True)
class LocalStaticFont:
    face_name: str
    path: Path


class FontRegistry:
    """Map face names to fonts registered with ReportLab.

    The PDF standard faces need no file. Any other face is looked up as
    ``<face>.ttf`` inside ``fonts_dir`` and registered on first use.
    """

    def __init__(self, fonts_dir: Path = FONTS_DIR) -> None:
        self.fonts_dir = fonts_dir
        self._standard = {_font_key(name): name for name in standardFonts}
        self._registered: dict[str, str] = {}

    def available(self) -> list[str]:
        faces = set(self._standard.values())
        faces.update(self._registered.values())
        if self.fonts_dir.is_dir():
            faces.update(path.stem for path in self.fonts_dir.glob("*.ttf"))
        return sorted(faces)

    def resolve(self, face: str) -> str:
        key = _font_key(face)
        standard = self._standard.get(key)
        if standard:
            return standard

        cached = self._registered.get(key)
        if cached:
            return cached

        source = self._find_local(face)
        if source is None:
            raise UnknownFontFace(face, ", ".join(self.available()))

        pdfmetrics.registerFont(ReportLabTTFont(source.face_name, str(source.path)))
        logger.info("Registered font face %s from %s", source.face_name, source.path)
        self._registered[key] = source.face_name
        return source.face_name

    def _find_local(self, face: str) -> LocalStaticFont | None:
        if not self.fonts_dir.is_dir():
            return None
        wanted = _font_key(face)
        for path in sorted(self.fonts_dir.glob("*.ttf")):
            if _font_key(path.stem) == wanted:
                return LocalStaticFont(face_name=path.stem, path=path)
        return None


_REGISTRY = FontRegistry()


def resolve_font_name(face: str) -> str:
    """Return the ReportLab font name for ``face`` or raise ``UnknownFontFace``."""

    return _REGISTRY.resolve(face)


__all__ = [
    "DEFAULT_FONT_FACE",
    "FontRegistry",
    "resolve_font_name",
]
