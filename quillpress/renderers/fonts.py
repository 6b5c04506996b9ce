"""Font lookup for the PDF renderer: standard PDF fonts plus TrueType files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Set, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

logger = logging.getLogger(__name__)

# family -> (regular, bold, italic, bold italic)
STANDARD_FAMILIES: Dict[str, Tuple[str, str, str, str]] = {
    "helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "arial": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "sans-serif": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "times-roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "times new roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "serif": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
    "monospace": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}

_VARIANT_SUFFIXES = ("", "-Bold", "-Italic", "-BoldItalic")


def is_bold_weight(weight: Optional[str]) -> bool:
    if weight is None:
        return False
    text = str(weight).strip().lower()
    if text in ("bold", "bolder"):
        return True
    try:
        return int(text) >= 600
    except ValueError:
        return False


def is_italic_style(style: Optional[str]) -> bool:
    return str(style or "").strip().lower() in ("italic", "oblique")


class FontRegistry:
    """
    Maps (family, bold, italic) to a font name registered with ReportLab.

    TrueType families are looked up in ``font_root`` as ``<Family>.ttf``,
    ``<Family>-Bold.ttf``, ``<Family>-Italic.ttf`` and ``<Family>-BoldItalic.ttf``.
    Unknown families fall back to ``base_font`` with one warning per family.
    """

    def __init__(self, base_font: str = "Helvetica", font_root: Optional[Path] = None):
        self.base_font = base_font
        self.font_root = Path(font_root) if font_root else None
        self._warned: Set[str] = set()
        self._cache: Dict[Tuple[str, bool, bool], str] = {}

    def resolve(self, family: Optional[str], bold: bool = False, italic: bool = False) -> str:
        key = ((family or self.base_font).strip(), bold, italic)
        if key not in self._cache:
            self._cache[key] = self._resolve(*key)
        return self._cache[key]

    def _resolve(self, family: str, bold: bool, italic: bool) -> str:
        index = (2 if italic else 0) + (1 if bold else 0)

        standard = STANDARD_FAMILIES.get(family.lower())
        if standard:
            return standard[index]

        registered = pdfmetrics.getRegisteredFontNames()
        name = f"{family}{_VARIANT_SUFFIXES[index]}"
        if name in registered:
            return name
        if self._register_ttf(family, name, _VARIANT_SUFFIXES[index]):
            return name
        if family in registered or self._register_ttf(family, family, ""):
            return family

        if family not in self._warned:
            logger.warning("Font family '%s' not available; using '%s'", family, self.base_font)
            self._warned.add(family)
        if family.lower() == self.base_font.lower():
            return self.base_font
        return self._resolve(self.base_font, bold, italic)

    def _register_ttf(self, family: str, font_name: str, suffix: str) -> bool:
        if self.font_root is None:
            return False
        path = self.font_root / f"{family}{suffix}.ttf"
        if not path.exists():
            return False
        try:
            pdfmetrics.registerFont(TTFont(font_name, str(path)))
        except (TTFError, OSError) as exc:
            logger.warning("Cannot register font %s from %s: %s", font_name, path, exc)
            return False
        logger.debug("Registered font %s from %s", font_name, path)
        return True
