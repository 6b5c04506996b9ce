"""Utility helpers shared across renderer components."""

from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from reportlab.lib.colors import Color, HexColor
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A3, A4, A5, LETTER

from ..exceptions import RenderingError
from ..styles.page_master import PageMasterStyle
from ..utils.enums import TextAlign
from ..utils.units import to_points

logger = logging.getLogger(__name__)

PAGE_SIZES = {
    "A3": A3,
    "A4": A4,
    "A5": A5,
    "LETTER": LETTER,
}

NAMED_COLORS = {
    "black": "#000000",
    "white": "#FFFFFF",
    "red": "#FF0000",
    "green": "#008000",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
    "gray": "#808080",
    "grey": "#808080",
    "lightgray": "#D3D3D3",
    "lightgrey": "#D3D3D3",
    "darkgray": "#A9A9A9",
    "darkgrey": "#A9A9A9",
    "darkblue": "#00008B",
    "darkred": "#8B0000",
    "darkgreen": "#006400",
    "lightblue": "#ADD8E6",
    "lightyellow": "#FFFFE0",
    "orange": "#FFA500",
    "navy": "#000080",
    "silver": "#C0C0C0",
    "transparent": None,
}

_RGB_RE = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$", re.IGNORECASE)

_ALIGNMENTS = {
    TextAlign.START: TA_LEFT,
    TextAlign.LEFT: TA_LEFT,
    TextAlign.END: TA_RIGHT,
    TextAlign.RIGHT: TA_RIGHT,
    TextAlign.CENTER: TA_CENTER,
    TextAlign.JUSTIFY: TA_JUSTIFY,
}


def normalize_color(value: object) -> Optional[str]:
    """
    Normalise a style colour to ``#RRGGBB``.

    Accepts ``#rgb``, ``#rrggbb``, bare hex, ``rgb(r, g, b)`` and a few CSS
    names. Returns ``None`` for empty, ``transparent`` or unknown values.
    """
    token = str(value or "").strip()
    if not token:
        return None

    lowered = token.lower()
    if lowered in NAMED_COLORS:
        return NAMED_COLORS[lowered]

    match = _RGB_RE.match(token)
    if match:
        r, g, b = (min(int(part), 255) for part in match.groups())
        return f"#{r:02X}{g:02X}{b:02X}"

    hex_part = token[1:] if token.startswith("#") else token
    if len(hex_part) == 3 and all(ch in "0123456789abcdefABCDEF" for ch in hex_part):
        hex_part = "".join(ch * 2 for ch in hex_part)
    if len(hex_part) == 6 and all(ch in "0123456789abcdefABCDEF" for ch in hex_part):
        return f"#{hex_part.upper()}"

    logger.debug("Unknown colour '%s'", token)
    return None


def to_color(value: object, fallback: Optional[str] = "#000000") -> Optional[Color]:
    normalized = normalize_color(value)
    if normalized is None:
        return HexColor(fallback) if fallback else None
    return HexColor(normalized)


def alignment_of(text_align: Optional[TextAlign], default: int = TA_LEFT) -> int:
    if text_align is None:
        return default
    return _ALIGNMENTS.get(text_align, default)


def page_size_of(page_master: Optional[PageMasterStyle], fallback: str = "A4") -> Tuple[float, float]:
    """Page (width, height) in points."""
    if page_master is None:
        preset = PAGE_SIZES.get(fallback.upper())
        if preset is None:
            raise RenderingError("Unsupported page size preset", fallback)
        return float(preset[0]), float(preset[1])
    return to_points(page_master.page_width), to_points(page_master.page_height)


def margins_of(page_master: Optional[PageMasterStyle]) -> Tuple[float, float, float, float]:
    """(top, right, bottom, left) margins in points."""
    if page_master is None:
        default = to_points("2cm")
        return default, default, default, default
    return (
        to_points(page_master.margin_top),
        to_points(page_master.margin_right),
        to_points(page_master.margin_bottom),
        to_points(page_master.margin_left),
    )


__all__ = [
    "PAGE_SIZES",
    "alignment_of",
    "margins_of",
    "normalize_color",
    "page_size_of",
    "to_color",
]
