"""Dimension, line-height and border validation plus unit conversion."""

from __future__ import annotations

import logging
import re
from typing import Optional

from reportlab.lib.units import cm as CM
from reportlab.lib.units import inch as INCH
from reportlab.lib.units import mm as MM

from ..exceptions import StyleError

logger = logging.getLogger(__name__)

DEFAULT_UNIT = "cm"
SUPPORTED_UNITS = ("cm", "mm", "in", "pt", "px")

_DIMENSION_RE = re.compile(r"^([0-9]*\.?[0-9]+)\s*([a-zA-Z]*)$")
_LINE_HEIGHT_RE = re.compile(r"^[0-9]*\.?[0-9]+\s*(pt|px|mm|cm|in|em|%)?$")

_BORDER_WIDTH = r"(?:[0-9]*\.?[0-9]+\s*(?:cm|mm|in|pt|px|em)|thin|medium|thick)"
_BORDER_STYLE = r"(?:solid|dashed|dotted|double|groove|ridge|inset|outset)"
_BORDER_COLOR = r"(?:#[0-9a-fA-F]{6}|#[0-9a-fA-F]{3}|[a-zA-Z]+|rgb\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*\))"
_BORDER_RE = re.compile(rf"^{_BORDER_WIDTH}\s+{_BORDER_STYLE}\s+{_BORDER_COLOR}$", re.IGNORECASE)

# centimetres per unit
_CM_FACTORS = {
    "cm": 1.0,
    "mm": 0.1,
    "in": 2.54,
    "pt": 0.0353,
    "px": 0.0264,
}

# points per unit
_POINT_FACTORS = {
    "cm": CM,
    "mm": MM,
    "in": INCH,
    "pt": 1.0,
    "px": 0.75,
}


def validate_dimension(value: Optional[str], name: str = "dimension") -> Optional[str]:
    """
    Validate a dimension string such as ``"2.5cm"``.

    A missing or unsupported unit is replaced with ``cm``.

    Args:
        value: Dimension string or ``None``
        name: Parameter name used in messages

    Returns:
        The normalised dimension, or ``None`` for ``None`` input

    Raises:
        StyleError: If the value is not a number followed by an optional unit
    """
    if value is None:
        return None
    text = str(value).strip()
    match = _DIMENSION_RE.match(text)
    if not match:
        raise StyleError(f"Invalid dimension for '{name}'", text)

    number, unit = match.group(1), match.group(2).lower()
    if unit not in SUPPORTED_UNITS:
        if unit:
            logger.warning("Unsupported unit '%s' for '%s'; using '%s'", unit, name, DEFAULT_UNIT)
        else:
            logger.warning("No unit given for '%s' (%s); using '%s'", name, text, DEFAULT_UNIT)
        unit = DEFAULT_UNIT
    return f"{number}{unit}"


def _split(value: str) -> tuple[float, str]:
    match = _DIMENSION_RE.match(str(value).strip())
    if not match:
        raise StyleError("Invalid dimension", str(value))
    unit = match.group(2).lower() or DEFAULT_UNIT
    if unit not in SUPPORTED_UNITS:
        unit = DEFAULT_UNIT
    return float(match.group(1)), unit


def to_cm(value: Optional[str]) -> float:
    """Convert a dimension string to centimetres (``None`` is 0)."""
    if value is None:
        return 0.0
    number, unit = _split(value)
    return number * _CM_FACTORS[unit]


def to_points(value: Optional[str], default: float = 0.0, font_size: float = 12.0) -> float:
    """
    Convert a dimension string to PDF points.

    ``em`` is resolved against ``font_size`` and ``%`` against ``font_size`` too,
    which is what line heights and list indents need. Unparseable values give
    ``default``.
    """
    if value is None:
        return default
    text = str(value).strip()
    if text.endswith("%"):
        try:
            return float(text[:-1]) / 100.0 * font_size
        except ValueError:
            return default
    if text.endswith("em"):
        try:
            return float(text[:-2]) * font_size
        except ValueError:
            return default
    try:
        number, unit = _split(text)
    except StyleError:
        return default
    return number * _POINT_FACTORS[unit]


def is_valid_line_height(value: Optional[str]) -> bool:
    """``normal`` or a number with an optional pt/px/mm/cm/in/em/% unit."""
    if value is None:
        return False
    text = str(value).strip().lower()
    return text == "normal" or bool(_LINE_HEIGHT_RE.match(text))


def is_valid_border(value: Optional[str]) -> bool:
    """Check a ``<width> <style> <color>`` border shorthand."""
    if value is None:
        return True
    text = str(value).strip()
    if text == "" or text.lower() in ("none", "hidden"):
        return True
    return bool(_BORDER_RE.match(text))


def parse_border(value: Optional[str]) -> Optional[tuple[float, str, str]]:
    """
    Split a border shorthand into ``(width_pt, style, color)``.

    Returns ``None`` for empty, ``none``, ``hidden`` or invalid borders. A bare
    width such as ``"1px"`` is accepted as a solid black border.
    """
    if value is None:
        return None
    text = str(value).strip()
    if text == "" or text.lower() in ("none", "hidden"):
        return None

    parts = text.split()
    keyword_widths = {"thin": 0.5, "medium": 1.0, "thick": 2.0}
    width_token = parts[0].lower()
    if width_token in keyword_widths:
        width = keyword_widths[width_token]
    else:
        width = to_points(width_token, default=-1.0)
        if width < 0:
            logger.debug("Ignoring unparseable border '%s'", text)
            return None

    style = parts[1].lower() if len(parts) > 1 else "solid"
    color = " ".join(parts[2:]) if len(parts) > 2 else "#000000"
    return width, style, color
