"""Enumerations used by style property bags."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class StyleEnum(str, Enum):
    """Base for style enums read leniently from style sheet values."""

    @classmethod
    def from_string(cls, value: Optional[str]):
        """Return the member whose value matches ``value`` case-insensitively, else ``None``."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        needle = str(value).strip().lower()
        for member in cls:
            if member.value == needle:
                return member
        return None


class TextAlign(StyleEnum):
    """Horizontal alignment of block text."""

    START = "start"
    END = "end"
    CENTER = "center"
    JUSTIFY = "justify"
    LEFT = "left"
    RIGHT = "right"


class LinefeedTreatment(StyleEnum):
    """How line feeds in text content are handled."""

    PRESERVE = "preserve"
    TREAT_AS_SPACE = "treat-as-space"
    TREAT_AS_ZERO_WIDTH_SPACE = "treat-as-zero-width-space"
    REMOVE = "remove"
    IGNORE = "ignore"


class PageBreakVariant(StyleEnum):
    """Break behaviour before or after a block."""

    AUTO = "auto"
    PAGE = "page"
    COLUMN = "column"
    EVEN_PAGE = "even-page"
    ODD_PAGE = "odd-page"


class ListStyleType(StyleEnum):
    """Marker drawn in front of list items."""

    NONE = "none"
    BULLET = "bullet"
    CIRCLE = "circle"
    SQUARE = "square"
    NUMBER = "number"
    LOWER_ALPHA = "lower-alpha"
    UPPER_ALPHA = "upper-alpha"

    @property
    def is_ordered(self) -> bool:
        return self in (ListStyleType.NUMBER, ListStyleType.LOWER_ALPHA, ListStyleType.UPPER_ALPHA)


class Span(StyleEnum):
    """Column spanning of a block in multi-column page masters."""

    NONE = "none"
    ALL = "all"
