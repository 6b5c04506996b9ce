"""Utility helpers for quillpress."""

from .enums import LinefeedTreatment, ListStyleType, PageBreakVariant, Span, TextAlign
from .logger import get_logger
from .units import is_valid_border, is_valid_line_height, to_cm, to_points, validate_dimension

__all__ = [
    "LinefeedTreatment",
    "ListStyleType",
    "PageBreakVariant",
    "Span",
    "TextAlign",
    "get_logger",
    "is_valid_border",
    "is_valid_line_height",
    "to_cm",
    "to_points",
    "validate_dimension",
]
