"""
Style property bags.

One bag class per content-node kind. Every field is optional; ``None`` means
"unset". Only fields declared with ``inherit=True`` are filled from the parent
bag during the cascade; spacing, padding, borders and breaks stay on the node
that declares them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Type, TypeVar

from ..utils.enums import LinefeedTreatment, ListStyleType, PageBreakVariant, Span, TextAlign
from ..utils.units import is_valid_border, is_valid_line_height

logger = logging.getLogger(__name__)

B = TypeVar("B", bound="StyleProperties")


# ----------------------------------------------------------------------
# Field parsers
# ----------------------------------------------------------------------


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "1", "always"):
            return True
        if lowered in ("false", "no", "0", "auto"):
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return None


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_number(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text.endswith("pt"):
        text = text[:-2]
    try:
        number = float(text)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


def _parse_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _parse_border(value: Any) -> Optional[str]:
    text = _parse_str(value)
    if text is not None and not is_valid_border(text):
        logger.warning("Border value '%s' is not a valid '<width> <style> <color>' shorthand", text)
    return text


def _parse_line_height(value: Any) -> Optional[str]:
    text = _parse_str(value)
    if text is not None and not is_valid_line_height(text):
        logger.warning("Line height '%s' is not valid; keeping it as given", text)
    return text


def _opt(parser: Callable[[Any], Any] = _parse_str, inherit: bool = False):
    return field(default=None, metadata={"parse": parser, "inherit": inherit})


def _enum(enum_cls, inherit: bool = False):
    return field(default=None, metadata={"parse": enum_cls.from_string, "enum": enum_cls, "inherit": inherit})


def _inherited(value_field) -> bool:
    return bool(value_field.metadata.get("inherit"))


def wire_key(name: str) -> str:
    """Map a field name to its style-sheet key (``space_before`` -> ``space-before``)."""
    return name.replace("_", "-")


# ----------------------------------------------------------------------
# Base
# ----------------------------------------------------------------------


@dataclass(slots=True)
class StyleProperties:
    """Common behaviour of every style bag."""

    kind: ClassVar[str] = "base"

    def copy(self: B) -> B:
        """Return an independent bag with identical field values."""
        return replace(self)

    def merge_with(self: B, parent: Optional["StyleProperties"]) -> B:
        """
        Fill every unset inheritable field from the same-named field of ``parent``.

        Fields already set are never touched; non-inheritable fields and
        fields the parent does not carry stay unset. Returns ``self``.
        """
        if parent is None:
            return self
        if not isinstance(parent, StyleProperties):
            logger.debug("Ignoring merge with non-style object %r", type(parent).__name__)
            return self

        parent_names = parent.field_names()
        for f in fields(self):
            if not _inherited(f) or f.name not in parent_names:
                continue
            if getattr(self, f.name) is None:
                inherited = getattr(parent, f.name)
                if inherited is not None:
                    setattr(self, f.name, inherited)
        return self

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    @classmethod
    def inheritable_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls) if _inherited(f))

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, keyed by their style-sheet names."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            result[wire_key(f.name)] = value
        return result

    @classmethod
    def from_dict(cls: Type[B], data: Optional[Mapping[str, Any]]) -> B:
        """
        Build a bag from a mapping keyed by style-sheet names or field names.

        Values that cannot be parsed are dropped with a warning; unknown keys
        are ignored.
        """
        bag = cls()
        if not data:
            return bag

        by_key = {wire_key(f.name): f for f in fields(cls)}
        by_key.update({f.name: f for f in fields(cls)})

        for key, raw in data.items():
            f = by_key.get(key)
            if f is None:
                logger.debug("Ignoring unknown %s style property '%s'", cls.kind, key)
                continue
            if raw is None:
                continue
            parser = f.metadata.get("parse", _parse_str)
            value = parser(raw)
            if value is None:
                logger.warning("Invalid value %r for %s style property '%s'", raw, cls.kind, key)
                continue
            setattr(bag, f.name, value)
        return bag


# ----------------------------------------------------------------------
# Block bags
# ----------------------------------------------------------------------


@dataclass(slots=True)
class ElementBlockStyleProperties(StyleProperties):
    """
    Spacing, indentation, padding, borders and breaks shared by all blocks.

    Only the background colour cascades; the rest describes the box of the
    block itself.
    """

    kind: ClassVar[str] = "block"

    space_before: Optional[str] = _opt()
    space_after: Optional[str] = _opt()
    start_indent: Optional[str] = _opt()
    end_indent: Optional[str] = _opt()
    padding: Optional[str] = _opt()
    padding_top: Optional[str] = _opt()
    padding_bottom: Optional[str] = _opt()
    padding_left: Optional[str] = _opt()
    padding_right: Optional[str] = _opt()
    border: Optional[str] = _opt(_parse_border)
    border_top: Optional[str] = _opt(_parse_border)
    border_bottom: Optional[str] = _opt(_parse_border)
    border_left: Optional[str] = _opt(_parse_border)
    border_right: Optional[str] = _opt(_parse_border)
    keep_with_next: Optional[bool] = _opt(_parse_bool)
    break_before: Optional[PageBreakVariant] = _enum(PageBreakVariant)
    break_after: Optional[PageBreakVariant] = _enum(PageBreakVariant)
    background_color: Optional[str] = _opt(inherit=True)


@dataclass(slots=True)
class TextBlockStyleProperties(ElementBlockStyleProperties):
    """Block bag that also carries text formatting."""

    kind: ClassVar[str] = "text-block"

    text_style_name: Optional[str] = _opt(inherit=True)
    font_family: Optional[str] = _opt(inherit=True)
    font_size: Optional[float] = _opt(_parse_number, inherit=True)
    font_weight: Optional[str] = _opt(inherit=True)
    font_style: Optional[str] = _opt(inherit=True)
    text_color: Optional[str] = _opt(inherit=True)
    line_height: Optional[str] = _opt(_parse_line_height, inherit=True)
    text_align: Optional[TextAlign] = _enum(TextAlign, inherit=True)
    span: Optional[Span] = _enum(Span)
    linefeed_treatment: Optional[LinefeedTreatment] = _enum(LinefeedTreatment, inherit=True)


@dataclass(slots=True)
class ParagraphStyleProperties(TextBlockStyleProperties):
    kind: ClassVar[str] = "paragraph"

    text_indent: Optional[str] = _opt(inherit=True)
    text_align_last: Optional[TextAlign] = _enum(TextAlign, inherit=True)
    hyphenate: Optional[bool] = _opt(_parse_bool, inherit=True)
    language: Optional[str] = _opt(inherit=True)
    orphans: Optional[int] = _opt(_parse_int, inherit=True)
    widows: Optional[int] = _opt(_parse_int, inherit=True)


@dataclass(slots=True)
class HeadlineStyleProperties(TextBlockStyleProperties):
    kind: ClassVar[str] = "headline"


@dataclass(slots=True)
class FootnoteStyleProperties(TextBlockStyleProperties):
    kind: ClassVar[str] = "footnote"


@dataclass(slots=True)
class ListStyleProperties(TextBlockStyleProperties):
    """List geometry and marker settings."""

    kind: ClassVar[str] = "list"

    DEFAULT_DISTANCE: ClassVar[str] = "1.5em"
    INSIDE_DISTANCE: ClassVar[str] = "0pt"
    DEFAULT_SEPARATION: ClassVar[str] = "0.5em"

    provisional_distance_between_starts: Optional[str] = _opt()
    provisional_label_separation: Optional[str] = _opt()
    list_style_type: Optional[ListStyleType] = _enum(ListStyleType)
    list_style_image: Optional[str] = _opt()
    list_style_position: Optional[str] = _opt()

    @property
    def effective_distance_between_starts(self) -> str:
        if self.provisional_distance_between_starts is not None:
            return self.provisional_distance_between_starts
        if (self.list_style_position or "").lower() == "inside":
            return self.INSIDE_DISTANCE
        return self.DEFAULT_DISTANCE

    @property
    def effective_label_separation(self) -> str:
        return self.provisional_label_separation or self.DEFAULT_SEPARATION


@dataclass(slots=True)
class ListItemStyleProperties(TextBlockStyleProperties):
    kind: ClassVar[str] = "list-item"

    list_style_type: Optional[ListStyleType] = _enum(ListStyleType, inherit=True)


@dataclass(slots=True)
class TableStyleProperties(TextBlockStyleProperties):
    kind: ClassVar[str] = "table"

    border_collapse: Optional[str] = _opt()
    width: Optional[str] = _opt()


@dataclass(slots=True)
class TableCellStyleProperties(TextBlockStyleProperties):
    """Cells take the box settings of their table unless they set their own."""

    kind: ClassVar[str] = "table-cell"

    padding: Optional[str] = _opt(inherit=True)
    border: Optional[str] = _opt(_parse_border, inherit=True)
    background_color: Optional[str] = _opt(inherit=True)
    vertical_align: Optional[str] = _opt(inherit=True)


@dataclass(slots=True)
class SectionStyleProperties(ElementBlockStyleProperties):
    kind: ClassVar[str] = "section"


@dataclass(slots=True)
class PartStyleProperties(ElementBlockStyleProperties):
    kind: ClassVar[str] = "part"

    page_break_before: Optional[PageBreakVariant] = _enum(PageBreakVariant)


@dataclass(slots=True)
class LayoutTableStyleProperties(ElementBlockStyleProperties):
    kind: ClassVar[str] = "layout-table"


@dataclass(slots=True)
class BlockImageStyleProperties(ElementBlockStyleProperties):
    kind: ClassVar[str] = "block-image"

    content_width: Optional[str] = _opt()
    block_width: Optional[str] = _opt()
    scaling: Optional[str] = _opt()
    alignment: Optional[str] = _opt()


# ----------------------------------------------------------------------
# Inline bags
# ----------------------------------------------------------------------


@dataclass(slots=True)
class InlineElementStyleProperties(StyleProperties):
    kind: ClassVar[str] = "inline"

    background_color: Optional[str] = _opt(inherit=True)


@dataclass(slots=True)
class InlineTextElementStyleProperties(InlineElementStyleProperties):
    kind: ClassVar[str] = "inline-text"

    text_style_name: Optional[str] = _opt(inherit=True)
    font_family: Optional[str] = _opt(inherit=True)
    font_size: Optional[float] = _opt(_parse_number, inherit=True)
    font_weight: Optional[str] = _opt(inherit=True)
    font_style: Optional[str] = _opt(inherit=True)
    text_decoration: Optional[str] = _opt(inherit=True)
    text_color: Optional[str] = _opt(inherit=True)
    linefeed_treatment: Optional[LinefeedTreatment] = _enum(LinefeedTreatment, inherit=True)


@dataclass(slots=True)
class TextRunStyleProperties(InlineTextElementStyleProperties):
    kind: ClassVar[str] = "text-run"

    baseline_shift: Optional[str] = _opt()
