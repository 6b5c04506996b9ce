"""Block-level content nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from ..exceptions import ModelError
from ..styles.style_sheet import StandardElementType
from .base import Element, ElementKind, InlineElement, Node, as_tuple, set_frozen
from .inline import TextRun

logger = logging.getLogger(__name__)

MIN_HEADLINE_LEVEL = 1
MAX_HEADLINE_LEVEL = 6


class SectionVariant(Enum):
    """Semantic flavour of a section; affects the style key and the PDF role."""

    SECTION = "Sect"
    NOTE = "Note"
    ASIDE = "Aside"

    @property
    def pdf_role(self) -> str:
        return self.value

    @property
    def style_name(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: Union[str, "SectionVariant", None]) -> Optional["SectionVariant"]:
        if value is None or isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError as exc:
            raise ModelError("Unknown section variant", str(value)) from exc


class PartVariant(Enum):
    """Part or article; only changes the PDF role."""

    PART = "Part"
    ARTICLE = "Article"

    @property
    def pdf_role(self) -> str:
        return self.value

    @property
    def style_name(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: Union[str, "PartVariant", None]) -> "PartVariant":
        if value is None:
            return cls.PART
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError as exc:
            raise ModelError("Unknown part variant", str(value)) from exc


class ListOrdering(str, Enum):
    ORDERED = "ordered"
    UNORDERED = "unordered"

    @classmethod
    def parse(cls, value: Union[str, "ListOrdering", None]) -> "ListOrdering":
        if value is None:
            return cls.UNORDERED
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ModelError("Unknown list ordering", str(value)) from exc


# ----------------------------------------------------------------------
# Text blocks
# ----------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Paragraph(Element):
    kind = ElementKind.PARAGRAPH

    inline_elements: Tuple[InlineElement, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "inline_elements", as_tuple(self.inline_elements))

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.P

    def children(self) -> Sequence[Node]:
        return self.inline_elements


@dataclass(frozen=True, eq=False)
class Headline(Element):
    """Heading of ``level`` 1-6; anything else is replaced by 1 with a warning."""

    kind = ElementKind.HEADLINE

    level: int = MIN_HEADLINE_LEVEL
    inline_elements: Tuple[InlineElement, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "level", _normalise_level(self.level))
        set_frozen(self, "inline_elements", as_tuple(self.inline_elements))

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.for_headline_level(self.level)

    def children(self) -> Sequence[Node]:
        return self.inline_elements

    @property
    def plain_text(self) -> str:
        """Run and link text of the heading, without footnote marks or page numbers."""
        return "".join(node.text for node in self.inline_elements if isinstance(node, TextRun)).strip()


def _normalise_level(level) -> int:
    try:
        value = int(level)
    except (TypeError, ValueError):
        logger.warning("Headline level %r is not a number; using %d", level, MIN_HEADLINE_LEVEL)
        return MIN_HEADLINE_LEVEL
    if not MIN_HEADLINE_LEVEL <= value <= MAX_HEADLINE_LEVEL:
        logger.warning(
            "Headline level %d outside %d-%d; using %d",
            value,
            MIN_HEADLINE_LEVEL,
            MAX_HEADLINE_LEVEL,
            MIN_HEADLINE_LEVEL,
        )
        return MIN_HEADLINE_LEVEL
    return value


# ----------------------------------------------------------------------
# Containers
# ----------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Section(Element):
    """
    Generic container.

    With a variant, styles are looked up under ``"<style_class>.<variant>"``
    first (e.g. ``"notice-box.note"``), then under the plain class.
    """

    kind = ElementKind.SECTION

    elements: Tuple[Element, ...] = ()
    variant: Optional[SectionVariant] = None
    alt_text: Optional[str] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "elements", as_tuple(self.elements))
        set_frozen(self, "variant", SectionVariant.parse(self.variant))

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.SECTION

    @property
    def pdf_role(self) -> str:
        return (self.variant or SectionVariant.SECTION).pdf_role

    def style_keys(self) -> Tuple[str, ...]:
        """Lookup keys in priority order; empty when there is no style class."""
        if self.style_class is None:
            return ()
        if self.variant is None:
            return (self.style_class,)
        return (f"{self.style_class}.{self.variant.style_name}", self.style_class)

    def children(self) -> Sequence[Node]:
        return self.elements


@dataclass(frozen=True, eq=False)
class Part(Element):
    kind = ElementKind.PART

    elements: Tuple[Element, ...] = ()
    variant: PartVariant = PartVariant.PART

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "elements", as_tuple(self.elements))
        set_frozen(self, "variant", PartVariant.parse(self.variant))

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.PART

    @property
    def pdf_role(self) -> str:
        return self.variant.pdf_role

    def children(self) -> Sequence[Node]:
        return self.elements


@dataclass(frozen=True, eq=False)
class ListItem(Element):
    """List entry with an optional inline ``label`` and block ``elements``."""

    kind = ElementKind.LIST_ITEM

    elements: Tuple[Element, ...] = ()
    label: Tuple[InlineElement, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "elements", as_tuple(self.elements))
        set_frozen(self, "label", as_tuple(self.label))

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.LI

    def children(self) -> Sequence[Node]:
        return self.label + self.elements


@dataclass(frozen=True, eq=False)
class SimpleList(Element):
    kind = ElementKind.LIST

    items: Tuple[ListItem, ...] = ()
    ordering: ListOrdering = ListOrdering.UNORDERED

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "items", as_tuple(self.items))
        set_frozen(self, "ordering", ListOrdering.parse(self.ordering))

    @property
    def is_ordered(self) -> bool:
        return self.ordering is ListOrdering.ORDERED

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.OL if self.is_ordered else StandardElementType.UL

    def children(self) -> Sequence[Node]:
        return self.items


@dataclass(frozen=True, eq=False)
class LayoutTable(Element):
    """Two blocks placed side by side. Either side may be empty."""

    kind = ElementKind.LAYOUT_TABLE

    element_left: Optional[Element] = None
    element_right: Optional[Element] = None

    def children(self) -> Sequence[Node]:
        return tuple(e for e in (self.element_left, self.element_right) if e is not None)


@dataclass(frozen=True, eq=False)
class BlockImage(Element):
    kind = ElementKind.BLOCK_IMAGE

    path: str = ""
    alt_text: Optional[str] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.path is None or not str(self.path).strip():
            raise ModelError("BlockImage path must not be empty")

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.IMAGE
