"""
Style sheet records: element styles, standard element kinds and their defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Collection, Dict, Iterable, List, Mapping, Optional, Type

from ..exceptions import StyleError
from .page_master import PageMasterStyle
from .properties import (
    BlockImageStyleProperties,
    FootnoteStyleProperties,
    HeadlineStyleProperties,
    LayoutTableStyleProperties,
    ListItemStyleProperties,
    ListStyleProperties,
    ParagraphStyleProperties,
    PartStyleProperties,
    SectionStyleProperties,
    StyleProperties,
    TableCellStyleProperties,
    TableStyleProperties,
    TextRunStyleProperties,
)
from .text_style import TextStyle

logger = logging.getLogger(__name__)

StyleMap = Dict[str, "ElementStyle"]


class ElementTargetType(str, Enum):
    """Node kinds an element style can target; each maps to one bag class."""

    PARAGRAPH = "paragraph"
    HEADLINE = "headline"
    LIST = "list"
    LIST_ITEM = "list-item"
    TABLE = "table"
    TABLE_CELL = "table-cell"
    SECTION = "section"
    PART = "part"
    TEXT_RUN = "text-run"
    HYPERLINK = "hyperlink"
    FOOTNOTE = "footnote"
    BLOCK_IMAGE = "block-image"
    LAYOUT_TABLE = "layout-table"

    @property
    def properties_class(self) -> Type[StyleProperties]:
        return _PROPERTIES_BY_TARGET[self]

    @classmethod
    def from_key(cls, key: str) -> "ElementTargetType":
        try:
            return cls(str(key).strip().lower())
        except ValueError as exc:
            raise StyleError("Unknown target element", str(key)) from exc


_PROPERTIES_BY_TARGET: Dict[ElementTargetType, Type[StyleProperties]] = {
    ElementTargetType.PARAGRAPH: ParagraphStyleProperties,
    ElementTargetType.HEADLINE: HeadlineStyleProperties,
    ElementTargetType.LIST: ListStyleProperties,
    ElementTargetType.LIST_ITEM: ListItemStyleProperties,
    ElementTargetType.TABLE: TableStyleProperties,
    ElementTargetType.TABLE_CELL: TableCellStyleProperties,
    ElementTargetType.SECTION: SectionStyleProperties,
    ElementTargetType.PART: PartStyleProperties,
    ElementTargetType.TEXT_RUN: TextRunStyleProperties,
    ElementTargetType.HYPERLINK: TextRunStyleProperties,
    ElementTargetType.FOOTNOTE: FootnoteStyleProperties,
    ElementTargetType.BLOCK_IMAGE: BlockImageStyleProperties,
    ElementTargetType.LAYOUT_TABLE: LayoutTableStyleProperties,
}


class StandardElementType(Enum):
    """Canonical node roles used for default-style fallback."""

    H1 = ("h1", ElementTargetType.HEADLINE)
    H2 = ("h2", ElementTargetType.HEADLINE)
    H3 = ("h3", ElementTargetType.HEADLINE)
    H4 = ("h4", ElementTargetType.HEADLINE)
    H5 = ("h5", ElementTargetType.HEADLINE)
    H6 = ("h6", ElementTargetType.HEADLINE)
    P = ("p", ElementTargetType.PARAGRAPH)
    UL = ("ul", ElementTargetType.LIST)
    OL = ("ol", ElementTargetType.LIST)
    LI = ("li", ElementTargetType.LIST_ITEM)
    TABLE = ("table", ElementTargetType.TABLE)
    IMAGE = ("image", ElementTargetType.BLOCK_IMAGE)
    HYPERLINK = ("hyperlink", ElementTargetType.HYPERLINK)
    FOOTNOTE = ("footnote", ElementTargetType.FOOTNOTE)
    PART = ("part", ElementTargetType.PART)
    SECTION = ("section", ElementTargetType.SECTION)

    @property
    def json_key(self) -> str:
        return self.value[0]

    @property
    def target_type(self) -> ElementTargetType:
        return self.value[1]

    @property
    def default_style_name(self) -> str:
        return f"{self.json_key}-default"

    @classmethod
    def from_json_key(cls, key: str) -> "StandardElementType":
        for member in cls:
            if member.json_key == key:
                return member
        raise StyleError("Unknown standard element type", str(key))

    @classmethod
    def for_headline_level(cls, level: int) -> "StandardElementType":
        return (cls.H1, cls.H2, cls.H3, cls.H4, cls.H5, cls.H6)[level - 1]


class DefaultStyles:
    """Table mapping standard element kinds to the style used when no class matches."""

    def __init__(self, entries: Optional[Mapping[StandardElementType, str]] = None):
        self._entries: Dict[StandardElementType, str] = dict(entries or {})

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, str]]) -> "DefaultStyles":
        """Build from ``{"p": "body-text", ...}``; unknown keys are skipped with a warning."""
        defaults = cls()
        for key, style_name in (data or {}).items():
            try:
                element_type = StandardElementType.from_json_key(key)
            except StyleError:
                logger.warning("Unknown standard element type in default styles: %s", key)
                continue
            defaults.set(element_type, style_name)
        return defaults

    def set(self, element_type: StandardElementType, style_name: str) -> None:
        self._entries[element_type] = style_name

    def get(self, element_type: StandardElementType) -> Optional[str]:
        return self._entries.get(element_type)

    def style_name_for(self, element_type: StandardElementType) -> str:
        """Configured name, or the conventional ``<key>-default`` name."""
        return self._entries.get(element_type) or element_type.default_style_name

    def to_dict(self) -> Dict[str, str]:
        return {element_type.json_key: name for element_type, name in self._entries.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DefaultStyles({self.to_dict()!r})"


@dataclass(frozen=True, slots=True)
class ElementStyle:
    """A named style entry: ``name -> properties`` for one target kind."""

    name: str
    target_element: ElementTargetType
    properties: StyleProperties

    def __post_init__(self) -> None:
        if self.name is None or not str(self.name).strip():
            raise StyleError("ElementStyle 'name' is required")
        if not isinstance(self.target_element, ElementTargetType):
            object.__setattr__(self, "target_element", ElementTargetType.from_key(self.target_element))
        expected = self.target_element.properties_class
        if type(self.properties) is not expected:
            raise StyleError(
                f"Properties of style '{self.name}' do not match target '{self.target_element.value}'",
                f"expected {expected.__name__}, got {type(self.properties).__name__}",
            )

    def validate(self, text_style_names: Collection[str]) -> bool:
        """Warn when the bag names a text style the sheet does not define; True if it resolves."""
        text_style_name = getattr(self.properties, "text_style_name", None)
        if text_style_name is None or text_style_name in text_style_names:
            return True
        logger.warning(
            "Element style '%s' refers to undefined text style '%s'; the base font is used instead",
            self.name,
            text_style_name,
        )
        return False


def build_style_map(element_styles: Iterable[ElementStyle]) -> StyleMap:
    """Index element styles by name; a later duplicate replaces an earlier one."""
    style_map: StyleMap = {}
    for element_style in element_styles:
        if element_style.name in style_map:
            logger.warning("Duplicate element style '%s'; the later definition wins", element_style.name)
        style_map[element_style.name] = element_style
    return style_map


@dataclass(slots=True)
class StyleSheet:
    """Text styles, element styles, page masters and the standard-kind defaults table."""

    text_styles: List[TextStyle] = field(default_factory=list)
    element_styles: List[ElementStyle] = field(default_factory=list)
    page_master_styles: List[PageMasterStyle] = field(default_factory=list)
    default_styles: DefaultStyles = field(default_factory=DefaultStyles)

    def find_text_style(self, name: Optional[str]) -> Optional[TextStyle]:
        if name is None:
            return None
        return next((ts for ts in self.text_styles if ts.name == name), None)

    def find_page_master(self, name: Optional[str]) -> Optional[PageMasterStyle]:
        if name is None:
            return None
        return next((pm for pm in self.page_master_styles if pm.name == name), None)

    def style_map(self) -> StyleMap:
        return build_style_map(self.element_styles)

    def validate(self) -> None:
        """
        Check the sheet is usable for rendering.

        Raises:
            StyleError: If no page master or no text style is defined, or a
                page master has invalid geometry
        """
        if not self.page_master_styles:
            logger.error("No page master styles defined in the style sheet")
            raise StyleError("No page master styles defined in the style sheet")
        if not self.text_styles:
            logger.error("No text styles defined in the style sheet")
            raise StyleError("No text styles defined in the style sheet")
        for page_master in self.page_master_styles:
            page_master.validate()
        text_style_names = {text_style.name for text_style in self.text_styles}
        for element_style in self.element_styles:
            element_style.validate(text_style_names)
        logger.debug(
            "Style sheet valid: %d text styles, %d element styles, %d page masters",
            len(self.text_styles),
            len(self.element_styles),
            len(self.page_master_styles),
        )
