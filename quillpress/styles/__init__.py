"""Style sheet records, property bags and the resolver context."""

from .context import StyleResolverContext
from .page_master import PageMasterStyle, PageSize
from .properties import (
    BlockImageStyleProperties,
    ElementBlockStyleProperties,
    FootnoteStyleProperties,
    HeadlineStyleProperties,
    InlineElementStyleProperties,
    InlineTextElementStyleProperties,
    LayoutTableStyleProperties,
    ListItemStyleProperties,
    ListStyleProperties,
    ParagraphStyleProperties,
    PartStyleProperties,
    SectionStyleProperties,
    StyleProperties,
    TableCellStyleProperties,
    TableStyleProperties,
    TextBlockStyleProperties,
    TextRunStyleProperties,
)
from .style_sheet import (
    DefaultStyles,
    ElementStyle,
    ElementTargetType,
    StandardElementType,
    StyleMap,
    StyleSheet,
    build_style_map,
)
from .text_style import TextStyle

__all__ = [
    "BlockImageStyleProperties",
    "DefaultStyles",
    "ElementBlockStyleProperties",
    "ElementStyle",
    "ElementTargetType",
    "FootnoteStyleProperties",
    "HeadlineStyleProperties",
    "InlineElementStyleProperties",
    "InlineTextElementStyleProperties",
    "LayoutTableStyleProperties",
    "ListItemStyleProperties",
    "ListStyleProperties",
    "PageMasterStyle",
    "PageSize",
    "ParagraphStyleProperties",
    "PartStyleProperties",
    "SectionStyleProperties",
    "StandardElementType",
    "StyleMap",
    "StyleProperties",
    "StyleResolverContext",
    "StyleSheet",
    "TableCellStyleProperties",
    "TableStyleProperties",
    "TextBlockStyleProperties",
    "TextRunStyleProperties",
    "TextStyle",
    "build_style_map",
]
