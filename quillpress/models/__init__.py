"""Content tree: document, page sequences, block and inline nodes."""

from .base import Element, ElementKind, InlineElement, Node
from .blocks import (
    BlockImage,
    Headline,
    LayoutTable,
    ListItem,
    ListOrdering,
    Paragraph,
    Part,
    PartVariant,
    Section,
    SectionVariant,
    SimpleList,
)
from .document import ContentArea, Document, InternalAddresses, Metadata, PageSequence
from .inline import Footnote, Hyperlink, PageNumber, TextRun
from .table import Table, TableCell, TableRow, TableSection

__all__ = [
    "BlockImage",
    "ContentArea",
    "Document",
    "Element",
    "ElementKind",
    "Footnote",
    "Headline",
    "Hyperlink",
    "InlineElement",
    "InternalAddresses",
    "LayoutTable",
    "ListItem",
    "ListOrdering",
    "Metadata",
    "Node",
    "PageNumber",
    "PageSequence",
    "Paragraph",
    "Part",
    "PartVariant",
    "Section",
    "SectionVariant",
    "SimpleList",
    "Table",
    "TableCell",
    "TableRow",
    "TableSection",
    "TextRun",
]
