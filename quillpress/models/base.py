"""
Base classes for content tree nodes.

Nodes are frozen dataclasses compared by identity, so they can key the
resolved-style mapping produced by the resolver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, Iterator, Optional, Sequence, Tuple, TypeVar

from ..exceptions import ModelError

T = TypeVar("T")


class ElementKind(str, Enum):
    """Discriminator of every node kind in the content tree."""

    PARAGRAPH = "paragraph"
    HEADLINE = "headline"
    LIST = "list"
    LIST_ITEM = "list-item"
    TABLE = "table"
    TABLE_SECTION = "table-section"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    SECTION = "section"
    PART = "part"
    LAYOUT_TABLE = "layout-table"
    BLOCK_IMAGE = "block-image"
    TEXT_RUN = "text-run"
    HYPERLINK = "hyperlink"
    PAGE_NUMBER = "page-number"
    FOOTNOTE = "footnote"


def check_style_class(style_class: Optional[str], owner: str) -> Optional[str]:
    """``None`` means pure inheritance; a supplied class must be non-blank."""
    if style_class is None:
        return None
    if not isinstance(style_class, str) or not style_class.strip():
        raise ModelError(f"{owner} style_class must not be empty when given", repr(style_class))
    return style_class


def as_tuple(items: Optional[Iterable[T]]) -> Tuple[T, ...]:
    """Normalise ``None`` to an empty sequence and freeze the rest."""
    if items is None:
        return ()
    return tuple(items)


def set_frozen(node: object, name: str, value: object) -> None:
    object.__setattr__(node, name, value)


@dataclass(frozen=True, eq=False)
class Node:
    """Common base of block and inline content nodes."""

    kind: ClassVar[ElementKind]

    style_class: Optional[str] = field(default=None, kw_only=True)

    def __post_init__(self) -> None:
        check_style_class(self.style_class, type(self).__name__)

    def children(self) -> Sequence["Node"]:
        """Direct child nodes in document order."""
        return ()

    def walk(self) -> Iterator["Node"]:
        """This node and all descendants, pre-order."""
        yield self
        for child in self.children():
            yield from child.walk()


@dataclass(frozen=True, eq=False)
class Element(Node):
    """Block-level node."""


@dataclass(frozen=True, eq=False)
class InlineElement(Node):
    """Inline node living inside a text block, list label or footnote."""
