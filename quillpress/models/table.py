"""Tables: ``Table -> TableSection -> TableRow -> TableCell``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..exceptions import ModelError
from ..styles.style_sheet import StandardElementType
from .base import Element, ElementKind, Node, as_tuple, set_frozen


@dataclass(frozen=True, eq=False)
class TableCell(Element):
    """Cell holding block elements; spans default to 1."""

    kind = ElementKind.TABLE_CELL

    elements: Tuple[Element, ...] = ()
    colspan: int = 1
    rowspan: int = 1

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "elements", as_tuple(self.elements))
        set_frozen(self, "colspan", _span(self.colspan, "colspan"))
        set_frozen(self, "rowspan", _span(self.rowspan, "rowspan"))

    def children(self) -> Sequence[Node]:
        return self.elements


def _span(value, name: str) -> int:
    if value is None:
        return 1
    try:
        span = int(value)
    except (TypeError, ValueError) as exc:
        raise ModelError(f"TableCell {name} must be an integer", repr(value)) from exc
    if span < 1:
        raise ModelError(f"TableCell {name} must be at least 1", str(span))
    return span


@dataclass(frozen=True, eq=False)
class TableRow(Node):
    kind = ElementKind.TABLE_ROW

    cells: Tuple[TableCell, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "cells", as_tuple(self.cells))

    def children(self) -> Sequence[Node]:
        return self.cells


@dataclass(frozen=True, eq=False)
class TableSection(Node):
    """Header, body or footer row group."""

    kind = ElementKind.TABLE_SECTION

    rows: Tuple[TableRow, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "rows", as_tuple(self.rows))

    def children(self) -> Sequence[Node]:
        return self.rows


@dataclass(frozen=True, eq=False)
class Table(Element):
    """
    Table with column widths and optional header, body and footer sections.

    ``columns`` holds one width per column (``"3cm"``, ``"25%"``, ``"*"``).
    """

    kind = ElementKind.TABLE

    columns: Tuple[str, ...] = ()
    header: Optional[TableSection] = None
    body: Optional[TableSection] = None
    footer: Optional[TableSection] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        set_frozen(self, "columns", tuple(str(c) for c in as_tuple(self.columns)))

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.TABLE

    @property
    def sections(self) -> Tuple[TableSection, ...]:
        return tuple(s for s in (self.header, self.body, self.footer) if s is not None)

    @property
    def column_count(self) -> int:
        if self.columns:
            return len(self.columns)
        widest = 0
        for section in self.sections:
            for row in section.rows:
                widest = max(widest, sum(cell.colspan for cell in row.cells))
        return widest

    def children(self) -> Sequence[Node]:
        return self.sections
