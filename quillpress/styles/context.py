"""Context threaded through a style resolution pass."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from .properties import StyleProperties
from .style_sheet import StyleMap, StyleSheet


@dataclass(frozen=True, slots=True)
class StyleResolverContext:
    """Immutable ``{style_map, style_sheet, parent_style}`` triple."""

    style_sheet: StyleSheet
    style_map: StyleMap
    parent_style: Optional[StyleProperties] = None

    @classmethod
    def root(cls, style_sheet: StyleSheet, style_map: Optional[StyleMap] = None) -> "StyleResolverContext":
        if style_map is None:
            style_map = style_sheet.style_map()
        return cls(style_sheet=style_sheet, style_map=style_map, parent_style=None)

    def create_child_context(self, resolved_style: Optional[StyleProperties]) -> "StyleResolverContext":
        """Same sheet and map, with ``resolved_style`` as the new parent style."""
        return replace(self, parent_style=resolved_style)
