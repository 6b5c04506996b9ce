"""
Style resolution.

Walks a content tree once, pre-order, and computes the final style bag of
every node (except page numbers). Lookup order for a node:

1. its style class (for variant sections ``"class.variant"`` first) in the style map
2. the default style of its standard element kind
3. an empty bag of the right kind

The chosen bag is copied and merged with the parent's resolved style. The
content tree is not modified; results are returned in a :class:`ResolvedStyles`
mapping keyed by node identity.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, Optional, Type

from ..config import ResolverConfig
from ..models import (
    BlockImage,
    Document,
    Element,
    Footnote,
    Headline,
    Hyperlink,
    LayoutTable,
    ListItem,
    Node,
    PageNumber,
    Paragraph,
    Part,
    Section,
    SimpleList,
    Table,
    TableCell,
    TableRow,
    TableSection,
    TextRun,
)
from ..styles.context import StyleResolverContext
from ..styles.properties import (
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
from ..styles.style_sheet import DefaultStyles, StandardElementType, StyleSheet

logger = logging.getLogger(__name__)


class ResolvedStyles(Mapping):
    """Resolved style bag per node, keyed by node identity."""

    def __init__(self) -> None:
        self._styles: Dict[Node, StyleProperties] = {}

    def record(self, node: Node, style: StyleProperties) -> None:
        if node in self._styles:
            logger.warning(
                "%s instance appears more than once in the tree; keeping the last resolved style",
                type(node).__name__,
            )
        self._styles[node] = style

    def style_for(self, node: Node) -> StyleProperties:
        """Resolved bag of ``node``; ``KeyError`` when it was never resolved."""
        try:
            return self._styles[node]
        except KeyError:
            raise KeyError(f"No resolved style for {type(node).__name__}") from None

    def __getitem__(self, node: Node) -> StyleProperties:
        return self._styles[node]

    def __iter__(self) -> Iterator[Node]:
        return iter(self._styles)

    def __len__(self) -> int:
        return len(self._styles)

    def __repr__(self) -> str:
        return f"ResolvedStyles({len(self._styles)} nodes)"


class StyleResolver:
    """
    Recursive resolver.

    ``default_styles`` replaces the style sheet's own standard-kind table when
    given.
    """

    def __init__(self, default_styles: Optional[DefaultStyles] = None, config: Optional[ResolverConfig] = None):
        self.default_styles = default_styles
        self.config = config or ResolverConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve_all(
        self, nodes: Iterable[Node], context: StyleResolverContext, out: ResolvedStyles
    ) -> None:
        for node in nodes:
            self.resolve(node, context, out)

    def resolve(self, node: Node, context: StyleResolverContext, out: ResolvedStyles) -> StyleResolverContext:
        """
        Resolve ``node`` and its subtree, recording results in ``out``.

        Returns:
            The context handed to the node's children
        """
        match node:
            case PageNumber():
                return context

            case Hyperlink():
                style = self._lookup(node, TextRunStyleProperties, context, (StandardElementType.HYPERLINK,))
                out.record(node, style)
                return context.create_child_context(style)

            case TextRun():
                style = self._lookup(node, TextRunStyleProperties, context)
                out.record(node, style)
                return context.create_child_context(style)

            case Footnote():
                # the body style is resolved against the surrounding text,
                # then the footnote content cascades from the body style
                style = self._lookup(node, FootnoteStyleProperties, context, (node.standard_type,))
                out.record(node, style)
                child = context.create_child_context(style)
                self.resolve_all(node.inline_elements, child, out)
                return child

            case Paragraph():
                child = self._resolve_block(node, ParagraphStyleProperties, context, out)
                self.resolve_all(node.inline_elements, child, out)
                return child

            case Headline():
                child = self._resolve_block(node, HeadlineStyleProperties, context, out)
                self.resolve_all(node.inline_elements, child, out)
                return child

            case Section():
                child = self._resolve_block(node, SectionStyleProperties, context, out, keys=node.style_keys())
                self.resolve_all(node.elements, child, out)
                return child

            case Part():
                child = self._resolve_block(node, PartStyleProperties, context, out)
                self.resolve_all(node.elements, child, out)
                return child

            case SimpleList():
                child = self._resolve_block(node, ListStyleProperties, context, out)
                self.resolve_all(node.items, child, out)
                return child

            case ListItem():
                child = self._resolve_block(node, ListItemStyleProperties, context, out)
                self.resolve_all(node.label, child, out)
                self.resolve_all(node.elements, child, out)
                return child

            case LayoutTable():
                child = self._resolve_block(node, LayoutTableStyleProperties, context, out)
                if node.element_left is not None:
                    self.resolve(node.element_left, child, out)
                if node.element_right is not None:
                    self.resolve(node.element_right, child, out)
                return child

            case Table():
                child = self._resolve_block(node, TableStyleProperties, context, out)
                self.resolve_all(node.sections, child, out)
                return child

            case TableSection():
                self.resolve_all(node.rows, context, out)
                return context

            case TableRow():
                self.resolve_all(node.cells, context, out)
                return context

            case TableCell():
                # context parent is the table style; sections and rows add nothing
                child = self._resolve_block(node, TableCellStyleProperties, context, out)
                self.resolve_all(node.elements, child, out)
                return child

            case BlockImage():
                return self._resolve_block(node, BlockImageStyleProperties, context, out)

            case _:
                logger.warning("No style resolution for node type %s", type(node).__name__)
                return context

    # ------------------------------------------------------------------
    # Lookup and fallback chain
    # ------------------------------------------------------------------

    def _resolve_block(
        self,
        node: Element,
        expected: Type[StyleProperties],
        context: StyleResolverContext,
        out: ResolvedStyles,
        keys: Optional[tuple] = None,
    ) -> StyleResolverContext:
        standard = getattr(node, "standard_type", None)
        style = self._lookup(
            node,
            expected,
            context,
            (standard,) if standard is not None else (),
            keys=keys,
        )
        out.record(node, style)
        return context.create_child_context(style)

    def _lookup(
        self,
        node: Node,
        expected: Type[StyleProperties],
        context: StyleResolverContext,
        standard_types: tuple = (),
        keys: Optional[tuple] = None,
    ) -> StyleProperties:
        if keys is None:
            keys = (node.style_class,) if node.style_class is not None else ()

        chosen = self._find_specific(node, expected, context, keys)
        if chosen is None:
            for standard in standard_types:
                chosen = self._find_default(standard, expected, context)
                if chosen is not None:
                    break
        if chosen is None:
            chosen = expected()

        return chosen.copy().merge_with(context.parent_style)

    def _find_specific(
        self,
        node: Node,
        expected: Type[StyleProperties],
        context: StyleResolverContext,
        keys: tuple,
    ) -> Optional[StyleProperties]:
        for key in keys:
            element_style = context.style_map.get(key)
            if element_style is None:
                logger.debug("Style key '%s' not in style map", key)
                continue
            if isinstance(element_style.properties, expected):
                logger.debug("Resolved %s with style '%s'", type(node).__name__, key)
                return element_style.properties
            logger.warning(
                "Style '%s' targets %s but is used on %s; ignoring it",
                key,
                element_style.target_element.value,
                type(node).__name__,
            )

        if keys:
            log = logger.warning if self.config.warn_on_missing_class else logger.debug
            log("Style class '%s' for %s not found; falling back to defaults", keys[-1], type(node).__name__)
        return None

    def _find_default(
        self,
        standard: StandardElementType,
        expected: Type[StyleProperties],
        context: StyleResolverContext,
    ) -> Optional[StyleProperties]:
        defaults = self.default_styles if self.default_styles is not None else context.style_sheet.default_styles
        name = defaults.style_name_for(standard)

        element_style = context.style_map.get(name)
        if element_style is None:
            if defaults.get(standard):
                logger.warning("Default style '%s' for '%s' is not defined", name, standard.json_key)
            else:
                logger.debug("No default style for '%s'", standard.json_key)
            return None
        if not isinstance(element_style.properties, expected):
            logger.warning(
                "Default style '%s' for '%s' targets %s; ignoring it",
                name,
                standard.json_key,
                element_style.target_element.value,
            )
            return None
        return element_style.properties


def resolve_styles(
    node: Node,
    context: StyleResolverContext,
    out: Optional[ResolvedStyles] = None,
    default_styles: Optional[DefaultStyles] = None,
) -> ResolvedStyles:
    """Resolve a single subtree under ``context`` and return the collected styles."""
    out = out if out is not None else ResolvedStyles()
    StyleResolver(default_styles).resolve(node, context, out)
    return out


class StyleResolverService:
    """Resolves every content area of every page sequence of a document."""

    def __init__(self, default_styles: Optional[DefaultStyles] = None, config: Optional[ResolverConfig] = None):
        self.resolver = StyleResolver(default_styles, config)

    def resolve(self, document: Optional[Document], style_sheet: Optional[StyleSheet]) -> ResolvedStyles:
        out = ResolvedStyles()
        if document is None or style_sheet is None:
            logger.warning("Document or style sheet missing; skipping style resolution")
            return out

        style_map = style_sheet.style_map()
        for sequence in document.page_sequences:
            for area in sequence.areas:
                root = StyleResolverContext(style_sheet=style_sheet, style_map=style_map, parent_style=None)
                self.resolver.resolve_all(area.elements, root, out)

        logger.info(
            "Resolved styles for %d nodes in %d page sequences", len(out), len(document.page_sequences)
        )
        return out


__all__ = [
    "ResolvedStyles",
    "StyleResolver",
    "StyleResolverService",
    "resolve_styles",
]
