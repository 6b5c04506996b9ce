"""
Conversion of resolved content nodes into ReportLab platypus flowables.

The builder only reads the tree and the resolved styles; it never resolves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import Image, PageBreak, Paragraph, Spacer, Table, TableStyle
from reportlab.platypus.flowables import Flowable, HRFlowable

from ..config import RenderConfig
from ..engine.style_resolver import ResolvedStyles
from ..models import (
    BlockImage,
    Element,
    Footnote,
    Headline,
    Hyperlink,
    InlineElement,
    LayoutTable,
    ListItem,
    PageNumber,
    Paragraph as ParagraphNode,
    Part,
    Section,
    SimpleList,
    Table as TableNode,
    TableCell,
    TextRun,
)
from ..styles.properties import (
    BlockImageStyleProperties,
    ElementBlockStyleProperties,
    FootnoteStyleProperties,
    ListItemStyleProperties,
    ListStyleProperties,
    ParagraphStyleProperties,
    StyleProperties,
    TableCellStyleProperties,
    TableStyleProperties,
    TextBlockStyleProperties,
    TextRunStyleProperties,
)
from ..styles.style_sheet import StyleSheet
from ..utils.enums import LinefeedTreatment, ListStyleType, PageBreakVariant
from ..utils.units import parse_border, to_points
from .fonts import FontRegistry, is_bold_weight, is_italic_style
from .render_utils import alignment_of, normalize_color, to_color

logger = logging.getLogger(__name__)

PAGE_TOKEN = "[[quillpress:page]]"

_PAGE_BREAKS = (PageBreakVariant.PAGE, PageBreakVariant.EVEN_PAGE, PageBreakVariant.ODD_PAGE)
_VALIGN = {"top": "TOP", "middle": "MIDDLE", "center": "MIDDLE", "bottom": "BOTTOM"}
_IMAGE_ALIGN = {"center": "CENTER", "end": "RIGHT", "right": "RIGHT", "start": "LEFT", "left": "LEFT"}
_DINGBAT_MARKERS = {ListStyleType.CIRCLE: "m", ListStyleType.SQUARE: "n"}


class PageNumberParagraph(Paragraph):
    """Paragraph whose text contains the current page number, filled in when laid out."""

    def __init__(self, template: str, style: ParagraphStyle):
        self._template = template
        self._current = template.replace(PAGE_TOKEN, "")
        super().__init__(self._current, style)

    def wrap(self, availWidth, availHeight):
        canv = getattr(self, "canv", None)
        if canv is not None:
            self._current = self._template.replace(PAGE_TOKEN, str(canv.getPageNumber()))
            Paragraph.__init__(self, self._current, self.style)
        return super().wrap(availWidth, availHeight)

    def split(self, availWidth, availHeight):
        plain = Paragraph(self._current, self.style)
        plain.wrap(availWidth, availHeight)
        return plain.split(availWidth, availHeight)


@dataclass(slots=True)
class FontSpec:
    name: str
    size: float
    leading: float
    color: Optional[str]


class FlowableBuilder:
    """
    Builds flowables for one content area.

    Footnote bodies met while building are collected and emitted by
    :meth:`footnote_flowables` (body areas) or dropped (header/footer areas,
    where only the mark is shown).
    """

    def __init__(
        self,
        style_sheet: StyleSheet,
        resolved: ResolvedStyles,
        fonts: FontRegistry,
        config: Optional[RenderConfig] = None,
        frame_width: float = 450.0,
        collect_footnotes: bool = True,
    ):
        self.style_sheet = style_sheet
        self.resolved = resolved
        self.fonts = fonts
        self.config = config or RenderConfig()
        self.frame_width = frame_width
        self.collect_footnotes = collect_footnotes
        self.footnotes: List[Tuple[Footnote, StyleProperties]] = []
        self._style_counter = 0

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def build_area(self, elements: Sequence[Element]) -> List[Flowable]:
        flowables: List[Flowable] = []
        for element in elements:
            flowables.extend(self.build(element))
        return flowables

    def build(self, node: Element) -> List[Flowable]:
        match node:
            case Headline():
                bag = self._style(node, ParagraphStyleProperties)
                heading = self._text_block(node.inline_elements, bag)
                # picked up by the doc template for the PDF outline
                heading.outline_entry = (node.plain_text, node.level)
                return self._with_breaks(bag, [heading])
            case ParagraphNode():
                bag = self._style(node, ParagraphStyleProperties)
                return self._with_breaks(bag, [self._text_block(node.inline_elements, bag)])
            case Section():
                bag = self._style(node, ElementBlockStyleProperties)
                return self._with_breaks(bag, self._boxed(self.build_area(node.elements), bag))
            case Part():
                bag = self._style(node, ElementBlockStyleProperties)
                flowables = self._with_breaks(bag, self._boxed(self.build_area(node.elements), bag))
                if getattr(bag, "page_break_before", None) in _PAGE_BREAKS:
                    flowables.insert(0, PageBreak())
                return flowables
            case SimpleList():
                bag = self._style(node, ListStyleProperties)
                return self._with_breaks(bag, self._list(node, bag))
            case TableNode():
                bag = self._style(node, TableStyleProperties)
                return self._with_breaks(bag, self._table(node, bag))
            case LayoutTable():
                bag = self._style(node, ElementBlockStyleProperties)
                return self._with_breaks(bag, [self._layout_table(node)])
            case BlockImage():
                bag = self._style(node, BlockImageStyleProperties)
                return self._with_breaks(bag, [self._image(node, bag)])
            case _:
                logger.warning("Cannot render block %s", type(node).__name__)
                return []

    def footnote_flowables(self) -> List[Flowable]:
        """Separator plus one paragraph per collected footnote, in reference order."""
        if not self.footnotes:
            return []
        flowables: List[Flowable] = [
            Spacer(1, 12),
            HRFlowable(width="30%", thickness=0.5, hAlign="LEFT", spaceAfter=4),
        ]
        for footnote, bag in self.footnotes:
            style = self._paragraph_style(bag)
            markup = f"<super>{escape(footnote.index)}</super> " + self._inline_markup(footnote.inline_elements)
            flowables.append(self._paragraph(markup, style))
        self.footnotes = []
        return flowables

    def _style(self, node, fallback_cls):
        style = self.resolved.get(node)
        if style is None:
            logger.debug("No resolved style for %s; rendering unstyled", type(node).__name__)
            return fallback_cls()
        return style

    def _with_breaks(self, bag: StyleProperties, flowables: List[Flowable]) -> List[Flowable]:
        result = list(flowables)
        if getattr(bag, "break_before", None) in _PAGE_BREAKS:
            result.insert(0, PageBreak())
        if getattr(bag, "break_after", None) in _PAGE_BREAKS:
            result.append(PageBreak())
        return result

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _font(self, bag: StyleProperties) -> FontSpec:
        text_style = self.style_sheet.find_text_style(getattr(bag, "text_style_name", None))

        family = getattr(bag, "font_family", None) or (text_style.font_family_name if text_style else None)
        weight = getattr(bag, "font_weight", None) or (text_style.font_weight if text_style else None)
        style = getattr(bag, "font_style", None) or (text_style.font_style if text_style else None)
        size = getattr(bag, "font_size", None) or (text_style.size_points if text_style else None)
        size = float(size or self.config.base_font_size)

        name = self.fonts.resolve(family or self.config.base_font, is_bold_weight(weight), is_italic_style(style))
        return FontSpec(
            name=name,
            size=size,
            leading=self._leading(getattr(bag, "line_height", None), size),
            color=normalize_color(getattr(bag, "text_color", None)),
        )

    def _leading(self, line_height: Optional[str], size: float) -> float:
        if line_height is None or str(line_height).strip().lower() == "normal":
            return size * self.config.leading_factor
        text = str(line_height).strip()
        try:
            return float(text) * size
        except ValueError:
            return to_points(text, default=size * self.config.leading_factor, font_size=size)

    def _paragraph_style(self, bag: StyleProperties) -> ParagraphStyle:
        font = self._font(bag)
        self._style_counter += 1

        style = ParagraphStyle(
            f"qp-{self._style_counter}",
            fontName=font.name,
            fontSize=font.size,
            leading=font.leading,
            alignment=alignment_of(getattr(bag, "text_align", None)),
            spaceBefore=to_points(getattr(bag, "space_before", None), font_size=font.size),
            spaceAfter=to_points(getattr(bag, "space_after", None), font_size=font.size),
            leftIndent=to_points(getattr(bag, "start_indent", None), font_size=font.size),
            rightIndent=to_points(getattr(bag, "end_indent", None), font_size=font.size),
            firstLineIndent=to_points(getattr(bag, "text_indent", None), font_size=font.size),
        )
        if font.color:
            style.textColor = to_color(font.color)
        background = to_color(getattr(bag, "background_color", None), fallback=None)
        if background is not None:
            style.backColor = background
        border = parse_border(getattr(bag, "border", None))
        if border is not None:
            width, _, color = border
            style.borderWidth = width
            style.borderColor = to_color(color)
            style.borderPadding = to_points(getattr(bag, "padding", None), default=2, font_size=font.size)
        if getattr(bag, "keep_with_next", None):
            style.keepWithNext = 1
        return style

    def _paragraph(self, markup: str, style: ParagraphStyle) -> Paragraph:
        if PAGE_TOKEN in markup:
            return PageNumberParagraph(markup, style)
        return Paragraph(markup, style)

    def _text_block(self, inlines: Sequence[InlineElement], bag: StyleProperties) -> Paragraph:
        return self._paragraph(self._inline_markup(inlines), self._paragraph_style(bag))

    def _inline_markup(self, inlines: Sequence[InlineElement]) -> str:
        return "".join(self._inline(node) for node in inlines)

    def _inline(self, node: InlineElement) -> str:
        match node:
            case PageNumber():
                return PAGE_TOKEN
            case Footnote():
                bag = self._style(node, FootnoteStyleProperties)
                if self.collect_footnotes:
                    self.footnotes.append((node, bag))
                return f"<super>{escape(node.index)}</super>"
            case Hyperlink():
                bag = self._style(node, TextRunStyleProperties)
                text = self._run(node.text, bag)
                return f'<link href="{escape(node.href, {chr(34): "&quot;"})}">{text}</link>'
            case TextRun():
                return self._run(node.text, self._style(node, TextRunStyleProperties))
            case _:
                logger.warning("Cannot render inline %s", type(node).__name__)
                return ""

    def _run(self, text: str, bag: StyleProperties) -> str:
        treatment = getattr(bag, "linefeed_treatment", None)
        body = escape(text)
        if treatment is LinefeedTreatment.PRESERVE:
            body = body.replace("\n", "<br/>")
        elif treatment in (LinefeedTreatment.REMOVE, LinefeedTreatment.IGNORE):
            body = body.replace("\n", "")
        elif treatment is LinefeedTreatment.TREAT_AS_ZERO_WIDTH_SPACE:
            body = body.replace("\n", "\u200b")
        else:
            body = body.replace("\n", " ")

        font = self._font(bag)
        attrs = [f'name="{font.name}"', f'size="{font.size:g}"']
        if font.color:
            attrs.append(f'color="{font.color}"')
        background = normalize_color(getattr(bag, "background_color", None))
        if background:
            attrs.append(f'backColor="{background}"')
        markup = f"<font {' '.join(attrs)}>{body}</font>"

        decoration = (getattr(bag, "text_decoration", None) or "").lower()
        if "underline" in decoration:
            markup = f"<u>{markup}</u>"
        if "line-through" in decoration:
            markup = f"<strike>{markup}</strike>"

        shift = (getattr(bag, "baseline_shift", None) or "").lower()
        if shift == "super":
            markup = f"<super>{markup}</super>"
        elif shift == "sub":
            markup = f"<sub>{markup}</sub>"
        return markup

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def _boxed(self, flowables: List[Flowable], bag: StyleProperties) -> List[Flowable]:
        """Wrap content in a one-cell table when the block has a border or background."""
        border = parse_border(getattr(bag, "border", None))
        background = to_color(getattr(bag, "background_color", None), fallback=None)

        before = to_points(getattr(bag, "space_before", None))
        after = to_points(getattr(bag, "space_after", None))

        if border is None and background is None:
            result = list(flowables)
        elif not flowables:
            result = []
        else:
            padding = to_points(getattr(bag, "padding", None), default=4)
            commands = [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("LEFTPADDING", (0, 0), (-1, -1), padding),
                ("RIGHTPADDING", (0, 0), (-1, -1), padding),
                ("TOPPADDING", (0, 0), (-1, -1), padding),
                ("BOTTOMPADDING", (0, 0), (-1, -1), padding),
            ]
            if border is not None:
                commands.append(("BOX", (0, 0), (-1, -1), border[0], to_color(border[2])))
            if background is not None:
                commands.append(("BACKGROUND", (0, 0), (-1, -1), background))
            box = Table([[flowables]], colWidths=[self.frame_width])
            box.setStyle(TableStyle(commands))
            result = [box]

        if before:
            result.insert(0, Spacer(1, before))
        if after:
            result.append(Spacer(1, after))
        return result

    def _list(self, node: SimpleList, bag: StyleProperties) -> List[Flowable]:
        """Lists are laid out as a two-column table: marker, item content."""
        if not node.items:
            return []

        distance = to_points(
            bag.effective_distance_between_starts if isinstance(bag, ListStyleProperties) else "1.5em",
            font_size=self._font(bag).size,
        )
        separation = to_points(
            bag.effective_label_separation if isinstance(bag, ListStyleProperties) else "0.5em",
            font_size=self._font(bag).size,
        )
        list_type = getattr(bag, "list_style_type", None) or (
            ListStyleType.NUMBER if node.is_ordered else ListStyleType.BULLET
        )

        rows = []
        for number, item in enumerate(node.items, start=1):
            item_bag = self._style(item, ListItemStyleProperties)
            label_style = self._paragraph_style(item_bag)
            label_style.spaceBefore = label_style.spaceAfter = 0
            label_style.leftIndent = label_style.firstLineIndent = 0
            if item.label:
                label = self._paragraph(self._inline_markup(item.label), label_style)
            else:
                item_type = getattr(item_bag, "list_style_type", None) or list_type
                label = Paragraph(list_marker(item_type, number), label_style)
            rows.append([label, self._list_item_content(item) or ""])

        if distance <= 0:
            distance = separation
        table = Table(rows, colWidths=[distance, max(self.frame_width - distance, 1)])
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (0, -1), separation),
                    ("RIGHTPADDING", (1, 0), (1, -1), 0),
                    ("TOPPADDING", (0, 0), (-1, -1), 0),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
                ]
            )
        )
        table.hAlign = "LEFT"
        return self._boxed([table], bag)

    def _list_item_content(self, item: ListItem) -> List[Flowable]:
        return self.build_area(item.elements)

    def _layout_table(self, node: LayoutTable) -> Table:
        left = self.build(node.element_left) if node.element_left is not None else []
        right = self.build(node.element_right) if node.element_right is not None else []
        half = self.frame_width / 2
        table = Table([[left or "", right or ""]], colWidths=[half, half])
        table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        return table

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _table(self, node: TableNode, bag: StyleProperties) -> List[Flowable]:
        rows = [row for section in node.sections for row in section.rows]
        columns = node.column_count
        if not rows or columns == 0:
            logger.debug("Skipping empty table")
            return []

        grid: List[List[object]] = [["" for _ in range(columns)] for _ in rows]
        occupied: Dict[Tuple[int, int], bool] = {}
        commands: List[tuple] = [("VALIGN", (0, 0), (-1, -1), "TOP")]

        for r, row in enumerate(rows):
            c = 0
            for cell in row.cells:
                while occupied.get((r, c)):
                    c += 1
                if c >= columns:
                    logger.warning("Table row %d has more cells than its %d columns; dropping the rest", r, columns)
                    break
                end_c = min(c + cell.colspan, columns) - 1
                end_r = min(r + cell.rowspan, len(rows)) - 1
                for rr in range(r, end_r + 1):
                    for cc in range(c, end_c + 1):
                        occupied[(rr, cc)] = True
                grid[r][c] = self.build_area(cell.elements) or ""
                if end_c > c or end_r > r:
                    commands.append(("SPAN", (c, r), (end_c, end_r)))
                commands.extend(self._cell_commands(cell, (c, r), (end_c, end_r)))
                c = end_c + 1

        table_border = parse_border(getattr(bag, "border", None))
        if table_border is not None:
            commands.append(("BOX", (0, 0), (-1, -1), table_border[0], to_color(table_border[2])))
        table_background = to_color(getattr(bag, "background_color", None), fallback=None)
        if table_background is not None:
            commands.insert(0, ("BACKGROUND", (0, 0), (-1, -1), table_background))

        header_rows = len(node.header.rows) if node.header is not None else 0
        table = Table(grid, colWidths=self._column_widths(node), repeatRows=header_rows)
        table.setStyle(TableStyle(commands))
        table.hAlign = "LEFT"

        result: List[Flowable] = []
        before = to_points(getattr(bag, "space_before", None))
        after = to_points(getattr(bag, "space_after", None))
        if before:
            result.append(Spacer(1, before))
        result.append(table)
        if after:
            result.append(Spacer(1, after))
        return result

    def _column_widths(self, node: TableNode) -> Optional[List[Optional[float]]]:
        if not node.columns:
            return None
        widths: List[Optional[float]] = []
        stars: List[int] = []
        for index, column in enumerate(node.columns):
            text = column.strip()
            if text == "*":
                stars.append(index)
                widths.append(None)
            elif text.endswith("%"):
                widths.append(self._relative(text, self.frame_width))
            else:
                widths.append(to_points(text, default=None) if text else None)
        if stars:
            used = sum(width for width in widths if width is not None)
            share = max((self.frame_width - used) / len(stars), 1.0)
            for index in stars:
                widths[index] = share
        return widths

    def _cell_commands(self, cell: TableCell, start: Tuple[int, int], end: Tuple[int, int]) -> List[tuple]:
        bag = self._style(cell, TableCellStyleProperties)
        commands: List[tuple] = []

        border = parse_border(getattr(bag, "border", None))
        if border is not None:
            commands.append(("BOX", start, end, border[0], to_color(border[2])))
        for side, op in (("border_top", "LINEABOVE"), ("border_bottom", "LINEBELOW"),
                         ("border_left", "LINEBEFORE"), ("border_right", "LINEAFTER")):
            side_border = parse_border(getattr(bag, side, None))
            if side_border is not None:
                commands.append((op, start, end, side_border[0], to_color(side_border[2])))

        background = to_color(getattr(bag, "background_color", None), fallback=None)
        if background is not None:
            commands.append(("BACKGROUND", start, end, background))

        valign = _VALIGN.get((getattr(bag, "vertical_align", None) or "").lower())
        if valign:
            commands.append(("VALIGN", start, end, valign))

        padding = getattr(bag, "padding", None)
        if padding is not None:
            amount = to_points(padding)
            for op in ("LEFTPADDING", "RIGHTPADDING", "TOPPADDING", "BOTTOMPADDING"):
                commands.append((op, start, end, amount))
        return commands

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def _image(self, node: BlockImage, bag: StyleProperties) -> Flowable:
        path = self.config.resolve_image_path(node.path)
        fallback_style = self._paragraph_style(TextBlockStyleProperties())
        fallback_text = escape(node.alt_text or node.path)

        if not path.exists():
            logger.warning("Image not found: %s", path)
            return Paragraph(f"[{fallback_text}]", fallback_style)

        try:
            with PILImage.open(path) as img:
                width_px, height_px = img.size
                dpi = img.info.get("dpi", (72, 72))
        except (OSError, UnidentifiedImageError) as exc:
            logger.warning("Cannot read image %s: %s", path, exc)
            return Paragraph(f"[{fallback_text}]", fallback_style)

        dpi_x = float(dpi[0]) if dpi and dpi[0] else 72.0
        dpi_y = float(dpi[1]) if dpi and len(dpi) > 1 and dpi[1] else dpi_x
        natural_w = width_px * 72.0 / dpi_x
        natural_h = height_px * 72.0 / dpi_y

        width = self._image_width(bag, natural_w)
        height = natural_h * (width / natural_w) if natural_w else natural_h

        image = Image(str(path), width=width, height=height)
        image.hAlign = _IMAGE_ALIGN.get((getattr(bag, "alignment", None) or "").lower(), "LEFT")
        return image

    def _image_width(self, bag: StyleProperties, natural: float) -> float:
        limit = self.frame_width
        block_width = getattr(bag, "block_width", None)
        if block_width:
            limit = min(limit, self._relative(block_width, self.frame_width))

        content_width = (getattr(bag, "content_width", None) or "").strip().lower()
        if content_width in ("scale-to-fit", "scale-down-to-fit"):
            width = limit if content_width == "scale-to-fit" else min(natural, limit)
        elif content_width and content_width != "auto":
            width = self._relative(content_width, limit)
        else:
            width = natural

        scaling = (getattr(bag, "scaling", None) or "").strip()
        if scaling.endswith("%"):
            width = natural * float(scaling[:-1]) / 100.0

        return max(1.0, min(width, limit))

    @staticmethod
    def _relative(value: str, reference: float) -> float:
        text = value.strip()
        if text.endswith("%"):
            try:
                return reference * float(text[:-1]) / 100.0
            except ValueError:
                return reference
        return to_points(text, default=reference)


def list_marker(list_type: Optional[ListStyleType], number: int) -> str:
    """Paragraph markup of the marker for item ``number`` (1-based)."""
    if list_type is None or list_type is ListStyleType.BULLET:
        return "•"
    if list_type is ListStyleType.NONE:
        return ""
    if list_type in _DINGBAT_MARKERS:
        return f'<font name="ZapfDingbats">{_DINGBAT_MARKERS[list_type]}</font>'
    if list_type is ListStyleType.NUMBER:
        return f"{number}."
    letters = _alpha(number)
    if list_type is ListStyleType.UPPER_ALPHA:
        letters = letters.upper()
    return f"{letters}."


def _alpha(number: int) -> str:
    letters = ""
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        letters = chr(ord("a") + remainder) + letters
    return letters
