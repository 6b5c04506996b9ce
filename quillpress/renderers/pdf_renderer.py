"""
PDF renderer built on ReportLab platypus.

Each page sequence gets its own page template (size, margins and columns from
the page master named by the sequence's style class). Header and footer
content areas are drawn on every page of their sequence.
"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import List, Optional, Tuple, Union

from reportlab.platypus import BaseDocTemplate, Frame, NextPageTemplate, PageBreak, PageTemplate, Spacer
from reportlab.platypus.doctemplate import LayoutError
from reportlab.platypus.flowables import Flowable

from ..config import RenderConfig
from ..engine.style_resolver import ResolvedStyles
from ..exceptions import RenderingError
from ..models import ContentArea, Document, PageSequence
from ..styles.page_master import PageMasterStyle
from ..styles.style_sheet import StyleSheet
from ..utils.units import to_points
from .flowables import FlowableBuilder
from .fonts import FontRegistry
from .render_utils import margins_of, page_size_of

logger = logging.getLogger(__name__)


class OutlineDocTemplate(BaseDocTemplate):
    """Doc template that bookmarks every heading flowable and adds it to the PDF outline."""

    def __init__(self, filename, **kwargs):
        super().__init__(filename, **kwargs)
        self.outline_count = 0
        self._outline_level = -1

    def afterFlowable(self, flowable):
        entry = getattr(flowable, "outline_entry", None)
        if entry is None:
            return
        title, level = entry
        if not title:
            logger.debug("Skipping outline entry for an empty heading")
            return

        # an outline entry may be at most one level below the previous one
        level = max(0, min(level - 1, self._outline_level + 1))
        key = f"heading-{self.outline_count}"
        self.canv.bookmarkPage(key)
        self.canv.addOutlineEntry(title, key, level=level, closed=False)
        self.outline_count += 1
        self._outline_level = level


class PdfRenderer:
    """Renders a resolved document to a PDF file."""

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self.fonts = FontRegistry(self.config.base_font, self.config.font_root)

    def render(
        self,
        document: Document,
        style_sheet: StyleSheet,
        resolved: ResolvedStyles,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Write ``document`` to ``output_path``.

        Args:
            document: Content tree
            style_sheet: Style sheet the styles were resolved with
            resolved: Result of the resolution pass over ``document``
            output_path: Target PDF file

        Returns:
            The written path

        Raises:
            RenderingError: If layout fails or the file cannot be written
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        templates: List[PageTemplate] = []
        story: List[Flowable] = []

        for index, sequence in enumerate(document.page_sequences):
            template_id = f"sequence-{index}"
            page_master = self._page_master(style_sheet, sequence)
            page_size = page_size_of(page_master, self.config.page_size_fallback)
            margins = margins_of(page_master)
            _, _, column_width = self._columns(page_size[0] - margins[1] - margins[3], page_master)

            templates.append(
                PageTemplate(
                    id=template_id,
                    frames=self._body_frames(template_id, page_size, margins, page_master),
                    pagesize=page_size,
                    onPage=partial(
                        self._draw_static,
                        sequence=sequence,
                        style_sheet=style_sheet,
                        resolved=resolved,
                        page_size=page_size,
                        margins=margins,
                        page_master=page_master,
                    ),
                )
            )

            if index > 0:
                story.append(NextPageTemplate(template_id))
                story.append(PageBreak())

            builder = FlowableBuilder(style_sheet, resolved, self.fonts, self.config, frame_width=column_width)
            story.extend(builder.build_area(sequence.body.elements))
            story.extend(builder.footnote_flowables())

        if not templates:
            logger.warning("Document has no page sequences; writing a single empty page")
            page_size = page_size_of(None, self.config.page_size_fallback)
            margins = margins_of(None)
            templates.append(
                PageTemplate(id="empty", frames=self._body_frames("empty", page_size, margins, None), pagesize=page_size)
            )
        if not story:
            story.append(Spacer(1, 1))

        metadata = document.metadata
        doc = OutlineDocTemplate(
            str(output_path),
            pagesize=templates[0].pagesize,
            title=metadata.title or self.config.title_fallback,
            author=metadata.author or "",
            subject=metadata.subject or "",
            keywords=", ".join(metadata.keywords),
            creator=metadata.producer or "",
        )
        doc.addPageTemplates(templates)

        try:
            doc.build(story)
        except LayoutError as exc:
            raise RenderingError("Layout failed", str(exc)) from exc
        except OSError as exc:
            raise RenderingError(f"Cannot write {output_path}", str(exc)) from exc

        logger.info(
            "Wrote %s (%d page sequences, %d outline entries)",
            output_path,
            len(document.page_sequences),
            doc.outline_count,
        )
        return output_path

    # ------------------------------------------------------------------
    # Page geometry
    # ------------------------------------------------------------------

    def _page_master(self, style_sheet: StyleSheet, sequence: PageSequence) -> Optional[PageMasterStyle]:
        page_master = style_sheet.find_page_master(sequence.style_class)
        if page_master is None:
            logger.warning(
                "Page master '%s' not found; using %s defaults",
                sequence.style_class,
                self.config.page_size_fallback,
            )
        return page_master

    @staticmethod
    def _body_frames(
        template_id: str,
        page_size: Tuple[float, float],
        margins: Tuple[float, float, float, float],
        page_master: Optional[PageMasterStyle],
    ) -> List[Frame]:
        width, height = page_size
        top, right, bottom, left = margins
        body_width = width - left - right
        body_height = height - top - bottom
        if body_width <= 0 or body_height <= 0:
            raise RenderingError("Page margins leave no room for the body", template_id)

        columns, gap, column_width = PdfRenderer._columns(body_width, page_master)

        return [
            Frame(
                left + i * (column_width + gap),
                bottom,
                column_width,
                body_height,
                leftPadding=0,
                rightPadding=0,
                topPadding=0,
                bottomPadding=0,
                id=f"{template_id}-col{i}",
            )
            for i in range(columns)
        ]

    @staticmethod
    def _columns(body_width: float, page_master: Optional[PageMasterStyle]) -> Tuple[int, float, float]:
        """Column count, gap and column width for a body of ``body_width`` points."""
        columns = page_master.columns if page_master is not None else 1
        gap = to_points(page_master.column_gap) if page_master is not None and columns > 1 else 0.0
        return columns, gap, (body_width - gap * (columns - 1)) / columns

    # ------------------------------------------------------------------
    # Header / footer
    # ------------------------------------------------------------------

    def _draw_static(
        self,
        canvas,
        doc,
        *,
        sequence: PageSequence,
        style_sheet: StyleSheet,
        resolved: ResolvedStyles,
        page_size: Tuple[float, float],
        margins: Tuple[float, float, float, float],
        page_master: Optional[PageMasterStyle],
    ) -> None:
        width, height = page_size
        top, right, bottom, left = margins
        area_width = width - left - right

        header_height = to_points(page_master.header_extent) if page_master is not None else 0.0
        footer_height = to_points(page_master.footer_extent) if page_master is not None else 0.0

        canvas.saveState()
        if len(sequence.header):
            self._draw_area(
                canvas, sequence.header, style_sheet, resolved,
                left, height - (header_height or top), area_width, header_height or top, "header",
            )
        if len(sequence.footer):
            self._draw_area(
                canvas, sequence.footer, style_sheet, resolved,
                left, 0, area_width, footer_height or bottom, "footer",
            )
        canvas.restoreState()

    def _draw_area(
        self,
        canvas,
        area: ContentArea,
        style_sheet: StyleSheet,
        resolved: ResolvedStyles,
        x: float,
        y: float,
        width: float,
        height: float,
        name: str,
    ) -> None:
        if height <= 0:
            logger.debug("No room for %s content", name)
            return
        builder = FlowableBuilder(
            style_sheet, resolved, self.fonts, self.config, frame_width=width, collect_footnotes=False
        )
        flowables = builder.build_area(area.elements)
        frame = Frame(x, y, width, height, leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0, id=name)
        frame.addFromList(flowables, canvas)
        if flowables:
            logger.debug("%d %s flowables did not fit", len(flowables), name)
