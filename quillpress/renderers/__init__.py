"""PDF rendering of resolved documents."""

from .flowables import FlowableBuilder, PageNumberParagraph
from .fonts import FontRegistry
from .pdf_renderer import PdfRenderer

__all__ = ["FlowableBuilder", "FontRegistry", "PageNumberParagraph", "PdfRenderer"]
