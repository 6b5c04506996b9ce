"""
quillpress - styled, paginated PDF documents from JSON content trees.

Typical use::

    from quillpress import read_document, read_style_sheet, StyleResolverService, PdfRenderer

    document = read_document("report.json")
    style_sheet = read_style_sheet("styles.json")
    resolved = StyleResolverService().resolve(document, style_sheet)
    PdfRenderer().render(document, style_sheet, resolved, "report.pdf")
"""

from .config import RenderConfig, ResolverConfig
from .engine import ResolvedStyles, StyleResolver, StyleResolverService, resolve_styles
from .exceptions import ModelError, ParsingError, QuillPressError, RenderingError, StyleError
from .importers import DocumentReader, StyleSheetReader, read_document, read_style_sheet
from .renderers import PdfRenderer
from .styles import StyleResolverContext, StyleSheet
from .version import __version__

__all__ = [
    "DocumentReader",
    "ModelError",
    "ParsingError",
    "PdfRenderer",
    "QuillPressError",
    "RenderConfig",
    "RenderingError",
    "ResolvedStyles",
    "ResolverConfig",
    "StyleError",
    "StyleResolver",
    "StyleResolverContext",
    "StyleResolverService",
    "StyleSheet",
    "StyleSheetReader",
    "__version__",
    "read_document",
    "read_style_sheet",
    "resolve_styles",
]
