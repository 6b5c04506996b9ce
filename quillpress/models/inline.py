"""Inline content: text runs, hyperlinks, page numbers and footnotes."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

from ..exceptions import ModelError
from ..styles.style_sheet import StandardElementType
from .base import ElementKind, InlineElement, Node, as_tuple, set_frozen

logger = logging.getLogger(__name__)

DEFAULT_FOOTNOTE_INDEX = "*"


@dataclass(frozen=True, eq=False)
class TextRun(InlineElement):
    kind = ElementKind.TEXT_RUN

    text: str

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.text is None:
            raise ModelError("TextRun text must not be None")


@dataclass(frozen=True, eq=False)
class Hyperlink(TextRun):
    """A text run pointing at ``href``; ``alt_text`` defaults to the link text."""

    kind = ElementKind.HYPERLINK

    href: str = ""
    alt_text: Optional[str] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.href is None or not str(self.href).strip():
            logger.warning("Hyperlink '%s' has no href; using an empty target", self.text)
            set_frozen(self, "href", "")
        if self.alt_text is None or not str(self.alt_text).strip():
            set_frozen(self, "alt_text", self.text)

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.HYPERLINK


@dataclass(frozen=True, eq=False)
class PageNumber(InlineElement):
    """Marker replaced by the current page number at render time. Has no style."""

    kind = ElementKind.PAGE_NUMBER


@dataclass(frozen=True, eq=False)
class Footnote(InlineElement):
    """
    Inline reference mark plus the footnote body.

    ``index`` is the visible mark (``"*"`` when absent or blank);
    ``inline_elements`` is the body content.
    """

    kind = ElementKind.FOOTNOTE

    index: Optional[str] = DEFAULT_FOOTNOTE_INDEX
    inline_elements: Tuple[InlineElement, ...] = ()
    id: str = field(default_factory=lambda: f"footnote-{uuid.uuid4().hex}")

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.index is None or not str(self.index).strip():
            logger.warning("Footnote without index; using '%s'", DEFAULT_FOOTNOTE_INDEX)
            set_frozen(self, "index", DEFAULT_FOOTNOTE_INDEX)
        set_frozen(self, "inline_elements", as_tuple(self.inline_elements))

    @property
    def standard_type(self) -> StandardElementType:
        return StandardElementType.FOOTNOTE

    def children(self) -> Sequence[Node]:
        return self.inline_elements
