"""Document-level records: metadata, resource addresses, page sequences."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..exceptions import ModelError
from .base import Element, Node, as_tuple, set_frozen

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "PDF Dokument"
DEFAULT_LANGUAGE = "de-DE"
DEFAULT_PRODUCER = "quillpress"


@dataclass(frozen=True, eq=False)
class ContentArea:
    """Ordered block elements of a header, body or footer region."""

    elements: Tuple[Element, ...] = ()

    def __post_init__(self) -> None:
        set_frozen(self, "elements", as_tuple(self.elements))

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def walk(self) -> Iterator[Node]:
        for element in self.elements:
            yield from element.walk()


@dataclass(frozen=True, eq=False)
class PageSequence:
    """Run of pages sharing one page master, named by ``style_class``."""

    style_class: str
    body: ContentArea = field(default_factory=ContentArea)
    header: ContentArea = field(default_factory=ContentArea)
    footer: ContentArea = field(default_factory=ContentArea)

    def __post_init__(self) -> None:
        if self.style_class is None or not str(self.style_class).strip():
            raise ModelError("PageSequence style_class must not be blank", repr(self.style_class))
        for name in ("body", "header", "footer"):
            area = getattr(self, name)
            if area is None:
                set_frozen(self, name, ContentArea())
            elif not isinstance(area, ContentArea):
                set_frozen(self, name, ContentArea(area))

    @property
    def areas(self) -> Tuple[ContentArea, ...]:
        return (self.header, self.body, self.footer)

    def walk(self) -> Iterator[Node]:
        for area in self.areas:
            yield from area.walk()


@dataclass(slots=True)
class Metadata:
    """
    Document information written to the PDF info dictionary.

    ``title`` is required; a blank title is replaced by ``"PDF Dokument"``.
    """

    title: str
    author: Optional[str] = None
    subject: Optional[str] = None
    keywords: List[str] = field(default_factory=list)
    language: Optional[str] = DEFAULT_LANGUAGE
    producer: Optional[str] = DEFAULT_PRODUCER
    creation_date: Optional[datetime] = None
    display_doc_title: bool = True

    def __post_init__(self) -> None:
        if self.title is None:
            raise ModelError("Metadata title must not be None")
        if not str(self.title).strip():
            logger.warning("Metadata title is blank; using '%s'", DEFAULT_TITLE)
            self.title = DEFAULT_TITLE
        if self.language is None or not str(self.language).strip():
            self.language = DEFAULT_LANGUAGE
        if self.producer is None or not str(self.producer).strip():
            self.producer = DEFAULT_PRODUCER
        self.keywords = list(self.keywords or [])
        if self.creation_date is None:
            self.creation_date = datetime.now()


@dataclass(slots=True)
class InternalAddresses:
    """Names of the font and image resource directories; resolved by the renderer."""

    font_dictionary: Optional[str] = None
    image_dictionary: Optional[str] = None


@dataclass(frozen=True, eq=False)
class Document:
    metadata: Metadata
    page_sequences: Tuple[PageSequence, ...] = ()
    internal_addresses: Optional[InternalAddresses] = None

    def __post_init__(self) -> None:
        if self.metadata is None:
            raise ModelError("Document metadata is required")
        set_frozen(self, "page_sequences", as_tuple(self.page_sequences))

    def iter_nodes(self) -> Iterator[Node]:
        """Every content node of every page sequence, pre-order."""
        for sequence in self.page_sequences:
            yield from sequence.walk()

    def count_kinds(self) -> Dict[str, int]:
        counts = Counter(node.kind.value for node in self.iter_nodes())
        return dict(sorted(counts.items()))

    def children(self) -> Sequence[PageSequence]:
        return self.page_sequences
