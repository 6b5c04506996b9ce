"""
JSON readers for documents and style sheets.

Maps the hyphenated wire format (``style-class``, ``inline-elements``, ...)
onto the content tree and style sheet records. Structural validation lives
in the model constructors; their :class:`ModelError` propagates unchanged.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ..exceptions import ParsingError
from ..models import (
    BlockImage,
    ContentArea,
    Document,
    Element,
    Footnote,
    Headline,
    Hyperlink,
    InlineElement,
    InternalAddresses,
    LayoutTable,
    ListItem,
    Metadata,
    PageNumber,
    PageSequence,
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
from ..styles.page_master import PageMasterStyle
from ..styles.style_sheet import DefaultStyles, ElementStyle, ElementTargetType, StyleSheet
from ..styles.text_style import TextStyle

logger = logging.getLogger(__name__)

JsonSource = Union[str, Path, Dict[str, Any]]


def _load(json_data: Optional[Dict[str, Any]], json_path: Optional[Union[str, Path]]) -> Dict[str, Any]:
    if json_data is not None:
        data = json_data
    elif json_path is not None:
        path = Path(json_path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise ParsingError(f"Cannot read {path}", str(exc)) from exc
        except json.JSONDecodeError as exc:
            raise ParsingError(f"Invalid JSON in {path}", str(exc)) from exc
    else:
        raise ParsingError("Either json_data or json_path is required")

    if not isinstance(data, dict):
        raise ParsingError("Top-level JSON value must be an object", type(data).__name__)
    return data


def _object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ParsingError(f"{what} must be an object", type(data).__name__)
    return data


def _list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParsingError(f"'{key}' must be a list", type(value).__name__)
    return value


class DocumentReader:
    """
    Reads a document tree from JSON.

    Args:
        json_data: Already decoded JSON object
        json_path: Path of a JSON file (used when ``json_data`` is None)
    """

    def __init__(self, json_data: Optional[Dict[str, Any]] = None, json_path: Optional[Union[str, Path]] = None):
        self.json_data = _load(json_data, json_path)

        self._block_readers: Dict[str, Callable[[Dict[str, Any]], Element]] = {
            "paragraph": self._deserialize_paragraph,
            "headline": self._deserialize_headline,
            "list": self._deserialize_list,
            "table": self._deserialize_table,
            "section": self._deserialize_section,
            "part": self._deserialize_part,
            "block-image": self._deserialize_block_image,
            "layout-table": self._deserialize_layout_table,
        }
        self._inline_readers: Dict[str, Callable[[Dict[str, Any]], InlineElement]] = {
            "text-run": self._deserialize_text_run,
            "hyperlink": self._deserialize_hyperlink,
            "page-number": self._deserialize_page_number,
            "footnote": self._deserialize_footnote,
        }

    def read(self) -> Document:
        data = self.json_data
        if "metadata" not in data:
            raise ParsingError("Document has no 'metadata'")

        sequences = [self._deserialize_page_sequence(s) for s in _list(data, "page-sequences")]
        addresses = data.get("internal-addresses")

        document = Document(
            metadata=self._deserialize_metadata(data["metadata"]),
            page_sequences=sequences,
            internal_addresses=self._deserialize_addresses(addresses) if addresses else None,
        )
        logger.debug("Read document '%s' with %d page sequences", document.metadata.title, len(sequences))
        return document

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def _deserialize_metadata(self, data: Dict[str, Any]) -> Metadata:
        if not isinstance(data, dict):
            raise ParsingError("'metadata' must be an object")
        creation = data.get("creation-date")
        if creation is not None:
            try:
                creation = datetime.fromisoformat(str(creation))
            except ValueError as exc:
                raise ParsingError("Invalid 'creation-date'", str(creation)) from exc
        return Metadata(
            title=data.get("title"),
            author=data.get("author"),
            subject=data.get("subject"),
            keywords=data.get("keywords") or [],
            language=data.get("language"),
            producer=data.get("producer"),
            creation_date=creation,
            display_doc_title=bool(data.get("display-doc-title", True)),
        )

    def _deserialize_addresses(self, data: Dict[str, Any]) -> InternalAddresses:
        data = _object(data, "'internal-addresses'")
        return InternalAddresses(
            font_dictionary=data.get("font-dictionary"),
            image_dictionary=data.get("image-dictionary"),
        )

    def _deserialize_page_sequence(self, data: Dict[str, Any]) -> PageSequence:
        data = _object(data, "Page sequence")
        return PageSequence(
            style_class=data.get("style-class"),
            header=self._deserialize_area(data.get("header")),
            body=self._deserialize_area(data.get("body")),
            footer=self._deserialize_area(data.get("footer")),
        )

    def _deserialize_area(self, data: Any) -> ContentArea:
        if data is None:
            return ContentArea()
        # an area is either {"elements": [...]} or a bare list of elements
        elements = data.get("elements") if isinstance(data, dict) else data
        if not isinstance(elements, (list, type(None))):
            raise ParsingError("Content area must be a list of elements", type(elements).__name__)
        return ContentArea(self._blocks(elements))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _blocks(self, items: Optional[List[Any]]) -> List[Element]:
        return [self.deserialize_element(item) for item in items or []]

    def _inlines(self, items: Optional[List[Any]]) -> List[InlineElement]:
        return [self.deserialize_inline(item) for item in items or []]

    def deserialize_element(self, data: Dict[str, Any]) -> Element:
        node_type = self._type_of(data)
        reader = self._block_readers.get(node_type)
        if reader is None:
            raise ParsingError("Unknown element type", node_type)
        return reader(data)

    def deserialize_inline(self, data: Dict[str, Any]) -> InlineElement:
        node_type = self._type_of(data)
        reader = self._inline_readers.get(node_type)
        if reader is None:
            raise ParsingError("Unknown inline element type", node_type)
        return reader(data)

    @staticmethod
    def _type_of(data: Any) -> str:
        if not isinstance(data, dict):
            raise ParsingError("Content node must be an object", type(data).__name__)
        node_type = data.get("type")
        if not node_type:
            raise ParsingError("Content node has no 'type'", json.dumps(data)[:80])
        return str(node_type)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _deserialize_paragraph(self, data: Dict[str, Any]) -> Paragraph:
        return Paragraph(
            inline_elements=self._inlines(data.get("inline-elements")),
            style_class=data.get("style-class"),
        )

    def _deserialize_headline(self, data: Dict[str, Any]) -> Headline:
        return Headline(
            level=data.get("level"),
            inline_elements=self._inlines(data.get("inline-elements")),
            style_class=data.get("style-class"),
        )

    def _deserialize_section(self, data: Dict[str, Any]) -> Section:
        return Section(
            elements=self._blocks(data.get("elements")),
            variant=data.get("variant"),
            alt_text=data.get("alt-text"),
            style_class=data.get("style-class"),
        )

    def _deserialize_part(self, data: Dict[str, Any]) -> Part:
        return Part(
            elements=self._blocks(data.get("elements")),
            variant=data.get("variant"),
            style_class=data.get("style-class"),
        )

    def _deserialize_list(self, data: Dict[str, Any]) -> SimpleList:
        return SimpleList(
            items=[self._deserialize_list_item(item) for item in data.get("items") or []],
            ordering=data.get("ordering"),
            style_class=data.get("style-class"),
        )

    def _deserialize_list_item(self, data: Dict[str, Any]) -> ListItem:
        if not isinstance(data, dict):
            raise ParsingError("List item must be an object", type(data).__name__)
        return ListItem(
            label=self._inlines(data.get("label")),
            elements=self._blocks(data.get("elements")),
            style_class=data.get("style-class"),
        )

    def _deserialize_table(self, data: Dict[str, Any]) -> Table:
        return Table(
            columns=data.get("columns") or [],
            header=self._deserialize_table_section(data.get("header")),
            body=self._deserialize_table_section(data.get("body")),
            footer=self._deserialize_table_section(data.get("footer")),
            style_class=data.get("style-class"),
        )

    def _deserialize_table_section(self, data: Optional[Dict[str, Any]]) -> Optional[TableSection]:
        if data is None:
            return None
        rows = data.get("rows") if isinstance(data, dict) else data
        if not isinstance(rows, (list, type(None))):
            raise ParsingError("Table section must be a list of rows", type(rows).__name__)
        return TableSection(rows=[self._deserialize_table_row(r) for r in rows or []])

    def _deserialize_table_row(self, data: Any) -> TableRow:
        cells = data.get("cells") if isinstance(data, dict) else data
        if not isinstance(cells, (list, type(None))):
            raise ParsingError("Table row must be a list of cells", type(cells).__name__)
        return TableRow(cells=[self._deserialize_table_cell(c) for c in cells or []])

    def _deserialize_table_cell(self, data: Dict[str, Any]) -> TableCell:
        data = _object(data, "Table cell")
        return TableCell(
            elements=self._blocks(data.get("elements")),
            colspan=data.get("col-span", 1),
            rowspan=data.get("row-span", 1),
            style_class=data.get("style-class"),
        )

    def _deserialize_layout_table(self, data: Dict[str, Any]) -> LayoutTable:
        left = data.get("element-left")
        right = data.get("element-right")
        return LayoutTable(
            element_left=self.deserialize_element(left) if left else None,
            element_right=self.deserialize_element(right) if right else None,
            style_class=data.get("style-class"),
        )

    def _deserialize_block_image(self, data: Dict[str, Any]) -> BlockImage:
        return BlockImage(
            path=data.get("path"),
            alt_text=data.get("alt-text"),
            style_class=data.get("style-class"),
        )

    # ------------------------------------------------------------------
    # Inline
    # ------------------------------------------------------------------

    def _deserialize_text_run(self, data: Dict[str, Any]) -> TextRun:
        return TextRun(data.get("text"), style_class=data.get("style-class"))

    def _deserialize_hyperlink(self, data: Dict[str, Any]) -> Hyperlink:
        return Hyperlink(
            data.get("text"),
            href=data.get("href"),
            alt_text=data.get("alt-text"),
            style_class=data.get("style-class"),
        )

    def _deserialize_page_number(self, data: Dict[str, Any]) -> PageNumber:
        return PageNumber(style_class=data.get("style-class"))

    def _deserialize_footnote(self, data: Dict[str, Any]) -> Footnote:
        return Footnote(
            index=data.get("index"),
            inline_elements=self._inlines(data.get("inline-elements")),
            style_class=data.get("style-class"),
        )


class StyleSheetReader:
    """Reads text styles, element styles, page masters and default styles from JSON."""

    def __init__(self, json_data: Optional[Dict[str, Any]] = None, json_path: Optional[Union[str, Path]] = None):
        self.json_data = _load(json_data, json_path)

    def read(self) -> StyleSheet:
        data = self.json_data
        sheet = StyleSheet(
            text_styles=[self._deserialize_text_style(t) for t in _list(data, "text-styles")],
            element_styles=[self._deserialize_element_style(e) for e in _list(data, "element-styles")],
            page_master_styles=[self._deserialize_page_master(p) for p in _list(data, "page-master-styles")],
            default_styles=DefaultStyles.from_mapping(self._default_styles(data.get("default-styles"))),
        )
        logger.debug(
            "Read style sheet: text styles [%s], element styles [%s]",
            ", ".join(t.name for t in sheet.text_styles),
            ", ".join(e.name for e in sheet.element_styles),
        )
        return sheet

    @staticmethod
    def _default_styles(data: Any) -> Optional[Dict[str, Any]]:
        if data is None:
            return None
        return _object(data, "'default-styles'")

    def _deserialize_text_style(self, data: Dict[str, Any]) -> TextStyle:
        data = _object(data, "Text style")
        return TextStyle(
            name=data.get("name"),
            font_size=data.get("font-size"),
            font_family_name=data.get("font-family-name"),
            font_weight=data.get("font-weight"),
            font_style=data.get("font-style"),
        )

    def _deserialize_element_style(self, data: Dict[str, Any]) -> ElementStyle:
        data = _object(data, "Element style")
        name = data.get("name")
        target = data.get("target-element")
        if target is None:
            raise ParsingError(f"Element style '{name}' has no 'target-element'")
        raw_properties = data.get("properties")
        if raw_properties is not None and not isinstance(raw_properties, dict):
            raise ParsingError(
                f"'properties' of element style '{name}' must be an object", type(raw_properties).__name__
            )
        target_type = ElementTargetType.from_key(target)
        properties = target_type.properties_class.from_dict(raw_properties)
        return ElementStyle(name=name, target_element=target_type, properties=properties)

    def _deserialize_page_master(self, data: Dict[str, Any]) -> PageMasterStyle:
        data = _object(data, "Page master style")
        kwargs = {
            key.replace("-", "_"): value
            for key, value in data.items()
            if key.replace("-", "_") in PageMasterStyle.__dataclass_fields__
        }
        return PageMasterStyle(**kwargs)


def read_document(source: JsonSource) -> Document:
    """Read a document from a path, a JSON string or a decoded object."""
    return DocumentReader(**_source_kwargs(source)).read()


def read_style_sheet(source: JsonSource) -> StyleSheet:
    """Read a style sheet from a path, a JSON string or a decoded object."""
    return StyleSheetReader(**_source_kwargs(source)).read()


def _source_kwargs(source: JsonSource) -> Dict[str, Any]:
    if isinstance(source, dict):
        return {"json_data": source}
    if isinstance(source, str) and source.lstrip().startswith("{"):
        try:
            return {"json_data": json.loads(source)}
        except json.JSONDecodeError as exc:
            raise ParsingError("Invalid JSON", str(exc)) from exc
    return {"json_path": source}


__all__ = [
    "DocumentReader",
    "StyleSheetReader",
    "read_document",
    "read_style_sheet",
]
