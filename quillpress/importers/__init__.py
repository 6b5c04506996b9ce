"""Readers turning JSON input into documents and style sheets."""

from .json_reader import DocumentReader, StyleSheetReader, read_document, read_style_sheet

__all__ = ["DocumentReader", "StyleSheetReader", "read_document", "read_style_sheet"]
