"""
Pytest configuration for quillpress
"""

import json
import logging
import sys
from pathlib import Path

import pytest

from quillpress.importers import read_document, read_style_sheet


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests of a single component")
    config.addinivalue_line("markers", "integration: tests spanning reader, resolver and renderer")
    config.addinivalue_line("markers", "slow: tests that write PDF files")


@pytest.fixture(autouse=True)
def configure_logging():
    """Console-only logging at WARNING; restores the root logger afterwards."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)
    package_logger = logging.getLogger("quillpress")
    for handler in list(package_logger.handlers):
        handler.close()
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile

    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def style_sheet_data():
    """Style sheet covering every element target and a few defaults."""
    return {
        "text-styles": [
            {
                "name": "body",
                "font-size": "11pt",
                "font-family-name": "Helvetica",
                "font-weight": "400",
                "font-style": "normal",
            },
            {
                "name": "title",
                "font-size": "20pt",
                "font-family-name": "Times",
                "font-weight": "700",
                "font-style": "normal",
            },
        ],
        "element-styles": [
            {
                "name": "h1",
                "target-element": "headline",
                "properties": {"font-size": 24, "font-weight": "bold", "space-after": "0.4cm"},
            },
            {
                "name": "p-default",
                "target-element": "paragraph",
                "properties": {"text-style-name": "body", "space-after": "4pt"},
            },
            {
                "name": "small",
                "target-element": "paragraph",
                "properties": {"font-size": "8pt", "text-align": "center"},
            },
            {
                "name": "footnote-default",
                "target-element": "footnote",
                "properties": {"font-size": 8},
            },
            {
                "name": "link",
                "target-element": "hyperlink",
                "properties": {"text-color": "#0000FF", "text-decoration": "underline"},
            },
            {
                "name": "em",
                "target-element": "text-run",
                "properties": {"font-style": "italic"},
            },
            {
                "name": "grid",
                "target-element": "table",
                "properties": {"border": "1px solid black"},
            },
            {
                "name": "head-cell",
                "target-element": "table-cell",
                "properties": {"background-color": "#DDDDDD", "font-weight": "bold", "padding": "3pt"},
            },
            {
                "name": "notice-box",
                "target-element": "section",
                "properties": {"border": "0.5pt solid gray", "padding": "4pt"},
            },
            {
                "name": "notice-box.note",
                "target-element": "section",
                "properties": {"border": "1pt solid #CC0000", "background-color": "#FFF4F4", "padding": "6pt"},
            },
            {
                "name": "steps",
                "target-element": "list",
                "properties": {"list-style-type": "lower-alpha", "provisional-distance-between-starts": "1cm"},
            },
            {
                "name": "columns",
                "target-element": "layout-table",
                "properties": {"space-before": "6pt"},
            },
            {
                "name": "chapter",
                "target-element": "part",
                "properties": {"page-break-before": "page"},
            },
        ],
        "page-master-styles": [
            {
                "name": "main",
                "page-width": "21cm",
                "page-height": "29.7cm",
                "margin-top": "2.5cm",
                "margin-bottom": "2.5cm",
                "header-extent": "1.5cm",
                "footer-extent": "1.5cm",
            },
            {
                "name": "landscape",
                "page-width": "29.7cm",
                "page-height": "21cm",
                "margin": "2cm",
            },
        ],
        "default-styles": {"h1": "h1", "p": "p-default"},
    }


@pytest.fixture
def document_data():
    """Two page sequences using every node kind."""
    return {
        "metadata": {
            "title": "Quarterly Report",
            "author": "Finance",
            "keywords": ["report", "q3"],
            "language": "en-GB",
            "creation-date": "2024-10-01T09:30:00",
        },
        "internal-addresses": {"font-dictionary": "fonts", "image-dictionary": "images"},
        "page-sequences": [
            {
                "style-class": "main",
                "header": {
                    "elements": [
                        {
                            "type": "paragraph",
                            "style-class": "small",
                            "inline-elements": [{"type": "text-run", "text": "Quarterly Report"}],
                        }
                    ]
                },
                "footer": [
                    {
                        "type": "paragraph",
                        "style-class": "small",
                        "inline-elements": [
                            {"type": "text-run", "text": "Page "},
                            {"type": "page-number"},
                        ],
                    }
                ],
                "body": {
                    "elements": [
                        {
                            "type": "headline",
                            "level": 1,
                            "style-class": "h1",
                            "inline-elements": [{"type": "text-run", "text": "Summary"}],
                        },
                        {
                            "type": "paragraph",
                            "inline-elements": [
                                {"type": "text-run", "text": "Revenue grew "},
                                {"type": "text-run", "text": "again", "style-class": "em"},
                                {
                                    "type": "footnote",
                                    "index": "1",
                                    "inline-elements": [{"type": "text-run", "text": "Unaudited figures."}],
                                },
                                {"type": "text-run", "text": ". See "},
                                {
                                    "type": "hyperlink",
                                    "text": "the website",
                                    "href": "https://example.com/q3",
                                    "style-class": "link",
                                },
                            ],
                        },
                        {
                            "type": "list",
                            "ordering": "ordered",
                            "style-class": "steps",
                            "items": [
                                {
                                    "elements": [
                                        {
                                            "type": "paragraph",
                                            "inline-elements": [{"type": "text-run", "text": "Collect data"}],
                                        }
                                    ]
                                },
                                {
                                    "label": [{"type": "text-run", "text": "*"}],
                                    "elements": [
                                        {
                                            "type": "paragraph",
                                            "inline-elements": [{"type": "text-run", "text": "Review"}],
                                        }
                                    ],
                                },
                            ],
                        },
                        {
                            "type": "table",
                            "style-class": "grid",
                            "columns": ["4cm", "*", "3cm"],
                            "header": {
                                "rows": [
                                    {
                                        "cells": [
                                            {
                                                "style-class": "head-cell",
                                                "col-span": 2,
                                                "elements": [
                                                    {
                                                        "type": "paragraph",
                                                        "inline-elements": [{"type": "text-run", "text": "Region"}],
                                                    }
                                                ],
                                            },
                                            {
                                                "style-class": "head-cell",
                                                "elements": [
                                                    {
                                                        "type": "paragraph",
                                                        "inline-elements": [{"type": "text-run", "text": "Total"}],
                                                    }
                                                ],
                                            },
                                        ]
                                    }
                                ]
                            },
                            "body": {
                                "rows": [
                                    {
                                        "cells": [
                                            {
                                                "row-span": 2,
                                                "elements": [
                                                    {
                                                        "type": "paragraph",
                                                        "inline-elements": [{"type": "text-run", "text": "EU"}],
                                                    }
                                                ],
                                            },
                                            {
                                                "elements": [
                                                    {
                                                        "type": "paragraph",
                                                        "inline-elements": [{"type": "text-run", "text": "North"}],
                                                    }
                                                ]
                                            },
                                            {
                                                "elements": [
                                                    {
                                                        "type": "paragraph",
                                                        "inline-elements": [{"type": "text-run", "text": "120"}],
                                                    }
                                                ]
                                            },
                                        ]
                                    },
                                    {
                                        "cells": [
                                            {
                                                "elements": [
                                                    {
                                                        "type": "paragraph",
                                                        "inline-elements": [{"type": "text-run", "text": "South"}],
                                                    }
                                                ]
                                            },
                                            {
                                                "elements": [
                                                    {
                                                        "type": "paragraph",
                                                        "inline-elements": [{"type": "text-run", "text": "80"}],
                                                    }
                                                ]
                                            },
                                        ]
                                    },
                                ]
                            },
                        },
                        {
                            "type": "section",
                            "style-class": "notice-box",
                            "variant": "note",
                            "alt-text": "Important note",
                            "elements": [
                                {
                                    "type": "paragraph",
                                    "inline-elements": [{"type": "text-run", "text": "Figures are preliminary."}],
                                }
                            ],
                        },
                        {
                            "type": "layout-table",
                            "style-class": "columns",
                            "element-left": {
                                "type": "paragraph",
                                "inline-elements": [{"type": "text-run", "text": "Left column"}],
                            },
                            "element-right": {
                                "type": "paragraph",
                                "inline-elements": [{"type": "text-run", "text": "Right column"}],
                            },
                        },
                    ]
                },
            },
            {
                "style-class": "landscape",
                "body": [
                    {
                        "type": "part",
                        "variant": "article",
                        "elements": [
                            {
                                "type": "headline",
                                "level": 2,
                                "inline-elements": [{"type": "text-run", "text": "Appendix"}],
                            },
                            {
                                "type": "list",
                                "items": [
                                    {
                                        "elements": [
                                            {
                                                "type": "paragraph",
                                                "inline-elements": [{"type": "text-run", "text": "Line one"}],
                                            }
                                        ]
                                    }
                                ],
                            },
                        ],
                    }
                ],
            },
        ],
    }


@pytest.fixture
def style_sheet(style_sheet_data):
    return read_style_sheet(style_sheet_data)


@pytest.fixture
def document(document_data):
    return read_document(document_data)


@pytest.fixture
def write_json(temp_dir):
    """Write an object to ``temp_dir/<name>`` and return the path."""

    def _write(name, data):
        path = temp_dir / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def png_image(temp_dir):
    """A small RGB PNG at 96 dpi."""
    from PIL import Image

    path = temp_dir / "logo.png"
    Image.new("RGB", (96, 48), "navy").save(path, dpi=(96, 96))
    return path
