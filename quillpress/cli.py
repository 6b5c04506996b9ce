"""
Command-line interface for quillpress.

Usage:
    quillpress render document.json styles.json -o out.pdf
    quillpress resolve document.json styles.json
    quillpress info document.json
    quillpress version
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .config import RenderConfig
from .engine.style_resolver import ResolvedStyles, StyleResolverService
from .exceptions import QuillPressError
from .importers.json_reader import read_document, read_style_sheet
from .models import Document, Node
from .styles import StyleSheet
from .utils.logger import configure_logging
from .utils.rich_logger import print_table, setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    common.add_argument("--plain-log", action="store_true", help="Plain log output instead of rich")
    common.add_argument("--log-file", help="Also write a rotating log file")

    parser = argparse.ArgumentParser(
        prog="quillpress",
        description="quillpress - styled PDF documents from JSON content trees",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  quillpress render report.json styles.json -o report.pdf
  quillpress render report.json styles.json --image-root assets/
  quillpress resolve report.json styles.json --output resolved.json
  quillpress info report.json
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", parents=[common], help="Resolve styles and write a PDF")
    render_parser.add_argument("document", help="Document JSON file")
    render_parser.add_argument("stylesheet", help="Style sheet JSON file")
    render_parser.add_argument("-o", "--output", help="Output PDF path (default: document name with .pdf)")
    render_parser.add_argument("--image-root", help="Directory relative image paths are resolved against")
    render_parser.add_argument("--font-root", help="Directory with TrueType font files")
    render_parser.add_argument("--base-font", default="Helvetica", help="Fallback font family (default: Helvetica)")

    resolve_parser = subparsers.add_parser("resolve", parents=[common], help="Print resolved styles as JSON")
    resolve_parser.add_argument("document", help="Document JSON file")
    resolve_parser.add_argument("stylesheet", help="Style sheet JSON file")
    resolve_parser.add_argument("-o", "--output", help="Write JSON here instead of stdout")

    info_parser = subparsers.add_parser("info", parents=[common], help="Show document information")
    info_parser.add_argument("document", help="Document JSON file")
    info_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("version", parents=[common], help="Show version information")

    return parser


def _load(args) -> Tuple[Document, StyleSheet]:
    document = read_document(Path(args.document))
    style_sheet = read_style_sheet(Path(args.stylesheet))
    return document, style_sheet


def cmd_render(args) -> int:
    """Handle render command."""
    from .renderers.pdf_renderer import PdfRenderer

    document, style_sheet = _load(args)
    style_sheet.validate()

    output_path = Path(args.output) if args.output else Path(args.document).with_suffix(".pdf")
    config = RenderConfig(
        base_font=args.base_font,
        image_root=Path(args.image_root) if args.image_root else None,
        font_root=Path(args.font_root) if args.font_root else None,
    )

    resolved = StyleResolverService().resolve(document, style_sheet)
    PdfRenderer(config).render(document, style_sheet, resolved, output_path)

    print(f"✅ Saved: {output_path}")
    return 0


def iter_with_paths(document: Document) -> Iterator[Tuple[str, Node]]:
    """Every node with a slash-separated position, e.g. ``0/body/2/1``."""

    def walk(node: Node, path: str) -> Iterator[Tuple[str, Node]]:
        yield path, node
        for index, child in enumerate(node.children()):
            yield from walk(child, f"{path}/{index}")

    for seq_index, sequence in enumerate(document.page_sequences):
        for area_name in ("header", "body", "footer"):
            area = getattr(sequence, area_name)
            for index, element in enumerate(area.elements):
                yield from walk(element, f"{seq_index}/{area_name}/{index}")


def describe_resolved(document: Document, resolved: ResolvedStyles) -> List[Dict[str, Any]]:
    entries = []
    for path, node in iter_with_paths(document):
        style = resolved.get(node)
        entries.append(
            {
                "path": path,
                "type": node.kind.value,
                "style-class": node.style_class,
                "style": style.to_dict() if style is not None else None,
            }
        )
    return entries


def cmd_resolve(args) -> int:
    """Handle resolve command."""
    document, style_sheet = _load(args)
    resolved = StyleResolverService().resolve(document, style_sheet)
    output = json.dumps(describe_resolved(document, resolved), indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"✅ Saved: {args.output}")
    else:
        print(output)
    return 0


def cmd_info(args) -> int:
    """Handle info command."""
    document = read_document(Path(args.document))
    metadata = document.metadata

    info = {
        "file": str(args.document),
        "metadata": {
            "title": metadata.title,
            "author": metadata.author,
            "subject": metadata.subject,
            "keywords": metadata.keywords,
            "language": metadata.language,
            "producer": metadata.producer,
            "creation_date": metadata.creation_date.isoformat() if metadata.creation_date else None,
        },
        "page_sequences": [s.style_class for s in document.page_sequences],
        "nodes": document.count_kinds(),
    }

    if args.json:
        print(json.dumps(info, indent=2, ensure_ascii=False, default=str))
    else:
        print_table("Metadata", {k: v for k, v in info["metadata"].items() if v})
        print_table("Page sequences", dict(enumerate(info["page_sequences"])))
        print_table("Nodes", info["nodes"])
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__

    print(f"quillpress v{__version__}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    handlers = {
        "render": cmd_render,
        "resolve": cmd_resolve,
        "info": cmd_info,
        "version": cmd_version,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    setup_logging(args.log_level, use_rich=not args.plain_log)
    if args.log_file:
        configure_logging(args.log_level, args.log_file, console=False)

    try:
        return handler(args)
    except QuillPressError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
