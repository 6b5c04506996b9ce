"""
Console logging through rich.

Used by the CLI; library code only ever calls ``logging.getLogger(__name__)``.
"""

import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table


def setup_logging(level: str = "INFO", use_rich: bool = True, console: Optional[Console] = None) -> None:
    """
    Setup logging for the application.

    Args:
        level: Log level name
        use_rich: Route records through a ``RichHandler``; plain stream output otherwise
        console: Console to write to (a new stderr console by default)
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_path=True,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.addHandler(handler)


def print_table(title: str, data: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Display key/value data in a rich table."""
    table = Table(title=title)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in data.items():
        table.add_row(str(key), str(value))
    (console or Console()).print(table)
