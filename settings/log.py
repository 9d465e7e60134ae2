"""Logging setup for the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_handler: RichHandler | None = None


def setup_logging(level: str = "WARNING", console: Console | None = None) -> None:
    """Route log records through a rich handler on stderr.

    Safe to call more than once; the handler is installed a single time and
    only the level changes afterwards.
    """
    global _handler

    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    if _handler is None:
        _handler = RichHandler(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
        )
        root.addHandler(_handler)

    root.setLevel(numeric_level)
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(numeric_level, logging.WARNING))
