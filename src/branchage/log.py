"""Diagnostic logging for branchage.

Log records go to stderr through rich, one line each, prefixed with a
colored level tag such as ``[DEBUG]``.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "branchage"

LEVEL_TAGS = {
    logging.CRITICAL: ("ERROR", "bold red"),
    logging.ERROR: ("ERROR", "red"),
    logging.WARNING: ("WARN", "yellow"),
    logging.INFO: ("INFO", "green"),
    logging.DEBUG: ("DEBUG", "blue"),
    TRACE: ("TRACE", "magenta"),
}


class LevelTagHandler(RichHandler):
    """Rich handler that renders the level as a bracketed tag."""

    def get_level_text(self, record: logging.LogRecord) -> Text:
        tag, style = LEVEL_TAGS.get(record.levelno, (record.levelname, ""))
        return Text(f"[{tag}]", style=style)


def build_logger(verbosity: int = 0, console: Optional[Console] = None) -> logging.Logger:
    """Configure and return the ``branchage`` logger.

    Args:
        verbosity: 0 disables logging, 1 logs at DEBUG and 2 or more at TRACE
        console: Console to write to, defaults to a new stderr console
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = False

    if verbosity <= 0:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    handler = LevelTagHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbosity == 1 else TRACE)
    return logger
