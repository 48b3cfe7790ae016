"""Logging setup for the command line.

The library code only ever asks for ``logging.getLogger(__name__)``; the
handler and level are installed once, here, by the CLI.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "panic": logging.CRITICAL,
}


def parse_level(level: str) -> int:
    """Map a verbosity name to a logging level.

    Raises:
        ValueError: If ``level`` is not a known verbosity name.
    """
    try:
        return LEVELS[level.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown log level {level!r} (expected one of: {', '.join(sorted(LEVELS))})"
        ) from None


def setup_logging(level: str = "warning", console: Console | None = None) -> logging.Logger:
    """Configure the ``chopchop`` logger hierarchy and return its root."""
    logger = logging.getLogger("chopchop")
    logger.setLevel(parse_level(level))
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
