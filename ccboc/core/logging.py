"""Logging setup for the ccboc CLI.

Log records go to stderr through Rich so they never mix with table output
on stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from ccboc.ui.theme import get_theme

ROOT_LOGGER = "ccboc"


def setup_logging(level: str = "INFO", console: Console | None = None) -> logging.Logger:
    """Configure the `ccboc` logger hierarchy.

    Calling it again replaces the previous handler.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True, theme=get_theme().to_rich_theme()),
        show_path=False,
        show_time=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the `ccboc` hierarchy."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
