"""Spinner shown while a request is in flight."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from ccboc.ui.console import err_console

SPINNER_STYLES = {
    "default": "dots",
    "loading": "dots12",
    "upload": "arc",
    "download": "bouncingBar",
}


@contextmanager
def create_spinner(message: str, style: str = "default") -> Generator[None, None, None]:
    """Context manager for showing a spinner during an operation.

    Drawn on stderr, so piped table output stays clean; Rich skips the
    animation entirely when stderr is not a terminal.
    """
    spinner_type = SPINNER_STYLES.get(style, "dots")
    with err_console.status(
        f"[primary]{message}[/primary]",
        spinner=spinner_type,
        spinner_style="primary",
    ):
        yield
