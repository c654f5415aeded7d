"""Rich console instances and helper functions."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ccboc.ui.theme import get_theme


# Tables go to stdout, diagnostics to stderr
console = Console(theme=get_theme().to_rich_theme(), highlight=False)
err_console = Console(theme=get_theme().to_rich_theme(), stderr=True, highlight=False)


def print_error(message: str, title: str = "Error", target: Console | None = None) -> None:
    """Print an error message in a red panel on stderr."""
    content = Text()
    content.append(message, style="#FF5252")

    (target or err_console).print(Panel(
        content,
        title=f"[#FF5252 bold]✖ {title}[/#FF5252 bold]",
        border_style="#FF5252",
        box=box.ROUNDED,
        padding=(0, 2),
    ))


def print_success(message: str, target: Console | None = None) -> None:
    """Print a one-line success message."""
    (target or console).print(f"[success]✔[/success] {message}")
