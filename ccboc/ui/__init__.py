"""UI components for the ccboc CLI."""

from ccboc.ui.console import console, err_console, print_error, print_success
from ccboc.ui.theme import Theme, get_theme

__all__ = [
    # Theme
    "Theme",
    "get_theme",
    # Console
    "console",
    "err_console",
    "print_error",
    "print_success",
]
