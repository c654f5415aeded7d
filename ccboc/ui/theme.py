"""Colours for tables, messages and the phase grid."""

from __future__ import annotations

from dataclasses import dataclass
from rich.style import Style
from rich.theme import Theme as RichTheme


@dataclass
class Theme:
    """Color theme for the CLI."""

    # Tables
    primary: str = "#C77DFF"      # headers, footers, titles
    secondary: str = "#FF8C42"    # object names in messages
    tertiary: str = "#9D4EDD"     # bulk and workerpool group rows

    # Messages
    success: str = "#00E676"
    error: str = "#FF5252"
    warning: str = "#FFB347"
    text: str = "#E8E8E8"
    muted: str = "#888888"

    # Phase grid backgrounds
    created: str = "#448AFF"
    processing: str = "#FFB347"
    completed: str = "#00E676"
    failed: str = "#FF5252"

    def phase_styles(self) -> dict[str, Style]:
        """One cell style per phase; light text on dark backgrounds."""
        return {
            "phase.created": Style(color="#FFFFFF", bgcolor=self.created, bold=True),
            "phase.processing": Style(color="#000000", bgcolor=self.processing, bold=True),
            "phase.completed": Style(color="#000000", bgcolor=self.completed, bold=True),
            "phase.failed": Style(color="#FFFFFF", bgcolor=self.failed, bold=True),
            "phase.unknown": Style(color=self.muted),
        }

    def to_rich_theme(self) -> RichTheme:
        """Convert to Rich theme."""
        return RichTheme({
            "primary": Style(color=self.primary),
            "primary.bold": Style(color=self.primary, bold=True),
            "secondary": Style(color=self.secondary),
            "tertiary": Style(color=self.tertiary),
            "tertiary.bold": Style(color=self.tertiary, bold=True),
            "command": Style(color=self.primary, bold=True),
            "path": Style(color=self.secondary),

            "success": Style(color=self.success, bold=True),
            "error": Style(color=self.error, bold=True),
            "warning": Style(color=self.warning),
            "text": Style(color=self.text),
            "muted": Style(color=self.muted),

            **self.phase_styles(),
        })


_theme = Theme()


def get_theme() -> Theme:
    """Get the current theme."""
    return _theme
