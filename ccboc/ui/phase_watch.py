"""Interactive phase view: redraw a bulk's grid on Enter, leave on Escape."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.key_binding import KeyBindings
from rich.console import Console

from ccboc.core.logging import get_logger
from ccboc.core.resources import CalculationBulk
from ccboc.ui.console import console
from ccboc.ui.phase_grid import phase_grid

logger = get_logger(__name__)


class WatchKey(str, Enum):
    REFRESH = "refresh"
    QUIT = "quit"


def _watch_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("enter")
    def _refresh(event) -> None:
        event.app.exit(result=WatchKey.REFRESH)

    @kb.add("escape", eager=True)
    @kb.add("c-c")
    @kb.add("c-d")
    def _quit(event) -> None:
        event.app.exit(result=WatchKey.QUIT)

    return kb


def read_watch_key(session: Optional[PromptSession] = None) -> WatchKey:
    """Block until the user presses Enter (refresh) or Escape (quit)."""
    session = session or PromptSession(key_bindings=_watch_bindings())
    result = session.prompt(HTML("<b>[Enter]</b> refresh  <b>[Esc]</b> quit "))
    return result if isinstance(result, WatchKey) else WatchKey.REFRESH


class PhaseWatch:
    """Two-state loop over a calculation bulk.

    Every refresh fetches the whole bulk again and redraws the whole grid.
    """

    def __init__(
        self,
        fetch: Callable[[], CalculationBulk],
        read_key: Callable[[], WatchKey] = read_watch_key,
        target: Console | None = None,
    ):
        self.fetch = fetch
        self.read_key = read_key
        self.console = target or console
        self.refreshes = 0

    def draw(self) -> CalculationBulk:
        bulk = self.fetch()
        self.console.clear()
        self.console.print(phase_grid(bulk))
        self.console.print()
        return bulk

    def run(self) -> None:
        """Draw once, then refresh on Enter until Escape."""
        self.draw()
        while True:
            key = self.read_key()
            if key is WatchKey.QUIT:
                logger.debug("phase watch stopped after %d refreshes", self.refreshes)
                return
            self.refreshes += 1
            self.draw()
