"""Colour-coded phase grid for a calculation bulk."""

from __future__ import annotations

from typing import Optional

from rich.console import Group
from rich.table import Table
from rich.text import Text

from ccboc.core.resources import Calculation, CalculationBulk, Phase

GRID_COLUMNS = 7

PHASE_STYLES: dict[Phase, str] = {
    Phase.CREATED: "phase.created",
    Phase.PROCESSING: "phase.processing",
    Phase.COMPLETED: "phase.completed",
    Phase.FAILED: "phase.failed",
}
UNKNOWN_STYLE = "phase.unknown"


def phase_style(phase: Optional[Phase]) -> str:
    return PHASE_STYLES.get(phase, UNKNOWN_STYLE) if phase is not None else UNKNOWN_STYLE


def phase_cell(calc: Calculation) -> Text:
    return Text(f" {calc.teff:0.1f} / {calc.logg:0.2f} ", style=phase_style(calc.phase))


def legend() -> Text:
    text = Text()
    for i, (phase, style) in enumerate(PHASE_STYLES.items()):
        if i:
            text.append("  ")
        text.append(f" {phase.value} ", style=style)
    return text


def phase_grid(bulk: CalculationBulk, columns: int = GRID_COLUMNS) -> Group:
    """Lay the bulk's calculations out in rows of `columns` cells."""
    grid = Table.grid(padding=(0, 1))
    for _ in range(columns):
        grid.add_column()

    cells = [phase_cell(calc) for calc in bulk.calculations]
    for start in range(0, len(cells), columns):
        row = cells[start:start + columns]
        row += [Text("")] * (columns - len(row))
        grid.add_row(*row)

    done = sum(1 for c in bulk.calculations if c.phase is Phase.COMPLETED)
    title = Text()
    title.append(bulk.name, style="primary.bold")
    title.append(f"  {done}/{len(bulk.calculations)} completed", style="muted")

    return Group(title, Text(""), grid, Text(""), legend())
