"""Table renderers for decoded resources.

One renderer per resource kind; `render` dispatches on the resource's
`kind` tag.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ccboc.core.resources import (
    Calculation,
    CalculationBulk,
    CalculationBulkList,
    CalculationList,
    Phase,
    Resource,
    ResourceKind,
    WorkerPool,
    WorkerPoolList,
)
from ccboc.ui.console import console

CALCULATION_COLUMNS = ["#", "Name", "Teff", "LogG", "Phase", "Worker"]
BULK_COLUMNS = ["#", "Name", "Teff", "LogG", "Phase"]
WORKER_POOL_LIST_COLUMNS = ["#", "Name", "Workers"]
WORKER_POOL_COLUMNS = ["Name", "Workers"]

CHILD_INDENT = "  └ "


def format_teff(value: float) -> str:
    return f"{value:0.1f}"


def format_logg(value: float) -> str:
    return f"{value:0.2f}"


def format_phase(phase: Optional[Phase]) -> str:
    return phase.value if phase is not None else ""


def _new_table(columns: list[str], total: Optional[int] = None) -> Table:
    """Create a table; a total adds a `Total N` footer under the first two columns."""
    table = Table(
        box=box.SIMPLE,
        header_style="primary.bold",
        footer_style="primary.bold",
        show_footer=total is not None,
    )
    for i, name in enumerate(columns):
        footer = ""
        if total is not None and i == 0:
            footer = "Total"
        elif total is not None and i == 1:
            footer = str(total)
        justify = "right" if name in ("#", "Teff", "LogG") else "left"
        table.add_column(name, footer=footer, justify=justify)
    return table


def _calculation_row(index: Any, calc: Calculation) -> list[str]:
    return [
        str(index),
        escape(calc.name),
        format_teff(calc.teff),
        format_logg(calc.logg),
        format_phase(calc.phase),
        escape(calc.assign),
    ]


def calculation_table(calc: Calculation) -> Table:
    table = _new_table(CALCULATION_COLUMNS)
    table.add_row(*_calculation_row(1, calc))
    return table


def calculation_list_table(calcs: CalculationList) -> Table:
    table = _new_table(CALCULATION_COLUMNS, total=len(calcs.items))
    for i, calc in enumerate(calcs.items, 1):
        table.add_row(*_calculation_row(i, calc))
    return table


def bulk_table(bulk: CalculationBulk) -> Table:
    """One row per calculation, each labelled with the bulk name."""
    table = _new_table(BULK_COLUMNS, total=len(bulk.calculations))
    for i, calc in enumerate(bulk.calculations, 1):
        table.add_row(
            str(i),
            escape(bulk.name),
            format_teff(calc.teff),
            format_logg(calc.logg),
            format_phase(calc.phase),
        )
    return table


def bulk_list_table(bulks: CalculationBulkList) -> Table:
    """A header row per bulk followed by its calculations."""
    table = _new_table(BULK_COLUMNS, total=len(bulks.items))
    for i, bulk in enumerate(bulks.items, 1):
        table.add_row(str(i), Text(bulk.name, style="tertiary.bold"), "", "", "")
        for calc in bulk.calculations:
            table.add_row(
                "",
                f"{CHILD_INDENT}{escape(calc.name)}",
                format_teff(calc.teff),
                format_logg(calc.logg),
                format_phase(calc.phase),
            )
    return table


def worker_pool_table(pool: WorkerPool) -> Table:
    table = _new_table(WORKER_POOL_COLUMNS, total=len(pool.workers))
    table.add_row(Text(pool.name, style="tertiary.bold"), "")
    for worker in pool.workers:
        table.add_row("", escape(worker.name))
    return table


def worker_pool_list_table(pools: WorkerPoolList) -> Table:
    """A header row per pool followed by its workers."""
    table = _new_table(WORKER_POOL_LIST_COLUMNS, total=len(pools.items))
    for i, pool in enumerate(pools.items, 1):
        table.add_row(str(i), Text(pool.name, style="tertiary.bold"), "")
        for worker in pool.workers:
            table.add_row("", "", f"{CHILD_INDENT}{escape(worker.name)}")
    return table


RENDERERS: dict[ResourceKind, Callable[[Any], Table]] = {
    ResourceKind.CALCULATION: calculation_table,
    ResourceKind.CALCULATION_LIST: calculation_list_table,
    ResourceKind.CALCULATION_BULK: bulk_table,
    ResourceKind.CALCULATION_BULK_LIST: bulk_list_table,
    ResourceKind.WORKER_POOL: worker_pool_table,
    ResourceKind.WORKER_POOL_LIST: worker_pool_list_table,
}


def build_table(resource: Resource) -> Table:
    return RENDERERS[resource.kind](resource)


def render(resource: Resource, target: Console | None = None) -> None:
    """Print a resource as a table on stdout."""
    (target or console).print(build_table(resource))
