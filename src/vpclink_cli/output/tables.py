"""Rich table rendering helpers."""

from __future__ import annotations

from typing import Any, Sequence

from rich.table import Table
from rich.text import Text

from vpclink_cli.models.vpc_link import PatchOp, PatchOperation

OP_STYLES = {
    PatchOp.ADD: "green",
    PatchOp.REMOVE: "red",
    PatchOp.REPLACE: "yellow",
}


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(str(cell) if cell is not None else "" for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False, show_lines=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value) if value is not None else "")
    return table


def patch_rows(patches: Sequence[PatchOperation]) -> list[list[str]]:
    """Rows of (op, path, value) for a patch plan."""
    return [[p.op.value, p.path, p.value if p.value is not None else ""] for p in patches]


def patch_table(patches: Sequence[PatchOperation], *, title: str | None = None) -> Table:
    """Render a patch plan with the operation colored by kind."""
    table = Table(title=title)
    table.add_column("Op", no_wrap=True)
    table.add_column("Path")
    table.add_column("Value")
    for p in patches:
        table.add_row(Text(p.op.value, style=OP_STYLES[p.op]), Text(p.path), Text(p.value or ""))
    return table
