"""Output dispatcher — renders data in table, JSON, YAML, or CSV format."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console

from vpclink_cli.output.tables import kv_table, make_table

console = Console()


def to_data(data: Any) -> Any:
    """Convert models and sets into plain JSON-compatible structures."""
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(data, (set, frozenset)):
        return sorted(data)
    if isinstance(data, dict):
        return {k: to_data(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_data(v) for v in data]
    return data


def output_json(data: Any) -> None:
    """Print data as formatted JSON."""
    console.print_json(json.dumps(to_data(data), indent=2, default=str))


def output_yaml(data: Any) -> None:
    """Print data as YAML."""
    import yaml

    console.print(yaml.safe_dump(to_data(data), default_flow_style=False, sort_keys=False), end="")


def output_csv(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
    """Print data as CSV."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(columns)
    writer.writerows(
        [[str(v) if v is not None else "" for v in row] for row in rows]
    )
    console.print(buf.getvalue(), end="")


def output_table(
    data: Any,
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Print data as a Rich table: key-value for dicts, else columns and rows."""
    if kv and isinstance(data, dict):
        console.print(kv_table(data, title=title))
    else:
        console.print(make_table(title, columns or [], rows or []))


def output(
    data: Any,
    fmt: str = "table",
    *,
    columns: Sequence[str] | None = None,
    rows: Sequence[Sequence[Any]] | None = None,
    title: str | None = None,
    kv: bool = False,
) -> None:
    """Dispatch output to the appropriate formatter."""
    if fmt == "json":
        output_json(data)
    elif fmt == "yaml":
        output_yaml(data)
    elif fmt == "csv":
        if columns and rows is not None:
            output_csv(columns, rows)
        else:
            output_json(data)
    else:
        output_table(data, columns=columns, rows=rows, title=title, kv=kv)
