from __future__ import annotations

import json
import time
from collections.abc import Iterable, Sequence
from typing import Any, Literal

import typer
import yaml
from rich.console import Console
from rich.table import Table

from photonctl.utils.serialization import to_plain_data

OutputFormat = Literal["json", "yaml", "table"]


def emit(value: Any, *, output: OutputFormat = "table", columns: Sequence[str] | None = None) -> None:
    """Render SDK/CLI output as json, yaml, or table.

    `columns` restricts and orders the table columns; json/yaml always carry
    the full document.
    """

    plain = to_plain_data(value)
    if output == "json":
        typer.echo(json.dumps(plain, indent=2))
        return
    if output == "yaml":
        typer.echo(yaml.safe_dump(plain, sort_keys=False).rstrip("\n"))
        return

    console = Console()
    if isinstance(plain, list) and all(isinstance(item, dict) for item in plain):
        keys: list[str] = list(columns or [])
        if not keys:
            for row in plain:
                for key in row:
                    if key not in keys:
                        keys.append(key)
        table = Table(show_header=True, header_style="bold")
        for key in keys:
            table.add_column(key)
        for row in plain:
            table.add_row(*[_cell(row.get(key)) for key in keys])
        console.print(table)
        console.print(f"Total: {len(plain)}")
        return

    if isinstance(plain, dict):
        table = Table(show_header=True, header_style="bold")
        table.add_column("key")
        table.add_column("value")
        for key, val in plain.items():
            if columns and key not in columns:
                continue
            table.add_row(str(key), _cell(val))
        console.print(table)
        return

    console.print(str(plain))


def emit_rows(rows: Iterable[Sequence[Any]]) -> None:
    """Print rows as tab-separated values for scripts (`--non-interactive`)."""

    for row in rows:
        typer.echo("\t".join(_cell(value) for value in row))


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def timestamp_to_string(timestamp: int | float | None) -> str:
    """Format an API timestamp (milliseconds since the epoch) in local time."""

    if timestamp is None or timestamp <= 0:
        return "-"
    return time.strftime("%Y-%m-%d %H:%M:%S.00", time.localtime(timestamp / 1000))
