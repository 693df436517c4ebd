"""Shared output handlers for CLI commands."""

import json
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from zh.core.constants import DisplayConstants
from zh.exceptions import ZHError, exit_code_for

console = Console()
err_console = Console(stderr=True)


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Print zh errors to stderr and exit with the matching code."""
    try:
        yield
    except ZHError as e:
        err_console.print(f"[red]Error:[/red] {escape(e.message)}", highlight=False)
        raise typer.Exit(exit_code_for(e)) from e


def handle_json_output(data: Sequence[BaseModel] | BaseModel) -> None:
    """Print a model or a list of models as indented JSON on stdout."""
    if isinstance(data, Sequence):
        output_data: Any = [item.model_dump(mode="json") for item in data]
    else:
        output_data = data.model_dump(mode="json")
    print(json.dumps(output_data, indent=2, default=str))


def handle_table_output(title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    """Render rows as a rich table; the first column is always the id."""
    table = Table(title=title, expand=False)
    for i, column in enumerate(columns):
        if i == 0:
            table.add_column(column, style="dim", no_wrap=True, max_width=DisplayConstants.ID_COLUMN_WIDTH)
        else:
            table.add_column(column, max_width=DisplayConstants.NAME_COLUMN_WIDTH)

    for row in rows:
        table.add_row(*(escape(cell) for cell in row))

    console.print(table)
    if not rows:
        console.print("[dim]No results.[/dim]")
