"""Shared CLI options and enums for commands."""

from enum import StrEnum
from typing import Annotated

import typer


class OutputFormat(StrEnum):
    """Supported output formats across commands."""

    TABLE = "table"
    JSON = "json"


# Common typer options
WORKSPACE_OPTION = Annotated[
    str | None,
    typer.Option(
        "--workspace",
        "-w",
        help="Workspace ID (defaults to ZH_WORKSPACE or the configured workspace)",
    ),
]

OUTPUT_FORMAT_OPTION = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format (table, json)",
        case_sensitive=False,
    ),
]

LIMIT_OPTION = Annotated[
    int | None,
    typer.Option(
        "--limit",
        "-l",
        min=1,
        help="Show at most this many items (the cache is not updated from partial lists)",
    ),
]

REPO_OPTION = Annotated[
    str | None,
    typer.Option(
        "--repo",
        "-r",
        help="Repository (repo or owner/repo) for bare issue numbers and branch names",
    ),
]

VERBOSE_OPTION = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Log requests and cache activity to stderr",
    ),
]
