"""Main CLI entry point for zh."""

import logging
import sys

import typer

from zh.cli.commands.cache import cache_app
from zh.cli.commands.epic import epic_app
from zh.cli.commands.list import list_app
from zh.cli.commands.pipeline import pipeline_app
from zh.cli.commands.resolve import resolve_app
from zh.cli.commands.workspace import workspace_app
from zh.cli.utils import VERBOSE_OPTION

app = typer.Typer(
    name="zh",
    help="zh - ZenHub from the command line",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def callback(verbose: VERBOSE_OPTION = False) -> None:
    """
    zh: work with ZenHub workspaces by name instead of ID
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)


app.add_typer(resolve_app, name="resolve")
app.add_typer(list_app, name="list")
app.add_typer(pipeline_app, name="pipeline")
app.add_typer(epic_app, name="epic")
app.add_typer(workspace_app, name="workspace")
app.add_typer(cache_app, name="cache")


if __name__ == "__main__":
    app()
