"""Workspace commands: list and switch."""

import logging
from typing import Annotated

import typer
from rich.markup import escape

from zh.cli.utils import (
    OUTPUT_FORMAT_OPTION,
    OutputFormat,
    command_context,
    console,
    exit_on_error,
    handle_json_output,
    handle_table_output,
)
from zh.config import save_config
from zh.exceptions import CacheError
from zh.resolve import fetch_workspaces, fetch_workspaces_into_cache, on_workspace_switch, resolve_workspace

logger = logging.getLogger(__name__)

workspace_app = typer.Typer(help="List and switch workspaces", no_args_is_help=True)


@workspace_app.command("list")
def list_workspaces(output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE) -> None:
    """List every workspace the API key can access."""
    with exit_on_error(), command_context(require_workspace=False) as ctx:
        workspaces = fetch_workspaces(ctx.client)
        try:
            fetch_workspaces_into_cache(ctx.cache, workspaces)
        except CacheError as e:
            logger.warning(f"Could not update workspace cache: {e}")

    if output_format == OutputFormat.JSON:
        handle_json_output(workspaces)
        return

    rows = [
        [w.id, w.display_name or w.name, w.org_name, "*" if w.id == ctx.workspace_id else ""] for w in workspaces
    ]
    handle_table_output("Workspaces", ["ID", "Name", "Organization", "Current"], rows)


@workspace_app.command("switch")
def switch_workspace(
    name: Annotated[str, typer.Argument(help="Workspace ID, name or unique name fragment")],
) -> None:
    """Make another workspace the default and drop the old workspace's cache."""
    with exit_on_error(), command_context(require_workspace=False) as ctx:
        target = resolve_workspace(ctx.client, ctx.cache, name)
        label = escape(target.name) + (f" ({escape(target.org_name)})" if target.org_name else "")

        if target.id == ctx.config.workspace:
            console.print(f"Already using workspace {label}")
            return

        on_workspace_switch(ctx.cache, ctx.config.workspace)
        ctx.config.workspace = target.id
        save_config(ctx.config)

    console.print(f"[green]✓ Switched to workspace[/green] {label}")
