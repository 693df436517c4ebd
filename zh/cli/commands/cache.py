"""Cache maintenance commands."""

from typing import Annotated

import typer

from zh.cli.utils import console, exit_on_error, get_config, get_workspace_id, open_cache

cache_app = typer.Typer(help="Manage the local resolution cache", no_args_is_help=True)


@cache_app.command("clear")
def clear_cache(
    workspace: Annotated[
        bool,
        typer.Option("--workspace", "-w", help="Clear only the current workspace's cache"),
    ] = False,
) -> None:
    """Clear all cached data, or only the current workspace's."""
    with exit_on_error():
        config = get_config()
        with open_cache(config) as cache:
            if workspace:
                workspace_id = get_workspace_id(config)
                removed = cache.clear_workspace(workspace_id)
                console.print(f"[green]✓ Cleared {removed} cached entries for the current workspace[/green]")
                return
            cache.clear_all()
    console.print("[green]✓ Cleared all cached data[/green]")


@cache_app.command("info")
def cache_info() -> None:
    """Show where the cache lives and how many entries it holds."""
    with exit_on_error():
        config = get_config()
        with open_cache(config) as cache:
            size = cache.get_cache_size()
    console.print(f"Cache directory: {config.cache_dir}", highlight=False)
    console.print(f"Entries: {size} (expire after {config.cache_ttl_hours:g} hours)", highlight=False)
