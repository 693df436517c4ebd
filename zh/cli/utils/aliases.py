"""Alias table maintenance shared by ``zh pipeline alias`` and ``zh epic alias``."""

from rich.markup import escape

from zh.cli.utils.output import console, handle_table_output
from zh.config import Config, save_config
from zh.exceptions import NotFoundError, UsageError


def set_alias(config: Config, table: dict[str, str], kind: str, alias: str, name: str) -> None:
    """Point ``alias`` at an entity's display name and save the config file.

    Raises:
        UsageError: If the alias already points somewhere else
    """
    existing = table.get(alias)
    if existing == name:
        console.print(f"Alias '{escape(alias)}' already points to '{escape(name)}'.")
        return
    if existing is not None:
        raise UsageError(
            f"alias {alias!r} already exists (points to {existing!r}): use --delete first to remove it",
            {"alias": alias, "target": existing},
        )
    table[alias] = name
    save_config(config)
    console.print(f"[green]✓ {kind.capitalize()} alias[/green] '{escape(alias)}' -> '{escape(name)}'")


def delete_alias(config: Config, table: dict[str, str], kind: str, alias: str) -> None:
    """Remove an alias and save the config file.

    Raises:
        NotFoundError: If the alias does not exist
    """
    if alias not in table:
        raise NotFoundError(f"{kind} alias", alias, f"alias {alias!r} not found")
    del table[alias]
    save_config(config)
    console.print(f"[green]✓ Removed {kind} alias[/green] '{escape(alias)}'")


def show_aliases(table: dict[str, str], kind: str) -> None:
    """Print an alias table."""
    if not table:
        console.print(f"No {kind} aliases configured.")
        return
    handle_table_output(f"{kind.capitalize()} aliases", ["Alias", "Name"], [[a, n] for a, n in sorted(table.items())])
