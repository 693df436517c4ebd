"""Epic commands: create and alias."""

from typing import Annotated, Any

import typer
from rich.markup import escape

from zh.api.client import GraphQLExecutor
from zh.api.queries import CREATE_ZENHUB_EPIC, WORKSPACE_ORGANIZATION
from zh.cli.utils import WORKSPACE_OPTION, command_context, console, exit_on_error, get_config
from zh.cli.utils.aliases import delete_alias, set_alias, show_aliases
from zh.exceptions import MalformedResponseError, UsageError
from zh.resolve import invalidate_epics, resolve_epic
from zh.resolve.pagination import dig

epic_app = typer.Typer(help="Manage epics", no_args_is_help=True)


def _organization_id(client: GraphQLExecutor, workspace_id: str) -> str:
    data = client.execute(WORKSPACE_ORGANIZATION, {"workspaceId": workspace_id})
    organization = dig(data, ("workspace", "zenhubOrganization"), "fetching workspace organization")
    organization_id = organization.get("id")
    if not organization_id:
        raise MalformedResponseError("fetching workspace organization", "organization has no id")
    return str(organization_id)


@epic_app.command("create")
def create_epic(
    title: Annotated[str, typer.Argument(help="Epic title")],
    body: Annotated[str | None, typer.Option("--body", "-b", help="Epic description (markdown)")] = None,
    workspace: WORKSPACE_OPTION = None,
) -> None:
    """Create a new epic in the workspace's organization."""
    with exit_on_error(), command_context(workspace) as ctx:
        epic_input: dict[str, Any] = {"title": title}
        if body is not None:
            epic_input["body"] = body

        organization_id = _organization_id(ctx.client, ctx.workspace_id)
        data = ctx.client.execute(
            CREATE_ZENHUB_EPIC,
            {"input": {"zenhubOrganizationId": organization_id, "zenhubEpic": epic_input}},
        )
        epic = dig(data, ("createZenhubEpic", "zenhubEpic"), "creating epic")
        invalidate_epics(ctx.cache, ctx.workspace_id)

    console.print(f"[green]✓ Created epic[/green] {escape(epic.get('title') or title)} [dim]{epic.get('id')}[/dim]")


@epic_app.command("alias")
def alias_epic(
    name: Annotated[str | None, typer.Argument(help="Epic to alias (the alias itself with --delete)")] = None,
    alias: Annotated[str | None, typer.Argument(help="Shorthand to use for the epic")] = None,
    delete: Annotated[bool, typer.Option("--delete", help="Remove an existing alias")] = False,
    list_aliases: Annotated[bool, typer.Option("--list", help="List all epic aliases")] = False,
    workspace: WORKSPACE_OPTION = None,
) -> None:
    """Set a shorthand name for an epic."""
    with exit_on_error():
        if list_aliases:
            show_aliases(get_config().aliases.epics, "epic")
            return
        if delete:
            if not name or alias:
                raise UsageError("usage: zh epic alias --delete ALIAS")
            config = get_config()
            delete_alias(config, config.aliases.epics, "epic", name)
            return
        if not name or not alias:
            raise UsageError("usage: zh epic alias NAME ALIAS")

        with command_context(workspace) as ctx:
            epic = resolve_epic(ctx.client, ctx.cache, ctx.workspace_id, name, ctx.config.aliases.epics)
            set_alias(ctx.config, ctx.config.aliases.epics, "epic", alias, epic.name)
