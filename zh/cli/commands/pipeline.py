"""Pipeline commands: create, edit, delete and alias."""

import logging
from typing import Annotated, Any

import typer
from rich.markup import escape

from zh.api.queries import CREATE_PIPELINE, DELETE_PIPELINE, UPDATE_PIPELINE
from zh.cli.utils import WORKSPACE_OPTION, command_context, console, exit_on_error, get_config
from zh.cli.utils.aliases import delete_alias, set_alias, show_aliases
from zh.exceptions import UsageError
from zh.resolve import invalidate_pipelines, resolve_pipeline
from zh.resolve.pagination import dig

logger = logging.getLogger(__name__)

pipeline_app = typer.Typer(help="Manage pipelines (board columns)", no_args_is_help=True)

POSITION_OPTION = Annotated[
    int | None,
    typer.Option("--position", "-p", min=0, help="Zero-indexed position from the left"),
]
DESCRIPTION_OPTION = Annotated[str | None, typer.Option("--description", "-d", help="Pipeline description")]


@pipeline_app.command("create")
def create_pipeline(
    name: Annotated[str, typer.Argument(help="Name of the new pipeline")],
    position: POSITION_OPTION = None,
    description: DESCRIPTION_OPTION = None,
    workspace: WORKSPACE_OPTION = None,
) -> None:
    """Create a new pipeline in the workspace."""
    with exit_on_error(), command_context(workspace) as ctx:
        mutation_input: dict[str, Any] = {"workspaceId": ctx.workspace_id, "name": name}
        if position is not None:
            mutation_input["position"] = position
        if description is not None:
            mutation_input["description"] = description

        data = ctx.client.execute(CREATE_PIPELINE, {"input": mutation_input})
        pipeline = dig(data, ("createPipeline", "pipeline"), "creating pipeline")
        invalidate_pipelines(ctx.cache, ctx.workspace_id)

    created = escape(pipeline.get("name") or name)
    console.print(f"[green]✓ Created pipeline[/green] {created} [dim]{pipeline.get('id')}[/dim]")


@pipeline_app.command("edit")
def edit_pipeline(
    identifier: Annotated[str, typer.Argument(help="Pipeline ID, alias, name or unique name fragment")],
    new_name: Annotated[str | None, typer.Option("--name", "-n", help="New pipeline name")] = None,
    position: POSITION_OPTION = None,
    description: DESCRIPTION_OPTION = None,
    workspace: WORKSPACE_OPTION = None,
) -> None:
    """Update a pipeline's name, position or description."""
    with exit_on_error(), command_context(workspace) as ctx:
        if new_name is None and position is None and description is None:
            raise UsageError("nothing to change: pass --name, --position or --description")

        pipeline = resolve_pipeline(ctx.client, ctx.cache, ctx.workspace_id, identifier, ctx.config.aliases.pipelines)

        mutation_input: dict[str, Any] = {"pipelineId": pipeline.id}
        if new_name is not None:
            mutation_input["name"] = new_name
        if position is not None:
            mutation_input["position"] = position
        if description is not None:
            mutation_input["description"] = description

        data = ctx.client.execute(UPDATE_PIPELINE, {"input": mutation_input})
        updated = dig(data, ("updatePipeline", "pipeline"), "updating pipeline")
        invalidate_pipelines(ctx.cache, ctx.workspace_id)

    console.print(f"[green]✓ Updated pipeline[/green] {escape(updated.get('name') or pipeline.name)}")


@pipeline_app.command("delete")
def delete_pipeline(
    identifier: Annotated[str, typer.Argument(help="Pipeline to delete")],
    into: Annotated[str, typer.Option("--into", help="Pipeline that receives the deleted pipeline's issues")],
    workspace: WORKSPACE_OPTION = None,
) -> None:
    """Delete a pipeline, moving its issues into another pipeline."""
    with exit_on_error(), command_context(workspace) as ctx:
        aliases = ctx.config.aliases.pipelines
        pipeline = resolve_pipeline(ctx.client, ctx.cache, ctx.workspace_id, identifier, aliases)
        destination = resolve_pipeline(ctx.client, ctx.cache, ctx.workspace_id, into, aliases)
        if pipeline.id == destination.id:
            raise UsageError("--into must name a different pipeline than the one being deleted")

        ctx.client.execute(
            DELETE_PIPELINE,
            {"input": {"pipelineId": pipeline.id, "destinationPipelineId": destination.id}},
        )
        invalidate_pipelines(ctx.cache, ctx.workspace_id)

    console.print(
        f"[green]✓ Deleted pipeline[/green] {escape(pipeline.name)}; issues moved to {escape(destination.name)}"
    )


@pipeline_app.command("alias")
def alias_pipeline(
    name: Annotated[str | None, typer.Argument(help="Pipeline to alias (the alias itself with --delete)")] = None,
    alias: Annotated[str | None, typer.Argument(help="Shorthand to use for the pipeline")] = None,
    delete: Annotated[bool, typer.Option("--delete", help="Remove an existing alias")] = False,
    list_aliases: Annotated[bool, typer.Option("--list", help="List all pipeline aliases")] = False,
    workspace: WORKSPACE_OPTION = None,
) -> None:
    """Set a shorthand name for a pipeline.

    Aliases store the pipeline's name, so they keep working across cache
    refreshes and stop working if the pipeline is renamed.
    """
    with exit_on_error():
        if list_aliases:
            show_aliases(get_config().aliases.pipelines, "pipeline")
            return
        if delete:
            if not name or alias:
                raise UsageError("usage: zh pipeline alias --delete ALIAS")
            config = get_config()
            delete_alias(config, config.aliases.pipelines, "pipeline", name)
            return
        if not name or not alias:
            raise UsageError("usage: zh pipeline alias NAME ALIAS")

        with command_context(workspace) as ctx:
            pipeline = resolve_pipeline(
                ctx.client, ctx.cache, ctx.workspace_id, name, ctx.config.aliases.pipelines
            )
            set_alias(ctx.config, ctx.config.aliases.pipelines, "pipeline", alias, pipeline.name)
