"""Resolve command implementation: turn an identifier into a canonical id."""

import logging
from collections.abc import Callable
from typing import Annotated

import typer
from pydantic import BaseModel

from zh.cli.utils import (
    OUTPUT_FORMAT_OPTION,
    REPO_OPTION,
    WORKSPACE_OPTION,
    CommandContext,
    OutputFormat,
    command_context,
    exit_on_error,
    get_github_client,
    handle_json_output,
)
from zh.models.results import IssueResult
from zh.resolve import (
    resolve_epic,
    resolve_issue,
    resolve_label,
    resolve_pipeline,
    resolve_priority,
    resolve_repo,
    resolve_sprint,
    resolve_user,
    resolve_zenhub_label,
)

logger = logging.getLogger(__name__)

resolve_app = typer.Typer(help="Resolve a name, alias or ID to the entity it refers to", no_args_is_help=True)

IDENTIFIER_ARGUMENT = Annotated[str, typer.Argument(help="ID, name, unique name fragment or alias")]


def _show(result: BaseModel, output_format: OutputFormat) -> None:
    if output_format == OutputFormat.JSON:
        handle_json_output(result)
        return
    label = result.full_ref if isinstance(result, IssueResult) else getattr(result, "name", "")
    print(f"{result.id}\t{label}")


def _run(workspace: str | None, output_format: OutputFormat, resolver: Callable[[CommandContext], BaseModel]) -> None:
    with exit_on_error():
        with command_context(workspace) as ctx:
            result = resolver(ctx)
        _show(result, output_format)


@resolve_app.command("pipeline")
def resolve_pipeline_command(
    identifier: IDENTIFIER_ARGUMENT,
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve a pipeline by ID, alias, name or unique name fragment."""
    _run(
        workspace,
        output_format,
        lambda ctx: resolve_pipeline(
            ctx.client, ctx.cache, ctx.workspace_id, identifier, ctx.config.aliases.pipelines
        ),
    )


@resolve_app.command("epic")
def resolve_epic_command(
    identifier: IDENTIFIER_ARGUMENT,
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve an epic by ID, owner/repo#number, alias, title or unique title fragment."""
    _run(
        workspace,
        output_format,
        lambda ctx: resolve_epic(ctx.client, ctx.cache, ctx.workspace_id, identifier, ctx.config.aliases.epics),
    )


@resolve_app.command("sprint")
def resolve_sprint_command(
    identifier: Annotated[str, typer.Argument(help="current, next, previous, ID or name")],
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve a sprint by keyword, ID, name or unique name fragment."""
    _run(workspace, output_format, lambda ctx: resolve_sprint(ctx.client, ctx.cache, ctx.workspace_id, identifier))


@resolve_app.command("issue")
def resolve_issue_command(
    identifier: Annotated[str, typer.Argument(help="owner/repo#123, repo#123, 123 (with --repo), ID or branch")],
    repo: REPO_OPTION = None,
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve an issue or pull request reference."""
    _run(
        workspace,
        output_format,
        lambda ctx: resolve_issue(
            ctx.client,
            ctx.cache,
            ctx.workspace_id,
            identifier,
            repo=repo,
            github=get_github_client(ctx.config),
        ),
    )


@resolve_app.command("label")
def resolve_label_command(
    identifier: IDENTIFIER_ARGUMENT,
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve a label by name or unique name fragment."""
    _run(workspace, output_format, lambda ctx: resolve_label(ctx.client, ctx.cache, ctx.workspace_id, identifier))


@resolve_app.command("zenhub-label")
def resolve_zenhub_label_command(
    identifier: Annotated[str, typer.Argument(help="Label ID or exact name")],
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve an organization-level ZenHub label (as used on epics)."""
    _run(
        workspace,
        output_format,
        lambda ctx: resolve_zenhub_label(ctx.client, ctx.cache, ctx.workspace_id, identifier),
    )


@resolve_app.command("priority")
def resolve_priority_command(
    identifier: IDENTIFIER_ARGUMENT,
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve a priority by name or unique name fragment."""
    _run(workspace, output_format, lambda ctx: resolve_priority(ctx.client, ctx.cache, ctx.workspace_id, identifier))


@resolve_app.command("user")
def resolve_user_command(
    identifier: Annotated[str, typer.Argument(help="GitHub login (with or without @) or name")],
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve a workspace user by GitHub login or name."""
    _run(workspace, output_format, lambda ctx: resolve_user(ctx.client, ctx.cache, ctx.workspace_id, identifier))


@resolve_app.command("repo")
def resolve_repo_command(
    identifier: Annotated[str, typer.Argument(help="owner/repo, repo or unique name fragment")],
    workspace: WORKSPACE_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """Resolve a repository connected to the workspace."""
    _run(workspace, output_format, lambda ctx: resolve_repo(ctx.client, ctx.cache, ctx.workspace_id, identifier))
