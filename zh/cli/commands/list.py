"""List commands: fetch entity lists, print them and warm the cache."""

import logging
from collections.abc import Callable
from datetime import datetime

import typer

from zh.cli.utils import (
    LIMIT_OPTION,
    OUTPUT_FORMAT_OPTION,
    WORKSPACE_OPTION,
    OutputFormat,
    command_context,
    exit_on_error,
    handle_json_output,
    handle_table_output,
)
from zh.exceptions import CacheError
from zh.models.records import LegacyEpicRecord, SprintRecord
from zh.resolve import (
    fetch_epics,
    fetch_epics_into_cache,
    fetch_labels,
    fetch_labels_into_cache,
    fetch_pipelines,
    fetch_pipelines_into_cache,
    fetch_priorities,
    fetch_priorities_into_cache,
    fetch_repos,
    fetch_repos_into_cache,
    fetch_sprints,
    fetch_sprints_into_cache,
    fetch_users,
    fetch_users_into_cache,
    fetch_zenhub_labels,
    fetch_zenhub_labels_into_cache,
)

logger = logging.getLogger(__name__)

list_app = typer.Typer(help="List workspace entities (refreshes the resolution cache)", no_args_is_help=True)


def _warm_cache(limit: int | None, store: Callable[[], None]) -> None:
    # A truncated listing must not replace the complete cached list
    if limit is not None:
        return
    try:
        store()
    except CacheError as e:
        logger.warning(f"Could not update cache: {e}")


def _format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else "-"


@list_app.command("pipelines")
def list_pipelines(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List pipelines in board order."""
    with exit_on_error(), command_context(workspace) as ctx:
        pipelines = fetch_pipelines(ctx.client, ctx.workspace_id, limit=limit)
        _warm_cache(limit, lambda: fetch_pipelines_into_cache(ctx.cache, pipelines, ctx.workspace_id))

    if output_format == OutputFormat.JSON:
        handle_json_output(pipelines)
        return
    handle_table_output("Pipelines", ["ID", "Name"], [[p.id, p.name] for p in pipelines])


@list_app.command("epics")
def list_epics(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List native and legacy epics."""
    with exit_on_error(), command_context(workspace) as ctx:
        epics = fetch_epics(ctx.client, ctx.workspace_id, limit=limit)
        _warm_cache(limit, lambda: fetch_epics_into_cache(ctx.cache, epics, ctx.workspace_id))

    if output_format == OutputFormat.JSON:
        handle_json_output(epics)
        return

    rows = []
    for epic in epics:
        if isinstance(epic, LegacyEpicRecord):
            rows.append([epic.id, epic.title, f"{epic.repo_owner}/{epic.repo_name}#{epic.issue_number}"])
        else:
            rows.append([epic.id, epic.title, "-"])
    handle_table_output("Epics", ["ID", "Title", "Issue"], rows)


@list_app.command("sprints")
def list_sprints(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List sprints, newest first, marking the current, next and previous ones."""
    with exit_on_error(), command_context(workspace) as ctx:
        sprints, accessors = fetch_sprints(ctx.client, ctx.workspace_id, limit=limit)
        _warm_cache(limit, lambda: fetch_sprints_into_cache(ctx.cache, sprints, ctx.workspace_id, accessors))

    if output_format == OutputFormat.JSON:
        handle_json_output(sprints)
        return

    markers = {
        accessors.active_id: "current",
        accessors.upcoming_id: "next",
        accessors.previous_id: "previous",
    }

    def row(sprint: SprintRecord) -> list[str]:
        return [
            sprint.id,
            sprint.display_name,
            sprint.state or "-",
            _format_date(sprint.start_at),
            _format_date(sprint.end_at),
            markers.get(sprint.id, ""),
        ]

    handle_table_output("Sprints", ["ID", "Name", "State", "Start", "End", ""], [row(s) for s in sprints])


@list_app.command("repos")
def list_repos(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List repositories connected to the workspace."""
    with exit_on_error(), command_context(workspace) as ctx:
        repos = fetch_repos(ctx.client, ctx.workspace_id, limit=limit)
        _warm_cache(limit, lambda: fetch_repos_into_cache(ctx.cache, repos, ctx.workspace_id))

    if output_format == OutputFormat.JSON:
        handle_json_output(repos)
        return
    rows = [[r.id, r.full_name, str(r.gh_id)] for r in repos]
    handle_table_output("Repositories", ["ID", "Repository", "GitHub ID"], rows)


@list_app.command("labels")
def list_labels(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List labels across all connected repositories."""
    with exit_on_error(), command_context(workspace) as ctx:
        labels = fetch_labels(ctx.client, ctx.workspace_id, limit=limit)
        _warm_cache(limit, lambda: fetch_labels_into_cache(ctx.cache, labels, ctx.workspace_id))

    if output_format == OutputFormat.JSON:
        handle_json_output(labels)
        return
    handle_table_output("Labels", ["ID", "Name", "Color"], [[lb.id, lb.name, lb.color] for lb in labels])


@list_app.command("zenhub-labels")
def list_zenhub_labels(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List the organization's ZenHub labels (used on epics)."""
    with exit_on_error(), command_context(workspace) as ctx:
        labels = fetch_zenhub_labels(ctx.client, ctx.workspace_id, limit=limit)
        _warm_cache(limit, lambda: fetch_zenhub_labels_into_cache(ctx.cache, labels, ctx.workspace_id))

    if output_format == OutputFormat.JSON:
        handle_json_output(labels)
        return
    handle_table_output("ZenHub labels", ["ID", "Name", "Color"], [[lb.id, lb.name, lb.color] for lb in labels])


@list_app.command("priorities")
def list_priorities(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List the workspace's priorities."""
    with exit_on_error(), command_context(workspace) as ctx:
        priorities = fetch_priorities(ctx.client, ctx.workspace_id)
        _warm_cache(limit, lambda: fetch_priorities_into_cache(ctx.cache, priorities, ctx.workspace_id))

    if limit is not None:
        priorities = priorities[:limit]
    if output_format == OutputFormat.JSON:
        handle_json_output(priorities)
        return
    handle_table_output(
        "Priorities", ["ID", "Name", "Description"], [[p.id, p.name, p.description] for p in priorities]
    )


@list_app.command("users")
def list_users(
    workspace: WORKSPACE_OPTION = None,
    limit: LIMIT_OPTION = None,
    output_format: OUTPUT_FORMAT_OPTION = OutputFormat.TABLE,
) -> None:
    """List workspace users."""
    with exit_on_error(), command_context(workspace) as ctx:
        users = fetch_users(ctx.client, ctx.workspace_id, limit=limit)
        _warm_cache(limit, lambda: fetch_users_into_cache(ctx.cache, users, ctx.workspace_id))

    if output_format == OutputFormat.JSON:
        handle_json_output(users)
        return
    rows = [[u.id, f"@{u.github_login}" if u.github_login else "-", u.name] for u in users]
    handle_table_output("Users", ["ID", "Login", "Name"], rows)
