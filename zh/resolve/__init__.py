"""Entity resolution: user-typed identifiers to canonical backend ids."""

from zh.resolve.ambiguity import Candidate, describe_ambiguity
from zh.resolve.epic import fetch_epics, fetch_epics_into_cache, resolve_epic
from zh.resolve.invalidation import invalidate_epics, invalidate_pipelines, on_workspace_switch
from zh.resolve.issue import parse_issue_ref, resolve_issue
from zh.resolve.label import fetch_labels, fetch_labels_into_cache, resolve_label, resolve_labels
from zh.resolve.pipeline import fetch_pipelines, fetch_pipelines_into_cache, resolve_pipeline
from zh.resolve.priority import fetch_priorities, fetch_priorities_into_cache, resolve_priority
from zh.resolve.repo import fetch_repos, fetch_repos_into_cache, lookup_repo, resolve_repo
from zh.resolve.sprint import fetch_sprints, fetch_sprints_into_cache, resolve_sprint
from zh.resolve.user import fetch_users, fetch_users_into_cache, resolve_user, resolve_users
from zh.resolve.workspace import fetch_workspaces, fetch_workspaces_into_cache, resolve_workspace
from zh.resolve.zenhub_label import (
    fetch_zenhub_labels,
    fetch_zenhub_labels_into_cache,
    resolve_zenhub_label,
    resolve_zenhub_labels,
)

__all__ = [
    "Candidate",
    "describe_ambiguity",
    "fetch_epics",
    "fetch_epics_into_cache",
    "fetch_labels",
    "fetch_labels_into_cache",
    "fetch_pipelines",
    "fetch_pipelines_into_cache",
    "fetch_priorities",
    "fetch_priorities_into_cache",
    "fetch_repos",
    "fetch_repos_into_cache",
    "fetch_sprints",
    "fetch_sprints_into_cache",
    "fetch_users",
    "fetch_users_into_cache",
    "fetch_workspaces",
    "fetch_workspaces_into_cache",
    "fetch_zenhub_labels",
    "fetch_zenhub_labels_into_cache",
    "invalidate_epics",
    "invalidate_pipelines",
    "lookup_repo",
    "on_workspace_switch",
    "parse_issue_ref",
    "resolve_epic",
    "resolve_issue",
    "resolve_label",
    "resolve_labels",
    "resolve_pipeline",
    "resolve_priority",
    "resolve_repo",
    "resolve_sprint",
    "resolve_user",
    "resolve_users",
    "resolve_workspace",
    "resolve_zenhub_label",
    "resolve_zenhub_labels",
]
