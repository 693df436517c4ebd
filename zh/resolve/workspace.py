"""Workspace listing and resolution.

Workspaces are listed per account, so their cache entry is not scoped to any
workspace and survives ``zh workspace switch``.
"""

import logging

from pydantic import ValidationError

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_WORKSPACES
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace
from zh.exceptions import MalformedResponseError
from zh.models.records import WORKSPACE_LIST, WorkspaceRecord
from zh.models.results import WorkspaceResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, resolve_records
from zh.resolve.pagination import dig

logger = logging.getLogger(__name__)

WORKSPACE_MATCH = MatchSpec[WorkspaceRecord](
    kind="workspace",
    names=lambda w: [n for n in (w.display_name, w.name) if n],
    describe=lambda w: Candidate(w.id, w.display_name or w.name, w.org_name),
    hint="run 'zh workspace list' to see available workspaces",
    advice="Use the workspace ID to pick one.",
)

WORKSPACES_CACHE_KEY = CacheKey(CacheNamespace.WORKSPACES)


def fetch_workspaces(client: GraphQLExecutor) -> list[WorkspaceRecord]:
    """Fetch every workspace visible to the API key, across organisations."""
    data = client.execute(LIST_WORKSPACES)
    viewer = dig(data, ("viewer", "zenhubOrganizations"), "listing workspaces")

    workspaces: list[WorkspaceRecord] = []
    try:
        for org in viewer.get("nodes") or []:
            for ws in (org.get("workspaces") or {}).get("nodes") or []:
                workspaces.append(
                    WorkspaceRecord(
                        id=ws["id"],
                        name=ws.get("name") or "",
                        display_name=ws.get("displayName") or "",
                        org_name=org.get("name") or "",
                    )
                )
    except (KeyError, AttributeError, ValidationError) as e:
        raise MalformedResponseError("listing workspaces", str(e)) from e

    logger.debug(f"Fetched {len(workspaces)} workspaces")
    return workspaces


def fetch_workspaces_into_cache(cache: CacheStore, records: list[WorkspaceRecord]) -> None:
    """Store an already-fetched workspace list."""
    cache.set(WORKSPACES_CACHE_KEY, WORKSPACE_LIST.dump_python(records, mode="json"))


def resolve_workspace(client: GraphQLExecutor, cache: CacheStore, identifier: str) -> WorkspaceResult:
    """Resolve a workspace by id, display name, slug or unique name fragment."""
    record = resolve_records(
        cache,
        WORKSPACES_CACHE_KEY,
        WORKSPACE_LIST,
        lambda: fetch_workspaces(client),
        identifier,
        WORKSPACE_MATCH,
    )
    return WorkspaceResult(id=record.id, name=record.display_name or record.name, org_name=record.org_name)
