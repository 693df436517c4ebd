"""Priority fetching and resolution."""

from collections.abc import Sequence

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_PRIORITIES
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace
from zh.models.records import PRIORITY_LIST, PriorityRecord
from zh.models.results import PriorityResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, resolve_records, write_records
from zh.resolve.pagination import decode_nodes, dig

PRIORITY_MATCH = MatchSpec[PriorityRecord](
    kind="priority",
    plural="priorities",
    names=lambda p: [p.name],
    describe=lambda p: Candidate(p.id, p.name),
    match_ids=False,
    hint="run 'zh list priorities' to see available priorities",
)


def priority_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.PRIORITIES, workspace_id)


def fetch_priorities(client: GraphQLExecutor, workspace_id: str) -> list[PriorityRecord]:
    """Fetch the workspace's priorities (a short, unpaginated list)."""
    data = client.execute(LIST_PRIORITIES, {"workspaceId": workspace_id})
    connection = dig(data, ("workspace", "prioritiesConnection"), "fetching priorities")
    return decode_nodes(
        (n for n in connection.get("nodes") or [] if n),
        lambda n: PriorityRecord(
            id=n["id"],
            name=n.get("name") or "",
            color=n.get("color") or "",
            description=n.get("description") or "",
        ),
        "fetching priorities",
    )


def fetch_priorities_into_cache(cache: CacheStore, records: Sequence[PriorityRecord], workspace_id: str) -> None:
    """Store an already-fetched priority list."""
    write_records(cache, priority_cache_key(workspace_id), PRIORITY_LIST, records)


def resolve_priority(
    client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifier: str
) -> PriorityResult:
    """Resolve a priority by exact name or unique name fragment."""
    record = resolve_records(
        cache,
        priority_cache_key(workspace_id),
        PRIORITY_LIST,
        lambda: fetch_priorities(client, workspace_id),
        identifier,
        PRIORITY_MATCH,
    )
    return PriorityResult(id=record.id, name=record.name, color=record.color)
