"""Sprint fetching and resolution, including ``current``/``next``/``previous``."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_SPRINTS
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace, SprintKeyword
from zh.exceptions import CacheError, NoActiveSprintError, NotFoundError
from zh.models.records import SPRINT_LIST, SprintAccessors, SprintRecord
from zh.models.results import SprintResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, load_records, resolve_records, store_records, write_records
from zh.resolve.pagination import decode_nodes, paginate_nodes

logger = logging.getLogger(__name__)


def _sprint_names(sprint: SprintRecord) -> list[str]:
    # A custom name does not hide the generated one
    names = [sprint.display_name]
    if sprint.name and sprint.generated_name:
        names.append(sprint.generated_name)
    return names


SPRINT_MATCH = MatchSpec[SprintRecord](
    kind="sprint",
    names=_sprint_names,
    describe=lambda s: Candidate(s.id, s.display_name),
    hint="run 'zh list sprints' to see available sprints",
)


def sprint_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.SPRINTS, workspace_id)


def sprint_accessors_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.SPRINT_ACCESSORS, workspace_id)


def _sprint_from_node(node: dict[str, Any]) -> SprintRecord:
    return SprintRecord(
        id=node["id"],
        name=node.get("name") or "",
        generated_name=node.get("generatedName") or "",
        state=node.get("state") or "",
        start_at=node.get("startAt"),
        end_at=node.get("endAt"),
    )


def fetch_sprints(
    client: GraphQLExecutor, workspace_id: str, limit: int | None = None
) -> tuple[list[SprintRecord], SprintAccessors]:
    """Fetch sprints, newest first, with the workspace's sprint accessors.

    Returns:
        Tuple of (sprints, accessors). Accessors come from the first page.
    """
    accessors = SprintAccessors()

    def read_accessors(data: dict[str, Any]) -> None:
        workspace = data.get("workspace") or {}
        accessors.active_id = (workspace.get("activeSprint") or {}).get("id")
        accessors.upcoming_id = (workspace.get("upcomingSprint") or {}).get("id")
        accessors.previous_id = (workspace.get("previousSprint") or {}).get("id")

    nodes = paginate_nodes(
        client,
        LIST_SPRINTS,
        {"workspaceId": workspace_id},
        ("workspace", "sprints"),
        operation="fetching sprints",
        limit=limit,
        on_first_page=read_accessors,
    )
    return decode_nodes(nodes, _sprint_from_node, "fetching sprints"), accessors


def fetch_sprints_into_cache(
    cache: CacheStore,
    records: Sequence[SprintRecord],
    workspace_id: str,
    accessors: SprintAccessors | None = None,
) -> None:
    """Store an already-fetched sprint list, and its accessors when known."""
    write_records(cache, sprint_cache_key(workspace_id), SPRINT_LIST, records)
    if accessors is not None:
        cache.set(sprint_accessors_cache_key(workspace_id), accessors.model_dump(mode="json"))


def _load_accessors(cache: CacheStore, workspace_id: str) -> SprintAccessors | None:
    value, found = cache.get(sprint_accessors_cache_key(workspace_id))
    if not found or not isinstance(value, dict):
        return None
    return SprintAccessors.model_validate(value)


def _refresh(
    client: GraphQLExecutor, cache: CacheStore, workspace_id: str
) -> tuple[list[SprintRecord], SprintAccessors]:
    sprints, accessors = fetch_sprints(client, workspace_id)
    store_records(cache, sprint_cache_key(workspace_id), SPRINT_LIST, sprints)
    try:
        cache.set(sprint_accessors_cache_key(workspace_id), accessors.model_dump(mode="json"))
    except CacheError as e:
        logger.warning(f"Could not update sprint accessors cache: {e}")
    return sprints, accessors


def find_active_by_date(sprints: Sequence[SprintRecord], now: datetime | None = None) -> str | None:
    """Id of the first open sprint whose date range covers ``now``."""
    now = now or datetime.now(UTC)
    for sprint in sprints:
        if sprint.state != "OPEN" or sprint.start_at is None or sprint.end_at is None:
            continue
        start = sprint.start_at if sprint.start_at.tzinfo else sprint.start_at.replace(tzinfo=UTC)
        end = sprint.end_at if sprint.end_at.tzinfo else sprint.end_at.replace(tzinfo=UTC)
        if start <= now < end:
            return sprint.id
    return None


def _target_id(keyword: SprintKeyword, accessors: SprintAccessors, sprints: Sequence[SprintRecord]) -> str:
    if keyword is SprintKeyword.CURRENT:
        target = accessors.active_id or find_active_by_date(sprints)
        if not target:
            raise NoActiveSprintError(keyword.value)
        return target
    if keyword is SprintKeyword.NEXT:
        if not accessors.upcoming_id:
            raise NotFoundError("sprint", keyword.value, "no upcoming sprint found")
        return accessors.upcoming_id
    if not accessors.previous_id:
        raise NotFoundError("sprint", keyword.value, "no previous sprint found")
    return accessors.previous_id


def _resolve_relative(
    client: GraphQLExecutor, cache: CacheStore, workspace_id: str, keyword: SprintKeyword
) -> SprintResult:
    sprints = load_records(cache, sprint_cache_key(workspace_id), SPRINT_LIST)
    accessors = _load_accessors(cache, workspace_id)
    from_cache = sprints is not None and accessors is not None

    if sprints is None or accessors is None:
        sprints, accessors = _refresh(client, cache, workspace_id)

    target = _target_id(keyword, accessors, sprints)
    match = next((s for s in sprints if s.id == target), None)

    if match is None and from_cache:
        logger.debug(f"Sprint {target} missing from cached list, refreshing")
        sprints, accessors = _refresh(client, cache, workspace_id)
        target = _target_id(keyword, accessors, sprints)
        match = next((s for s in sprints if s.id == target), None)

    if match is None:
        raise NotFoundError("sprint", keyword.value, f"sprint {keyword.value!r} not found in sprint list")
    return SprintResult(id=match.id, name=match.display_name)


def resolve_sprint(client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifier: str) -> SprintResult:
    """Resolve a sprint by keyword, id, exact name or unique name fragment.

    ``current``, ``next`` and ``previous`` (any case) are reserved and never
    matched against sprint names.
    """
    keyword = identifier.strip().lower()
    if keyword in {k.value for k in SprintKeyword}:
        return _resolve_relative(client, cache, workspace_id, SprintKeyword(keyword))

    def refresh() -> list[SprintRecord]:
        sprints, _ = _refresh(client, cache, workspace_id)
        return sprints

    record = resolve_records(
        cache,
        sprint_cache_key(workspace_id),
        SPRINT_LIST,
        refresh,
        identifier,
        SPRINT_MATCH,
    )
    return SprintResult(id=record.id, name=record.display_name)
