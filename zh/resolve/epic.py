"""Epic fetching and resolution.

Workspaces hold two kinds of epics: native ones, listed by ``zenhubEpics``,
and legacy ones backed by an issue, which only show up as roadmap items.
Both lists are fetched and merged, keyed by id.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_ROADMAP_EPICS, LIST_ZENHUB_EPICS
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace, EpicKind
from zh.models.records import EPIC_LIST, EpicRecord, LegacyEpicRecord, ZenhubEpicRecord
from zh.models.results import EpicResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.issue import ISSUE_REF_PATTERN
from zh.resolve.matching import MatchSpec, resolve_records, write_records
from zh.resolve.pagination import decode_nodes, paginate_nodes

logger = logging.getLogger(__name__)


def _by_issue_ref(epics: Sequence[EpicRecord], identifier: str) -> EpicRecord | None:
    m = ISSUE_REF_PATTERN.match(identifier)
    if not m:
        return None
    owner, repo, number = m.groups()
    for epic in epics:
        if not isinstance(epic, LegacyEpicRecord):
            continue
        if (
            epic.issue_number == int(number)
            and epic.repo_name.lower() == repo.lower()
            and (owner is None or epic.repo_owner.lower() == owner.lower())
        ):
            return epic
    return None


def _describe(epic: EpicRecord) -> Candidate:
    if isinstance(epic, LegacyEpicRecord):
        return Candidate(epic.id, epic.title, f"{epic.repo_owner}/{epic.repo_name}#{epic.issue_number}")
    return Candidate(epic.id, epic.title)


EPIC_MATCH = MatchSpec[EpicRecord](
    kind="epic",
    names=lambda e: [e.title],
    describe=_describe,
    reference=_by_issue_ref,
    hint="run 'zh list epics' to see available epics",
)


def epic_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.EPICS, workspace_id)


def parse_roadmap_item(node: dict[str, Any]) -> EpicRecord | None:
    """Decode one roadmap item, or None when it is not an epic (e.g. a project)."""
    typename = node.get("__typename")
    if typename == "ZenhubEpic":
        return ZenhubEpicRecord(id=node["id"], title=node.get("title") or "")
    if typename == "Epic":
        issue = node.get("issue") or {}
        repository = issue.get("repository") or {}
        return LegacyEpicRecord(
            id=node["id"],
            title=issue.get("title") or "",
            issue_number=issue.get("number") or 0,
            repo_name=repository.get("name") or "",
            repo_owner=repository.get("ownerName") or "",
        )
    return None


def fetch_epics(client: GraphQLExecutor, workspace_id: str, limit: int | None = None) -> list[EpicRecord]:
    """Fetch native and legacy epics, de-duplicated by id."""
    variables = {"workspaceId": workspace_id}
    epics: dict[str, EpicRecord] = {}

    native = paginate_nodes(
        client,
        LIST_ZENHUB_EPICS,
        variables,
        ("workspace", "zenhubEpics"),
        operation="fetching zenhub epics",
        limit=limit,
    )
    for record in decode_nodes(
        native, lambda n: ZenhubEpicRecord(id=n["id"], title=n.get("title") or ""), "fetching zenhub epics"
    ):
        epics[record.id] = record

    items = paginate_nodes(
        client,
        LIST_ROADMAP_EPICS,
        variables,
        ("workspace", "roadmap", "items"),
        operation="fetching roadmap epics",
        limit=limit,
    )
    for epic in decode_nodes(items, parse_roadmap_item, "fetching roadmap epics"):
        if epic is not None and epic.id not in epics:
            epics[epic.id] = epic

    records = list(epics.values())
    logger.debug(
        f"Fetched {len(records)} epics "
        f"({sum(1 for e in records if e.kind == EpicKind.LEGACY)} legacy) for workspace {workspace_id}"
    )
    return records[:limit] if limit is not None else records


def fetch_epics_into_cache(cache: CacheStore, records: Sequence[EpicRecord], workspace_id: str) -> None:
    """Store an already-fetched epic list."""
    write_records(cache, epic_cache_key(workspace_id), EPIC_LIST, records)


def resolve_epic(
    client: GraphQLExecutor,
    cache: CacheStore,
    workspace_id: str,
    identifier: str,
    aliases: Mapping[str, str] | None = None,
) -> EpicResult:
    """Resolve an epic by id, ``owner/repo#number`` (legacy epics), alias, title or title fragment."""
    record = resolve_records(
        cache,
        epic_cache_key(workspace_id),
        EPIC_LIST,
        lambda: fetch_epics(client, workspace_id),
        identifier,
        EPIC_MATCH,
        aliases,
    )
    return EpicResult(id=record.id, name=record.title, kind=EpicKind(record.kind))
