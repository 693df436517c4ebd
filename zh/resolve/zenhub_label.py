"""ZenHub label fetching and resolution.

ZenHub labels belong to the organization and are applied to epics. They are
kept apart from the repository labels in :mod:`zh.resolve.label`, and match
by id or exact name only.
"""

import logging
from collections.abc import Sequence

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_ZENHUB_LABELS
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace
from zh.models.records import LABEL_LIST, LabelRecord
from zh.models.results import LabelResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, resolve_many_records, resolve_records, write_records
from zh.resolve.pagination import decode_nodes, paginate_nodes

logger = logging.getLogger(__name__)

ZENHUB_LABEL_MATCH = MatchSpec[LabelRecord](
    kind="ZenHub label",
    names=lambda label: [label.name],
    describe=lambda label: Candidate(label.id, label.name),
    match_substrings=False,
    hint="run 'zh list zenhub-labels' to see available labels",
)


def zenhub_label_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.ZENHUB_LABELS, workspace_id)


def fetch_zenhub_labels(client: GraphQLExecutor, workspace_id: str, limit: int | None = None) -> list[LabelRecord]:
    """Fetch the ZenHub labels available in a workspace."""
    nodes = paginate_nodes(
        client,
        LIST_ZENHUB_LABELS,
        {"workspaceId": workspace_id},
        ("workspace", "zenhubLabels"),
        operation="fetching ZenHub labels",
        limit=limit,
    )
    labels = decode_nodes(
        nodes,
        lambda n: LabelRecord(id=n["id"], name=n.get("name") or "", color=n.get("color") or ""),
        "fetching ZenHub labels",
    )
    logger.debug(f"Fetched {len(labels)} ZenHub labels for workspace {workspace_id}")
    return labels


def fetch_zenhub_labels_into_cache(cache: CacheStore, records: Sequence[LabelRecord], workspace_id: str) -> None:
    """Store an already-fetched ZenHub label list."""
    write_records(cache, zenhub_label_cache_key(workspace_id), LABEL_LIST, records)


def _to_result(record: LabelRecord) -> LabelResult:
    return LabelResult(id=record.id, name=record.name, color=record.color)


def resolve_zenhub_label(
    client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifier: str
) -> LabelResult:
    """Resolve a ZenHub label by id or exact name (any case)."""
    record = resolve_records(
        cache,
        zenhub_label_cache_key(workspace_id),
        LABEL_LIST,
        lambda: fetch_zenhub_labels(client, workspace_id),
        identifier,
        ZENHUB_LABEL_MATCH,
    )
    return _to_result(record)


def resolve_zenhub_labels(
    client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifiers: Sequence[str]
) -> list[LabelResult]:
    """Resolve several ZenHub labels, refreshing the list at most once."""
    records = resolve_many_records(
        cache,
        zenhub_label_cache_key(workspace_id),
        LABEL_LIST,
        lambda: fetch_zenhub_labels(client, workspace_id),
        identifiers,
        ZENHUB_LABEL_MATCH,
    )
    return [_to_result(r) for r in records]
