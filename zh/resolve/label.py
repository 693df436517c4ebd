"""Label fetching and resolution.

Labels belong to repositories; the workspace label list is the union over all
connected repositories, de-duplicated by case-insensitive name.
"""

import logging
from collections.abc import Sequence

from pydantic import ValidationError

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_LABELS
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace
from zh.exceptions import MalformedResponseError
from zh.models.records import LABEL_LIST, LabelRecord
from zh.models.results import LabelResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, resolve_many_records, resolve_records, write_records
from zh.resolve.pagination import paginate_nodes

logger = logging.getLogger(__name__)

LABEL_MATCH = MatchSpec[LabelRecord](
    kind="label",
    names=lambda label: [label.name],
    describe=lambda label: Candidate(label.id, label.name),
    match_ids=False,
    hint="run 'zh list labels' to see available labels",
)


def label_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.LABELS, workspace_id)


def fetch_labels(client: GraphQLExecutor, workspace_id: str, limit: int | None = None) -> list[LabelRecord]:
    """Fetch labels across all repositories of a workspace."""
    repos = paginate_nodes(
        client,
        LIST_LABELS,
        {"workspaceId": workspace_id},
        ("workspace", "repositoriesConnection"),
        operation="fetching labels",
    )

    seen: set[str] = set()
    labels: list[LabelRecord] = []
    try:
        for repo in repos:
            for node in (repo.get("labels") or {}).get("nodes") or []:
                name = node.get("name") or ""
                if not node.get("id") or name.lower() in seen:
                    continue
                seen.add(name.lower())
                labels.append(LabelRecord(id=node["id"], name=name, color=node.get("color") or ""))
    except (AttributeError, ValidationError) as e:
        raise MalformedResponseError("fetching labels", f"unreadable label: {e}") from e

    logger.debug(f"Fetched {len(labels)} distinct labels from {len(repos)} repos")
    return labels[:limit] if limit is not None else labels


def fetch_labels_into_cache(cache: CacheStore, records: Sequence[LabelRecord], workspace_id: str) -> None:
    """Store an already-fetched label list."""
    write_records(cache, label_cache_key(workspace_id), LABEL_LIST, records)


def _to_result(record: LabelRecord) -> LabelResult:
    return LabelResult(id=record.id, name=record.name, color=record.color)


def resolve_label(client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifier: str) -> LabelResult:
    """Resolve a label by exact name or unique name fragment."""
    record = resolve_records(
        cache,
        label_cache_key(workspace_id),
        LABEL_LIST,
        lambda: fetch_labels(client, workspace_id),
        identifier,
        LABEL_MATCH,
    )
    return _to_result(record)


def resolve_labels(
    client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifiers: Sequence[str]
) -> list[LabelResult]:
    """Resolve several labels, refreshing the list at most once."""
    records = resolve_many_records(
        cache,
        label_cache_key(workspace_id),
        LABEL_LIST,
        lambda: fetch_labels(client, workspace_id),
        identifiers,
        LABEL_MATCH,
    )
    return [_to_result(r) for r in records]
