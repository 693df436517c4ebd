"""Pipeline fetching and resolution."""

from collections.abc import Mapping, Sequence

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_PIPELINES
from zh.cache import CacheKey, CacheStore
from zh.core.constants import APIConstants, CacheNamespace
from zh.models.records import PIPELINE_LIST, PipelineRecord
from zh.models.results import PipelineResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, resolve_records, write_records
from zh.resolve.pagination import decode_nodes, paginate_nodes

PIPELINE_MATCH = MatchSpec[PipelineRecord](
    kind="pipeline",
    names=lambda p: [p.name],
    describe=lambda p: Candidate(p.id, p.name),
    hint="run 'zh list pipelines' to see available pipelines",
)


def pipeline_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.PIPELINES, workspace_id)


def fetch_pipelines(client: GraphQLExecutor, workspace_id: str, limit: int | None = None) -> list[PipelineRecord]:
    """Fetch the workspace's pipelines in board order."""
    nodes = paginate_nodes(
        client,
        LIST_PIPELINES,
        {"workspaceId": workspace_id},
        ("workspace", "pipelinesConnection"),
        operation="fetching pipelines",
        page_size=APIConstants.PIPELINE_PAGE_SIZE,
        limit=limit,
    )
    return decode_nodes(
        nodes, lambda n: PipelineRecord(id=n["id"], name=n.get("name") or ""), "fetching pipelines"
    )


def fetch_pipelines_into_cache(cache: CacheStore, records: Sequence[PipelineRecord], workspace_id: str) -> None:
    """Store an already-fetched pipeline list, e.g. from ``zh list pipelines``."""
    write_records(cache, pipeline_cache_key(workspace_id), PIPELINE_LIST, records)


def resolve_pipeline(
    client: GraphQLExecutor,
    cache: CacheStore,
    workspace_id: str,
    identifier: str,
    aliases: Mapping[str, str] | None = None,
) -> PipelineResult:
    """Resolve a pipeline by id, alias, exact name or unique name fragment."""
    record = resolve_records(
        cache,
        pipeline_cache_key(workspace_id),
        PIPELINE_LIST,
        lambda: fetch_pipelines(client, workspace_id),
        identifier,
        PIPELINE_MATCH,
        aliases,
    )
    return PipelineResult(id=record.id, name=record.name)
