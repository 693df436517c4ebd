from __future__ import annotations

import pytest

from tests.fakes.client import STANDARD_PIPELINES, FakeClient, connection, pipelines_response
from zh.api import queries
from zh.cache import CacheStore
from zh.exceptions import AmbiguousMatchError, GraphQLError, MalformedResponseError, NotFoundError
from zh.models.records import PipelineRecord
from zh.resolve.invalidation import invalidate_pipelines
from zh.resolve.pagination import paginate_nodes
from zh.resolve.pipeline import fetch_pipelines, fetch_pipelines_into_cache, resolve_pipeline


def test_fetch_pipelines_follows_cursors():
    client = FakeClient(
        {
            queries.LIST_PIPELINES: [
                pipelines_response(("p1", "Backlog"), end_cursor="c1"),
                pipelines_response(("p2", "Done")),
            ]
        }
    )

    pipelines = fetch_pipelines(client, "ws1")

    assert pipelines == [PipelineRecord(id="p1", name="Backlog"), PipelineRecord(id="p2", name="Done")]
    first, second = client.variables(queries.LIST_PIPELINES)
    assert first == {"workspaceId": "ws1", "first": 50}
    assert second == {"workspaceId": "ws1", "first": 50, "after": "c1"}


def test_fetch_pipelines_respects_limit():
    client = FakeClient(
        {queries.LIST_PIPELINES: pipelines_response(("p1", "Backlog"), ("p2", "Doing"), end_cursor="c1")}
    )

    pipelines = fetch_pipelines(client, "ws1", limit=2)

    assert [p.id for p in pipelines] == ["p1", "p2"]
    assert client.count(queries.LIST_PIPELINES) == 1
    assert client.variables(queries.LIST_PIPELINES)[0]["first"] == 2


def test_missing_connection_is_malformed():
    client = FakeClient({queries.LIST_PIPELINES: {"workspace": None}})

    with pytest.raises(MalformedResponseError):
        fetch_pipelines(client, "ws1")


def test_node_without_id_is_malformed():
    client = FakeClient({queries.LIST_PIPELINES: {"workspace": {"pipelinesConnection": connection([{"name": "x"}])}}})

    with pytest.raises(MalformedResponseError, match="node without 'id'"):
        fetch_pipelines(client, "ws1")


def test_paginate_nodes_passes_first_page_to_callback():
    seen = []
    client = FakeClient({queries.LIST_REPOS: {"workspace": {"repositoriesConnection": connection([{"id": "r"}])}}})

    nodes = paginate_nodes(
        client,
        queries.LIST_REPOS,
        {"workspaceId": "ws1"},
        ("workspace", "repositoriesConnection"),
        operation="fetching repos",
        on_first_page=seen.append,
    )

    assert nodes == [{"id": "r"}]
    assert len(seen) == 1


class TestResolvePipeline:
    """The worked example: Backlog / In Progress / Done."""

    def test_fragment_resolves(self, client: FakeClient, cache: CacheStore):
        assert resolve_pipeline(client, cache, "ws1", "prog").id == "p2"

    def test_id_resolves(self, client: FakeClient, cache: CacheStore):
        result = resolve_pipeline(client, cache, "ws1", "p1")

        assert result.id == "p1"
        assert result.name == "Backlog"

    def test_shared_fragment_is_ambiguous_over_all_three(self, client: FakeClient, cache: CacheStore):
        with pytest.raises(AmbiguousMatchError) as exc_info:
            resolve_pipeline(client, cache, "ws1", "o")

        message = exc_info.value.message
        for name in ("Backlog", "In Progress", "Done"):
            assert name in message

    def test_unknown_name_is_not_found(self, client: FakeClient, cache: CacheStore):
        with pytest.raises(NotFoundError):
            resolve_pipeline(client, cache, "ws1", "archived")

    def test_second_resolution_uses_cache(self, client: FakeClient, cache: CacheStore):
        resolve_pipeline(client, cache, "ws1", "prog")
        resolve_pipeline(client, cache, "ws1", "Done")

        assert client.count(queries.LIST_PIPELINES) == 1

    def test_aliases_apply(self, client: FakeClient, cache: CacheStore):
        result = resolve_pipeline(client, cache, "ws1", "todo", aliases={"todo": "Backlog"})

        assert result.id == "p1"

    def test_new_pipeline_found_after_refresh(self, cache: CacheStore):
        client = FakeClient(
            {
                queries.LIST_PIPELINES: [
                    STANDARD_PIPELINES,
                    pipelines_response(("p1", "Backlog"), ("p2", "In Progress"), ("p3", "Done"), ("p4", "QA")),
                ]
            }
        )
        resolve_pipeline(client, cache, "ws1", "Backlog")

        assert resolve_pipeline(client, cache, "ws1", "QA").id == "p4"
        assert client.count(queries.LIST_PIPELINES) == 2

    def test_invalidation_forces_next_fetch(self, client: FakeClient, cache: CacheStore):
        resolve_pipeline(client, cache, "ws1", "Done")
        invalidate_pipelines(cache, "ws1")
        resolve_pipeline(client, cache, "ws1", "Done")

        assert client.count(queries.LIST_PIPELINES) == 2

    def test_warmed_cache_is_used(self, cache: CacheStore):
        client = FakeClient()
        fetch_pipelines_into_cache(cache, [PipelineRecord(id="p7", name="Icebox")], "ws1")

        assert resolve_pipeline(client, cache, "ws1", "ice").id == "p7"
        assert client.calls == []

    def test_upstream_errors_propagate(self, cache: CacheStore):
        client = FakeClient({queries.LIST_PIPELINES: GraphQLError([{"message": "boom"}])})

        with pytest.raises(GraphQLError, match="boom"):
            resolve_pipeline(client, cache, "ws1", "Done")

    def test_workspaces_are_resolved_independently(self, cache: CacheStore):
        client = FakeClient(
            {
                queries.LIST_PIPELINES: lambda variables: (
                    STANDARD_PIPELINES
                    if variables["workspaceId"] == "ws1"
                    else pipelines_response(("q1", "Triage"))
                )
            }
        )

        assert resolve_pipeline(client, cache, "ws1", "Done").id == "p3"
        assert resolve_pipeline(client, cache, "ws2", "Triage").id == "q1"
        with pytest.raises(NotFoundError):
            resolve_pipeline(client, cache, "ws2", "Done")
