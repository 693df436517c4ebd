from __future__ import annotations

import logging

import pytest

from tests.fakes.client import FakeClient
from zh.api import queries
from zh.cache import CacheKey, CacheStore
from zh.exceptions import CacheError
from zh.resolve.epic import epic_cache_key
from zh.resolve.invalidation import invalidate_epics, invalidate_pipelines, on_workspace_switch
from zh.resolve.pipeline import pipeline_cache_key, resolve_pipeline
from zh.resolve.workspace import WORKSPACES_CACHE_KEY


class BrokenCache:
    def clear(self, key: CacheKey) -> bool:
        raise CacheError(f"disk full while deleting {key}")

    def clear_workspace(self, workspace_id: str) -> int:
        raise CacheError("database is locked")


def test_invalidate_pipelines_only_touches_one_workspace(client: FakeClient, cache: CacheStore):
    resolve_pipeline(client, cache, "ws1", "Done")
    resolve_pipeline(client, cache, "ws2", "Done")

    invalidate_pipelines(cache, "ws1")

    assert cache.get(pipeline_cache_key("ws1")) == (None, False)
    assert cache.get(pipeline_cache_key("ws2"))[1] is True


def test_invalidate_epics_leaves_pipelines(client: FakeClient, cache: CacheStore):
    resolve_pipeline(client, cache, "ws1", "Done")
    cache.set(epic_cache_key("ws1"), [])

    invalidate_epics(cache, "ws1")

    assert cache.get(epic_cache_key("ws1"))[1] is False
    assert cache.get(pipeline_cache_key("ws1"))[1] is True


def test_workspace_switch_clears_previous_workspace(cache: CacheStore):
    cache.set(pipeline_cache_key("ws1"), [])
    cache.set(epic_cache_key("ws1"), [])
    cache.set(pipeline_cache_key("ws2"), [])
    cache.set(WORKSPACES_CACHE_KEY, [])

    assert on_workspace_switch(cache, "ws1") == 2
    assert cache.get(pipeline_cache_key("ws2"))[1] is True
    assert cache.get(WORKSPACES_CACHE_KEY)[1] is True


def test_first_workspace_selection_clears_nothing(cache: CacheStore):
    cache.set(pipeline_cache_key("ws1"), [])

    assert on_workspace_switch(cache, None) == 0
    assert cache.get(pipeline_cache_key("ws1"))[1] is True


@pytest.mark.parametrize(
    "hook",
    [
        lambda cache: invalidate_pipelines(cache, "ws1"),
        lambda cache: invalidate_epics(cache, "ws1"),
        lambda cache: on_workspace_switch(cache, "ws1"),
    ],
)
def test_cache_failures_are_logged_not_raised(hook, caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING, logger="zh.resolve.invalidation"):
        hook(BrokenCache())

    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING


def test_pipeline_list_is_refetched_after_switching_back(client: FakeClient, cache: CacheStore):
    resolve_pipeline(client, cache, "ws1", "Done")
    on_workspace_switch(cache, "ws1")

    resolve_pipeline(client, cache, "ws1", "Done")

    assert client.count(queries.LIST_PIPELINES) == 2
