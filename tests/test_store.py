from __future__ import annotations

from pathlib import Path

import pytest

from tests.fakes.client import FakeClock
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace


def test_cache_key_string_form():
    assert str(CacheKey(CacheNamespace.PIPELINES, "ws1")) == "pipelines-ws1"
    assert str(CacheKey(CacheNamespace.WORKSPACES)) == "workspaces"


def test_set_then_get_returns_value(cache: CacheStore):
    key = CacheKey("pipelines", "ws1")
    cache.set(key, [{"id": "p1", "name": "Backlog"}])

    value, found = cache.get(key)

    assert found is True
    assert value == [{"id": "p1", "name": "Backlog"}]


def test_missing_key_is_a_miss(cache: CacheStore):
    assert cache.get(CacheKey("pipelines", "ws1")) == (None, False)


def test_entry_is_fresh_until_ttl(cache: CacheStore, clock: FakeClock):
    key = CacheKey("pipelines", "ws1")
    cache.set(key, ["a"])

    clock.advance(23.9)

    assert cache.get(key) == (["a"], True)


def test_expired_entry_reads_as_absent(cache: CacheStore, clock: FakeClock):
    key = CacheKey("pipelines", "ws1")
    cache.set(key, ["a"])

    clock.advance(24)

    assert cache.get(key) == (None, False)


def test_set_after_expiry_starts_a_new_lifetime(cache: CacheStore, clock: FakeClock):
    key = CacheKey("pipelines", "ws1")
    cache.set(key, ["old"])
    clock.advance(30)

    cache.set(key, ["new"])
    clock.advance(1)

    assert cache.get(key) == (["new"], True)


def test_set_replaces_previous_value(cache: CacheStore):
    key = CacheKey("labels", "ws1")
    cache.set(key, ["a", "b"])
    cache.set(key, ["c"])

    assert cache.get(key) == (["c"], True)


def test_ttl_is_configurable(tmp_path: Path, clock: FakeClock):
    with CacheStore(tmp_path / "short", ttl_hours=1, clock=clock) as store:
        key = CacheKey("pipelines", "ws1")
        store.set(key, ["a"])
        clock.advance(1.5)
        assert store.get(key) == (None, False)


def test_malformed_entry_is_a_miss(cache: CacheStore):
    key = CacheKey("pipelines", "ws1")
    cache.cache.set(str(key), "not an envelope")

    assert cache.get(key) == (None, False)


def test_clear_removes_one_entry(cache: CacheStore):
    pipelines = CacheKey("pipelines", "ws1")
    epics = CacheKey("epics", "ws1")
    cache.set(pipelines, ["p"])
    cache.set(epics, ["e"])

    assert cache.clear(pipelines) is True
    assert cache.clear(pipelines) is False

    assert cache.get(pipelines) == (None, False)
    assert cache.get(epics) == (["e"], True)


def test_clear_workspace_only_touches_that_workspace(cache: CacheStore):
    for namespace in ("pipelines", "epics", "sprints", "sprint-accessors"):
        cache.set(CacheKey(namespace, "ws1"), [namespace])
    cache.set(CacheKey("pipelines", "ws2"), ["other"])
    cache.set(CacheKey("workspaces"), ["all"])

    removed = cache.clear_workspace("ws1")

    assert removed == 4
    for namespace in ("pipelines", "epics", "sprints", "sprint-accessors"):
        assert cache.get(CacheKey(namespace, "ws1")) == (None, False)
    assert cache.get(CacheKey("pipelines", "ws2")) == (["other"], True)
    assert cache.get(CacheKey("workspaces")) == (["all"], True)


def test_clear_all_empties_the_store(cache: CacheStore):
    cache.set(CacheKey("pipelines", "ws1"), ["a"])
    cache.set(CacheKey("workspaces"), ["b"])

    cache.clear_all()

    assert cache.get_cache_size() == 0


def test_entries_survive_reopening(tmp_path: Path, clock: FakeClock):
    directory = tmp_path / "persistent"
    key = CacheKey("repos", "ws1")
    with CacheStore(directory, clock=clock) as store:
        store.set(key, [{"id": "r1"}])

    with CacheStore(directory, clock=clock) as store:
        assert store.get(key) == ([{"id": "r1"}], True)


@pytest.mark.parametrize("workspace_id", ["ws1", "ws2"])
def test_workspaces_do_not_share_entries(cache: CacheStore, workspace_id: str):
    cache.set(CacheKey("pipelines", "ws1"), ["one"])
    cache.set(CacheKey("pipelines", "ws2"), ["two"])

    value, _ = cache.get(CacheKey("pipelines", workspace_id))

    assert value == (["one"] if workspace_id == "ws1" else ["two"])
