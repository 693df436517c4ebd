from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from tests.fakes.client import STANDARD_PIPELINES, FakeClient, FakeClock
from zh.api import queries
from zh.cache import CacheStore


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in (
        "ZH_API_KEY",
        "ZH_REST_API_KEY",
        "ZH_WORKSPACE",
        "ZH_GITHUB_TOKEN",
        "ZH_CACHE_DIR",
        "ZH_CACHE_TTL_HOURS",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(tmp_path: Path, clock: FakeClock) -> Iterator[CacheStore]:
    store = CacheStore(tmp_path / "cache", ttl_hours=24, clock=clock)
    yield store
    store.close()


@pytest.fixture
def client() -> FakeClient:
    return FakeClient({queries.LIST_PIPELINES: STANDARD_PIPELINES})
