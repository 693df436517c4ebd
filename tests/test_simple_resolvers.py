from __future__ import annotations

import pytest

from tests.fakes.client import WORKSPACES, FakeClient, connection
from zh.api import queries
from zh.cache import CacheStore
from zh.exceptions import AmbiguousMatchError, MalformedResponseError, NotFoundError
from zh.resolve.label import fetch_labels, resolve_label, resolve_labels
from zh.resolve.priority import fetch_priorities, resolve_priority
from zh.resolve.repo import fetch_repos
from zh.resolve.user import resolve_user, resolve_users
from zh.resolve.workspace import WORKSPACES_CACHE_KEY, fetch_workspaces, resolve_workspace
from zh.resolve.zenhub_label import (
    fetch_zenhub_labels,
    resolve_zenhub_label,
    resolve_zenhub_labels,
    zenhub_label_cache_key,
)

LABELS = {
    "workspace": {
        "repositoriesConnection": connection(
            [
                {"labels": {"nodes": [{"id": "l1", "name": "bug", "color": "d73a4a"}, {"id": "l2", "name": "docs"}]}},
                {"labels": {"nodes": [{"id": "l3", "name": "Bug", "color": "ff0000"}, {"id": "l4", "name": "debt"}]}},
                {"labels": None},
            ]
        )
    }
}

PRIORITIES = {
    "workspace": {
        "prioritiesConnection": {
            "nodes": [
                {"id": "pr1", "name": "High priority", "color": "red", "description": None},
                {"id": "pr2", "name": "Low priority", "color": "grey", "description": "Someday"},
            ]
        }
    }
}

ZENHUB_LABELS = {
    "workspace": {
        "zenhubLabels": connection(
            [
                {"id": "zl1", "name": "Customer", "color": "0052cc"},
                {"id": "zl2", "name": "Customer request", "color": None},
                {"id": "zl3", "name": "Tech debt", "color": "fbca04"},
            ]
        )
    }
}

USERS = {
    "workspace": {
        "zenhubUsers": connection(
            [
                {"id": "u1", "name": "John Doe", "githubUser": {"login": "johndoe"}},
                {"id": "u2", "name": "Jane Doe", "githubUser": {"login": "janedoe"}},
                {"id": "u3", "name": "johndoe", "githubUser": None},
                {"id": "u4", "name": "Contractor", "githubUser": None},
            ]
        )
    }
}


class TestLabels:
    def test_labels_are_deduplicated_across_repos(self):
        labels = fetch_labels(FakeClient({queries.LIST_LABELS: LABELS}), "ws1")

        assert [lb.name for lb in labels] == ["bug", "docs", "debt"]
        assert labels[0].color == "d73a4a"

    def test_resolve_label(self, cache: CacheStore):
        client = FakeClient({queries.LIST_LABELS: LABELS})

        assert resolve_label(client, cache, "ws1", "BUG").id == "l1"
        assert resolve_label(client, cache, "ws1", "doc").id == "l2"

    def test_labels_are_not_matched_by_id(self, cache: CacheStore):
        with pytest.raises(NotFoundError):
            resolve_label(FakeClient({queries.LIST_LABELS: LABELS}), cache, "ws1", "l2")

    def test_batch_resolution(self, cache: CacheStore):
        client = FakeClient({queries.LIST_LABELS: LABELS})

        labels = resolve_labels(client, cache, "ws1", ["docs", "bug"])

        assert [lb.id for lb in labels] == ["l2", "l1"]
        assert client.count(queries.LIST_LABELS) == 1

    def test_batch_reports_all_missing_labels(self, cache: CacheStore):
        client = FakeClient({queries.LIST_LABELS: LABELS})

        with pytest.raises(NotFoundError, match="wontfix, dupe"):
            resolve_labels(client, cache, "ws1", ["bug", "wontfix", "dupe"])


class TestZenhubLabels:
    @pytest.fixture
    def client(self) -> FakeClient:
        return FakeClient({queries.LIST_ZENHUB_LABELS: ZENHUB_LABELS})

    def test_fetch(self, client: FakeClient):
        labels = fetch_zenhub_labels(client, "ws1")

        assert [lb.id for lb in labels] == ["zl1", "zl2", "zl3"]
        assert labels[1].color == ""
        assert client.variables(queries.LIST_ZENHUB_LABELS) == [{"workspaceId": "ws1", "first": 100}]

    def test_resolve_by_exact_name_and_id(self, client: FakeClient, cache: CacheStore):
        assert resolve_zenhub_label(client, cache, "ws1", "customer").id == "zl1"
        assert resolve_zenhub_label(client, cache, "ws1", "zl3").name == "Tech debt"
        assert client.count(queries.LIST_ZENHUB_LABELS) == 1

    def test_fragments_do_not_match(self, client: FakeClient, cache: CacheStore):
        with pytest.raises(NotFoundError, match="zenhub-labels"):
            resolve_zenhub_label(client, cache, "ws1", "debt")

    def test_kept_apart_from_repository_labels(self, client: FakeClient, cache: CacheStore):
        resolve_zenhub_label(client, cache, "ws1", "Customer")

        assert cache.get(zenhub_label_cache_key("ws1"))[1] is True
        assert client.count(queries.LIST_LABELS) == 0

    def test_stale_cache_is_refreshed_once(self, cache: CacheStore):
        client = FakeClient(
            {
                queries.LIST_ZENHUB_LABELS: [
                    {"workspace": {"zenhubLabels": connection([{"id": "zl1", "name": "Customer"}])}},
                    ZENHUB_LABELS,
                ]
            }
        )
        resolve_zenhub_label(client, cache, "ws1", "Customer")

        assert resolve_zenhub_label(client, cache, "ws1", "Tech debt").id == "zl3"
        assert client.count(queries.LIST_ZENHUB_LABELS) == 2

    def test_batch_reports_all_missing_labels(self, client: FakeClient, cache: CacheStore):
        with pytest.raises(NotFoundError, match="ZenHub labels not found: urgent, later"):
            resolve_zenhub_labels(client, cache, "ws1", ["Customer", "urgent", "later"])

    def test_batch_resolution(self, client: FakeClient, cache: CacheStore):
        labels = resolve_zenhub_labels(client, cache, "ws1", ["tech debt", "Customer request"])

        assert [lb.id for lb in labels] == ["zl3", "zl2"]


class TestPriorities:
    def test_fetch(self):
        priorities = fetch_priorities(FakeClient({queries.LIST_PRIORITIES: PRIORITIES}), "ws1")

        assert [p.id for p in priorities] == ["pr1", "pr2"]
        assert priorities[0].description == ""

    def test_resolve_by_fragment(self, cache: CacheStore):
        assert resolve_priority(FakeClient({queries.LIST_PRIORITIES: PRIORITIES}), cache, "ws1", "high").id == "pr1"

    def test_shared_word_is_ambiguous(self, cache: CacheStore):
        with pytest.raises(AmbiguousMatchError, match="matches 2 priorities"):
            resolve_priority(FakeClient({queries.LIST_PRIORITIES: PRIORITIES}), cache, "ws1", "priority")


class TestUsers:
    @pytest.fixture
    def client(self) -> FakeClient:
        return FakeClient({queries.LIST_USERS: USERS})

    def test_login_with_at_sign(self, client: FakeClient, cache: CacheStore):
        result = resolve_user(client, cache, "ws1", "@janedoe")

        assert result.id == "u2"
        assert result.display_name == "@janedoe"

    def test_login_beats_equal_display_name(self, client: FakeClient, cache: CacheStore):
        assert resolve_user(client, cache, "ws1", "JohnDoe").id == "u1"

    def test_display_name(self, client: FakeClient, cache: CacheStore):
        result = resolve_user(client, cache, "ws1", "contractor")

        assert result.id == "u4"
        assert result.login is None
        assert result.display_name == "Contractor"

    def test_batch(self, client: FakeClient, cache: CacheStore):
        users = resolve_users(client, cache, "ws1", ["@johndoe", "Jane Doe"])

        assert [u.id for u in users] == ["u1", "u2"]

    def test_unknown_user(self, client: FakeClient, cache: CacheStore):
        with pytest.raises(NotFoundError):
            resolve_user(client, cache, "ws1", "@nobody")


class TestWorkspaces:
    def test_fetch_flattens_organizations(self):
        workspaces = fetch_workspaces(FakeClient({queries.LIST_WORKSPACES: WORKSPACES}))

        assert [(w.id, w.org_name) for w in workspaces] == [("ws1", "Acme"), ("ws2", "Acme"), ("ws3", "Globex")]

    def test_resolve_by_slug_and_id(self, cache: CacheStore):
        client = FakeClient({queries.LIST_WORKSPACES: WORKSPACES})

        assert resolve_workspace(client, cache, "mobile").id == "ws2"
        assert resolve_workspace(client, cache, "ws3").org_name == "Globex"

    def test_same_name_in_two_organizations_is_ambiguous(self, cache: CacheStore):
        client = FakeClient({queries.LIST_WORKSPACES: WORKSPACES})

        with pytest.raises(AmbiguousMatchError) as exc_info:
            resolve_workspace(client, cache, "platform")

        assert "Platform (Acme) [ws1]" in exc_info.value.message
        assert "Platform (Globex) [ws3]" in exc_info.value.message

    def test_workspace_list_is_not_scoped(self, cache: CacheStore):
        resolve_workspace(FakeClient({queries.LIST_WORKSPACES: WORKSPACES}), cache, "mobile")

        cache.clear_workspace("ws2")

        assert cache.get(WORKSPACES_CACHE_KEY)[1] is True


@pytest.mark.parametrize(
    ("fetch", "query", "response"),
    [
        (
            fetch_repos,
            queries.LIST_REPOS,
            {"workspace": {"repositoriesConnection": connection([{"id": "r1", "name": "api", "ownerName": "acme"}])}},
        ),
        (
            fetch_priorities,
            queries.LIST_PRIORITIES,
            {"workspace": {"prioritiesConnection": {"nodes": [{"name": "High"}]}}},
        ),
        (
            fetch_zenhub_labels,
            queries.LIST_ZENHUB_LABELS,
            {"workspace": {"zenhubLabels": connection([{"id": ["zl1"], "name": "Customer"}])}},
        ),
    ],
    ids=["repo-without-gh-id", "priority-without-id", "label-with-list-id"],
)
def test_unreadable_nodes_are_malformed_responses(fetch, query: str, response: dict):
    with pytest.raises(MalformedResponseError):
        fetch(FakeClient({query: response}), "ws1")
