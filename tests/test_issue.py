from __future__ import annotations

import pytest

from tests.fakes.client import FakeClient, connection
from zh.api import queries
from zh.cache import CacheStore
from zh.exceptions import AmbiguousMatchError, NotFoundError, UsageError
from zh.resolve.issue import ParsedIssueRef, parse_issue_ref, resolve_issue
from zh.resolve.repo import lookup_repo, resolve_repo

REPOS = {
    "workspace": {
        "repositoriesConnection": connection(
            [
                {"id": "r1", "ghId": 101, "name": "api", "ownerName": "acme"},
                {"id": "r2", "ghId": 102, "name": "web", "ownerName": "acme"},
                {"id": "r3", "ghId": 103, "name": "web", "ownerName": "forks"},
                {"id": "r4", "ghId": 104, "name": "api-gateway", "ownerName": "acme"},
            ]
        )
    }
}


def issue_payload(number: int, gh_id: int = 101, name: str = "api", owner: str = "acme") -> dict:
    return {"id": f"issue-{number}", "number": number, "repository": {"ghId": gh_id, "name": name, "ownerName": owner}}


def issue_client(issue: dict | None = None) -> FakeClient:
    return FakeClient(
        {
            queries.LIST_REPOS: REPOS,
            queries.ISSUE_BY_INFO: {"issueByInfo": issue},
            queries.ISSUE_BY_NODE: {"node": issue},
        }
    )


class FakeGitHub:
    def __init__(self, number: int) -> None:
        self.number = number
        self.calls: list[tuple[str, str, str]] = []

    def resolve_branch_to_issue(self, owner: str, repo: str, branch: str) -> int:
        self.calls.append((owner, repo, branch))
        return self.number


class TestParseIssueRef:
    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [
            ("acme/api#12", ParsedIssueRef(owner="acme", repo="api", number=12)),
            ("api#12", ParsedIssueRef(repo="api", number=12)),
            ("12", ParsedIssueRef(number=12)),
            ("Z2lkOi8vcmFwdG9yL0lzc3VlLzEyMw==", ParsedIssueRef(node_id="Z2lkOi8vcmFwdG9yL0lzc3VlLzEyMw==")),
        ],
    )
    def test_accepted_forms(self, identifier: str, expected: ParsedIssueRef):
        assert parse_issue_ref(identifier) == expected

    @pytest.mark.parametrize("identifier", ["", "0", "api#", "#12", "a/b/c#1", "fix-login-flow", "short"])
    def test_rejected_forms(self, identifier: str):
        with pytest.raises(UsageError):
            parse_issue_ref(identifier)


def test_full_reference_uses_repo_gh_id(cache: CacheStore):
    client = issue_client(issue_payload(12))

    issue = resolve_issue(client, cache, "ws1", "acme/api#12")

    assert issue.id == "issue-12"
    assert issue.ref == "api#12"
    assert issue.full_ref == "acme/api#12"
    assert client.variables(queries.ISSUE_BY_INFO) == [{"repositoryGhId": 101, "issueNumber": 12}]


def test_short_reference_with_unique_repo_name(cache: CacheStore):
    client = issue_client(issue_payload(3))

    assert resolve_issue(client, cache, "ws1", "api#3").number == 3
    assert client.variables(queries.ISSUE_BY_INFO)[0]["repositoryGhId"] == 101


def test_repo_name_under_two_owners_is_ambiguous(cache: CacheStore):
    client = issue_client(issue_payload(5, 102, "web"))

    with pytest.raises(AmbiguousMatchError) as exc_info:
        resolve_issue(client, cache, "ws1", "web#5")

    assert "acme/web" in exc_info.value.message
    assert "forks/web" in exc_info.value.message
    assert client.count(queries.ISSUE_BY_INFO) == 0


def test_owner_disambiguates(cache: CacheStore):
    client = issue_client(issue_payload(5, 103, "web", "forks"))

    resolve_issue(client, cache, "ws1", "forks/web#5")

    assert client.variables(queries.ISSUE_BY_INFO)[0]["repositoryGhId"] == 103


def test_issue_repos_are_not_matched_by_fragment(cache: CacheStore):
    client = issue_client(issue_payload(1))

    with pytest.raises(NotFoundError):
        resolve_issue(client, cache, "ws1", "gate#1")


def test_bare_number_needs_a_repo(cache: CacheStore):
    client = issue_client(issue_payload(9))

    with pytest.raises(UsageError, match="--repo"):
        resolve_issue(client, cache, "ws1", "9")

    assert resolve_issue(client, cache, "ws1", "9", repo="api").number == 9


def test_backend_decides_whether_issue_exists(cache: CacheStore):
    client = issue_client(None)

    with pytest.raises(NotFoundError, match="acme/api#404"):
        resolve_issue(client, cache, "ws1", "acme/api#404")


def test_node_id_lookup(cache: CacheStore):
    client = issue_client(issue_payload(77))

    issue = resolve_issue(client, cache, "ws1", "Z2lkOi8vcmFwdG9yL0lzc3VlLzc3")

    assert issue.number == 77
    assert client.count(queries.LIST_REPOS) == 0


def test_branch_name_goes_through_github(cache: CacheStore):
    client = issue_client(issue_payload(31))
    github = FakeGitHub(31)

    issue = resolve_issue(client, cache, "ws1", "fix-login-flow", repo="acme/api", github=github)

    assert issue.number == 31
    assert github.calls == [("acme", "api", "fix-login-flow")]


def test_branch_name_without_github_is_a_usage_error(cache: CacheStore):
    with pytest.raises(UsageError):
        resolve_issue(issue_client(), cache, "ws1", "fix-login-flow", repo="acme/api")


def test_resolve_repo_accepts_fragments_but_lookup_does_not(cache: CacheStore):
    client = issue_client()

    assert resolve_repo(client, cache, "ws1", "gateway").full_name == "acme/api-gateway"
    with pytest.raises(NotFoundError):
        lookup_repo(client, cache, "ws1", "gateway")


def test_resolve_repo_by_full_name_is_case_insensitive(cache: CacheStore):
    result = resolve_repo(issue_client(), cache, "ws1", "FORKS/Web")

    assert result.id == "r3"
    assert result.gh_id == 103
