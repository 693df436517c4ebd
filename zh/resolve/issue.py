"""Issue reference parsing and resolution.

Accepted identifiers:

* ``owner/repo#123`` and ``repo#123``
* ``123``, together with an explicit repository
* a raw backend node id
* a branch name, when a repository and GitHub access are both available
"""

import logging
import re
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from zh.api.client import GraphQLExecutor
from zh.api.github import GitHubClient
from zh.api.queries import ISSUE_BY_INFO, ISSUE_BY_NODE
from zh.cache import CacheStore
from zh.core.constants import DisplayConstants
from zh.exceptions import MalformedResponseError, NotFoundError, UsageError
from zh.models.results import IssueResult, RepoResult
from zh.resolve.repo import lookup_repo

logger = logging.getLogger(__name__)

ISSUE_REF_PATTERN = re.compile(r"^(?:([^/#]+)/)?([^/#]+)#(\d+)$")
_NODE_ID_PATTERN = re.compile(r"^[A-Za-z0-9+/=]+$")


@dataclass(frozen=True)
class ParsedIssueRef:
    """Components of an issue identifier; exactly one form is populated."""

    node_id: str | None = None
    owner: str | None = None
    repo: str | None = None
    number: int | None = None


def looks_like_node_id(value: str) -> bool:
    """True for long alphanumeric/base64 strings such as backend node ids."""
    return len(value) >= DisplayConstants.MIN_ISSUE_ID_LENGTH and bool(_NODE_ID_PATTERN.match(value))


def parse_issue_ref(identifier: str) -> ParsedIssueRef:
    """Split an issue identifier into its parts.

    Raises:
        UsageError: If the identifier matches none of the accepted forms
    """
    identifier = identifier.strip()
    if m := ISSUE_REF_PATTERN.match(identifier):
        owner, repo, number = m.groups()
        return ParsedIssueRef(owner=owner, repo=repo, number=int(number))

    if identifier.isdigit() and int(identifier) > 0:
        return ParsedIssueRef(number=int(identifier))

    if looks_like_node_id(identifier):
        return ParsedIssueRef(node_id=identifier)

    raise UsageError(
        f"invalid issue identifier {identifier!r}: expected repo#number, owner/repo#number, or an issue ID",
        {"identifier": identifier},
    )


def _issue_from_node(node: dict[str, Any] | None) -> IssueResult | None:
    if not node or not node.get("repository"):
        return None
    repo = node["repository"]
    return IssueResult(
        id=node["id"],
        number=node["number"],
        repo_gh_id=repo["ghId"],
        repo_owner=repo.get("ownerName") or "",
        repo_name=repo.get("name") or "",
    )


def fetch_issue_by_number(client: GraphQLExecutor, repo: RepoResult, number: int) -> IssueResult:
    """Look up an issue or pull request by repository and number.

    The backend decides whether the issue exists; the number is not validated
    locally.
    """
    data = client.execute(ISSUE_BY_INFO, {"repositoryGhId": repo.gh_id, "issueNumber": number})
    try:
        issue = _issue_from_node(data.get("issueByInfo"))
    except (KeyError, TypeError, ValidationError) as e:
        raise MalformedResponseError("fetching issue details", str(e)) from e
    if issue is None:
        ref = f"{repo.full_name}#{number}"
        raise NotFoundError("issue", ref, f"issue {ref} not found")
    return issue


def fetch_issue_by_id(client: GraphQLExecutor, node_id: str) -> IssueResult:
    """Look up an issue by its backend node id."""
    data = client.execute(ISSUE_BY_NODE, {"id": node_id})
    try:
        issue = _issue_from_node(data.get("node"))
    except (KeyError, TypeError, ValidationError) as e:
        raise MalformedResponseError("fetching issue by ID", str(e)) from e
    if issue is None:
        raise NotFoundError("issue", node_id)
    return issue


def resolve_issue(
    client: GraphQLExecutor,
    cache: CacheStore,
    workspace_id: str,
    identifier: str,
    repo: str | None = None,
    github: GitHubClient | None = None,
) -> IssueResult:
    """Resolve an issue identifier to a backend issue.

    Args:
        client: ZenHub GraphQL executor
        cache: Cache store holding the repository list
        workspace_id: Active workspace
        identifier: Issue identifier as typed by the user
        repo: Repository context (``repo`` or ``owner/repo``) for bare
            numbers and branch names
        github: GitHub client used to map a branch name to a pull request

    Raises:
        UsageError: If the identifier is malformed or needs a repository
        NotFoundError: If the repository or the issue does not exist
        AmbiguousMatchError: If a repository name exists under two owners
    """
    try:
        parsed = parse_issue_ref(identifier)
    except UsageError:
        if repo and github is not None:
            return _resolve_by_branch(client, cache, workspace_id, identifier, repo, github)
        raise

    if parsed.node_id or parsed.number is None:
        return fetch_issue_by_id(client, parsed.node_id or identifier)

    if parsed.repo is None:
        if not repo:
            raise UsageError(f"bare issue number {parsed.number} requires a repository (--repo)")
        repo_id = repo
    else:
        repo_id = f"{parsed.owner}/{parsed.repo}" if parsed.owner else parsed.repo

    resolved_repo = lookup_repo(client, cache, workspace_id, repo_id)
    return fetch_issue_by_number(client, resolved_repo, parsed.number)


def _resolve_by_branch(
    client: GraphQLExecutor,
    cache: CacheStore,
    workspace_id: str,
    branch: str,
    repo: str,
    github: GitHubClient,
) -> IssueResult:
    resolved_repo = lookup_repo(client, cache, workspace_id, repo)
    logger.debug(f"Looking up PR for branch {branch!r} in {resolved_repo.full_name}")
    number = github.resolve_branch_to_issue(resolved_repo.owner_name, resolved_repo.name, branch)
    return fetch_issue_by_number(client, resolved_repo, number)
