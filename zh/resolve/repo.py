"""Repository fetching and resolution."""

from collections.abc import Sequence

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_REPOS
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace
from zh.models.records import REPO_LIST, RepoRecord
from zh.models.results import RepoResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, resolve_records, write_records
from zh.resolve.pagination import decode_nodes, paginate_nodes


def _by_full_name(repos: Sequence[RepoRecord], identifier: str) -> RepoRecord | None:
    owner, sep, name = identifier.partition("/")
    if not sep:
        return None
    for repo in repos:
        if repo.owner_name.lower() == owner.lower() and repo.name.lower() == name.lower():
            return repo
    return None


REPO_MATCH = MatchSpec[RepoRecord](
    kind="repository",
    plural="repos",
    names=lambda r: [r.name],
    describe=lambda r: Candidate(r.id, r.full_name),
    match_ids=False,
    reference=_by_full_name,
    hint="run 'zh list repos' to see connected repos",
    advice="Use the full owner/repo format.",
)

# Issue references name repositories exactly; fragments are not accepted there
EXACT_REPO_MATCH = MatchSpec[RepoRecord](
    kind="repository",
    plural="repos",
    names=lambda r: [r.name],
    describe=lambda r: Candidate(r.id, r.full_name),
    match_ids=False,
    match_substrings=False,
    reference=_by_full_name,
    hint="run 'zh list repos' to see connected repos",
    advice="Use the full owner/repo format.",
)


def repo_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.REPOS, workspace_id)


def fetch_repos(client: GraphQLExecutor, workspace_id: str, limit: int | None = None) -> list[RepoRecord]:
    """Fetch the repositories connected to a workspace."""
    nodes = paginate_nodes(
        client,
        LIST_REPOS,
        {"workspaceId": workspace_id},
        ("workspace", "repositoriesConnection"),
        operation="fetching repos",
        limit=limit,
    )
    return decode_nodes(
        nodes,
        lambda n: RepoRecord(
            id=n["id"], gh_id=n["ghId"], name=n.get("name") or "", owner_name=n.get("ownerName") or ""
        ),
        "fetching repos",
    )


def fetch_repos_into_cache(cache: CacheStore, records: Sequence[RepoRecord], workspace_id: str) -> None:
    """Store an already-fetched repository list."""
    write_records(cache, repo_cache_key(workspace_id), REPO_LIST, records)


def _to_result(record: RepoRecord) -> RepoResult:
    return RepoResult(id=record.id, name=record.name, gh_id=record.gh_id, owner_name=record.owner_name)


def lookup_repo(client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifier: str) -> RepoResult:
    """Resolve ``repo`` or ``owner/repo`` by exact name only."""
    record = resolve_records(
        cache,
        repo_cache_key(workspace_id),
        REPO_LIST,
        lambda: fetch_repos(client, workspace_id),
        identifier,
        EXACT_REPO_MATCH,
    )
    return _to_result(record)


def resolve_repo(client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifier: str) -> RepoResult:
    """Resolve a repository by ``owner/repo``, exact name or unique name fragment."""
    record = resolve_records(
        cache,
        repo_cache_key(workspace_id),
        REPO_LIST,
        lambda: fetch_repos(client, workspace_id),
        identifier,
        REPO_MATCH,
    )
    return _to_result(record)
