"""Workspace user fetching and resolution."""

from collections.abc import Sequence

from zh.api.client import GraphQLExecutor
from zh.api.queries import LIST_USERS
from zh.cache import CacheKey, CacheStore
from zh.core.constants import CacheNamespace
from zh.models.records import USER_LIST, UserRecord
from zh.models.results import UserResult
from zh.resolve.ambiguity import Candidate
from zh.resolve.matching import MatchSpec, resolve_many_records, resolve_records, write_records
from zh.resolve.pagination import decode_nodes, paginate_nodes


def _by_login(users: Sequence[UserRecord], identifier: str) -> UserRecord | None:
    # A GitHub login beats a display name that happens to be equal
    wanted = identifier.lower()
    for user in users:
        if user.github_login and user.github_login.lower() == wanted:
            return user
    return None


def _describe(user: UserRecord) -> Candidate:
    if user.github_login:
        return Candidate(user.id, f"@{user.github_login}", user.name)
    return Candidate(user.id, user.name)


USER_MATCH = MatchSpec[UserRecord](
    kind="user",
    names=lambda u: [n for n in (u.github_login, u.name) if n],
    describe=_describe,
    match_ids=False,
    reference=_by_login,
    normalize=lambda identifier: identifier.strip().removeprefix("@"),
    hint="check the GitHub login or name",
)


def user_cache_key(workspace_id: str) -> CacheKey:
    return CacheKey(CacheNamespace.USERS, workspace_id)


def fetch_users(client: GraphQLExecutor, workspace_id: str, limit: int | None = None) -> list[UserRecord]:
    """Fetch the workspace's users."""
    nodes = paginate_nodes(
        client,
        LIST_USERS,
        {"workspaceId": workspace_id},
        ("workspace", "zenhubUsers"),
        operation="fetching workspace users",
        limit=limit,
    )
    return decode_nodes(
        nodes,
        lambda n: UserRecord(
            id=n["id"],
            name=n.get("name") or "",
            github_login=(n.get("githubUser") or {}).get("login"),
        ),
        "fetching workspace users",
    )


def fetch_users_into_cache(cache: CacheStore, records: Sequence[UserRecord], workspace_id: str) -> None:
    """Store an already-fetched user list."""
    write_records(cache, user_cache_key(workspace_id), USER_LIST, records)


def _to_result(record: UserRecord) -> UserResult:
    return UserResult(id=record.id, name=record.name, login=record.github_login)


def resolve_user(client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifier: str) -> UserResult:
    """Resolve a user by GitHub login (``@`` optional), name or unique fragment."""
    record = resolve_records(
        cache,
        user_cache_key(workspace_id),
        USER_LIST,
        lambda: fetch_users(client, workspace_id),
        identifier,
        USER_MATCH,
    )
    return _to_result(record)


def resolve_users(
    client: GraphQLExecutor, cache: CacheStore, workspace_id: str, identifiers: Sequence[str]
) -> list[UserResult]:
    """Resolve several users, refreshing the list at most once."""
    records = resolve_many_records(
        cache,
        user_cache_key(workspace_id),
        USER_LIST,
        lambda: fetch_users(client, workspace_id),
        identifiers,
        USER_MATCH,
    )
    return [_to_result(r) for r in records]
