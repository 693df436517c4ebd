"""Cursor pagination over GraphQL connections."""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, TypeVar

from pydantic import ValidationError

from zh.api.client import GraphQLExecutor
from zh.core.constants import APIConstants
from zh.exceptions import MalformedResponseError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def dig(data: dict[str, Any], path: Sequence[str], operation: str) -> dict[str, Any]:
    """Walk ``path`` through a response, failing loudly on missing objects."""
    node: Any = data
    for part in path:
        if not isinstance(node, dict) or not isinstance(node.get(part), dict):
            raise MalformedResponseError(operation, f"missing '{'.'.join(path)}' in response")
        node = node[part]
    return node


def paginate_nodes(
    client: GraphQLExecutor,
    query: str,
    variables: dict[str, Any],
    connection_path: Sequence[str],
    *,
    operation: str,
    page_size: int = APIConstants.DEFAULT_PAGE_SIZE,
    limit: int | None = None,
    on_first_page: Callable[[dict[str, Any]], None] | None = None,
) -> list[dict[str, Any]]:
    """Collect the nodes of a connection, page by page.

    Args:
        client: GraphQL executor
        query: Query taking ``$first`` and ``$after`` variables
        variables: Other query variables
        connection_path: Keys leading from ``data`` to the connection object
        operation: Human-readable description used in error messages
        page_size: Nodes requested per page
        limit: Stop once this many nodes were collected (None for all)
        on_first_page: Called with the first page's ``data`` (for fields
            returned alongside the connection)

    Returns:
        The collected node dictionaries
    """
    nodes: list[dict[str, Any]] = []
    cursor: str | None = None
    page = 0

    if limit is not None and limit <= 0:
        return nodes

    while True:
        first = page_size if limit is None else min(page_size, limit - len(nodes))
        params: dict[str, Any] = {**variables, "first": first}
        if cursor:
            params["after"] = cursor

        data = client.execute(query, params)
        if page == 0 and on_first_page:
            on_first_page(data)
        page += 1

        connection = dig(data, connection_path, operation)
        nodes.extend(n for n in connection.get("nodes") or [] if n)

        if limit is not None and len(nodes) >= limit:
            return nodes[:limit]

        page_info = connection.get("pageInfo") or {}
        if not page_info.get("hasNextPage") or not page_info.get("endCursor"):
            break
        cursor = page_info["endCursor"]

    logger.debug(f"Fetched {len(nodes)} nodes in {page} page(s) while {operation}")
    return nodes


def decode_nodes(nodes: Iterable[dict[str, Any]], decode: Callable[[dict[str, Any]], T], operation: str) -> list[T]:
    """Turn response nodes into records.

    Raises:
        MalformedResponseError: If a node lacks a required field or holds a
            value of the wrong type
    """
    try:
        return [decode(node) for node in nodes]
    except KeyError as e:
        raise MalformedResponseError(operation, f"node without {e}") from e
    except (AttributeError, TypeError, ValidationError) as e:
        raise MalformedResponseError(operation, f"unreadable node: {e}") from e
