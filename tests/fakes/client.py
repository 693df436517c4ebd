"""In-memory GraphQL executor and clock fakes."""

from __future__ import annotations

from typing import Any

START_TIME = 1_700_000_000.0


class FakeClient:
    """GraphQL executor answering from canned responses, keyed by query text.

    A response may be a dict, an exception to raise, a callable taking the
    variables, or a list of those consumed one per call (the last one repeats).
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = {}
        for query, response in (responses or {}).items():
            self.respond(query, response)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __enter__(self) -> FakeClient:
        return self

    def __exit__(self, *args: Any) -> None:
        pass

    def respond(self, query: str, response: Any) -> None:
        self.responses[query] = list(response) if isinstance(response, list) else response

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        self.calls.append((query, dict(variables or {})))
        if query not in self.responses:
            raise AssertionError(f"unexpected query: {query.splitlines()[0]}")

        response = self.responses[query]
        if isinstance(response, list):
            response = response.pop(0) if len(response) > 1 else response[0]
        if callable(response):
            response = response(variables or {})
        if isinstance(response, Exception):
            raise response
        return response

    def count(self, query: str) -> int:
        return sum(1 for q, _ in self.calls if q == query)

    def variables(self, query: str) -> list[dict[str, Any]]:
        return [v for q, v in self.calls if q == query]


class FakeClock:
    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, hours: float) -> None:
        self.now += hours * 3600


def connection(nodes: list[dict[str, Any]], end_cursor: str | None = None) -> dict[str, Any]:
    """One page of a GraphQL connection; ``end_cursor`` means more pages follow."""
    return {
        "pageInfo": {"hasNextPage": end_cursor is not None, "endCursor": end_cursor},
        "nodes": nodes,
    }


def pipelines_response(*pipelines: tuple[str, str], end_cursor: str | None = None) -> dict[str, Any]:
    nodes = [{"id": pid, "name": name} for pid, name in pipelines]
    return {"workspace": {"pipelinesConnection": connection(nodes, end_cursor)}}


STANDARD_PIPELINES = pipelines_response(("p1", "Backlog"), ("p2", "In Progress"), ("p3", "Done"))

WORKSPACES = {
    "viewer": {
        "zenhubOrganizations": {
            "nodes": [
                {
                    "id": "o1",
                    "name": "Acme",
                    "workspaces": {
                        "nodes": [
                            {"id": "ws1", "name": "platform", "displayName": "Platform"},
                            {"id": "ws2", "name": "mobile", "displayName": "Mobile"},
                        ]
                    },
                },
                {
                    "id": "o2",
                    "name": "Globex",
                    "workspaces": {"nodes": [{"id": "ws3", "name": "platform", "displayName": "Platform"}]},
                },
            ]
        }
    }
}
