"""GitHub access via a personal access token or the gh CLI."""

import json
import logging
import subprocess
from typing import Any

import requests

from zh.api.queries import GITHUB_PR_BY_BRANCH
from zh.core.constants import GITHUB_GRAPHQL_URL, USER_AGENT, APIConstants
from zh.exceptions import APIError, AuthenticationError, GraphQLError, MalformedResponseError, NotFoundError

logger = logging.getLogger(__name__)


class GitHubClient:
    """GitHub GraphQL client, used only to map branch names to pull requests."""

    def __init__(self, method: str, token: str | None = None, endpoint: str = GITHUB_GRAPHQL_URL) -> None:
        """Initialize the GitHub client.

        Args:
            method: "gh" to shell out to the gh CLI, "pat" to call the API with a token
            token: Personal access token (only for method="pat")
            endpoint: GraphQL endpoint URL
        """
        if method not in ("gh", "pat"):
            raise ValueError(f"Unsupported GitHub access method: {method}")
        if method == "pat" and not token:
            raise AuthenticationError("GitHub access method 'pat' requires a token")
        self.method = method
        self.token = token
        self.endpoint = endpoint

    @classmethod
    def from_settings(cls, method: str | None, token: str | None) -> "GitHubClient | None":
        """Build a client from configuration, or None when GitHub access is disabled."""
        if not method or method == "none":
            return None
        return cls(method, token)

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a GraphQL document to GitHub and return the ``data`` object."""
        body = {"query": query, "variables": variables or {}}
        if self.method == "gh":
            payload = self._execute_via_gh_cli(body)
        else:
            payload = self._execute_via_pat(body)

        if errors := payload.get("errors"):
            raise GraphQLError(errors, payload.get("data"))
        return payload.get("data") or {}

    def _execute_via_pat(self, body: dict[str, Any]) -> dict[str, Any]:
        logger.debug(f"→ GitHub POST {self.endpoint}")
        try:
            response = requests.post(
                self.endpoint,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Content-Type": "application/json",
                    "User-Agent": USER_AGENT,
                },
                json=body,
                timeout=APIConstants.REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise APIError(0, f"GitHub API request failed: {e}") from e

        logger.debug(f"← GitHub {response.status_code}")
        if response.status_code in (401, 403):
            raise AuthenticationError("GitHub authentication failed: check your token", response.text)
        if not 200 <= response.status_code < 300:
            raise APIError(response.status_code, f"GitHub API returned HTTP {response.status_code}", response.text)

        try:
            return dict(response.json())
        except ValueError as e:
            raise MalformedResponseError("parsing GitHub response", str(e)) from e

    def _execute_via_gh_cli(self, body: dict[str, Any]) -> dict[str, Any]:
        # Body goes through stdin so $-variables never pass through a shell
        args = ["gh", "api", "graphql", "--input", "-"]
        logger.debug(f"→ {' '.join(args)}")
        try:
            proc = subprocess.run(args, input=json.dumps(body), capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise APIError(0, "gh CLI not found: install it or configure a GitHub token") from e

        if proc.returncode != 0:
            raise APIError(0, f"gh CLI error: {proc.stderr.strip() or proc.returncode}")

        logger.debug(f"← gh response: {len(proc.stdout)} bytes")
        try:
            return dict(json.loads(proc.stdout))
        except ValueError as e:
            raise MalformedResponseError("parsing gh CLI response", str(e)) from e

    def resolve_branch_to_issue(self, owner: str, repo: str, branch: str) -> int:
        """Find the number of the pull request whose head is ``branch``.

        Raises:
            NotFoundError: If no pull request uses that branch
        """
        data = self.execute(GITHUB_PR_BY_BRANCH, {"owner": owner, "repo": repo, "head": branch})
        try:
            nodes = (data.get("repository") or {})["pullRequests"]["nodes"]
        except (KeyError, TypeError) as e:
            raise MalformedResponseError("looking up PR by branch name", str(e)) from e

        if not nodes:
            raise NotFoundError("branch", branch, f"no PR found for branch {branch!r} in {owner}/{repo}")
        return int(nodes[0]["number"])
