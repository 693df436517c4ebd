"""ZenHub GraphQL API client implementation."""

import json
import logging
import os
from typing import Any, Protocol

import requests

from zh.core.constants import API_BASE_URL, USER_AGENT, APIConstants
from zh.exceptions import (
    APIError,
    AuthenticationError,
    GraphQLError,
    MalformedResponseError,
    RateLimitError,
)


class GraphQLExecutor(Protocol):
    """Anything that can run a GraphQL document and return its ``data`` object."""

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]: ...


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


class ZenHubClient:
    """Client for the ZenHub GraphQL API.

    Failed calls are surfaced as :class:`~zh.exceptions.APIError` subclasses
    and never retried.
    """

    def __init__(self, api_key: str | None = None, endpoint: str = API_BASE_URL) -> None:
        """Initialize the API client.

        Args:
            api_key: ZenHub API key (defaults to ZH_API_KEY env var)
            endpoint: GraphQL endpoint URL

        Raises:
            AuthenticationError: If no API key is available

        """
        self.logger = logging.getLogger(__name__)

        self.api_key = api_key or os.getenv("ZH_API_KEY")
        self.endpoint = endpoint

        if not self.api_key:
            self.logger.error("API key not provided")
            raise AuthenticationError("No API key configured: set ZH_API_KEY or run setup")

        self.session: requests.Session | None = None

    def __enter__(self) -> "ZenHubClient":
        """Enter context."""
        self.session = requests.Session()
        self.logger.debug("Client session opened")
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context."""
        if self.session:
            self.session.close()
            self.session = None
            self.logger.debug("Client session closed")

    @property
    def headers(self) -> dict[str, str]:
        """Get request headers."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Send a GraphQL document and return the ``data`` object.

        Args:
            query: GraphQL query or mutation text
            variables: Query variables

        Returns:
            The response's ``data`` object

        Raises:
            APIError: On transport failures, HTTP errors, GraphQL errors and
                unparsable responses
        """
        if not self.session:
            raise RuntimeError("Client not initialized. Use context manager.")

        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables

        self.logger.debug(f"→ POST {self.endpoint}")
        self.logger.debug(f"→ Query: {query}")
        if variables:
            self.logger.debug(f"→ Variables: {json.dumps(variables, indent=2)}")

        try:
            response = self.session.post(
                self.endpoint, headers=self.headers, json=body, timeout=APIConstants.REQUEST_TIMEOUT
            )
        except requests.exceptions.Timeout as e:
            raise APIError(0, f"API request timed out after {int(APIConstants.REQUEST_TIMEOUT)}s") from e
        except requests.exceptions.RequestException as e:
            raise APIError(0, f"API request failed: {e}") from e

        response_text = response.text
        self.logger.debug(f"← {response.status_code} {response.reason}")
        self.logger.debug(f"← Body: {_truncate(response_text, APIConstants.MAX_LOGGED_BODY)}")

        self._raise_for_status(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedResponseError("parsing API response", str(e)) from e

        if not isinstance(payload, dict):
            raise MalformedResponseError("parsing API response", "response is not a JSON object")

        data = payload.get("data") or {}
        if errors := payload.get("errors"):
            raise GraphQLError(errors, data)

        return data

    def _raise_for_status(self, response: requests.Response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return

        response_text = response.text
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            seconds = int(retry_after) if retry_after and retry_after.isdigit() else None
            message = f"Rate limited: retry after {seconds} seconds" if seconds else "Rate limited: try again later"
            raise RateLimitError(message, response_text, seconds)
        if status in (401, 403):
            raise AuthenticationError("Authentication failed: check your API key", response_text)

        raise APIError(
            status,
            f"API returned HTTP {status}: {_truncate(response_text, APIConstants.MAX_ERROR_BODY)}",
            response_text,
        )
