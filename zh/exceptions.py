"""Custom exceptions for zh."""

from typing import Any

from zh.core.constants import ExitCode


class ZHError(Exception):
    """Base exception for all zh errors."""

    exit_code: int = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize zh error.

        Args:
            message: Error message
            details: Additional error details

        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ZHError):
    """Raised when configuration is invalid or missing."""

    exit_code = ExitCode.USAGE_ERROR


class UsageError(ZHError):
    """Raised when an identifier or argument is malformed."""

    exit_code = ExitCode.USAGE_ERROR


class CacheError(ZHError):
    """Raised when cache operations fail."""


class APIError(ZHError):
    """Raised when the backend fails or returns data that cannot be used."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response_text: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            status_code: HTTP status code (0 when no response was received)
            message: Error message
            response_text: Raw response text from API
            details: Additional error details

        """
        super().__init__(message, details)
        self.status_code = status_code
        self.response_text = response_text


class AuthenticationError(APIError):
    """Raised when authentication fails (401/403)."""

    exit_code = ExitCode.AUTH_FAILURE

    def __init__(self, message: str = "Authentication failed", response_text: str | None = None) -> None:
        super().__init__(401, message, response_text)


class RateLimitError(APIError):
    """Raised when rate limit is exceeded (429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        response_text: str | None = None,
        retry_after: int | None = None,
    ) -> None:
        super().__init__(429, message, response_text)
        self.retry_after = retry_after


class GraphQLError(APIError):
    """Raised when a GraphQL response carries an ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]], data: dict[str, Any] | None = None) -> None:
        messages = [str(e.get("message", e)) for e in errors]
        if len(messages) == 1:
            message = messages[0]
        else:
            message = f"{len(messages)} GraphQL errors:" + "".join(f"\n  - {m}" for m in messages)
        super().__init__(200, message, details={"errors": errors})
        self.errors = errors
        self.data = data


class MalformedResponseError(APIError):
    """Raised when a response cannot be parsed into the expected shape."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(200, f"Unexpected response while {operation}: {reason}")
        self.operation = operation


class ResolutionError(ZHError):
    """Base class for identifier resolution failures."""

    def __init__(self, kind: str, identifier: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, {"kind": kind, "identifier": identifier, **(details or {})})
        self.kind = kind
        self.identifier = identifier


class NotFoundError(ResolutionError):
    """Raised when an identifier matches nothing, even after a fresh fetch."""

    exit_code = ExitCode.NOT_FOUND

    def __init__(self, kind: str, identifier: str, message: str | None = None) -> None:
        super().__init__(kind, identifier, message or f"{kind} {identifier!r} not found")


class AmbiguousMatchError(ResolutionError):
    """Raised when an identifier matches two or more candidates.

    ``candidates`` holds every match so the caller can render them; the
    message is built by :func:`zh.resolve.ambiguity.describe_ambiguity`.
    """

    exit_code = ExitCode.USAGE_ERROR

    def __init__(self, kind: str, identifier: str, candidates: list[Any], message: str) -> None:
        super().__init__(kind, identifier, message, {"candidates": candidates})
        self.candidates = candidates


class NoActiveSprintError(ResolutionError):
    """Raised when ``current`` is requested but the workspace has no active sprint."""

    exit_code = ExitCode.NOT_FOUND

    def __init__(self, identifier: str = "current") -> None:
        super().__init__(
            "sprint",
            identifier,
            "no active sprint: the workspace may not have sprints configured, "
            "or no sprint is currently in progress",
        )


def exit_code_for(error: BaseException) -> int:
    """Map an exception to a process exit code."""
    if isinstance(error, ZHError):
        return int(error.exit_code)
    return int(ExitCode.GENERAL_ERROR)
