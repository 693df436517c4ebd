"""
Constants and configuration values for zh.
"""

from enum import IntEnum, StrEnum

# API endpoints
API_BASE_URL = "https://api.zenhub.com/public/graphql"
GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

# Version
PACKAGE_VERSION = "0.1.0"
USER_AGENT = f"zh-cli/{PACKAGE_VERSION}"


class APIConstants(IntEnum):
    """API-related limits and constants."""

    DEFAULT_PAGE_SIZE = 100
    PIPELINE_PAGE_SIZE = 50
    REQUEST_TIMEOUT = 30
    MAX_LOGGED_BODY = 2000
    MAX_ERROR_BODY = 200


class CacheLimits(IntEnum):
    """Cache-related limits."""

    DEFAULT_TTL_HOURS = 24


class CacheNamespace(StrEnum):
    """Entity-kind component of a cache key."""

    WORKSPACES = "workspaces"
    PIPELINES = "pipelines"
    EPICS = "epics"
    SPRINTS = "sprints"
    SPRINT_ACCESSORS = "sprint-accessors"
    REPOS = "repos"
    LABELS = "labels"
    ZENHUB_LABELS = "zenhub-labels"
    PRIORITIES = "priorities"
    USERS = "users"


class SprintKeyword(StrEnum):
    """Relative sprint references resolved before name matching."""

    CURRENT = "current"
    NEXT = "next"
    PREVIOUS = "previous"


class EpicKind(StrEnum):
    """Backend representation of an epic."""

    ZENHUB = "zenhub"
    LEGACY = "legacy"


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    USAGE_ERROR = 2
    AUTH_FAILURE = 3
    NOT_FOUND = 4


class DisplayConstants(IntEnum):
    """Display and formatting limits."""

    MIN_ISSUE_ID_LENGTH = 10
    ID_COLUMN_WIDTH = 38
    NAME_COLUMN_WIDTH = 40
