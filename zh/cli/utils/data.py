"""Shared data access utilities for CLI commands."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from zh.api.client import ZenHubClient
from zh.cache import CacheStore
from zh.cli.utils.auth import get_config, get_workspace_id, with_api_client
from zh.config import Config

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Everything a command needs to talk to the backend for one invocation."""

    config: Config
    client: ZenHubClient
    cache: CacheStore
    workspace_id: str


def open_cache(config: Config) -> CacheStore:
    """Open the entity cache configured for this invocation."""
    logger.debug(f"Using cache directory {config.cache_dir} (ttl {config.cache_ttl_hours}h)")
    return CacheStore(config.cache_dir, ttl_hours=config.cache_ttl_hours)


@contextmanager
def command_context(workspace: str | None = None, require_workspace: bool = True) -> Iterator[CommandContext]:
    """Load configuration, then open the API session and the cache.

    Args:
        workspace: Workspace id overriding the configured one
        require_workspace: Fail when no workspace is selected

    Raises:
        ConfigurationError: If the configuration is invalid or no workspace is selected
        AuthenticationError: If no API key is configured
    """
    config = get_config()
    if require_workspace:
        workspace_id = get_workspace_id(config, workspace)
    else:
        workspace_id = workspace or config.workspace or ""

    with with_api_client(config) as client, open_cache(config) as cache:
        yield CommandContext(config=config, client=client, cache=cache, workspace_id=workspace_id)
