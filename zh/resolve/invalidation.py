"""Cache invalidation after mutations and workspace switches.

Every hook is best effort: a failure to clear the cache is logged, never
raised, so it cannot fail a mutation that already succeeded.
"""

import logging

from zh.cache import CacheStore
from zh.exceptions import CacheError
from zh.resolve.epic import epic_cache_key
from zh.resolve.pipeline import pipeline_cache_key

logger = logging.getLogger(__name__)


def invalidate_pipelines(cache: CacheStore, workspace_id: str) -> None:
    """Drop the cached pipeline list after a pipeline was created, edited or deleted."""
    try:
        cache.clear(pipeline_cache_key(workspace_id))
    except CacheError as e:
        logger.warning(f"Could not invalidate pipeline cache for {workspace_id}: {e}")


def invalidate_epics(cache: CacheStore, workspace_id: str) -> None:
    """Drop the cached epic list after an epic was created."""
    try:
        cache.clear(epic_cache_key(workspace_id))
    except CacheError as e:
        logger.warning(f"Could not invalidate epic cache for {workspace_id}: {e}")


def on_workspace_switch(cache: CacheStore, previous_workspace_id: str | None) -> int:
    """Clear every entry scoped to the workspace being left.

    Returns:
        Number of entries removed
    """
    if not previous_workspace_id:
        return 0
    try:
        removed = cache.clear_workspace(previous_workspace_id)
    except CacheError as e:
        logger.warning(f"Could not clear cache for workspace {previous_workspace_id}: {e}")
        return 0
    logger.debug(f"Cleared {removed} cache entries for workspace {previous_workspace_id}")
    return removed
