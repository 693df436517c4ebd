"""Workspace-scoped key/value cache backed by DiskCache."""

import logging
import sqlite3
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from diskcache import Cache

from zh.core.constants import CacheLimits
from zh.exceptions import CacheError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Identifies one cache entry: an entity kind, optionally scoped to a workspace."""

    namespace: str
    workspace_id: str | None = None

    def __str__(self) -> str:
        if self.workspace_id:
            return f"{self.namespace}-{self.workspace_id}"
        return self.namespace


class CacheStore:
    """Namespaced key/value store on local disk with per-entry expiry.

    Every value is wrapped in an envelope carrying its expiry time. Expired
    envelopes read as missing but stay on disk until the next ``set`` for the
    same key overwrites them. Scoped entries are tagged with their workspace
    id so that :meth:`clear_workspace` can drop them regardless of kind.
    """

    def __init__(
        self,
        directory: Path,
        ttl_hours: float = CacheLimits.DEFAULT_TTL_HOURS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize cache store.

        Args:
            directory: Directory holding the DiskCache database
            ttl_hours: Time to live for every entry, in hours
            clock: Source of the current time (seconds since the epoch)
        """
        directory.mkdir(parents=True, exist_ok=True)
        self.cache = Cache(str(directory))
        self.cache_path = directory
        self.ttl_seconds = ttl_hours * 3600
        self._clock = clock

        logger.debug(f"Initialized cache at {directory}")

    def __enter__(self) -> "CacheStore":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying DiskCache handle."""
        self.cache.close()

    def get(self, key: CacheKey) -> tuple[Any, bool]:
        """Load a value from cache.

        Args:
            key: Cache key

        Returns:
            Tuple of (value, found). Missing, expired and unreadable entries
            all return (None, False).
        """
        try:
            envelope = self.cache.get(str(key))
        except Exception as e:
            logger.debug(f"Error loading cache key {key}: {e}")
            return None, False

        if not isinstance(envelope, dict) or "value" not in envelope:
            if envelope is not None:
                logger.debug(f"Ignoring malformed cache entry {key}")
            return None, False

        expires_at = envelope.get("expires_at")
        if not isinstance(expires_at, int | float) or expires_at <= self._clock():
            logger.debug(f"Cache entry {key} expired")
            return None, False

        return envelope["value"], True

    def set(self, key: CacheKey, value: Any) -> None:
        """Save a value, replacing any previous entry for the key.

        Args:
            key: Cache key
            value: JSON-compatible data to cache

        Raises:
            CacheError: If the value could not be written
        """
        now = self._clock()
        envelope = {"value": value, "cached_at": now, "expires_at": now + self.ttl_seconds}
        try:
            self.cache.set(str(key), envelope, tag=key.workspace_id)
        except (OSError, sqlite3.Error) as e:
            raise CacheError(f"Error caching data with key {key}: {e}", {"key": str(key)}) from e
        logger.debug(f"Cached data with key: {key}")

    def clear(self, key: CacheKey) -> bool:
        """Delete a single entry.

        Returns:
            True if an entry was deleted, False if there was none
        """
        try:
            return bool(self.cache.delete(str(key)))
        except (OSError, sqlite3.Error) as e:
            raise CacheError(f"Error deleting cache item {key}: {e}", {"key": str(key)}) from e

    def clear_workspace(self, workspace_id: str) -> int:
        """Delete every entry scoped to ``workspace_id``, whatever its kind.

        Returns:
            Number of entries removed
        """
        try:
            removed = self.cache.evict(workspace_id)
        except (OSError, sqlite3.Error) as e:
            raise CacheError(f"Error clearing cache for workspace {workspace_id}: {e}") from e
        logger.info(f"Cleared {removed} cache entries for workspace {workspace_id}")
        return int(removed)

    def clear_all(self) -> None:
        """Delete every entry in the store."""
        try:
            self.cache.clear()
        except (OSError, sqlite3.Error) as e:
            raise CacheError(f"Error clearing cache: {e}") from e
        logger.info("Cleared all cached data")

    def get_cache_size(self) -> int:
        """Get number of entries in the store, expired ones included."""
        return len(self.cache)
