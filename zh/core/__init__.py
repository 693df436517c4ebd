"""Core functionality module."""

from zh.core.constants import CacheLimits, CacheNamespace, EpicKind, ExitCode, SprintKeyword

__all__ = [
    "CacheLimits",
    "CacheNamespace",
    "EpicKind",
    "ExitCode",
    "SprintKeyword",
]
