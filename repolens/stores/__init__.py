"""Cache storage for analysis results."""

from __future__ import annotations

from .manager import CacheManager, CacheStats, TTLHours
from .pool import CacheEntry, CachePool, approximate_size
from .snapshot import PersistenceResult, SnapshotStore

__all__ = [
    "CacheEntry",
    "CacheManager",
    "CachePool",
    "CacheStats",
    "PersistenceResult",
    "SnapshotStore",
    "TTLHours",
    "approximate_size",
]
