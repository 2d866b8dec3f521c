"""Bounded, TTL-aware cache for repositories, analyses and descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from ..errors import RepoLensError
from ..logging import get_logger
from ..models import AnalysisResult, RepoMetadata
from .pool import CacheEntry, CachePool, Clock, Sizer, approximate_size, utcnow
from .snapshot import SNAPSHOT_VERSION, PersistenceResult, SnapshotStore

DEFAULT_MAX_TOTAL_BYTES = 50 * 1024 * 1024
EVICTION_TARGET_RATIO = 0.8

REPOSITORIES = "repositories"
ANALYSES = "analyses"
DESCRIPTIONS = "descriptions"
POOL_NAMES = (REPOSITORIES, ANALYSES, DESCRIPTIONS)


@dataclass(frozen=True)
class TTLHours:
    repositories: float = 24
    analyses: float = 12
    descriptions: float = 48


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time view of cache occupancy."""

    repositories: int
    analyses: int
    descriptions: int
    total_entries: int
    current_bytes: int
    max_bytes: int
    utilization_percent: int
    last_cleanup: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "repositories": self.repositories,
            "analyses": self.analyses,
            "descriptions": self.descriptions,
            "total_entries": self.total_entries,
            "current_bytes": self.current_bytes,
            "max_bytes": self.max_bytes,
            "utilization_percent": self.utilization_percent,
            "last_cleanup": self.last_cleanup,
        }


_Codec = Tuple[Callable[[Any], Any], Callable[[Any], Any]]

_CODECS: Dict[str, _Codec] = {
    REPOSITORIES: (lambda value: value.to_dict(), RepoMetadata.from_dict),
    ANALYSES: (lambda value: value.to_dict(), AnalysisResult.from_dict),
    DESCRIPTIONS: (str, str),
}


class CacheManager:
    """Three pools sharing one byte budget.

    The manager is constructed explicitly and handed to whoever needs it;
    ``init`` hydrates it from the optional snapshot store and ``dispose``
    writes it back. No method raises: unsizable values are skipped and store
    failures are logged.
    """

    def __init__(
        self,
        max_total_bytes: int = DEFAULT_MAX_TOTAL_BYTES,
        *,
        ttl_hours: Optional[TTLHours] = None,
        store: Optional[SnapshotStore] = None,
        clock: Optional[Clock] = None,
        sizer: Sizer = approximate_size,
    ) -> None:
        if max_total_bytes <= 0:
            raise ValueError("max_total_bytes must be positive")
        self.max_total_bytes = max_total_bytes
        self.ttl_hours = ttl_hours or TTLHours()
        self.store = store
        self._clock = clock or utcnow
        self._pools: Dict[str, CachePool[Any]] = {
            name: CachePool(name, clock=self._clock, sizer=sizer) for name in POOL_NAMES
        }
        self._last_cleanup: Optional[datetime] = None
        self.logger = get_logger("stores.manager")

    # ------------------------------------------------------------------
    # Lifecycle

    def init(self) -> bool:
        """Hydrate from the store; returns True when a snapshot was restored."""
        if self.store is None:
            return False
        result = self.store.load()
        if not result.ok:
            self.logger.warning("Starting with an empty cache: %s", result.error)
            return False
        if result.value is None:
            return False
        return self.restore(result.value)

    def persist(self) -> bool:
        if self.store is None:
            return False
        try:
            snapshot = self.snapshot()
        except (AttributeError, TypeError, ValueError, RecursionError) as exc:
            result = PersistenceResult.failure(f"Snapshot could not be built: {exc}", "save")
        else:
            result = self.store.save(snapshot)
        if not result.ok:
            self.logger.warning("Cache snapshot not saved: %s", result.error)
        return result.ok

    def dispose(self) -> None:
        self.persist()
        for pool in self._pools.values():
            pool.clear()

    # ------------------------------------------------------------------
    # Pool accessors

    def put_repository(
        self, key: str, value: RepoMetadata, ttl_hours: Optional[float] = None
    ) -> bool:
        return self._put(REPOSITORIES, key, value, ttl_hours, self.ttl_hours.repositories)

    def get_repository(self, key: str) -> Optional[RepoMetadata]:
        return self._pools[REPOSITORIES].get(key)

    def put_analysis(
        self, key: str, value: AnalysisResult, ttl_hours: Optional[float] = None
    ) -> bool:
        return self._put(ANALYSES, key, value, ttl_hours, self.ttl_hours.analyses)

    def get_analysis(self, key: str) -> Optional[AnalysisResult]:
        return self._pools[ANALYSES].get(key)

    def put_description(self, key: str, value: str, ttl_hours: Optional[float] = None) -> bool:
        return self._put(DESCRIPTIONS, key, value, ttl_hours, self.ttl_hours.descriptions)

    def get_description(self, key: str) -> Optional[str]:
        return self._pools[DESCRIPTIONS].get(key)

    def pool(self, name: str) -> CachePool[Any]:
        return self._pools[name]

    @property
    def total_bytes(self) -> int:
        return sum(pool.total_bytes for pool in self._pools.values())

    # ------------------------------------------------------------------
    # Maintenance

    def cleanup(self) -> int:
        """Drop expired entries, then evict oldest-first if over budget.

        Returns the number of entries removed.
        """
        removed = sum(pool.sweep_expired() for pool in self._pools.values())
        if self.total_bytes > self.max_total_bytes:
            removed += self._evict_oldest(int(self.max_total_bytes * EVICTION_TARGET_RATIO))
        self._last_cleanup = self._clock()
        return removed

    def clear(self) -> None:
        for pool in self._pools.values():
            pool.clear()
        if self.store is not None:
            result = self.store.clear()
            if not result.ok:
                self.logger.warning("Cache snapshot not removed: %s", result.error)

    def stats(self) -> CacheStats:
        counts = {name: len(pool) for name, pool in self._pools.items()}
        current = self.total_bytes
        return CacheStats(
            repositories=counts[REPOSITORIES],
            analyses=counts[ANALYSES],
            descriptions=counts[DESCRIPTIONS],
            total_entries=sum(counts.values()),
            current_bytes=current,
            max_bytes=self.max_total_bytes,
            utilization_percent=round(current / self.max_total_bytes * 100),
            last_cleanup=self._last_cleanup.isoformat() if self._last_cleanup else None,
        )

    # ------------------------------------------------------------------
    # Snapshots

    def snapshot(self) -> Dict[str, Any]:
        pools: Dict[str, Dict[str, Any]] = {}
        for name, pool in self._pools.items():
            encode = _CODECS[name][0]
            pools[name] = {
                key: {
                    "value": encode(entry.value),
                    "created_at": entry.created_at.isoformat(),
                    "expires_at": entry.expires_at.isoformat(),
                    "byte_size": entry.byte_size,
                }
                for key, entry in pool.entries()
            }
        return {"version": SNAPSHOT_VERSION, "pools": pools}

    def restore(self, snapshot: Mapping[str, Any]) -> bool:
        """Replace the pools with the contents of ``snapshot``.

        A malformed snapshot leaves the cache empty and returns False.
        Expired entries are dropped and the budget re-applied afterwards.
        """
        try:
            restored = _decode_pools(snapshot)
        except (
            KeyError, TypeError, ValueError, AttributeError, OverflowError, RepoLensError
        ) as exc:
            self.logger.warning("Ignoring malformed cache snapshot: %s", exc)
            for pool in self._pools.values():
                pool.clear()
            return False

        for name, pool in self._pools.items():
            pool.clear()
            for key, entry in restored.get(name, []):
                pool.load_entry(key, entry)
        self.cleanup()
        self.logger.debug("Restored %d cache entries", self.stats().total_entries)
        return True

    # ------------------------------------------------------------------
    # Internal helpers

    def _put(
        self,
        pool_name: str,
        key: str,
        value: Any,
        ttl_hours: Optional[float],
        default_ttl_hours: float,
    ) -> bool:
        hours = default_ttl_hours if ttl_hours is None else ttl_hours
        try:
            ttl = timedelta(hours=hours)
        except (OverflowError, ValueError) as exc:
            self.logger.warning(
                "Skipping cache write for %s/%s: ttl %r hours: %s", pool_name, key, hours, exc
            )
            return False
        stored = self._pools[pool_name].put(key, value, ttl)
        self.cleanup()
        return stored

    def _evict_oldest(self, target_bytes: int) -> int:
        candidates: List[Tuple[datetime, int, int, str, str]] = []
        for pool_index, (name, pool) in enumerate(self._pools.items()):
            for position, (key, entry) in enumerate(pool.entries()):
                candidates.append((entry.created_at, pool_index, position, name, key))
        candidates.sort(key=lambda item: item[:3])

        evicted = 0
        for _, _, _, name, key in candidates:
            if self.total_bytes <= target_bytes:
                break
            self._pools[name].delete(key)
            evicted += 1
        if evicted:
            self.logger.debug(
                "Evicted %d entries to bring cache under %d bytes", evicted, target_bytes
            )
        return evicted


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _byte_size(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"invalid byte_size {value!r}")
    return value


def _decode_pools(snapshot: Mapping[str, Any]) -> Dict[str, List[Tuple[str, CacheEntry[Any]]]]:
    if snapshot.get("version") != SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version {snapshot.get('version')!r}")
    pools = snapshot["pools"]
    if not isinstance(pools, Mapping):
        raise TypeError("snapshot pools must be a mapping")
    decoded: Dict[str, List[Tuple[str, CacheEntry[Any]]]] = {}
    for name in POOL_NAMES:
        decode = _CODECS[name][1]
        entries: List[Tuple[str, CacheEntry[Any]]] = []
        for key, raw in (pools.get(name) or {}).items():
            entries.append(
                (
                    str(key),
                    CacheEntry(
                        value=decode(raw["value"]),
                        created_at=_parse_timestamp(raw["created_at"]),
                        expires_at=_parse_timestamp(raw["expires_at"]),
                        byte_size=_byte_size(raw["byte_size"]),
                    ),
                )
            )
        decoded[name] = entries
    return decoded


__all__ = [
    "CacheManager",
    "CacheStats",
    "DEFAULT_MAX_TOTAL_BYTES",
    "EVICTION_TARGET_RATIO",
    "POOL_NAMES",
    "TTLHours",
]
