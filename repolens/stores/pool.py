"""Single named pool of expiring, sized cache entries."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, is_dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

from ..logging import get_logger

T = TypeVar("T")

Clock = Callable[[], datetime]
Sizer = Callable[[Any], int]


def utcnow() -> datetime:
    return datetime.now(UTC)


def approximate_size(value: Any) -> int:
    """Return the UTF-8 length of ``value`` serialised as compact JSON.

    Raises ``TypeError``, ``ValueError`` or ``RecursionError`` for values that
    cannot be serialised (including circular structures).
    """
    text = json.dumps(value, default=_encode, separators=(",", ":"), ensure_ascii=False)
    return len(text.encode("utf-8"))


def _encode(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not serialisable")


@dataclass
class CacheEntry(Generic[T]):
    """A cached value with its lifetime and accounted size."""

    value: T
    created_at: datetime
    expires_at: datetime
    byte_size: int

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class CachePool(Generic[T]):
    """Key/value pool tracking the byte size of its live entries.

    Expiry is lazy: ``get`` drops an expired entry when it is read, and
    ``sweep_expired`` drops them in bulk. Reads never refresh an entry, so
    recency is insertion time only.
    """

    def __init__(
        self,
        name: str,
        *,
        clock: Optional[Clock] = None,
        sizer: Sizer = approximate_size,
    ) -> None:
        self.name = name
        self._clock = clock or utcnow
        self._sizer = sizer
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._total_bytes = 0
        self.logger = get_logger(f"stores.{name}")

    @property
    def total_bytes(self) -> int:
        return self._total_bytes

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def put(self, key: str, value: T, ttl: timedelta) -> bool:
        """Store ``value`` under ``key``.

        Returns False, leaving the pool untouched, when the value cannot be
        sized or its expiry falls outside the representable date range.
        """
        try:
            size = self._sizer(value)
        except (TypeError, ValueError, RecursionError) as exc:
            self.logger.warning("Skipping cache write for %s/%s: %s", self.name, key, exc)
            return False

        now = self._clock()
        try:
            expires_at = now + ttl
        except OverflowError as exc:
            self.logger.warning(
                "Skipping cache write for %s/%s: ttl %s: %s", self.name, key, ttl, exc
            )
            return False

        self._discard(key)
        self._insert(key, CacheEntry(value=value, created_at=now, expires_at=expires_at, byte_size=size))
        return True

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._discard(key)
            self.logger.debug("Expired %s/%s on read", self.name, key)
            return None
        return entry.value

    def entry(self, key: str) -> Optional[CacheEntry[T]]:
        """Return the raw entry without checking expiry."""
        return self._entries.get(key)

    def delete(self, key: str) -> bool:
        return self._discard(key) is not None

    def sweep_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            self._discard(key)
        if expired:
            self.logger.debug("Swept %d expired entries from %s", len(expired), self.name)
        return len(expired)

    def evict_oldest_until(self, target_bytes: int) -> int:
        """Drop entries oldest-first until the pool holds at most ``target_bytes``."""
        evicted = 0
        # sorted() is stable, so equal timestamps keep insertion order.
        for key, _ in sorted(self._entries.items(), key=lambda item: item[1].created_at):
            if self._total_bytes <= target_bytes:
                break
            self._discard(key)
            evicted += 1
        return evicted

    def entries(self) -> List[Tuple[str, CacheEntry[T]]]:
        return list(self._entries.items())

    def load_entry(self, key: str, entry: CacheEntry[T]) -> None:
        """Insert a pre-built entry, e.g. one restored from a snapshot."""
        self._discard(key)
        self._insert(key, entry)

    def clear(self) -> None:
        self._entries.clear()
        self._total_bytes = 0

    def _insert(self, key: str, entry: CacheEntry[T]) -> None:
        self._entries[key] = entry
        self._total_bytes += entry.byte_size

    def _discard(self, key: str) -> Optional[CacheEntry[T]]:
        # Popping (rather than reassigning) moves a rewritten key to the end of
        # iteration order, matching its fresh created_at.
        entry = self._entries.pop(key, None)
        if entry is not None:
            self._total_bytes -= entry.byte_size
        return entry


__all__ = ["CacheEntry", "CachePool", "approximate_size", "utcnow"]
