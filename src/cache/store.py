"""Bounded, time-expiring in-memory map with a pluggable eviction policy.

``TTLCache`` owns the entries and their insertion times; an
``EvictionPolicy`` only tracks access order and names the next victim when
the cache is full. Every operation takes the same lock, so recency updates,
inserts and evictions never interleave.
"""

from __future__ import annotations

import time
from collections import Counter, OrderedDict
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Generic, Hashable, Optional, Protocol, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class EvictionPolicy(Protocol):
    """Tracks key usage and chooses which key to drop when full."""

    def on_insert(self, key: Hashable) -> None: ...

    def on_access(self, key: Hashable) -> None: ...

    def on_remove(self, key: Hashable) -> None: ...

    def victim(self) -> Hashable: ...

    def clear(self) -> None: ...


class LRUPolicy:
    """Evicts the least recently used key."""

    def __init__(self) -> None:
        self._order: OrderedDict[Hashable, None] = OrderedDict()

    def on_insert(self, key: Hashable) -> None:
        self._order[key] = None
        self._order.move_to_end(key)

    def on_access(self, key: Hashable) -> None:
        self._order.move_to_end(key)

    def on_remove(self, key: Hashable) -> None:
        self._order.pop(key, None)

    def victim(self) -> Hashable:
        return next(iter(self._order))

    def clear(self) -> None:
        self._order.clear()


class LFUPolicy:
    """Evicts the least frequently used key; ties go to the oldest insert."""

    def __init__(self) -> None:
        self._hits: Counter[Hashable] = Counter()
        self._inserted: dict[Hashable, int] = {}
        self._seq = 0

    def on_insert(self, key: Hashable) -> None:
        self._seq += 1
        self._hits[key] = 0
        self._inserted[key] = self._seq

    def on_access(self, key: Hashable) -> None:
        self._hits[key] += 1

    def on_remove(self, key: Hashable) -> None:
        self._hits.pop(key, None)
        self._inserted.pop(key, None)

    def victim(self) -> Hashable:
        return min(self._hits, key=lambda k: (self._hits[k], self._inserted[k]))

    def clear(self) -> None:
        self._hits.clear()
        self._inserted.clear()


@dataclass(frozen=True)
class _Entry(Generic[V]):
    value: V
    inserted_at: float


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0


class TTLCache(Generic[K, V]):
    """Thread-safe map of at most *capacity* entries, each valid for *ttl_seconds*."""

    def __init__(
        self,
        capacity: int,
        ttl_seconds: float,
        policy: Optional[EvictionPolicy] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self.capacity = capacity
        self.ttl_seconds = ttl_seconds
        self._policy: EvictionPolicy = policy or LRUPolicy()
        self._clock = clock
        self._entries: dict[K, _Entry[V]] = {}
        self._lock = Lock()
        self.stats = CacheStats()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: K, now: Optional[float] = None) -> Optional[V]:
        """Return the value for *key*, or ``None`` if absent or expired.

        A hit refreshes the key's standing with the eviction policy; an
        expired entry is dropped on the spot.
        """
        now = self._clock() if now is None else now
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.stats.misses += 1
                return None

            if now - entry.inserted_at >= self.ttl_seconds:
                self._remove(key)
                self.stats.expirations += 1
                self.stats.misses += 1
                return None

            self._policy.on_access(key)
            self.stats.hits += 1
            return entry.value

    def put(self, key: K, value: V, inserted_at: Optional[float] = None) -> Optional[K]:
        """Store *value* under *key*, replacing any previous entry whole.

        Returns the key evicted to make room, if any.
        """
        inserted_at = self._clock() if inserted_at is None else inserted_at
        evicted: Optional[K] = None
        with self._lock:
            if key in self._entries:
                self._remove(key)
            elif len(self._entries) >= self.capacity:
                evicted = self._policy.victim()  # type: ignore[assignment]
                self._remove(evicted)
                self.stats.evictions += 1

            self._entries[key] = _Entry(value=value, inserted_at=inserted_at)
            self._policy.on_insert(key)
        return evicted

    def delete(self, key: K) -> bool:
        with self._lock:
            if key not in self._entries:
                return False
            self._remove(key)
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._policy.clear()
            self.stats = CacheStats()

    def snapshot(self) -> dict[str, object]:
        """Return counters and sizing without exposing cached payloads."""
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "ttl_seconds": self.ttl_seconds,
                "policy": type(self._policy).__name__,
                "hits": self.stats.hits,
                "misses": self.stats.misses,
                "expirations": self.stats.expirations,
                "evictions": self.stats.evictions,
            }

    def _remove(self, key: K) -> None:
        del self._entries[key]
        self._policy.on_remove(key)
