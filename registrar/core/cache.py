"""Cache — bounded, TTL-based key/value store for hot entities and query results.

Invariants:
    - Each namespace holds at most max_entries_per_namespace entries
    - An entry is live while now <= inserted_at + ttl; get() removes it once stale
    - Eviction removes the entry with the oldest insertion time (not last access)
    - Every get() moves exactly one of the hit/miss counters; nothing else does
    - Cached values are never None (None is the miss signal)

Design Decisions:
    - Insertion-order eviction is an O(n) scan: namespaces are small (<= 100)
      and eviction is rare relative to hits
    - One lock for all namespaces and counters: entries are tiny, contention low
    - Clock injected (monotonic by default) so TTL tests need no sleeping
"""

import itertools
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from registrar.core.domain_types import CacheNamespace

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 100
DEFAULT_TTL_SECONDS = 300.0


@dataclass
class CacheEntry:
    value: Any
    inserted_at: float
    ttl: float
    sequence: int

    def is_expired(self, now: float) -> bool:
        return now > self.inserted_at + self.ttl


@dataclass
class CacheStats:
    """Cumulative counters plus current per-namespace sizes."""
    hits: int = 0
    misses: int = 0
    sizes: dict[CacheNamespace, int] = field(default_factory=dict)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    def __str__(self) -> str:
        sizes = ", ".join(f"{ns.value}={n}" for ns, n in self.sizes.items())
        return (
            f"Cache Stats: hits={self.hits}, misses={self.misses}, "
            f"hit_rate={self.hit_rate:.2%}, {sizes}"
        )


class Cache:
    """Per-namespace TTL cache with insertion-order eviction."""

    def __init__(
        self,
        max_entries_per_namespace: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries_per_namespace
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: dict[CacheNamespace, dict[str, CacheEntry]] = {
            ns: {} for ns in CacheNamespace
        }
        self._sequence = itertools.count()
        self._hits = 0
        self._misses = 0

    def put(
        self, namespace: CacheNamespace, key: str, value: Any, ttl: float = DEFAULT_TTL_SECONDS,
    ) -> None:
        """Insert or replace; evicts the oldest entry when the namespace is full."""
        if value is None:
            raise ValueError("None cannot be cached")
        with self._lock:
            entries = self._entries[namespace]
            if key not in entries and len(entries) >= self.max_entries:
                self._evict_oldest(namespace)
            entries[key] = CacheEntry(
                value=value,
                inserted_at=self._clock(),
                ttl=ttl,
                sequence=next(self._sequence),
            )

    def get(self, namespace: CacheNamespace, key: str) -> Any | None:
        with self._lock:
            entries = self._entries[namespace]
            entry = entries.get(key)
            if entry is not None and not entry.is_expired(self._clock()):
                self._hits += 1
                return entry.value
            self._misses += 1
            entries.pop(key, None)
            return None

    def invalidate(self, namespace: CacheNamespace, key: str) -> None:
        with self._lock:
            self._entries[namespace].pop(key, None)

    def invalidate_by_prefix(self, prefix: str) -> int:
        """Drop every query-namespace entry whose key starts with prefix."""
        with self._lock:
            queries = self._entries[CacheNamespace.QUERY]
            stale = [k for k in queries if k.startswith(prefix)]
            for k in stale:
                del queries[k]
            return len(stale)

    def invalidate_entity(self, namespace: CacheNamespace, key: str) -> None:
        """Drop an entity entry and every query keyed under "<namespace>_<key>"."""
        with self._lock:
            self.invalidate(namespace, key)
            self.invalidate_by_prefix(f"{namespace.value}_{key}")

    def sweep_expired(self) -> int:
        """Remove expired entries in all namespaces; returns how many went."""
        with self._lock:
            now = self._clock()
            removed = 0
            for entries in self._entries.values():
                stale = [k for k, e in entries.items() if e.is_expired(now)]
                for k in stale:
                    del entries[k]
                removed += len(stale)
        if removed:
            logger.debug(f"Cache sweep removed {removed} expired entries")
        return removed

    def clear(self) -> None:
        with self._lock:
            for entries in self._entries.values():
                entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                sizes={ns: len(entries) for ns, entries in self._entries.items()},
            )

    def _evict_oldest(self, namespace: CacheNamespace) -> None:
        entries = self._entries[namespace]
        if not entries:
            return
        oldest = min(entries, key=lambda k: (entries[k].inserted_at, entries[k].sequence))
        del entries[oldest]
        logger.debug(
            f"Cache evicted {oldest!r}",
            extra={"namespace": namespace.value, "entity_key": oldest},
        )
