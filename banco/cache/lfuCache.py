"""LFU (Least Frequently Used) cache implementation."""

import heapq
import logging
import threading
from dataclasses import dataclass
from itertools import count
from typing import Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

from banco.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[K, V]):
    """One cache slot: key, value and how many times it has been used."""

    key: K
    value: V
    use_count: int
    sequence: int


class FrequencyBucket(Generic[K, V]):
    """
    Entries sharing one use count, ordered by insertion sequence.

    The heap keeps stale (sequence, key) pairs for entries that left the
    bucket; they are skipped on lookup and dropped when the heap grows
    past twice the live size.
    """

    def __init__(self):
        self.members: Dict[K, CacheEntry[K, V]] = {}
        self.order: List[Tuple[int, K]] = []

    def __len__(self) -> int:
        return len(self.members)

    def add(self, entry: CacheEntry[K, V]) -> None:
        self.members[entry.key] = entry
        heapq.heappush(self.order, (entry.sequence, entry.key))

    def discard(self, key: K) -> None:
        del self.members[key]
        if len(self.order) > 2 * len(self.members) + 8:
            self.order = [(e.sequence, k) for k, e in self.members.items()]
            heapq.heapify(self.order)

    def oldest(self) -> CacheEntry[K, V]:
        """Entry with the lowest insertion sequence. The bucket must not be empty."""
        while True:
            sequence, key = self.order[0]
            entry = self.members.get(key)
            if entry is not None and entry.sequence == sequence:
                return entry
            heapq.heappop(self.order)


class LFUCache(Generic[K, V]):
    """
    LFU cache with a hard capacity.

    Every put or get on a stored key bumps its use count. When a new key
    arrives and the cache is full, the entry with the smallest use count
    is evicted; among equal counts the oldest inserted entry goes first.

    None is not a supported value: get() returns None for a miss, so a
    stored None cannot be told apart from an absent key. Use contains_key()
    when that distinction matters.
    """

    def __init__(self, capacity: int):
        """
        Initialize LFU cache.

        Args:
            capacity: Maximum number of entries (must be a positive integer)

        Raises:
            InvalidConfigurationError: If capacity is not a positive integer
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidConfigurationError(
                f"Cache capacity must be a positive integer, got {capacity!r}"
            )
        self._capacity = capacity
        self._entries: Dict[K, CacheEntry[K, V]] = {}
        self._buckets: Dict[int, FrequencyBucket[K, V]] = {}
        self._min_count = 0
        self._sequence = count()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K) -> Optional[V]:
        """
        Get item from cache and update its use count.

        Args:
            key: Cache key

        Returns:
            Cached value or None
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        self._touch(entry)
        return entry.value

    def put(self, key: K, value: V) -> None:
        """
        Add or update item in cache.

        Args:
            key: Cache key
            value: Value to cache
        """
        entry = self._entries.get(key)
        if entry is not None:
            entry.value = value
            self._touch(entry)
            return

        if len(self._entries) >= self._capacity:
            self._evict()

        entry = CacheEntry(key=key, value=value, use_count=1, sequence=next(self._sequence))
        self._entries[key] = entry
        self._buckets.setdefault(1, FrequencyBucket()).add(entry)
        self._min_count = 1

    def contains_key(self, key: K) -> bool:
        """Check if key exists in cache without counting it as a use."""
        return key in self._entries

    def remove(self, key: K) -> None:
        """Remove key from cache if present."""
        entry = self._entries.pop(key, None)
        if entry is None:
            return
        self._unlink(entry)

    def clear(self) -> None:
        """Clear all items from cache."""
        self._entries.clear()
        self._buckets.clear()
        self._min_count = 0

    def size(self) -> int:
        """Get current cache size."""
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def values(self) -> List[V]:
        """Snapshot of the stored values."""
        return [entry.value for entry in self._entries.values()]

    def keys(self) -> List[K]:
        """Snapshot of the stored keys."""
        return list(self._entries)

    def use_count(self, key: K) -> Optional[int]:
        """Current use count of key, or None if absent. Does not count as a use."""
        entry = self._entries.get(key)
        return entry.use_count if entry is not None else None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}(capacity={self._capacity}, size={len(self._entries)})"

    def _touch(self, entry: CacheEntry[K, V]) -> None:
        old_count = entry.use_count
        self._unlink(entry)
        entry.use_count = old_count + 1
        self._buckets.setdefault(entry.use_count, FrequencyBucket()).add(entry)
        if old_count == self._min_count and old_count not in self._buckets:
            self._min_count = entry.use_count

    def _unlink(self, entry: CacheEntry[K, V]) -> None:
        bucket = self._buckets[entry.use_count]
        bucket.discard(entry.key)
        if not bucket:
            del self._buckets[entry.use_count]

    def _evict(self) -> None:
        """Evict the least frequently used entry, oldest first on ties."""
        # _min_count never exceeds the real minimum; remove() can leave it low
        while self._min_count not in self._buckets:
            self._min_count += 1
        victim = self._buckets[self._min_count].oldest()
        del self._entries[victim.key]
        self._unlink(victim)
        logger.debug(
            "Evicted key %r (use_count=%d) from cache of capacity %d",
            victim.key, victim.use_count, self._capacity,
        )


class SynchronizedLFUCache(Generic[K, V]):
    """
    Thread-safe wrapper around LFUCache.

    Every operation runs under a single re-entrant lock.
    """

    def __init__(self, capacity: int):
        self._cache: LFUCache[K, V] = LFUCache(capacity)
        self._lock = threading.RLock()

    @property
    def capacity(self) -> int:
        return self._cache.capacity

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            return self._cache.get(key)

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._cache.put(key, value)

    def contains_key(self, key: K) -> bool:
        with self._lock:
            return self._cache.contains_key(key)

    def remove(self, key: K) -> None:
        with self._lock:
            self._cache.remove(key)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        with self._lock:
            return self._cache.size()

    def is_empty(self) -> bool:
        with self._lock:
            return self._cache.is_empty()

    def values(self) -> List[V]:
        with self._lock:
            return self._cache.values()

    def keys(self) -> List[K]:
        with self._lock:
            return self._cache.keys()

    def use_count(self, key: K) -> Optional[int]:
        with self._lock:
            return self._cache.use_count(key)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return self.contains_key(key)
