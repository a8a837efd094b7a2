"""In-process caches for repository lookups."""

from banco.cache.lfuCache import CacheEntry, LFUCache, SynchronizedLFUCache

__all__ = [
    'CacheEntry',
    'LFUCache',
    'SynchronizedLFUCache',
]
