"""Cache layer for podscope.

Provides in-memory resource caches backed by Kubernetes watch streams.
Callers only ever receive immutable ``CachedResource`` snapshots; writes come
exclusively from the informer that owns each cache.

Submodules:
    kind_cache -- Copy-on-write store for a single resource kind.
    informer   -- List-then-watch loop feeding one KindCache.
    cache_set  -- The six per-kind caches and their informers.
    sync       -- Sync barrier awaiting every cache's initial listing.
"""

from podscope.cache.cache_set import ResourceCacheSet
from podscope.cache.kind_cache import KindCache
from podscope.cache.sync import wait_for_cache_sync

__all__ = ["KindCache", "ResourceCacheSet", "wait_for_cache_sync"]
