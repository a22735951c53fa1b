"""The process-wide set of watch-backed caches, one per resource kind.

Ordering requirement: every ``KindCache`` handle is created in the
constructor, before any watch loop exists.  ``start()`` launches the
informers afterwards and may run only once.  Starting a watch loop before
its handle exists would drop the events it receives, so callers must
obtain handles (``cache_set.pods`` and friends) from a constructed set and
never construct caches lazily.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any

from podscope.cache.informer import Informer, ListFn, Serializer
from podscope.cache.kind_cache import KindCache
from podscope.models.resources import CacheReadiness, ResourceKind
from podscope.observability.logging import get_logger

_log = get_logger("cache.cache_set")

DEFAULT_RESYNC_PERIOD = 600.0


class ResourceCacheSet:
    """One ``KindCache`` and one ``Informer`` for each ``ResourceKind``."""

    def __init__(
        self,
        list_fns: Mapping[ResourceKind, ListFn],
        *,
        resync_period: float = DEFAULT_RESYNC_PERIOD,
        retry_delay: float = 5.0,
        serialize: Serializer | None = None,
        watch_factory: Callable[[], Any] | None = None,
    ) -> None:
        missing = set(ResourceKind) - set(list_fns)
        if missing:
            raise ValueError(f"no list function for kinds: {sorted(k.value for k in missing)}")

        self.resync_period = resync_period
        self._caches: dict[ResourceKind, KindCache] = {kind: KindCache(kind) for kind in ResourceKind}
        self._informers: dict[ResourceKind, Informer] = {
            kind: Informer(
                self._caches[kind],
                list_fns[kind],
                resync_period=resync_period,
                retry_delay=retry_delay,
                serialize=serialize,
                watch_factory=watch_factory,
            )
            for kind in ResourceKind
        }
        self._tasks: list[asyncio.Task[None]] = []
        self._started = False

    @classmethod
    def from_api_client(cls, api_client: Any, **kwargs: Any) -> ResourceCacheSet:
        """Build list functions from a kubernetes-asyncio ``ApiClient``."""
        from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

        core_v1 = k8s_client.CoreV1Api(api_client)
        apps_v1 = k8s_client.AppsV1Api(api_client)
        list_fns: dict[ResourceKind, ListFn] = {
            ResourceKind.NAMESPACE: core_v1.list_namespace,
            ResourceKind.DEPLOYMENT: apps_v1.list_deployment_for_all_namespaces,
            ResourceKind.REPLICA_SET: apps_v1.list_replica_set_for_all_namespaces,
            ResourceKind.POD: core_v1.list_pod_for_all_namespaces,
            ResourceKind.REPLICATION_CONTROLLER: core_v1.list_replication_controller_for_all_namespaces,
            ResourceKind.SERVICE: core_v1.list_service_for_all_namespaces,
        }
        kwargs.setdefault("serialize", api_client.sanitize_for_serialization)
        return cls(list_fns, **kwargs)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Launch one informer task per kind.  Must be called exactly once."""
        if self._started:
            raise RuntimeError("ResourceCacheSet.start() called more than once")
        self._started = True
        for kind, informer in self._informers.items():
            task = asyncio.create_task(informer.run(), name=f"informer-{kind.value}")
            self._tasks.append(task)
        _log.info("informers_started", kinds=[k.value for k in self._informers], resync_period=self.resync_period)

    async def stop(self) -> None:
        """Cancel all informer tasks and wait for them to finish."""
        for task in self._tasks:
            if not task.done():
                task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        _log.info("informers_stopped")

    @property
    def started(self) -> bool:
        return self._started

    # ------------------------------------------------------------------
    # Handles
    # ------------------------------------------------------------------

    def __getitem__(self, kind: ResourceKind) -> KindCache:
        return self._caches[kind]

    def caches(self) -> list[KindCache]:
        return list(self._caches.values())

    @property
    def namespaces(self) -> KindCache:
        return self._caches[ResourceKind.NAMESPACE]

    @property
    def deployments(self) -> KindCache:
        return self._caches[ResourceKind.DEPLOYMENT]

    @property
    def replica_sets(self) -> KindCache:
        return self._caches[ResourceKind.REPLICA_SET]

    @property
    def pods(self) -> KindCache:
        return self._caches[ResourceKind.POD]

    @property
    def replication_controllers(self) -> KindCache:
        return self._caches[ResourceKind.REPLICATION_CONTROLLER]

    @property
    def services(self) -> KindCache:
        return self._caches[ResourceKind.SERVICE]

    # ------------------------------------------------------------------
    # Readiness
    # ------------------------------------------------------------------

    def has_synced(self) -> bool:
        """True only when every kind has completed its initial listing."""
        return all(cache.has_synced for cache in self._caches.values())

    def readiness(self) -> CacheReadiness:
        """Summarise the per-kind sync and failure state.

        DEGRADED wins over every other state; it is reported, never acted on.
        """
        if any(cache.is_degraded for cache in self._caches.values()):
            return CacheReadiness.DEGRADED
        synced = sum(1 for cache in self._caches.values() if cache.has_synced)
        if synced == len(self._caches):
            return CacheReadiness.READY
        if synced == 0:
            return CacheReadiness.WARMING
        return CacheReadiness.PARTIALLY_READY

    def status(self) -> dict[str, dict[str, Any]]:
        """Per-kind sync status, for the status endpoint."""
        return {
            kind.value: {
                "synced": cache.has_synced,
                "objects": len(cache),
                "failures": cache.failures,
                "last_synced_at": cache.last_synced_at.isoformat() if cache.last_synced_at else None,
            }
            for kind, cache in self._caches.items()
        }
