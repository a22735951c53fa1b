"""List-then-watch loop that keeps one ``KindCache`` in sync.

kubernetes-asyncio provides the watch stream but not a client-go style
informer, so this loop supplies the missing pieces: a full list that seeds
the cache, a watch from the list's resourceVersion, a relist whenever the
watch expires (HTTP 410) or the resync period elapses, and a fixed delay
before retrying after any other failure.

Each informer runs as its own asyncio task.  Failures are counted on its own
cache only; one kind losing its watch never affects another kind.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from kubernetes_asyncio import watch
from kubernetes_asyncio.client.exceptions import ApiException

from podscope.cache.kind_cache import KindCache
from podscope.observability.logging import get_logger
from podscope.observability.metrics import cache_events_total, cache_relists_total, watch_failures_total

ListFn = Callable[..., Awaitable[Any]]
Serializer = Callable[[Any], dict[str, Any]]

_log = get_logger("cache.informer")

_HTTP_GONE = 410


class _WatchExpired(Exception):
    """The watch resourceVersion is too old; a full relist is required."""


class WatchError(Exception):
    """The API server sent an ERROR event on the watch stream."""


class Informer:
    """Keeps a single ``KindCache`` populated from the API server.

    Args:
        cache:         Store this informer owns writes to.
        list_fn:       kubernetes-asyncio list call for the kind (all namespaces).
        resync_period: Seconds a watch stays open before a full relist.
        retry_delay:   Seconds to wait after a failed list or watch.
        serialize:     Converts typed client models to camelCase dicts.
        watch_factory: Builds the watch object; defaults to ``watch.Watch``.
    """

    def __init__(
        self,
        cache: KindCache,
        list_fn: ListFn,
        *,
        resync_period: float = 600.0,
        retry_delay: float = 5.0,
        serialize: Serializer | None = None,
        watch_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._cache = cache
        self._list_fn = list_fn
        self._resync_period = resync_period
        self._retry_delay = retry_delay
        self._serialize = serialize
        self._watch_factory = watch_factory or watch.Watch
        self._kind = cache.kind.value

    @property
    def cache(self) -> KindCache:
        return self._cache

    async def run(self) -> None:
        """Run until cancelled."""
        while True:
            try:
                resource_version = await self._list()
                await self._watch(resource_version)
            except asyncio.CancelledError:
                raise
            except _WatchExpired as exc:
                _log.info("watch_expired_relisting", kind=self._kind, detail=str(exc))
            except Exception as exc:
                failures = self._cache.record_failure()
                watch_failures_total.labels(kind=self._kind).inc()
                _log.warning(
                    "watch_failed",
                    kind=self._kind,
                    consecutive_failures=failures,
                    degraded=self._cache.is_degraded,
                    error=str(exc),
                )
                await asyncio.sleep(self._retry_delay)

    async def _list(self) -> str:
        result = await self._list_fn()
        metadata = getattr(result, "metadata", None)
        resource_version = str(getattr(metadata, "resource_version", "") or "")
        items = [self._to_dict(item) for item in getattr(result, "items", None) or []]
        self._cache.replace(items, resource_version)
        cache_relists_total.labels(kind=self._kind).inc()
        _log.debug("cache_listed", kind=self._kind, objects=len(items), resource_version=resource_version)
        return resource_version

    async def _watch(self, resource_version: str) -> None:
        w = self._watch_factory()
        try:
            async with w.stream(
                self._list_fn,
                resource_version=resource_version,
                timeout_seconds=int(self._resync_period),
            ) as stream:
                async for event in stream:
                    self._apply(event)
        except ApiException as exc:
            if exc.status == _HTTP_GONE:
                raise _WatchExpired(str(exc.reason)) from exc
            raise

    def _apply(self, event: Mapping[str, Any]) -> None:
        event_type = str(event.get("type", ""))
        raw = event.get("raw_object")
        if raw is None:
            raw = self._to_dict(event.get("object"))

        if event_type == "ERROR":
            if raw.get("code") == _HTTP_GONE:
                raise _WatchExpired(str(raw.get("message", "")))
            raise WatchError(f"{self._kind} watch error: {raw.get('message', raw)}")

        cache_events_total.labels(kind=self._kind, type=event_type).inc()
        if event_type in ("ADDED", "MODIFIED"):
            self._cache.upsert(raw)
        elif event_type == "DELETED":
            metadata = raw.get("metadata") or {}
            self._cache.delete(str(metadata.get("namespace") or ""), str(metadata.get("name", "")))

    def _to_dict(self, item: Any) -> Mapping[str, Any]:
        if item is None:
            return {}
        if isinstance(item, Mapping):
            return item
        if self._serialize is None:
            raise TypeError(f"cannot convert {type(item).__name__} without a serializer")
        return self._serialize(item)
