"""Copy-on-write store for one resource kind.

A ``KindCache`` is written by exactly one ``Informer`` and read by any number
of callers.  Every write builds a new ``_Snapshot`` and publishes it with a
single attribute assignment, so a reader that grabbed ``self._snapshot`` sees
a consistent view for as long as it holds it.  Published snapshots are never
mutated.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from podscope.models.resources import CachedResource, LabelSelector, ResourceKind
from podscope.observability.metrics import cache_objects

# Consecutive list/watch failures tolerated before the kind reports degraded.
_FAILURE_THRESHOLD = 3


@dataclass(frozen=True)
class _Snapshot:
    by_namespace: Mapping[str, Mapping[str, CachedResource]]
    count: int


_EMPTY_SNAPSHOT = _Snapshot(by_namespace=MappingProxyType({}), count=0)


class KindCache:
    """Read handle plus informer-facing write methods for a single kind."""

    def __init__(self, kind: ResourceKind) -> None:
        self.kind = kind
        self._snapshot = _EMPTY_SNAPSHOT
        self._synced = asyncio.Event()
        self._last_synced_at: datetime | None = None
        self._resource_version = ""
        self._failures = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, namespace: str, name: str) -> CachedResource | None:
        """Point lookup by ``(namespace, name)``.

        Cluster-scoped kinds are stored under the empty namespace; the
        namespace argument is ignored for them.
        """
        if not self.kind.namespaced:
            namespace = ""
        names = self._snapshot.by_namespace.get(namespace)
        if names is None:
            return None
        return names.get(name)

    def list(self, namespace: str | None = None, selector: LabelSelector | None = None) -> list[CachedResource]:
        """List objects, optionally scoped to a namespace and filtered by labels.

        ``namespace=None`` lists across all namespaces.
        """
        snapshot = self._snapshot
        if namespace is None:
            groups: Iterable[Mapping[str, CachedResource]] = snapshot.by_namespace.values()
        else:
            if not self.kind.namespaced:
                namespace = ""
            groups = [snapshot.by_namespace.get(namespace, {})]

        items = [obj for names in groups for obj in names.values()]
        if selector is None or selector.is_everything:
            return items
        return [obj for obj in items if selector.matches(obj.labels)]

    def __len__(self) -> int:
        return self._snapshot.count

    @property
    def has_synced(self) -> bool:
        """True once the initial full listing has been applied."""
        return self._synced.is_set()

    @property
    def last_synced_at(self) -> datetime | None:
        return self._last_synced_at

    @property
    def resource_version(self) -> str:
        return self._resource_version

    @property
    def failures(self) -> int:
        """Consecutive list/watch failures since the last successful list."""
        return self._failures

    @property
    def is_degraded(self) -> bool:
        return self._failures > _FAILURE_THRESHOLD

    async def wait_synced(self) -> None:
        await self._synced.wait()

    # ------------------------------------------------------------------
    # Writes (informer only)
    # ------------------------------------------------------------------

    def replace(self, raws: Iterable[Mapping[str, Any]], resource_version: str = "") -> None:
        """Swap in the result of a full listing and mark the cache synced."""
        grouped: dict[str, dict[str, CachedResource]] = {}
        for raw in raws:
            obj = CachedResource.from_raw(self.kind, raw)
            if not obj.name:
                continue
            grouped.setdefault(obj.namespace, {})[obj.name] = obj
        self._publish({ns: MappingProxyType(names) for ns, names in grouped.items()})
        self._resource_version = resource_version
        self._last_synced_at = datetime.now(tz=UTC)
        self._failures = 0
        self._synced.set()

    def upsert(self, raw: Mapping[str, Any]) -> CachedResource | None:
        """Apply an ADDED or MODIFIED event."""
        obj = CachedResource.from_raw(self.kind, raw)
        if not obj.name:
            return None
        current = self._snapshot.by_namespace
        names = dict(current.get(obj.namespace, {}))
        names[obj.name] = obj
        updated = dict(current)
        updated[obj.namespace] = MappingProxyType(names)
        self._publish(updated)
        if obj.resource_version:
            self._resource_version = obj.resource_version
        return obj

    def delete(self, namespace: str, name: str) -> bool:
        """Apply a DELETED event.  Returns False if the object was not cached."""
        if not self.kind.namespaced:
            namespace = ""
        current = self._snapshot.by_namespace
        if name not in current.get(namespace, {}):
            return False
        names = dict(current[namespace])
        del names[name]
        updated = dict(current)
        if names:
            updated[namespace] = MappingProxyType(names)
        else:
            del updated[namespace]
        self._publish(updated)
        return True

    def record_failure(self) -> int:
        self._failures += 1
        return self._failures

    def reset_failures(self) -> None:
        self._failures = 0

    def _publish(self, by_namespace: dict[str, Mapping[str, CachedResource]]) -> None:
        count = sum(len(names) for names in by_namespace.values())
        self._snapshot = _Snapshot(by_namespace=MappingProxyType(by_namespace), count=count)
        cache_objects.labels(kind=self.kind.value).set(count)
