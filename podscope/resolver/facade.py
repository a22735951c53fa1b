"""Entry point for callers that need a reference resolved to pods."""

from __future__ import annotations

import time

from podscope.cache.cache_set import ResourceCacheSet
from podscope.errors import NotReady, ResolutionError
from podscope.models.resources import LabelSelector, PodSet, ResourceReference
from podscope.observability.logging import get_logger
from podscope.observability.metrics import resolution_duration_seconds, resolutions_total
from podscope.resolver.names import normalize
from podscope.resolver.ownership import OwnershipResolver

_log = get_logger("resolver.facade")


class ResourceResolver:
    """Validates a request, gates on cache readiness and delegates resolution.

    Holds nothing but the cache set reference; no per-request state and no
    caching of results.
    """

    def __init__(self, caches: ResourceCacheSet, running_only: bool = True) -> None:
        self._caches = caches
        self._ownership = OwnershipResolver(caches, running_only=running_only)

    def resolve(self, kind: str, namespace: str, name: str, label_selector: str = "") -> PodSet:
        """Resolve ``kind/namespace/name`` to the pods it represents.

        Raises:
            UnknownResourceKind, InvalidReference, NotFound, NoPodsFound,
            NotReady, UnsupportedSelectorKind, or ResolutionError for a
            malformed cached object.
        """
        t_start = time.monotonic()
        metric_kind = "unknown"
        try:
            reference = ResourceReference(
                kind=normalize(kind),
                namespace=namespace or "",
                name=name or "",
                label_selector=LabelSelector.parse(label_selector),
            )
            metric_kind = reference.kind.value
            if not self._caches.has_synced():
                raise NotReady()
            pods = self._ownership.resolve_pods(reference)
        except ResolutionError as exc:
            resolutions_total.labels(kind=metric_kind, outcome=exc.code.lower()).inc()
            _log.info(
                "resolution_failed",
                kind=kind,
                namespace=namespace,
                name=name,
                error_code=exc.code,
                error=str(exc),
            )
            raise
        except (KeyError, TypeError, AttributeError) as exc:
            resolutions_total.labels(kind=metric_kind, outcome="resolution_error").inc()
            _log.error("resolution_internal_error", kind=kind, namespace=namespace, name=name, error=str(exc))
            raise ResolutionError(f"failed to resolve {kind}/{namespace}/{name}: {exc}") from exc
        finally:
            resolution_duration_seconds.observe(time.monotonic() - t_start)

        resolutions_total.labels(kind=metric_kind, outcome="ok").inc()
        _log.info("resolution_succeeded", reference=str(reference), pods=len(pods))
        return pods
