"""Resource reference to pod set, walking ownership where needed.

Ownership is never stored.  Every call reads the current replica-set and pod
snapshots and derives the deployment -> replica set -> pod edges from them,
so a rollout that replaces a replica set is picked up on the next call.

Replica sets are attributed to a deployment by their controller owner
reference when they carry one.  Only replica sets without any owner
reference fall back to the label heuristic: their labels must satisfy the
deployment's selector.
"""

from __future__ import annotations

from collections.abc import Iterable

from podscope.cache.cache_set import ResourceCacheSet
from podscope.errors import InvalidReference, NoPodsFound, NotFound
from podscope.models.resources import CachedResource, LabelSelector, PodSet, ResourceKind, ResourceReference
from podscope.observability.logging import get_logger
from podscope.resolver.names import normalize
from podscope.resolver.selectors import pod_template_selector, selector_for

_log = get_logger("resolver.ownership")

RUNNING_PHASE = "Running"


class OwnershipResolver:
    """Resolves references against a ``ResourceCacheSet``.

    Pure with respect to the cache: the same snapshot always yields the same
    pod set.  Safe to call concurrently from any number of readers.
    """

    def __init__(self, caches: ResourceCacheSet, running_only: bool = True) -> None:
        self._caches = caches
        self._running_only = running_only

    def resolve_pods(self, ref: ResourceReference) -> PodSet:
        """Return the pods *ref* represents.

        Raises:
            UnknownResourceKind: the kind is not user-addressable.
            InvalidReference:    a namespaced kind was given no namespace.
            NotFound:            the named object is not cached.
            NoPodsFound:         a non-namespace reference matched no pods.
        """
        kind = self._validate(ref)

        if kind is ResourceKind.POD:
            candidates: Iterable[CachedResource] = [self._get(kind, ref.namespace, ref.name)]
        elif kind is ResourceKind.DEPLOYMENT:
            candidates = self._deployment_pods(ref)
        elif kind is ResourceKind.NAMESPACE:
            namespace = self._get(kind, "", ref.target_namespace)
            candidates = self._caches.pods.list(namespace.name)
        else:
            target = self._get(kind, ref.namespace, ref.name)
            candidates = self._caches.pods.list(ref.namespace, selector_for(target).merged(ref.label_selector))

        pods = PodSet.from_pods(p for p in candidates if self._keep(p, ref.label_selector))
        _log.debug("resolved", reference=str(ref), pods=len(pods))
        if not pods and kind is not ResourceKind.NAMESPACE:
            raise NoPodsFound(str(ref))
        return pods

    def _validate(self, ref: ResourceReference) -> ResourceKind:
        kind = normalize(str(ref.kind))
        if kind is ResourceKind.NAMESPACE:
            if not ref.target_namespace:
                raise InvalidReference("namespace reference requires a name")
            return kind
        if not ref.namespace:
            raise InvalidReference(f"{kind} reference requires a namespace")
        if not ref.name:
            raise InvalidReference(f"{kind} reference requires a name")
        return kind

    def _get(self, kind: ResourceKind, namespace: str, name: str) -> CachedResource:
        obj = self._caches[kind].get(namespace, name)
        if obj is None:
            raise NotFound(kind.value, namespace, name)
        return obj

    def _keep(self, pod: CachedResource, selector: LabelSelector) -> bool:
        if self._running_only and pod.phase != RUNNING_PHASE:
            return False
        return selector.matches(pod.labels)

    def _deployment_pods(self, ref: ResourceReference) -> list[CachedResource]:
        deployment = self._get(ResourceKind.DEPLOYMENT, ref.namespace, ref.name)
        deployment_selector = selector_for(deployment)

        pods: list[CachedResource] = []
        for replica_set in self.owned_replica_sets(deployment, deployment_selector):
            rs_selector = pod_template_selector(replica_set)
            if rs_selector.is_everything:
                _log.debug("replica_set_without_selector_skipped", namespace=ref.namespace, name=replica_set.name)
                continue
            pods.extend(self._caches.pods.list(ref.namespace, rs_selector))
        return pods

    def owned_replica_sets(
        self,
        deployment: CachedResource,
        deployment_selector: LabelSelector | None = None,
    ) -> list[CachedResource]:
        """Replica sets in the deployment's namespace that it manages."""
        if deployment_selector is None:
            deployment_selector = selector_for(deployment)
        return [
            rs
            for rs in self._caches.replica_sets.list(deployment.namespace)
            if _is_owned_by(rs, deployment, deployment_selector)
        ]


def _is_owned_by(replica_set: CachedResource, deployment: CachedResource, deployment_selector: LabelSelector) -> bool:
    if replica_set.owner_references:
        owner = replica_set.controller_owner()
        if owner is None or owner.kind != ResourceKind.DEPLOYMENT.api_kind:
            return False
        if owner.uid and deployment.uid:
            return owner.uid == deployment.uid
        return owner.name == deployment.name
    if deployment_selector.is_everything:
        return False
    return deployment_selector.matches(replica_set.labels)
