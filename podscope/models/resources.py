"""Resource kinds, cached objects, selectors and pod sets."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from podscope.errors import InvalidReference


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


class ResourceKind(StrEnum):
    """Closed set of resource kinds held in the cache.

    Values are the canonical plural names exposed to callers.
    """

    NAMESPACE = "namespaces"
    DEPLOYMENT = "deployments"
    REPLICA_SET = "replicasets"
    POD = "pods"
    REPLICATION_CONTROLLER = "replicationcontrollers"
    SERVICE = "services"

    @property
    def api_kind(self) -> str:
        """The ``kind`` field Kubernetes uses for this resource."""
        return _API_KINDS[self]

    @property
    def namespaced(self) -> bool:
        return self is not ResourceKind.NAMESPACE


_API_KINDS: dict[ResourceKind, str] = {
    ResourceKind.NAMESPACE: "Namespace",
    ResourceKind.DEPLOYMENT: "Deployment",
    ResourceKind.REPLICA_SET: "ReplicaSet",
    ResourceKind.POD: "Pod",
    ResourceKind.REPLICATION_CONTROLLER: "ReplicationController",
    ResourceKind.SERVICE: "Service",
}


class CacheReadiness(StrEnum):
    """Cache completeness state."""

    READY = "ready"
    WARMING = "warming"
    PARTIALLY_READY = "partially_ready"
    DEGRADED = "degraded"


def freeze(value: Any) -> Any:
    """Return a read-only copy of a decoded JSON value.

    Dicts become ``MappingProxyType`` views over fresh dicts, lists become
    tuples.  Scalars are returned unchanged.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


@dataclass(frozen=True)
class OwnerReference:
    """A single ``metadata.ownerReferences`` entry."""

    kind: str
    name: str
    uid: str = ""
    controller: bool = False

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> OwnerReference:
        return cls(
            kind=str(raw.get("kind", "")),
            name=str(raw.get("name", "")),
            uid=str(raw.get("uid", "") or ""),
            controller=bool(raw.get("controller", False)),
        )


@dataclass(frozen=True)
class CachedResource:
    """Immutable snapshot of one cluster object, as held by the cache.

    Built only by the cache from watch/list payloads.  Nested spec and status
    are frozen so consumers cannot mutate cache state through a reference.
    """

    kind: ResourceKind
    namespace: str
    name: str
    uid: str = ""
    resource_version: str = ""
    labels: Mapping[str, str] = field(default_factory=_empty)
    annotations: Mapping[str, str] = field(default_factory=_empty)
    owner_references: tuple[OwnerReference, ...] = ()
    spec: Mapping[str, Any] = field(default_factory=_empty)
    status: Mapping[str, Any] = field(default_factory=_empty)

    def __hash__(self) -> int:
        return hash((self.kind, self.namespace, self.name, self.resource_version))

    @classmethod
    def from_raw(cls, kind: ResourceKind, raw: Mapping[str, Any]) -> CachedResource:
        """Build a snapshot from a camelCase API dict (watch ``raw_object``)."""
        metadata = raw.get("metadata") or {}
        return cls(
            kind=kind,
            namespace=str(metadata.get("namespace") or "") if kind.namespaced else "",
            name=str(metadata.get("name", "")),
            uid=str(metadata.get("uid") or ""),
            resource_version=str(metadata.get("resourceVersion") or ""),
            labels=freeze(metadata.get("labels") or {}),
            annotations=freeze(metadata.get("annotations") or {}),
            owner_references=tuple(OwnerReference.from_raw(o) for o in metadata.get("ownerReferences") or ()),
            spec=freeze(raw.get("spec") or {}),
            status=freeze(raw.get("status") or {}),
        )

    @property
    def key(self) -> tuple[str, str]:
        return (self.namespace, self.name)

    @property
    def phase(self) -> str:
        return str(self.status.get("phase") or "")

    def controller_owner(self) -> OwnerReference | None:
        """Return the managing controller reference, if any."""
        for ref in self.owner_references:
            if ref.controller:
                return ref
        return None


@dataclass(frozen=True)
class LabelSelector:
    """Equality-based label selector.

    A pod matches when its labels are a superset of ``match_labels``.  An
    empty selector matches everything; ``matches_nothing`` is set only when
    merging produced contradictory constraints.
    """

    match_labels: Mapping[str, str] = field(default_factory=_empty)
    matches_nothing: bool = False

    def __hash__(self) -> int:
        return hash((tuple(sorted(self.match_labels.items())), self.matches_nothing))

    @classmethod
    def everything(cls) -> LabelSelector:
        return cls()

    @classmethod
    def from_labels(cls, labels: Mapping[str, Any] | None) -> LabelSelector:
        return cls(match_labels=MappingProxyType({str(k): str(v) for k, v in (labels or {}).items()}))

    @classmethod
    def parse(cls, text: str) -> LabelSelector:
        """Parse ``key=value`` pairs separated by commas.

        ``==`` is accepted as a synonym for ``=``.  Set-based and inequality
        expressions are rejected.
        """
        labels: dict[str, str] = {}
        for raw_term in (text or "").split(","):
            term = raw_term.strip()
            if not term:
                continue
            if "!=" in term:
                raise InvalidReference(f"unsupported label selector term [{term}]: only equality is supported")
            key, sep, value = term.partition("==") if "==" in term else term.partition("=")
            key, value = key.strip(), value.strip()
            if not sep or not key:
                raise InvalidReference(f"invalid label selector term [{term}]")
            if key in labels and labels[key] != value:
                raise InvalidReference(f"conflicting values for label [{key}] in selector [{text}]")
            labels[key] = value
        return cls.from_labels(labels)

    @property
    def is_everything(self) -> bool:
        return not self.match_labels and not self.matches_nothing

    def matches(self, labels: Mapping[str, str]) -> bool:
        if self.matches_nothing:
            return False
        return all(labels.get(k) == v for k, v in self.match_labels.items())

    def merged(self, other: LabelSelector) -> LabelSelector:
        """Return a selector requiring both this selector and *other*."""
        if self.matches_nothing or other.matches_nothing:
            return LabelSelector(matches_nothing=True)
        combined = dict(self.match_labels)
        for key, value in other.match_labels.items():
            if combined.get(key, value) != value:
                return LabelSelector(matches_nothing=True)
            combined[key] = value
        return LabelSelector.from_labels(combined)

    def __str__(self) -> str:
        if self.matches_nothing:
            return "<nothing>"
        return ",".join(f"{k}={v}" for k, v in sorted(self.match_labels.items()))


@dataclass(frozen=True)
class ResourceReference:
    """A request to resolve a resource to its pods."""

    kind: ResourceKind
    namespace: str
    name: str
    label_selector: LabelSelector = field(default_factory=LabelSelector.everything)

    @property
    def target_namespace(self) -> str:
        """The namespace pods are searched in."""
        if self.kind is ResourceKind.NAMESPACE:
            return self.name or self.namespace
        return self.namespace

    def __str__(self) -> str:
        if self.kind is ResourceKind.NAMESPACE:
            text = f"{self.kind}/{self.target_namespace}"
        else:
            text = f"{self.kind}/{self.namespace}/{self.name}"
        if not self.label_selector.is_everything:
            text += f" (labels: {self.label_selector})"
        return text


@dataclass(frozen=True)
class PodSet:
    """Resolved pods, deduplicated by ``(namespace, name)``.

    Iteration order is not part of the contract.
    """

    pods: tuple[CachedResource, ...] = ()

    @classmethod
    def from_pods(cls, pods: Iterable[CachedResource]) -> PodSet:
        unique: dict[tuple[str, str], CachedResource] = {}
        for pod in pods:
            unique.setdefault(pod.key, pod)
        return cls(pods=tuple(unique.values()))

    def __len__(self) -> int:
        return len(self.pods)

    def __iter__(self) -> Iterator[CachedResource]:
        return iter(self.pods)

    def __contains__(self, key: object) -> bool:
        return key in self.keys()

    def keys(self) -> frozenset[tuple[str, str]]:
        return frozenset(pod.key for pod in self.pods)
