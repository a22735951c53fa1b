"""Shared fixtures for podscope integration tests.

Provides a ``ResourceCacheSet`` populated with a realistic emojivoto-style
cluster, and a ``ResourceResolver`` over it, so resolution can be exercised
end to end without a real Kubernetes API server.
"""

from __future__ import annotations

from typing import Any

import pytest

from podscope.cache.cache_set import ResourceCacheSet
from podscope.models.resources import ResourceKind
from podscope.resolver.facade import ResourceResolver
from tests.fakes import idle_list_fns

# ---------------------------------------------------------------------------
# Object factory helpers
# ---------------------------------------------------------------------------


def _metadata(
    name: str,
    namespace: str = "",
    labels: dict[str, str] | None = None,
    uid: str = "",
    owners: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    metadata: dict[str, Any] = {"name": name, "uid": uid or f"uid-{name}", "resourceVersion": "1"}
    if namespace:
        metadata["namespace"] = namespace
    if labels:
        metadata["labels"] = labels
    if owners:
        metadata["ownerReferences"] = owners
    return metadata


def owner(kind: str, name: str, uid: str = "") -> dict[str, Any]:
    return {"apiVersion": "apps/v1", "kind": kind, "name": name, "uid": uid or f"uid-{name}", "controller": True}


def make_namespace(name: str) -> dict[str, Any]:
    return {"metadata": _metadata(name), "status": {"phase": "Active"}}


def make_pod(
    name: str,
    namespace: str = "emojivoto",
    labels: dict[str, str] | None = None,
    phase: str = "Running",
    owners: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "metadata": _metadata(name, namespace, labels, owners=owners),
        "spec": {"containers": [{"name": "main", "image": "buoyantio/emojivoto:v11"}]},
        "status": {"phase": phase},
    }


def make_deployment(name: str, match_labels: dict[str, str], namespace: str = "emojivoto") -> dict[str, Any]:
    return {
        "metadata": _metadata(name, namespace, match_labels),
        "spec": {
            "replicas": 1,
            "selector": {"matchLabels": match_labels},
            "template": {"metadata": {"labels": match_labels}},
        },
    }


def make_replica_set(
    name: str,
    match_labels: dict[str, str],
    namespace: str = "emojivoto",
    owners: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "metadata": _metadata(name, namespace, match_labels, owners=owners),
        "spec": {"selector": {"matchLabels": match_labels}, "template": {"metadata": {"labels": match_labels}}},
    }


def make_service(name: str, selector: dict[str, str], namespace: str = "emojivoto") -> dict[str, Any]:
    return {"metadata": _metadata(name, namespace), "spec": {"selector": selector, "ports": [{"port": 8080}]}}


def make_rc(name: str, selector: dict[str, str], namespace: str = "emojivoto") -> dict[str, Any]:
    return {"metadata": _metadata(name, namespace), "spec": {"replicas": 1, "selector": selector}}


# ---------------------------------------------------------------------------
# Cluster contents
# ---------------------------------------------------------------------------

WEB_LABELS = {"app": "web-svc"}
VOTING_LABELS = {"app": "voting-svc"}


def emojivoto_cluster() -> dict[ResourceKind, list[dict[str, Any]]]:
    """A small cluster covering every resolution path."""
    return {
        ResourceKind.NAMESPACE: [
            make_namespace("emojivoto"),
            make_namespace("empty-ns"),
            make_namespace("other"),
        ],
        ResourceKind.DEPLOYMENT: [
            make_deployment("web", WEB_LABELS),
            make_deployment("voting", VOTING_LABELS),
            make_deployment("idle", {"app": "idle"}),
        ],
        ResourceKind.REPLICA_SET: [
            # Two generations of the web rollout, both owned by reference.
            make_replica_set("web-5d7f", {**WEB_LABELS, "pod-template-hash": "5d7f"}, owners=[owner("Deployment", "web")]),
            make_replica_set("web-6a8b", {**WEB_LABELS, "pod-template-hash": "6a8b"}, owners=[owner("Deployment", "web")]),
            # Overlapping labels but owned by a different deployment.
            make_replica_set(
                "web-canary-1c2d",
                {**WEB_LABELS, "pod-template-hash": "1c2d"},
                owners=[owner("Deployment", "web-canary")],
            ),
            # No owner references at all: attributed by the label heuristic.
            make_replica_set("voting-7f9e", {**VOTING_LABELS, "pod-template-hash": "7f9e"}),
            make_replica_set("idle-0a0a", {"app": "idle", "pod-template-hash": "0a0a"}, owners=[owner("Deployment", "idle")]),
        ],
        ResourceKind.POD: [
            make_pod("emojivoto-meshed", labels={"app": "emoji-svc"}),
            make_pod("web-5d7f-aaaaa", labels={**WEB_LABELS, "pod-template-hash": "5d7f"}),
            make_pod("web-6a8b-bbbbb", labels={**WEB_LABELS, "pod-template-hash": "6a8b"}),
            make_pod("web-6a8b-ccccc", labels={**WEB_LABELS, "pod-template-hash": "6a8b"}, phase="Pending"),
            make_pod("web-canary-1c2d-ddddd", labels={**WEB_LABELS, "pod-template-hash": "1c2d"}),
            make_pod("voting-7f9e-eeeee", labels={**VOTING_LABELS, "pod-template-hash": "7f9e", "tier": "backend"}),
            make_pod("idle-0a0a-fffff", labels={"app": "idle", "pod-template-hash": "0a0a"}, phase="Succeeded"),
            make_pod("legacy-ggggg", labels={"app": "legacy"}),
            make_pod("emoji-elsewhere", namespace="other", labels={"app": "emoji-svc"}),
        ],
        ResourceKind.REPLICATION_CONTROLLER: [
            make_rc("legacy", {"app": "legacy"}),
        ],
        ResourceKind.SERVICE: [
            make_service("emoji-svc", {"app": "emoji-svc"}),
            make_service("nothing-svc", {"app": "does-not-exist"}),
        ],
    }


def populate(cache_set: ResourceCacheSet, contents: dict[ResourceKind, list[dict[str, Any]]]) -> None:
    """Apply a full listing to every cache, as the informers would."""
    for kind in ResourceKind:
        cache_set[kind].replace(contents.get(kind, []), resource_version="1")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_set() -> ResourceCacheSet:
    """A synced cache set holding the emojivoto cluster.  Informers are not started."""
    caches = ResourceCacheSet(idle_list_fns())
    populate(caches, emojivoto_cluster())
    return caches


@pytest.fixture
def resolver(cache_set: ResourceCacheSet) -> ResourceResolver:
    return ResourceResolver(cache_set)
