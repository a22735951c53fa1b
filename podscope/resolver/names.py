"""Shorthand resource names to canonical kinds.

Mirrors the aliases kubectl accepts.  Matching is exact and case-sensitive.
Replica sets are resolved internally and have no user-facing alias.
"""

from __future__ import annotations

from types import MappingProxyType

from podscope.errors import UnknownResourceKind
from podscope.models.resources import ResourceKind

ALIASES: MappingProxyType[str, ResourceKind] = MappingProxyType(
    {
        "deploy": ResourceKind.DEPLOYMENT,
        "deployment": ResourceKind.DEPLOYMENT,
        "deployments": ResourceKind.DEPLOYMENT,
        "ns": ResourceKind.NAMESPACE,
        "namespace": ResourceKind.NAMESPACE,
        "namespaces": ResourceKind.NAMESPACE,
        "po": ResourceKind.POD,
        "pod": ResourceKind.POD,
        "pods": ResourceKind.POD,
        "rc": ResourceKind.REPLICATION_CONTROLLER,
        "replicationcontroller": ResourceKind.REPLICATION_CONTROLLER,
        "replicationcontrollers": ResourceKind.REPLICATION_CONTROLLER,
        "svc": ResourceKind.SERVICE,
        "service": ResourceKind.SERVICE,
        "services": ResourceKind.SERVICE,
    }
)


def normalize(friendly_name: str) -> ResourceKind:
    """Return the canonical kind for *friendly_name*.

    Raises:
        UnknownResourceKind: no alias matches.
    """
    try:
        return ALIASES[friendly_name]
    except (KeyError, TypeError):
        raise UnknownResourceKind(str(friendly_name)) from None
