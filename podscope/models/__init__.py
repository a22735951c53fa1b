"""Core data structures for podscope."""

from podscope.models.config import PodscopeConfig
from podscope.models.resources import (
    CachedResource,
    CacheReadiness,
    LabelSelector,
    OwnerReference,
    PodSet,
    ResourceKind,
    ResourceReference,
)

__all__ = [
    "CacheReadiness",
    "CachedResource",
    "LabelSelector",
    "OwnerReference",
    "PodSet",
    "PodscopeConfig",
    "ResourceKind",
    "ResourceReference",
]
