"""Label selector extraction, dispatched on resource kind.

Every ``ResourceKind`` has an entry in ``SELECTOR_RULES``.  Kinds resolved by
identity or through ownership (pods, replica sets) map to ``None`` and are
rejected, as is anything that is not a known kind.  An unknown kind never
falls back to an empty selector, because an empty selector matches
everything.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from podscope.errors import UnsupportedSelectorKind
from podscope.models.resources import CachedResource, LabelSelector, ResourceKind

SelectorRule = Callable[[CachedResource], LabelSelector]


def pod_template_selector(obj: CachedResource) -> LabelSelector:
    """``spec.selector.matchLabels`` of a deployment or replica set."""
    selector = obj.spec.get("selector") or {}
    match_labels: Mapping[str, Any] = selector.get("matchLabels") or {}
    return LabelSelector.from_labels(match_labels)


def _spec_selector(obj: CachedResource) -> LabelSelector:
    return LabelSelector.from_labels(obj.spec.get("selector") or {})


def _everything(_obj: CachedResource) -> LabelSelector:
    return LabelSelector.everything()


SELECTOR_RULES: Mapping[ResourceKind, SelectorRule | None] = {
    ResourceKind.NAMESPACE: _everything,
    ResourceKind.DEPLOYMENT: pod_template_selector,
    ResourceKind.REPLICATION_CONTROLLER: _spec_selector,
    ResourceKind.SERVICE: _spec_selector,
    ResourceKind.REPLICA_SET: None,
    ResourceKind.POD: None,
}


def selector_for(obj: Any) -> LabelSelector:
    """Return the selector identifying the pods *obj* governs.

    Raises:
        UnsupportedSelectorKind: *obj* is not a selectable resource.
    """
    kind = getattr(obj, "kind", None)
    rule = SELECTOR_RULES.get(kind) if isinstance(kind, ResourceKind) else None
    if rule is None:
        raise UnsupportedSelectorKind(str(kind) if kind is not None else type(obj).__name__)
    return rule(obj)
