"""Unit tests for podscope.resolver.selectors."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from podscope.errors import UnsupportedSelectorKind
from podscope.models.resources import CachedResource, ResourceKind
from podscope.resolver.selectors import SELECTOR_RULES, pod_template_selector, selector_for


def _obj(kind: ResourceKind, spec: dict | None = None, labels: dict | None = None) -> CachedResource:
    return CachedResource.from_raw(
        kind,
        {
            "metadata": {"name": "thing", "namespace": "emojivoto", "labels": labels or {}},
            "spec": spec or {},
        },
    )


class TestSelectorFor:
    def test_namespace_selects_everything(self) -> None:
        selector = selector_for(_obj(ResourceKind.NAMESPACE))
        assert selector.is_everything
        assert selector.matches({"anything": "goes"})

    def test_deployment_uses_match_labels(self) -> None:
        obj = _obj(ResourceKind.DEPLOYMENT, {"selector": {"matchLabels": {"app": "web-svc"}}})
        selector = selector_for(obj)
        assert dict(selector.match_labels) == {"app": "web-svc"}

    def test_deployment_without_selector_is_empty(self) -> None:
        assert selector_for(_obj(ResourceKind.DEPLOYMENT)).is_everything

    def test_replication_controller_uses_spec_selector(self) -> None:
        obj = _obj(ResourceKind.REPLICATION_CONTROLLER, {"selector": {"app": "legacy", "tier": "back"}})
        assert dict(selector_for(obj).match_labels) == {"app": "legacy", "tier": "back"}

    def test_service_uses_spec_selector(self) -> None:
        obj = _obj(ResourceKind.SERVICE, {"selector": {"app": "emoji-svc"}})
        selector = selector_for(obj)
        assert selector.matches({"app": "emoji-svc", "version": "v1"})
        assert not selector.matches({"app": "voting-svc"})

    @pytest.mark.parametrize("kind", [ResourceKind.POD, ResourceKind.REPLICA_SET])
    def test_identity_and_owned_kinds_rejected(self, kind: ResourceKind) -> None:
        with pytest.raises(UnsupportedSelectorKind) as exc_info:
            selector_for(_obj(kind, {"selector": {"matchLabels": {"app": "x"}}}))
        assert kind.value in str(exc_info.value)

    def test_unknown_kind_string_rejected(self) -> None:
        with pytest.raises(UnsupportedSelectorKind) as exc_info:
            selector_for(SimpleNamespace(kind="statefulsets", spec={}))
        assert exc_info.value.kind == "statefulsets"

    def test_arbitrary_object_rejected_with_type_name(self) -> None:
        with pytest.raises(UnsupportedSelectorKind) as exc_info:
            selector_for(object())
        assert exc_info.value.kind == "object"

    def test_input_not_mutated(self) -> None:
        obj = _obj(ResourceKind.SERVICE, {"selector": {"app": "emoji-svc"}})
        before = dict(obj.spec["selector"])
        selector_for(obj)
        assert dict(obj.spec["selector"]) == before


class TestRuleTable:
    def test_every_kind_has_an_entry(self) -> None:
        assert set(SELECTOR_RULES) == set(ResourceKind)


class TestPodTemplateSelector:
    def test_replica_set_match_labels(self) -> None:
        obj = _obj(
            ResourceKind.REPLICA_SET,
            {"selector": {"matchLabels": {"app": "web-svc", "pod-template-hash": "5d7f"}}},
        )
        assert dict(pod_template_selector(obj).match_labels) == {"app": "web-svc", "pod-template-hash": "5d7f"}
