"""Typed failures returned by the resolution layer.

Every failure carries a stable ``code`` that the REST layer maps onto its
error envelope.  Nothing in this package retries; a failure is handed to the
immediate caller as-is.
"""

from __future__ import annotations

from collections.abc import Iterable


class ResolutionError(Exception):
    """Base class for all resolution failures."""

    code = "RESOLUTION_ERROR"


class UnknownResourceKind(ResolutionError):
    """The kind string does not name a supported resource kind."""

    code = "UNKNOWN_RESOURCE_KIND"

    def __init__(self, friendly_name: str) -> None:
        super().__init__(f"cannot find canonical resource kind for [{friendly_name}]")
        self.friendly_name = friendly_name


class UnsupportedSelectorKind(ResolutionError):
    """A selector was requested for an object that has no selector semantics."""

    code = "UNSUPPORTED_SELECTOR_KIND"

    def __init__(self, kind: str) -> None:
        super().__init__(f"cannot get object selector for kind [{kind}]")
        self.kind = kind


class InvalidReference(ResolutionError):
    """The reference is structurally invalid (missing namespace, bad selector)."""

    code = "INVALID_REFERENCE"


class NotFound(ResolutionError):
    """The named object is absent from the cache."""

    code = "NOT_FOUND"

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        if namespace:
            message = f'{kind} "{name}" not found in namespace "{namespace}"'
        else:
            message = f'{kind} "{name}" not found'
        super().__init__(message)
        self.kind = kind
        self.namespace = namespace
        self.name = name


class NoPodsFound(ResolutionError):
    """The object exists but its selection matched zero pods."""

    code = "NO_PODS_FOUND"

    def __init__(self, selection: str) -> None:
        super().__init__(f"no pods found for {selection}")
        self.selection = selection


class SyncTimeout(ResolutionError):
    """Initial cache population did not complete in time."""

    code = "SYNC_TIMEOUT"

    def __init__(self, timeout: float, pending: Iterable[str]) -> None:
        self.timeout = timeout
        self.pending = sorted(pending)
        super().__init__(
            f"timed out after {timeout:g}s waiting for caches to sync: {', '.join(self.pending) or 'unknown'}"
        )


class NotReady(ResolutionError):
    """A request arrived before the cache sync barrier passed."""

    code = "NOT_READY"

    def __init__(self, message: str = "resource caches have not completed their initial sync") -> None:
        super().__init__(message)
