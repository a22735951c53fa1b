"""Prometheus metrics for the watch caches and the resolver."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

cache_events_total = Counter(
    "podscope_cache_events_total",
    "Watch events applied to a resource cache",
    ["kind", "type"],
)

cache_objects = Gauge(
    "podscope_cache_objects",
    "Objects currently held per resource cache",
    ["kind"],
)

cache_relists_total = Counter(
    "podscope_cache_relists_total",
    "Full list calls that replaced a resource cache snapshot",
    ["kind"],
)

watch_failures_total = Counter(
    "podscope_watch_failures_total",
    "List or watch failures per resource kind",
    ["kind"],
)

resolutions_total = Counter(
    "podscope_resolutions_total",
    "Resource reference resolutions by outcome",
    ["kind", "outcome"],
)

resolution_duration_seconds = Histogram(
    "podscope_resolution_duration_seconds",
    "Time spent resolving a resource reference against the caches",
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)
