"""Route handlers for the REST API."""

from __future__ import annotations

from fastapi import APIRouter, Request

from podscope.api.schemas import (
    HealthResponse,
    KindStatus,
    PodItem,
    ResolveRequest,
    ResolveResponse,
    StatusResponse,
)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness only; does not look at the caches."""
    return HealthResponse()


@router.get("/status", response_model=StatusResponse)
async def status(request: Request) -> StatusResponse:
    cache_set = request.app.state.cache_set
    return StatusResponse(
        readiness=cache_set.readiness().value,
        synced=cache_set.has_synced(),
        kinds={kind: KindStatus(**info) for kind, info in cache_set.status().items()},
    )


@router.post("/resolve", response_model=ResolveResponse)
async def resolve(body: ResolveRequest, request: Request) -> ResolveResponse:
    """Resolve a resource reference to its pods.

    Resolution failures propagate as ``ResolutionError`` and are rendered by
    the handler registered in ``create_app``.
    """
    resolver = request.app.state.resolver
    pods = resolver.resolve(body.kind, body.namespace, body.name, body.label_selector)
    reference = "/".join(part for part in (body.kind, body.namespace, body.name) if part)
    items = [
        PodItem(namespace=pod.namespace, name=pod.name, labels=dict(pod.labels), phase=pod.phase)
        for pod in sorted(pods, key=lambda p: p.key)
    ]
    return ResolveResponse(reference=reference, count=len(items), pods=items)
