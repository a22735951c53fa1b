"""Request and response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ResolveRequest(BaseModel):
    """Resource reference to resolve."""

    kind: str = Field(min_length=1, max_length=64, description="Resource kind or shorthand, e.g. 'deploy'.")
    namespace: str = Field(default="", max_length=253)
    name: str = Field(default="", max_length=253)
    label_selector: str = Field(default="", max_length=1024, description="Extra equality selector, 'a=b,c=d'.")


class PodItem(BaseModel):
    namespace: str
    name: str
    labels: dict[str, str]
    phase: str


class ResolveResponse(BaseModel):
    reference: str
    count: int
    pods: list[PodItem]


class HealthResponse(BaseModel):
    status: str = "ok"


class KindStatus(BaseModel):
    synced: bool
    objects: int
    failures: int
    last_synced_at: str | None = None


class StatusResponse(BaseModel):
    readiness: str
    synced: bool
    kinds: dict[str, KindStatus]


class ErrorResponse(BaseModel):
    error: str
    detail: str
