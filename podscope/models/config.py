"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CacheConfig:
    """Watch cache configuration."""

    resync_seconds: int = 600
    sync_timeout_seconds: int = 60
    retry_delay_seconds: float = 5.0


@dataclass
class ResolverConfig:
    """Pod resolution configuration."""

    running_only: bool = True


@dataclass
class KubernetesConfig:
    """Kubernetes client configuration."""

    kubeconfig: str = ""


@dataclass
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class PodscopeConfig:
    """Top-level podscope configuration."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    resolver: ResolverConfig = field(default_factory=ResolverConfig)
    kubernetes: KubernetesConfig = field(default_factory=KubernetesConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
