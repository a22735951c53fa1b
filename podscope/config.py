"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from podscope.models.config import (
    APIConfig,
    CacheConfig,
    KubernetesConfig,
    LogConfig,
    PodscopeConfig,
    ResolverConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"PODSCOPE_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None) -> float:
    val = float(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> PodscopeConfig:
    """Load configuration from PODSCOPE_* environment variables."""
    return PodscopeConfig(
        cache=CacheConfig(
            resync_seconds=_env_int("RESYNC_SECONDS", 600, min_val=30),
            sync_timeout_seconds=_env_int("SYNC_TIMEOUT_SECONDS", 60, min_val=1, max_val=600),
            retry_delay_seconds=_env_float("RETRY_DELAY_SECONDS", 5.0, min_val=0.1),
        ),
        resolver=ResolverConfig(
            running_only=_env_bool("RUNNING_ONLY", True),
        ),
        kubernetes=KubernetesConfig(
            kubeconfig=_env("KUBECONFIG", ""),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
