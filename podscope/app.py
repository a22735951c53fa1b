"""Application bootstrap for podscope.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → K8s client → cache set → sync barrier
              → resolver → REST

The sync barrier is mandatory: a ``SyncTimeout`` aborts startup and the
process exits non-zero instead of serving requests against a partially
populated cache.  Shutdown stops components in reverse startup order.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, Any

from podscope.config import load_config
from podscope.models.config import PodscopeConfig
from podscope.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from podscope.cache import ResourceCacheSet
    from podscope.resolver import ResourceResolver

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class PodscopeApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already stopped)
    is safe.
    """

    def __init__(self, config: PodscopeConfig | None = None) -> None:
        self.config = config

        self._api_client: Any | None = None
        self._cache_set: ResourceCacheSet | None = None
        self._resolver: ResourceResolver | None = None
        self._rest_server: Any | None = None

        self._background_tasks: list[asyncio.Task[None]] = []

        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        # --- 1. Configuration -------------------------------------------
        if self.config is None:
            self.config = load_config()

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("podscope starting", version=_podscope_version())

        # --- 3. Kubernetes client ----------------------------------------
        await self._start_k8s_client()

        # --- 4. Resource cache set ---------------------------------------
        await self._start_cache_set()

        # --- 5. Sync barrier ---------------------------------------------
        await self._wait_for_sync()

        # --- 6. Resolver -------------------------------------------------
        self._start_resolver()

        # --- 7. REST API -------------------------------------------------
        await self._start_rest()

        self._running = True
        self._log.info("podscope started", port=self.config.api.port)

    # ------------------------------------------------------------------
    # Component startup helpers
    # ------------------------------------------------------------------

    async def _start_k8s_client(self) -> None:
        """Initialise kubernetes-asyncio from in-cluster config or kubeconfig."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting k8s client")
        try:
            import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
            from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

            kubeconfig = self.config.kubernetes.kubeconfig
            if kubeconfig:
                await k8s_config.load_kube_config(config_file=kubeconfig)
                self._log.info("k8s client configured from kubeconfig", path=kubeconfig)
            else:
                try:
                    # load_incluster_config() is synchronous in kubernetes-asyncio
                    k8s_config.load_incluster_config()
                    self._log.info("k8s client configured from in-cluster service account")
                except k8s_config.ConfigException:
                    await k8s_config.load_kube_config()
                    self._log.info("k8s client configured from kubeconfig")

            self._api_client = k8s_client.ApiClient()
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    async def _start_cache_set(self) -> None:
        """Obtain every per-kind cache handle, then start the informers."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting resource cache set")
        try:
            from podscope.cache import ResourceCacheSet

            cache_set = ResourceCacheSet.from_api_client(
                self._api_client,
                resync_period=float(self.config.cache.resync_seconds),
                retry_delay=self.config.cache.retry_delay_seconds,
            )
            # Handles exist once the constructor returns; only now start watching.
            cache_set.start()
            self._cache_set = cache_set
            self._log.info("resource cache set started")
        except Exception as exc:
            raise _ComponentError("cache", exc) from exc

    async def _wait_for_sync(self) -> None:
        """Block until every cache has completed its initial listing."""
        assert self._log is not None
        assert self.config is not None
        assert self._cache_set is not None
        from podscope.cache import wait_for_cache_sync
        from podscope.errors import SyncTimeout

        try:
            await wait_for_cache_sync(
                self._cache_set.caches(),
                timeout=float(self.config.cache.sync_timeout_seconds),
            )
        except SyncTimeout as exc:
            raise _ComponentError("cache_sync", exc) from exc

    def _start_resolver(self) -> None:
        assert self._log is not None
        assert self.config is not None
        assert self._cache_set is not None
        from podscope.resolver import ResourceResolver

        self._resolver = ResourceResolver(self._cache_set, running_only=self.config.resolver.running_only)
        self._log.info("resolver started", running_only=self.config.resolver.running_only)

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        assert self._resolver is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn  # type: ignore[import-untyped]

            from podscope.api import create_app

            fastapi_app = create_app(resolver=self._resolver, cache_set=self._cache_set, config=self.config)
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host="0.0.0.0",
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("rest api started", port=self.config.api.port)
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Gracefully stop all components in reverse startup order."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("podscope shutting down")

        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True

        for task in reversed(self._background_tasks):
            if not task.done():
                task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        self._background_tasks.clear()

        self._resolver = None
        if self._cache_set is not None:
            try:
                await asyncio.wait_for(self._cache_set.stop(), timeout=_SHUTDOWN_GRACE_SECONDS)
            except TimeoutError:
                log.warning("cache set stop timed out", timeout=_SHUTDOWN_GRACE_SECONDS)
            self._cache_set = None
        await self._stop_k8s_client()

        log.info("podscope stopped")

    async def _stop_k8s_client(self) -> None:
        """Close the kubernetes-asyncio ApiClient connection pool."""
        if self._api_client is None:
            return
        log = self._log or get_logger("app")
        try:
            await self._api_client.close()
        except Exception as exc:
            log.debug("k8s client close raised (non-fatal)", error=str(exc))
        self._api_client = None


def _podscope_version() -> str:
    from podscope import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = PodscopeApp()
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        while app._running:
            await asyncio.sleep(1)
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app._running:
            await app.stop()


def run() -> None:
    """Console-script entry point."""
    asyncio.run(main())
