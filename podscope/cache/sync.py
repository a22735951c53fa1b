"""One-shot barrier that waits for every cache's initial listing."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable

from podscope.cache.kind_cache import KindCache
from podscope.errors import SyncTimeout
from podscope.observability.logging import get_logger

_log = get_logger("cache.sync")

DEFAULT_SYNC_TIMEOUT = 60.0


async def wait_for_cache_sync(caches: Iterable[KindCache], timeout: float = DEFAULT_SYNC_TIMEOUT) -> None:
    """Block until every cache reports synced.

    Raises:
        SyncTimeout: *timeout* seconds elapsed with at least one cache unsynced.

    Cancelling the awaiting task cancels the wait.  Partial readiness is
    never reported as success.
    """
    pending = list(caches)
    _log.info("waiting_for_cache_sync", kinds=[c.kind.value for c in pending], timeout=timeout)
    t_start = time.monotonic()
    try:
        await asyncio.wait_for(asyncio.gather(*(c.wait_synced() for c in pending)), timeout=timeout)
    except TimeoutError as exc:
        unsynced = [c.kind.value for c in pending if not c.has_synced]
        _log.error("cache_sync_timed_out", timeout=timeout, unsynced=unsynced)
        raise SyncTimeout(timeout, unsynced) from exc
    _log.info("caches_synced", duration_ms=round((time.monotonic() - t_start) * 1000.0, 1))
