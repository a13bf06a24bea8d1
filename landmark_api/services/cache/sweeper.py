"""Background task that periodically sweeps expired cache entries.

The sweeper is owned by whoever builds the store; building a store never
starts a timer. Use it as an async context manager, or call start/stop.
"""

import asyncio
import logging

from .service import CacheStore

logger = logging.getLogger(__name__)


class CacheSweeper:
    """Runs ``store.sweep_expired()`` every ``interval_seconds``."""

    def __init__(self, store: CacheStore, interval_seconds: float = 60.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._store = store
        self._interval = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        """Sweep immediately. Errors are logged, not raised."""
        try:
            return await self._store.sweep_expired()
        except Exception as e:
            logger.warning(f"[CACHE] Sweep failed: {type(e).__name__}: {e}")
            return 0

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="cache-sweeper")
        logger.info(f"[CACHE] Sweeper started (every {self._interval:g}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("[CACHE] Sweeper stopped")

    async def __aenter__(self) -> "CacheSweeper":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
