"""Periodically refreshed cached value.

Holds one immutable snapshot produced by an async loader. Readers always get
either the previous or the next complete snapshot: a refresh builds the new
value off to the side and then replaces the reference in a single assignment.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import logfire

T = TypeVar("T")


@dataclass(frozen=True)
class _Snapshot(Generic[T]):
    value: T
    loaded_at: float
    expires_at: float


class RefreshingValue(Generic[T]):
    """Cached value with automatic and on-demand refresh.

    - ``automatic_refresh_interval``: age after which ``get()`` reloads, and
      the period of the optional background refresh task.
    - ``refresh_interval``: minimum age before ``request_refresh()`` is
      honoured, so a burst of callers cannot hammer the source.

    If a reload fails while a snapshot exists, the stale snapshot keeps
    being served and the error is logged. With no snapshot the error
    propagates to the caller.
    """

    def __init__(
        self,
        name: str,
        loader: Callable[[], Awaitable[T]],
        automatic_refresh_interval: float,
        refresh_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            name: Name used in log records
            loader: Coroutine function producing a fresh value
            automatic_refresh_interval: Seconds between automatic refreshes
            refresh_interval: Minimum seconds between on-demand refreshes
            clock: Monotonic clock, injectable for tests
        """
        self.name = name
        self._loader = loader
        self.automatic_refresh_interval = automatic_refresh_interval
        self.refresh_interval = refresh_interval
        self._clock = clock

        self._snapshot: _Snapshot[T] | None = None
        self._refresh_requested = False
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None

    async def get(self) -> T:
        """Return the current value, loading it first if absent or expired."""
        snapshot = self._snapshot
        if snapshot is not None and not self._is_due(snapshot):
            return snapshot.value
        return await self._reload(force=False)

    def request_refresh(self) -> bool:
        """Ask for the next ``get()`` to reload.

        Ignored when the current snapshot is younger than ``refresh_interval``.

        Returns:
            True if the request was accepted
        """
        snapshot = self._snapshot
        if snapshot is not None and self._age(snapshot) < self.refresh_interval:
            logfire.debug("Refresh request ignored, snapshot too recent", cache=self.name)
            return False
        self._refresh_requested = True
        return True

    async def refresh(self) -> T:
        """Reload unconditionally."""
        return await self._reload(force=True)

    def start(self) -> None:
        """Start the background refresh task on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run(), name=f"refresh:{self.name}")

    async def aclose(self) -> None:
        """Stop the background refresh task."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    def _age(self, snapshot: _Snapshot[T]) -> float:
        return self._clock() - snapshot.loaded_at

    def _is_due(self, snapshot: _Snapshot[T]) -> bool:
        return self._refresh_requested or self._clock() >= snapshot.expires_at

    async def _reload(self, force: bool) -> T:
        async with self._lock:
            # Another caller may have reloaded while we waited for the lock
            snapshot = self._snapshot
            if not force and snapshot is not None and not self._is_due(snapshot):
                return snapshot.value

            with logfire.span("refreshing_value.reload", cache=self.name):
                try:
                    value = await self._loader()
                except Exception as e:
                    if snapshot is None:
                        logfire.error(
                            "Cache load failed", cache=self.name, error=str(e)
                        )
                        raise
                    logfire.warn(
                        "Cache refresh failed, serving stale value",
                        cache=self.name,
                        error=str(e),
                    )
                    # Serve the stale value, retry after the on-demand interval
                    now = self._clock()
                    self._snapshot = _Snapshot(
                        snapshot.value, now, now + self.refresh_interval
                    )
                    self._refresh_requested = False
                    return snapshot.value

                now = self._clock()
                self._snapshot = _Snapshot(
                    value, now, now + self.automatic_refresh_interval
                )
                self._refresh_requested = False
                logfire.info("Cache refreshed", cache=self.name)
                return value

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.automatic_refresh_interval)
            try:
                await self.refresh()
            except Exception as e:
                logfire.error(
                    "Background cache refresh failed", cache=self.name, error=str(e)
                )
