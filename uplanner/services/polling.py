"""Periodic refresh of the plan snapshot from the store.

Polling stands in for push updates. The loop keeps running through
failures; after three consecutive ones the synchronizer reports itself
degraded until a refresh succeeds or the count is reset by hand.
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime
from typing import Callable

from uplanner.contracts.common import utc_now
from uplanner.persistence.plan_store import PlanStore
from uplanner.services.snapshots import PlanSnapshotCache

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = int(os.getenv("UPLANNER_POLL_INTERVAL_MS", "5000"))
DEGRADED_AFTER = 3

Listener = Callable[["PollingSynchronizer"], None]


class PollingSynchronizer:
    def __init__(
        self,
        store: PlanStore,
        cache: PlanSnapshotCache,
        interval_ms: int | None = None,
    ):
        self._store = store
        self._cache = cache
        self._interval_ms = POLL_INTERVAL_MS if interval_ms is None else interval_ms
        self._task: asyncio.Task | None = None
        self._in_flight = False
        self._error_count = 0
        self._last_error: str | None = None
        self._last_synced_at: datetime | None = None
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def degraded(self) -> bool:
        return self._error_count >= DEGRADED_AFTER

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def last_synced_at(self) -> datetime | None:
        return self._last_synced_at

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def reset_error_count(self) -> None:
        """Clear the degraded state, e.g. after the operator clicks retry."""
        self._error_count = 0
        self._last_error = None

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    async def refresh(self) -> bool:
        """Run one refresh now.

        Returns False when the refresh failed or was skipped because the
        previous one is still running.
        """
        if self._in_flight:
            logger.debug("Refresh still running, tick skipped")
            return False

        self._in_flight = True
        try:
            plans = await self._store.list_plans()
            folders = await self._store.list_folders()
        except Exception as exc:
            self._error_count += 1
            self._last_error = str(exc) or type(exc).__name__
            logger.warning(
                "Plan refresh failed (%d in a row): %s", self._error_count, self._last_error
            )
            if self._error_count == DEGRADED_AFTER:
                logger.warning("Plan synchronization degraded")
            return False
        else:
            self._cache.replace_all(plans, folders)
            self._error_count = 0
            self._last_error = None
            self._last_synced_at = utc_now()
            return True
        finally:
            self._in_flight = False
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Polling listener failed")

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def start(self, interval_ms: int | None = None) -> None:
        """Start polling on the running event loop. No-op if already started."""
        if interval_ms is not None:
            self._interval_ms = interval_ms
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Polling every %d ms", self._interval_ms)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self._interval_ms / 1000)
