"""
==============================================================================
Retention Service Module
==============================================================================

Purges inventory update records older than the retention window.

This module implements:
- RetentionSweeper: the sweep rule over an injected entry store
- RetentionTaskManager: background asyncio task running the sweep daily

Background Task:
---------------
The RetentionTaskManager sleeps until the configured local time (05:00
Asia/Seoul by default), runs one sweep in a fresh session on a worker
thread, and repeats.
A failed run is logged and the next day's run still happens.

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional, Protocol, Sequence

from storeledger.config import get_settings
from storeledger.db.database import DatabaseManager
from storeledger.db.repositories import InventoryRecordRepository
from storeledger.utils.clock import now_local, seconds_until_next_run


# Module logger
logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 60


class EntryStore(Protocol):
    def find_older_than(self, cutoff: datetime) -> Sequence: ...

    def delete_all(self, entries: Sequence) -> None: ...


class RetentionSweeper:
    """
    Deletes every entry created strictly before ``reference - retention``.

    Example:
        >>> sweeper = RetentionSweeper()
        >>> sweeper.sweep(datetime(2023, 5, 1, 5), repository)
        3
    """

    def __init__(self, retention_days: int = DEFAULT_RETENTION_DAYS) -> None:
        if retention_days < 0:
            raise ValueError("retention_days must not be negative")
        self._retention_days = retention_days

    @property
    def retention_days(self) -> int:
        return self._retention_days

    def cutoff(self, reference_time: datetime, retention_days: Optional[int] = None) -> datetime:
        """Entries created before this instant are expired."""
        days = self._retention_days if retention_days is None else retention_days
        return reference_time - timedelta(days=days)

    def sweep(
        self,
        reference_time: datetime,
        entry_store: EntryStore,
        retention_days: Optional[int] = None
    ) -> int:
        """
        Remove expired entries.

        Args:
            reference_time: Naive datetime on the store clock
            entry_store: Selects and deletes entries
            retention_days: Overrides the sweeper's window for this call

        Returns:
            Number of entries removed

        Raises:
            StorageError: If selection or deletion fails; nothing is removed
        """
        cutoff = self.cutoff(reference_time, retention_days)

        expired = entry_store.find_older_than(cutoff)
        if not expired:
            logger.debug(f"No inventory records older than {cutoff.isoformat()}")
            return 0

        entry_store.delete_all(expired)

        logger.info(
            f"🗑️ Deleted {len(expired)} inventory records older than "
            f"{cutoff.isoformat()}"
        )
        return len(expired)


class RetentionTaskManager:
    """
    Manager for the daily retention task.

    Only one instance exists per process, so at most one sweep loop runs.

    Example:
        >>> manager = RetentionTaskManager()
        >>> manager.start()  # on startup
        >>> manager.stop()   # on shutdown
    """

    _instance: Optional[RetentionTaskManager] = None

    def __new__(cls) -> RetentionTaskManager:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, '_initialized', False):
            return

        self._settings = get_settings()
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._initialized = True

    def seconds_until_next_run(self, now: Optional[datetime] = None) -> float:
        now = now or now_local(self._settings.tzinfo)
        return seconds_until_next_run(
            now,
            self._settings.retention_run_hour,
            self._settings.retention_run_minute,
        )

    def run_once(self) -> int:
        """Run one sweep in its own session."""
        session = DatabaseManager().get_session()
        try:
            sweeper = RetentionSweeper(self._settings.retention_days)
            return sweeper.sweep(
                now_local(self._settings.tzinfo),
                InventoryRecordRepository(session),
            )
        finally:
            session.close()

    async def _sweep_loop(self) -> None:
        logger.info("🔄 Retention background task started")

        while self._running:
            try:
                delay = self.seconds_until_next_run()
                logger.debug(f"Next retention sweep in {delay:.0f}s")
                await asyncio.sleep(delay)

                # blocking database work runs in a worker thread
                deleted = await asyncio.to_thread(self.run_once)
                logger.info(f"✅ Retention sweep removed {deleted} records")

            except asyncio.CancelledError:
                logger.info("🛑 Retention task cancelled")
                break
            except Exception:
                logger.exception("Retention sweep failed")

    def start(self) -> asyncio.Task:
        """Start the background task; returns the running task."""
        if self._task is None or self._task.done():
            self._running = True
            self._task = asyncio.create_task(self._sweep_loop())
            logger.info(
                f"✅ Retention task scheduled daily at "
                f"{self._settings.retention_run_hour:02d}:"
                f"{self._settings.retention_run_minute:02d} "
                f"({self._settings.timezone})"
            )
        return self._task

    def stop(self) -> None:
        """Stop the background task."""
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            logger.info("🛑 Retention task stopped")

    @property
    def is_running(self) -> bool:
        return self._running and self._task is not None and not self._task.done()
