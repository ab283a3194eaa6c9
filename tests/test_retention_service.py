"""
==============================================================================
Retention Tests
==============================================================================

Tests for the retention sweep rule, its SQLAlchemy-backed store, and the
daily schedule computation.

==============================================================================
"""

import asyncio
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from storeledger.core.exceptions import StorageError
from storeledger.db.models import InventoryUpdateRecord
from storeledger.db.repositories import InventoryRecordRepository
from storeledger.services.retention_service import RetentionSweeper, RetentionTaskManager
from storeledger.utils.clock import seconds_until_next_run


NOW = datetime(2023, 5, 1, 5, 0)


@dataclass(frozen=True)
class Entry:
    id: int
    created_at: datetime


class FakeEntryStore:
    """In-memory entry store applying the strict older-than predicate."""

    def __init__(self, entries: List[Entry]):
        self.entries = list(entries)
        self.cutoffs = []

    def find_older_than(self, cutoff):
        self.cutoffs.append(cutoff)
        return [e for e in self.entries if e.created_at < cutoff]

    def delete_all(self, entries):
        doomed = {e.id for e in entries}
        self.entries = [e for e in self.entries if e.id not in doomed]


class FailingEntryStore(FakeEntryStore):
    def delete_all(self, entries):
        raise StorageError("connection lost")


class TestRetentionSweeper:
    """Tests for RetentionSweeper.sweep."""

    def test_cutoff_is_sixty_days_by_default(self):
        store = FakeEntryStore([])
        RetentionSweeper().sweep(NOW, store)
        assert store.cutoffs == [NOW - timedelta(days=60)]

    def test_entry_exactly_at_cutoff_is_kept(self):
        store = FakeEntryStore([Entry(1, NOW - timedelta(days=60))])
        assert RetentionSweeper().sweep(NOW, store) == 0
        assert [e.id for e in store.entries] == [1]

    def test_entry_older_than_cutoff_is_removed(self):
        store = FakeEntryStore([
            Entry(1, NOW - timedelta(days=61)),
            Entry(2, NOW - timedelta(days=60, seconds=1)),
            Entry(3, NOW - timedelta(days=59)),
        ])
        assert RetentionSweeper().sweep(NOW, store) == 2
        assert [e.id for e in store.entries] == [3]

    def test_second_sweep_removes_nothing(self):
        store = FakeEntryStore([Entry(1, NOW - timedelta(days=90))])
        sweeper = RetentionSweeper()
        assert sweeper.sweep(NOW, store) == 1
        assert sweeper.sweep(NOW, store) == 0

    def test_retention_days_override(self):
        store = FakeEntryStore([Entry(1, NOW - timedelta(days=10))])
        assert RetentionSweeper().sweep(NOW, store, retention_days=7) == 1

    def test_storage_failure_propagates(self):
        store = FailingEntryStore([Entry(1, NOW - timedelta(days=90))])
        with pytest.raises(StorageError):
            RetentionSweeper().sweep(NOW, store)
        assert [e.id for e in store.entries] == [1]

    def test_negative_retention_rejected(self):
        with pytest.raises(ValueError):
            RetentionSweeper(-1)


class TestRepositoryBackedSweep:
    """Sweeping through the SQLAlchemy repository."""

    def test_sweep_deletes_old_rows(self, db: Session, worker, make_time_card, make_record):
        card = make_time_card(worker, "2023", "3", "1", "09:00~18:00")
        make_record(card, worker, "old", created_at=NOW - timedelta(days=61))
        make_record(card, worker, "edge", created_at=NOW - timedelta(days=60))
        make_record(card, worker, "fresh", created_at=NOW - timedelta(days=1))

        repository = InventoryRecordRepository(db)
        assert RetentionSweeper().sweep(NOW, repository) == 1

        names = sorted(r.inventory_name for r in db.query(InventoryUpdateRecord).all())
        assert names == ["edge", "fresh"]

        assert RetentionSweeper().sweep(NOW, repository) == 0

    def test_failed_delete_rolls_back(self, db: Session, worker, make_time_card, make_record, monkeypatch):
        card = make_time_card(worker, "2023", "3", "1", "09:00~18:00")
        make_record(card, worker, "old-1", created_at=NOW - timedelta(days=70))
        make_record(card, worker, "old-2", created_at=NOW - timedelta(days=80))

        def broken_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "commit", broken_commit)

        with pytest.raises(StorageError):
            RetentionSweeper().sweep(NOW, InventoryRecordRepository(db))

        monkeypatch.undo()
        assert db.query(InventoryUpdateRecord).count() == 2


class TestSchedule:
    """Tests for the daily run time computation."""

    def test_slot_later_today(self):
        now = datetime(2023, 5, 1, 3, 30)
        assert seconds_until_next_run(now, 5, 0) == 90 * 60

    def test_slot_already_passed_moves_to_tomorrow(self):
        now = datetime(2023, 5, 1, 6, 0)
        assert seconds_until_next_run(now, 5, 0) == 23 * 3600

    def test_exactly_at_slot_waits_a_day(self):
        now = datetime(2023, 5, 1, 5, 0)
        assert seconds_until_next_run(now, 5, 0) == 24 * 3600

    def test_task_manager_uses_configured_slot(self):
        manager = RetentionTaskManager()
        assert manager.seconds_until_next_run(datetime(2023, 5, 1, 4, 0)) == 3600
        assert manager is RetentionTaskManager()
        assert manager.is_running is False

    def test_sweep_runs_on_a_worker_thread(self, monkeypatch):
        manager = RetentionTaskManager()
        loop_thread = threading.get_ident()
        sweep_threads = []

        def fake_run_once():
            sweep_threads.append(threading.get_ident())
            manager._running = False
            return 0

        monkeypatch.setattr(manager, "seconds_until_next_run", lambda now=None: 0)
        monkeypatch.setattr(manager, "run_once", fake_run_once)
        manager._running = True

        asyncio.run(manager._sweep_loop())

        assert len(sweep_threads) == 1
        assert sweep_threads[0] != loop_thread
