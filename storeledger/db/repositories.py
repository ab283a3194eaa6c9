"""
==============================================================================
Repository Module
==============================================================================

Data access for time cards and inventory update records.

Repositories hide the SQLAlchemy queries from the services and hand out
frozen snapshots instead of live ORM objects, so the shift and retention
logic never touches the session.

    ┌─────────────────┐
    │    Service      │
    └────────┬────────┘
             │  snapshots
    ┌────────▼────────┐
    │   Repository    │
    └────────┬────────┘
             │  ORM queries
    ┌────────▼────────┐
    │    Session      │
    └─────────────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storeledger.core.exceptions import StorageError
from storeledger.db.models import (
    Category,
    InventoryUpdateRecord,
    Store,
    TimeCard,
    User,
)


# Module logger
logger = logging.getLogger(__name__)


# =============================================================================
# SNAPSHOTS
# =============================================================================

@dataclass(frozen=True)
class TimeCardSnapshot:
    """Read-only copy of a TimeCard row."""

    id: int
    year: str
    month: str
    day: str
    work_time: str
    work_hour: Optional[float]
    user_code: int

    @classmethod
    def from_model(cls, time_card: TimeCard) -> TimeCardSnapshot:
        return cls(
            id=time_card.id,
            year=time_card.year,
            month=time_card.month,
            day=time_card.day,
            work_time=time_card.work_time,
            work_hour=time_card.work_hour,
            user_code=time_card.user_code,
        )


@dataclass(frozen=True)
class InventoryRecordSnapshot:
    """Read-only copy of an InventoryUpdateRecord row."""

    id: int
    inventory_name: str
    category: Category
    prev_count: int
    change_count: int
    user_name: str
    user_profile_code: int
    time_card_id: int
    created_at: datetime

    @property
    def current_count(self) -> int:
        """Stock after the change was applied."""
        return self.prev_count + self.change_count

    @classmethod
    def from_model(cls, record: InventoryUpdateRecord) -> InventoryRecordSnapshot:
        return cls(
            id=record.id,
            inventory_name=record.inventory_name,
            category=record.category,
            prev_count=record.prev_count,
            change_count=record.change_count,
            user_name=record.user_name,
            user_profile_code=record.user_profile_code,
            time_card_id=record.time_card_id,
            created_at=record.created_at,
        )


# =============================================================================
# TIME CARD REPOSITORY
# =============================================================================

class TimeCardRepository:
    """Queries over time cards, scoped to stores through their owners."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_store_name(self, store_name: str) -> List[TimeCardSnapshot]:
        """All time cards of users working at ``store_name``, in id order."""
        rows = (
            self._db.query(TimeCard)
            .join(User, TimeCard.user_code == User.user_code)
            .join(Store, User.store_id == Store.id)
            .filter(Store.store_name == store_name)
            .order_by(TimeCard.id)
            .all()
        )
        return [TimeCardSnapshot.from_model(t) for t in rows]

    def get_for_store(self, time_card_id: int, store_id: int) -> Optional[TimeCardSnapshot]:
        """A time card by id, only if its owner works at ``store_id``."""
        row = (
            self._db.query(TimeCard)
            .join(User, TimeCard.user_code == User.user_code)
            .filter(TimeCard.id == time_card_id, User.store_id == store_id)
            .first()
        )
        return TimeCardSnapshot.from_model(row) if row else None

    def get_many(self, ids: Sequence[int]) -> dict:
        """Map of id -> snapshot for the given ids."""
        if not ids:
            return {}
        rows = self._db.query(TimeCard).filter(TimeCard.id.in_(set(ids))).all()
        return {t.id: TimeCardSnapshot.from_model(t) for t in rows}


# =============================================================================
# INVENTORY RECORD REPOSITORY
# =============================================================================

class InventoryRecordRepository:
    """
    Queries and bulk deletion of inventory update records.

    Serves both as the entry lookup for the shift window evaluator and as
    the entry store for the retention sweeper.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def _snapshots(self, query) -> List[InventoryRecordSnapshot]:
        rows = query.order_by(InventoryUpdateRecord.id).all()
        return [InventoryRecordSnapshot.from_model(r) for r in rows]

    def find_by_store(self, store_id: int) -> List[InventoryRecordSnapshot]:
        return self._snapshots(
            self._db.query(InventoryUpdateRecord)
            .filter(InventoryUpdateRecord.store_id == store_id)
        )

    def find_by_store_and_category(
        self,
        store_id: int,
        category: Category
    ) -> List[InventoryRecordSnapshot]:
        return self._snapshots(
            self._db.query(InventoryUpdateRecord)
            .filter(
                InventoryUpdateRecord.store_id == store_id,
                InventoryUpdateRecord.category == category,
            )
        )

    def find_by_time_card(self, time_card: TimeCardSnapshot) -> List[InventoryRecordSnapshot]:
        return self._snapshots(
            self._db.query(InventoryUpdateRecord)
            .filter(InventoryUpdateRecord.time_card_id == time_card.id)
        )

    def find_by_time_card_and_category(
        self,
        time_card: TimeCardSnapshot,
        category: Category
    ) -> List[InventoryRecordSnapshot]:
        return self._snapshots(
            self._db.query(InventoryUpdateRecord)
            .filter(
                InventoryUpdateRecord.time_card_id == time_card.id,
                InventoryUpdateRecord.category == category,
            )
        )

    def add(self, record: InventoryUpdateRecord) -> InventoryRecordSnapshot:
        """
        Persist a new record.

        Raises:
            StorageError: If the insert fails (the session is rolled back)
        """
        try:
            self._db.add(record)
            self._db.commit()
            self._db.refresh(record)
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error(f"Failed to store inventory record: {e}")
            raise StorageError("Failed to store inventory record")
        return InventoryRecordSnapshot.from_model(record)

    # =========================================================================
    # RETENTION
    # =========================================================================

    def find_older_than(self, cutoff: datetime) -> List[InventoryRecordSnapshot]:
        """
        Records created strictly before ``cutoff``.

        Raises:
            StorageError: If the query fails
        """
        try:
            return self._snapshots(
                self._db.query(InventoryUpdateRecord)
                .filter(InventoryUpdateRecord.created_at < cutoff)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to select expired inventory records: {e}")
            raise StorageError("Failed to select expired inventory records")

    def delete_all(self, records: Sequence[InventoryRecordSnapshot]) -> None:
        """
        Delete the given records in a single transaction.

        Either every record is removed or, on failure, none is.

        Raises:
            StorageError: If the delete or commit fails
        """
        if not records:
            return

        ids = [r.id for r in records]
        try:
            (
                self._db.query(InventoryUpdateRecord)
                .filter(InventoryUpdateRecord.id.in_(ids))
                .delete(synchronize_session=False)
            )
            self._db.commit()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error(f"Failed to delete {len(ids)} inventory records: {e}")
            raise StorageError(
                "Failed to delete expired inventory records",
                {"record_count": len(ids)}
            )
