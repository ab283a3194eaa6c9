"""
==============================================================================
Inventory Record Service Module
==============================================================================

Business logic for inventory update records of a store.

This module implements:
- InventoryRecordService: listing, today's summary, logging and retention

Store Scoping:
-------------
Every operation works on the caller's store. Time cards belong to a store
through the user who owns them.

==============================================================================
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from storeledger.config import get_settings
from storeledger.core.exceptions import time_card_not_found
from storeledger.db.models import Category, InventoryUpdateRecord, User
from storeledger.db.repositories import (
    InventoryRecordRepository,
    InventoryRecordSnapshot,
    TimeCardRepository,
    TimeCardSnapshot,
)
from storeledger.schemas.inventory_record import InventoryRecordCreate
from storeledger.services.retention_service import RetentionSweeper
from storeledger.services.shift_window_service import ShiftSummary, ShiftWindowEvaluator
from storeledger.services.user_service import UserService
from storeledger.utils.clock import now_local, start_of_day
from storeledger.utils.work_time import shift_date


# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordGroup:
    """A record's author and shift, with all records of that shift."""

    user_name: str
    user_profile_code: int
    time_card: TimeCardSnapshot
    records: List[InventoryRecordSnapshot]


class InventoryRecordService:
    """
    Inventory record operations for the caller's store.

    Example:
        >>> service = InventoryRecordService(db_session)
        >>> groups = service.list_records(user, Category.CIGARETTE)
        >>> today = service.find_today(user)
    """

    def __init__(self, db: Session) -> None:
        self._db = db
        self._settings = get_settings()
        self._records = InventoryRecordRepository(db)
        self._time_cards = TimeCardRepository(db)
        self._users = UserService(db)

    @property
    def retention_days(self) -> int:
        return self._settings.retention_days

    # =========================================================================
    # QUERIES
    # =========================================================================

    def list_records(
        self,
        user: User,
        category: Optional[Category] = None
    ) -> List[RecordGroup]:
        """
        Records of the caller's store, each with its shift's records.

        One group is produced per record, in record order. With a category,
        both the outer records and each group's records are filtered.
        """
        store = self._users.get_store(user)

        if category is None:
            records = self._records.find_by_store(store.id)
        else:
            records = self._records.find_by_store_and_category(store.id, category)

        time_cards = self._time_cards.get_many([r.time_card_id for r in records])

        groups = []
        for record in records:
            time_card = time_cards[record.time_card_id]
            if category is None:
                shift_records = self._records.find_by_time_card(time_card)
            else:
                shift_records = self._records.find_by_time_card_and_category(time_card, category)

            groups.append(RecordGroup(
                user_name=record.user_name,
                user_profile_code=record.user_profile_code,
                time_card=time_card,
                records=shift_records,
            ))

        return groups

    def find_today(
        self,
        user: User,
        now: Optional[datetime] = None
    ) -> List[ShiftSummary[TimeCardSnapshot, InventoryRecordSnapshot]]:
        """
        Summaries of today's shifts at the caller's store.

        The reference time is midnight starting today on the store clock, so
        shifts starting at any time during today are included. Only cards
        dated on the reference day or the day after can start inside the
        window, so older and later cards are never parsed.

        Raises:
            ParseError: If one of the candidate time cards is malformed
        """
        store = self._users.get_store(user)
        now = now or now_local(self._settings.tzinfo)
        reference_time = start_of_day(now)

        time_cards = [
            card for card in self._time_cards.find_by_store_name(store.store_name)
            if self._may_start_near(card, reference_time)
        ]
        evaluator = ShiftWindowEvaluator(self._settings.summary_suffix_template)

        return evaluator.evaluate(
            reference_time,
            time_cards,
            self._records.find_by_time_card,
        )

    @staticmethod
    def _may_start_near(time_card: TimeCardSnapshot, reference_time: datetime) -> bool:
        card_date = shift_date(time_card.year, time_card.month, time_card.day)
        if card_date is None:
            # undatable cards go to the parser, which reports them
            return True
        first_day = reference_time.date()
        return first_day <= card_date <= first_day + timedelta(days=1)

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def create_record(self, user: User, data: InventoryRecordCreate) -> InventoryRecordSnapshot:
        """
        Log an inventory change against one of the store's time cards.

        Raises:
            NotFoundError: TIME_CARD_NOT_FOUND if the time card is not in
                the caller's store
            StorageError: If the insert fails
        """
        store = self._users.get_store(user)

        time_card = self._time_cards.get_for_store(data.time_card_id, store.id)
        if time_card is None:
            raise time_card_not_found(data.time_card_id)

        record = InventoryUpdateRecord(
            inventory_name=data.inventory_name,
            category=data.category,
            prev_count=data.prev_count,
            change_count=data.change_count,
            user_name=user.user_name,
            user_profile_code=user.user_profile_code,
            store_id=store.id,
            time_card_id=time_card.id,
        )
        snapshot = self._records.add(record)

        logger.info(
            f"📦 {user.user_name} logged {snapshot.inventory_name} "
            f"({snapshot.category.value}, {snapshot.change_count:+d}) "
            f"on time card {time_card.id}"
        )
        return snapshot

    def sweep_expired(self, now: Optional[datetime] = None) -> int:
        """
        Delete records older than the retention window.

        Raises:
            StorageError: If the store fails; nothing is deleted
        """
        now = now or now_local(self._settings.tzinfo)
        sweeper = RetentionSweeper(self._settings.retention_days)
        return sweeper.sweep(now, self._records)
