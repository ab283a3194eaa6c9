"""
==============================================================================
Inventory Record Endpoints
==============================================================================

Listing, today's summary and logging of inventory update records for the
caller's store, plus the manual retention trigger.

==============================================================================
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storeledger.db.database import get_db
from storeledger.db.models import Category, User
from storeledger.core.dependencies import get_current_user, require_manager
from storeledger.services.inventory_record_service import InventoryRecordService
from storeledger.schemas.inventory_record import (
    InventoryRecordCreate,
    InventoryRecordDetail,
    InventoryRecordGroup,
    InventoryRecordListResponse,
    InventoryRecordResponse,
    SweepResponse,
    TodayResponse,
    TodaySummary,
)


router = APIRouter(prefix="/inventory-records", tags=["Inventory Records"])


class InventoryRecordController:
    """Controller for inventory record operations."""

    def __init__(self, db: Session):
        self._service = InventoryRecordService(db)

    def list_all(self, user: User, category: Optional[Category]) -> InventoryRecordListResponse:
        """List records grouped by shift."""
        groups = self._service.list_records(user, category)
        return InventoryRecordListResponse(
            groups=[InventoryRecordGroup.from_group(g) for g in groups],
            total=len(groups)
        )

    def today(self, user: User) -> TodayResponse:
        """Summarise today's shifts."""
        summaries = self._service.find_today(user)
        return TodayResponse(summaries=[TodaySummary.from_summary(s) for s in summaries])

    def create(self, user: User, data: InventoryRecordCreate) -> InventoryRecordResponse:
        """Log an inventory change."""
        record = self._service.create_record(user, data)
        return InventoryRecordResponse(record=InventoryRecordDetail.from_model(record))

    def sweep(self) -> SweepResponse:
        """Run the retention sweep now."""
        deleted = self._service.sweep_expired()
        retention_days = self._service.retention_days
        return SweepResponse(
            message=f"Deleted {deleted} records older than {retention_days} days",
            deleted_count=deleted,
            retention_days=retention_days
        )


@router.get("", response_model=InventoryRecordListResponse)
async def list_records(
    category: Optional[Category] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the store's records, optionally for one category."""
    controller = InventoryRecordController(db)
    return controller.list_all(user, category)


@router.get("/today", response_model=TodayResponse)
async def list_today(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Summaries of shifts starting today, most recently listed first."""
    controller = InventoryRecordController(db)
    return controller.today(user)


@router.post("", response_model=InventoryRecordResponse)
async def create_record(
    request: InventoryRecordCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Log an inventory change against a time card of the store."""
    controller = InventoryRecordController(db)
    return controller.create(user, request)


# ==== RETENTION (Manager Only) ====

@router.post("/retention/sweep", response_model=SweepResponse)
async def sweep_expired(
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Delete records older than the retention window (Manager only)."""
    controller = InventoryRecordController(db)
    return controller.sweep()
