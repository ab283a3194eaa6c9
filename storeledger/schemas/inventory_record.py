"""
==============================================================================
Inventory Record Schemas Module
==============================================================================

Request and response schemas for inventory update records.

==============================================================================
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from storeledger.db.models import Category


# =============================================================================
# CREATE SCHEMAS
# =============================================================================

class InventoryRecordCreate(BaseModel):
    """Inventory change logged during a shift."""
    time_card_id: int = Field(..., ge=1)
    inventory_name: str = Field(..., min_length=1, max_length=100)
    category: Category
    prev_count: int = Field(default=0, ge=0)
    change_count: int = Field(...)

    @field_validator("inventory_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Inventory name cannot be blank")
        return v


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class TimeCardDetail(BaseModel):
    """Time card as shown next to records."""
    id: int
    year: str
    month: str
    day: str
    work_time: str
    work_hour: Optional[float]

    @classmethod
    def from_model(cls, time_card):
        return cls(
            id=time_card.id,
            year=time_card.year,
            month=time_card.month,
            day=time_card.day,
            work_time=time_card.work_time,
            work_hour=time_card.work_hour,
        )


class InventoryRecordDetail(BaseModel):
    """Single inventory update record."""
    id: int
    inventory_name: str
    category: Category
    prev_count: int
    change_count: int
    current_count: int
    user_name: str
    user_profile_code: int
    time_card_id: int
    created_at: datetime

    @classmethod
    def from_model(cls, record):
        return cls(
            id=record.id,
            inventory_name=record.inventory_name,
            category=record.category,
            prev_count=record.prev_count,
            change_count=record.change_count,
            current_count=record.current_count,
            user_name=record.user_name,
            user_profile_code=record.user_profile_code,
            time_card_id=record.time_card_id,
            created_at=record.created_at,
        )


class InventoryRecordGroup(BaseModel):
    """A record's author and shift with every record of that shift."""
    user_name: str
    user_profile_code: int
    time_card: TimeCardDetail
    records: List[InventoryRecordDetail]

    @classmethod
    def from_group(cls, group):
        return cls(
            user_name=group.user_name,
            user_profile_code=group.user_profile_code,
            time_card=TimeCardDetail.from_model(group.time_card),
            records=[InventoryRecordDetail.from_model(r) for r in group.records],
        )


class InventoryRecordListResponse(BaseModel):
    """Grouped record listing."""
    success: bool = Field(default=True)
    groups: List[InventoryRecordGroup]
    total: int


class InventoryRecordResponse(BaseModel):
    """Single record response."""
    success: bool = Field(default=True)
    record: InventoryRecordDetail


class TodaySummary(BaseModel):
    """Summary of one of today's shifts."""
    primary_item_name: str
    count_suffix: str
    summary: str
    shift_start: datetime
    shift_end: datetime
    time_card: TimeCardDetail
    record: InventoryRecordDetail

    @classmethod
    def from_summary(cls, summary):
        return cls(
            primary_item_name=summary.primary_item_name,
            count_suffix=summary.count_suffix,
            summary=summary.summary,
            shift_start=summary.window.start,
            shift_end=summary.window.end,
            time_card=TimeCardDetail.from_model(summary.time_card),
            record=InventoryRecordDetail.from_model(summary.first_entry),
        )


class TodayResponse(BaseModel):
    """Today's shift summaries, most recently listed shift first."""
    success: bool = Field(default=True)
    summaries: List[TodaySummary]


class SweepResponse(BaseModel):
    """Result of an on-demand retention sweep."""
    success: bool = Field(default=True)
    message: str
    deleted_count: int
    retention_days: int
