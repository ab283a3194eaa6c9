"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

This package provides:
- User: caller profile schemas
- InventoryRecord: record logging, listing and today's summaries

==============================================================================
"""

from .user import UserDetail, UserResponse
from .inventory_record import (
    InventoryRecordCreate,
    InventoryRecordDetail,
    InventoryRecordGroup,
    InventoryRecordListResponse,
    InventoryRecordResponse,
    SweepResponse,
    TimeCardDetail,
    TodayResponse,
    TodaySummary,
)

__all__ = [
    # User
    "UserDetail",
    "UserResponse",
    # Inventory records
    "InventoryRecordCreate",
    "InventoryRecordDetail",
    "InventoryRecordGroup",
    "InventoryRecordListResponse",
    "InventoryRecordResponse",
    "SweepResponse",
    "TimeCardDetail",
    "TodayResponse",
    "TodaySummary",
]
