"""
Store ledger services: caller lookup, today's shift summaries, record
logging and listing, and the retention sweep with its daily scheduler.
"""

from .user_service import UserService
from .shift_window_service import ShiftSummary, ShiftWindowEvaluator
from .retention_service import RetentionSweeper, RetentionTaskManager
from .inventory_record_service import InventoryRecordService, RecordGroup

__all__ = [
    "UserService",
    "ShiftSummary",
    "ShiftWindowEvaluator",
    "RetentionSweeper",
    "RetentionTaskManager",
    "InventoryRecordService",
    "RecordGroup",
]
