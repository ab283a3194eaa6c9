"""
Ledger persistence.

├── database.py      - DatabaseManager class, session factory, get_db
├── models.py        - Store, User, TimeCard, InventoryUpdateRecord
├── repositories.py  - Snapshot-returning repositories
└── init_db.py       - DatabaseInitializer for setup
"""

from .database import DatabaseManager, Base, get_db
from .models import (
    Category,
    InventoryUpdateRecord,
    Role,
    Store,
    TimeCard,
    User,
)
from .repositories import (
    InventoryRecordRepository,
    InventoryRecordSnapshot,
    TimeCardRepository,
    TimeCardSnapshot,
)
from .init_db import DatabaseInitializer, init_db

__all__ = [
    # Database management
    "DatabaseManager",
    "Base",
    "get_db",
    # Models
    "Store",
    "User",
    "TimeCard",
    "InventoryUpdateRecord",
    # Enums
    "Role",
    "Category",
    # Repositories
    "TimeCardRepository",
    "InventoryRecordRepository",
    "TimeCardSnapshot",
    "InventoryRecordSnapshot",
    # Initialization
    "DatabaseInitializer",
    "init_db",
]
